"""
specrt Integer Test Suite

Tests the numeric vocabulary:
1. Size construction and arithmetic
2. Align construction and offset restriction
3. Range checks and narrowing
4. Modulo-based masking
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from specrt import Size, Align, Signed, Unsigned, in_bounds, try_narrow
from specrt.integer import (
    bit_and,
    max_value,
    min_value,
    modulo,
    try_to_i8,
    try_to_i128,
    try_to_u8,
    try_to_u64,
    try_to_usize,
)


# --- Test 1: Size ---

def test_size_bits_is_eight_times_bytes():
    for n in (0, 1, 2, 4, 8, 16, 3):
        assert Size.from_bytes(n).bits == 8 * n


def test_size_from_bits():
    assert Size.from_bits(32) == Size.from_bytes(4)
    assert Size.from_bits(12) is None
    assert Size.from_bits(-8) is None


def test_size_rejects_negative():
    with pytest.raises(ValueError):
        Size.from_bytes(-1)


def test_size_arithmetic():
    four = Size.from_bytes(4)
    assert four + Size.from_bytes(2) == Size.from_bytes(6)
    assert four * 3 == Size.from_bytes(12)
    assert 3 * four == Size.from_bytes(12)
    assert four - Size.from_bytes(4) == Size.ZERO
    assert Size.ZERO.is_zero
    assert Size.from_bytes(2) < four


def test_size_align_to():
    assert Size.from_bytes(5).align_to(Align.from_bytes(4)) == Size.from_bytes(8)
    assert Size.from_bytes(8).align_to(Align.from_bytes(4)) == Size.from_bytes(8)
    assert Size.ZERO.align_to(Align.from_bytes(16)) == Size.ZERO


# --- Test 2: Align ---

def test_align_requires_power_of_two():
    assert Align.from_bytes(8).bytes == 8
    assert Align.from_bytes(6) is None
    assert Align.from_bytes(0) is None
    assert Align.from_bits(64) == Align.from_bytes(8)
    assert Align.ONE.bits == 8


def test_align_restrict_for_offset():
    align = Align.from_bytes(8)
    assert align.restrict_for_offset(Size.from_bytes(12)) == Align.from_bytes(4)
    assert align.restrict_for_offset(Size.from_bytes(3)) == Align.ONE
    assert align.restrict_for_offset(Size.from_bytes(32)) == align
    assert align.restrict_for_offset(Size.ZERO) == align


# --- Test 3: Range checks ---

def test_bounds_of_widths():
    byte = Size.from_bytes(1)
    assert (min_value(Signed, byte), max_value(Signed, byte)) == (-128, 127)
    assert (min_value(Unsigned, byte), max_value(Unsigned, byte)) == (0, 255)
    assert max_value(Unsigned, Size.from_bytes(16)) == 2 ** 128 - 1


def test_in_bounds():
    size = Size.from_bytes(2)
    assert in_bounds(-32768, Signed, size)
    assert not in_bounds(-32769, Signed, size)
    assert in_bounds(65535, Unsigned, size)
    assert not in_bounds(-1, Unsigned, size)


def test_narrowing_fails_instead_of_wrapping():
    assert try_to_u8(255) == 255
    assert try_to_u8(256) is None
    assert try_to_u8(-1) is None
    assert try_to_i8(-128) == -128
    assert try_to_i8(128) is None
    assert try_to_u64(2 ** 64) is None
    assert try_to_usize(2 ** 64 - 1) == 2 ** 64 - 1
    assert try_to_i128(-(2 ** 127)) == -(2 ** 127)
    assert try_narrow(2 ** 200, Signed, Size.from_bytes(16)) is None


def test_arithmetic_never_wraps():
    big = 2 ** 128
    assert big * big == 2 ** 256
    assert (big << 64) >> 64 == big
    assert -big - 1 < -big


# --- Test 4: Masking ---

def test_modulo_is_floored():
    assert modulo(-1, 256) == 255
    assert modulo(257, 256) == 1
    with pytest.raises(ZeroDivisionError):
        modulo(1, 0)


def test_bit_and_with_low_mask():
    assert bit_and(0x1234, 0xFF) == 0x34
    assert bit_and(-1, 0xFFFF) == 0xFFFF
    assert bit_and(0x1234, 0) == 0
    with pytest.raises(ValueError):
        bit_and(5, 0x0F0)


def test_module_constants():
    assert Align.ONE == Align.from_bytes(1)
    assert Size.ZERO == Size.from_bytes(0)
    with pytest.raises(ValueError):
        Align(3)
    with pytest.raises(ValueError):
        Align(True)
