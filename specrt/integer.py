"""
specrt Integers

The runtime's numeric value is Python's unbounded ``int``: arithmetic never
wraps, comparison is total, and shifts and powers are exact. This module adds
the fixed-width vocabulary on top of it: range checks, narrowing to machine
widths (which fails instead of truncating), and the modulo-based bit masking
the codec relies on.
"""

from __future__ import annotations

from typing import Callable, Optional

from specrt.kinds import Signedness
from specrt.size import Size

Int = int


def min_value(signedness: Signedness, size: Size) -> int:
    """Smallest value representable in `size` under `signedness`."""
    if signedness.is_signed:
        return -(2 ** (size.bits - 1)) if size.bits else 0
    return 0


def max_value(signedness: Signedness, size: Size) -> int:
    """Largest value representable in `size` under `signedness`."""
    if signedness.is_signed:
        return 2 ** (size.bits - 1) - 1 if size.bits else 0
    return 2 ** size.bits - 1


def in_bounds(value: int, signedness: Signedness, size: Size) -> bool:
    return min_value(signedness, size) <= value <= max_value(signedness, size)


def try_narrow(value: int, signedness: Signedness, size: Size) -> Optional[int]:
    """Return `value` unchanged if it fits the width, otherwise None."""
    if not in_bounds(value, signedness, size):
        return None
    return value


def modulo(value: int, modulus: int) -> int:
    """Floored modulo; the result has the sign of `modulus`."""
    if modulus == 0:
        raise ZeroDivisionError("modulo by zero")
    return value % modulus


def bit_and(value: int, mask: int) -> int:
    """`value & mask` for a mask of the form 2^k - 1, computed as a modulo."""
    if mask < 0 or mask & (mask + 1) != 0:
        raise ValueError(f"mask must be 2^k - 1, got {mask:#x}")
    return modulo(value, mask + 1)


def _narrowing(signedness: Signedness, bits: int) -> Callable[[int], Optional[int]]:
    size = Size.from_bits(bits)

    def narrow(value: int) -> Optional[int]:
        return try_narrow(value, signedness, size)

    prefix = "i" if signedness.is_signed else "u"
    narrow.__name__ = f"try_to_{prefix}{bits}"
    narrow.__doc__ = f"Narrow to {prefix}{bits}, or None if out of range."
    return narrow


try_to_u8 = _narrowing(Signedness.UNSIGNED, 8)
try_to_i8 = _narrowing(Signedness.SIGNED, 8)
try_to_u16 = _narrowing(Signedness.UNSIGNED, 16)
try_to_i16 = _narrowing(Signedness.SIGNED, 16)
try_to_u32 = _narrowing(Signedness.UNSIGNED, 32)
try_to_i32 = _narrowing(Signedness.SIGNED, 32)
try_to_u64 = _narrowing(Signedness.UNSIGNED, 64)
try_to_i64 = _narrowing(Signedness.SIGNED, 64)
try_to_u128 = _narrowing(Signedness.UNSIGNED, 128)
try_to_i128 = _narrowing(Signedness.SIGNED, 128)
# Host-independent: indices are always treated as 64-bit.
try_to_usize = _narrowing(Signedness.UNSIGNED, 64)
