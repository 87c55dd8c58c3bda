"""
specrt Size and Align

Size is a byte count for a fixed-width representation (bits = 8 * bytes).
Align is a power-of-two byte alignment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def _is_power_of_two(n: int) -> bool:
    return isinstance(n, int) and not isinstance(n, bool) and n > 0 and n & (n - 1) == 0


@dataclass(frozen=True, order=True)
class Size:
    """A non-negative byte count."""
    bytes: int

    def __post_init__(self) -> None:
        if not isinstance(self.bytes, int) or isinstance(self.bytes, bool):
            raise TypeError(f"Size needs an int byte count, got {type(self.bytes).__name__}")
        if self.bytes < 0:
            raise ValueError(f"Size cannot be negative: {self.bytes}")

    @classmethod
    def from_bytes(cls, n: int) -> Size:
        return cls(n)

    @classmethod
    def from_bits(cls, bits: int) -> Optional[Size]:
        """Size for a bit count, or None if it is not a whole number of bytes."""
        if bits < 0 or bits % 8 != 0:
            return None
        return cls(bits // 8)

    @property
    def bits(self) -> int:
        return self.bytes * 8

    @property
    def is_zero(self) -> bool:
        return self.bytes == 0

    def align_to(self, align: Align) -> Size:
        """Round up to the next multiple of `align`."""
        return Size(-(-self.bytes // align.bytes) * align.bytes)

    def __add__(self, other: Size) -> Size:
        if not isinstance(other, Size):
            return NotImplemented
        return Size(self.bytes + other.bytes)

    def __sub__(self, other: Size) -> Size:
        if not isinstance(other, Size):
            return NotImplemented
        return Size(self.bytes - other.bytes)

    def __mul__(self, factor: int) -> Size:
        if not isinstance(factor, int):
            return NotImplemented
        return Size(self.bytes * factor)

    __rmul__ = __mul__

    def __repr__(self) -> str:
        return f"<Size {self.bytes}B>"


Size.ZERO = Size(0)


@dataclass(frozen=True, order=True)
class Align:
    """A power-of-two alignment in bytes."""
    bytes: int

    def __post_init__(self) -> None:
        if not _is_power_of_two(self.bytes):
            raise ValueError(f"Alignment must be a power of two: {self.bytes}")

    @classmethod
    def from_bytes(cls, n: int) -> Optional[Align]:
        if not _is_power_of_two(n):
            return None
        return cls(n)

    @classmethod
    def from_bits(cls, bits: int) -> Optional[Align]:
        if bits % 8 != 0:
            return None
        return cls.from_bytes(bits // 8)

    @property
    def bits(self) -> int:
        return self.bytes * 8

    def restrict_for_offset(self, offset: Size) -> Align:
        """Largest alignment no greater than self that also divides `offset`."""
        if offset.is_zero:
            return self
        largest = offset.bytes & -offset.bytes
        return Align(min(self.bytes, largest))

    def __repr__(self) -> str:
        return f"<Align {self.bytes}B>"


Align.ONE = Align(1)
