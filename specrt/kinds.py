"""
specrt Kinds

Small closed enumerations shared by the codec and by consumers that
describe places and integer types.
"""

from __future__ import annotations

from enum import Enum


class Signedness(Enum):
    """Whether a fixed-width integer reads its top bit as a sign bit."""
    SIGNED = "signed"       # Two's complement
    UNSIGNED = "unsigned"

    @property
    def is_signed(self) -> bool:
        return self is Signedness.SIGNED


class Endianness(Enum):
    """Byte order of a serialized multi-byte integer."""
    BIG_ENDIAN = "big"         # Most significant byte first
    LITTLE_ENDIAN = "little"   # Least significant byte first


class Mutability(Enum):
    """Whether a place may be written through."""
    MUTABLE = "mutable"
    IMMUTABLE = "immutable"


Signed = Signedness.SIGNED
Unsigned = Signedness.UNSIGNED
BigEndian = Endianness.BIG_ENDIAN
LittleEndian = Endianness.LITTLE_ENDIAN
Mutable = Mutability.MUTABLE
Immutable = Mutability.IMMUTABLE
