"""
specrt Byte Codec

Converts integers to and from fixed-length byte sequences.

Wire contract: for every size in {1, 2, 4, 8, 16} bytes, both signedness
values and both byte orders, ``encode`` produces exactly the canonical
two's-complement encoding of the corresponding native integer type and
``decode`` is its exact inverse.

Usage:
    codec = ByteCodec(BigEndian)
    codec.encode(Signed, Size.from_bytes(4), -1)      # b"\\xff\\xff\\xff\\xff"
    codec.decode(Signed, b"\\xff\\xff\\xff\\xff")       # -1

    stream = KaitaiStream(io.BytesIO(memory))
    codec.read(stream, Unsigned, Size.from_bytes(2))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from kaitaistruct import KaitaiStream

from specrt.errors import ContractViolation
from specrt.integer import in_bounds
from specrt.kinds import Endianness, Signedness
from specrt.size import Size

ByteLike = Union[bytes, bytearray, memoryview, Iterable[int]]


def encode(
    endianness: Endianness,
    signedness: Signedness,
    size: Size,
    value: int,
) -> Optional[bytes]:
    """Encode `value` into exactly `size.bytes` bytes.

    Returns None if `value` does not fit into `size` under `signedness`.
    Negative values are brought into unsigned range by adding 2^bits,
    which is the two's-complement bit pattern.
    """
    if not in_bounds(value, signedness, size):
        return None

    if value < 0:
        value += 2 ** size.bits

    # Most significant byte first.
    out = bytearray()
    for j in range(size.bytes - 1, -1, -1):
        out.append((value >> (j * 8)) % 256)

    if endianness is Endianness.LITTLE_ENDIAN:
        out.reverse()
    return bytes(out)


def decode(endianness: Endianness, signedness: Signedness, data: ByteLike) -> int:
    """Decode a fixed-width byte sequence.

    The sequence is normalized to big-endian order. The first byte seeds the
    result (as i8 when signed, so its top bit carries the sign) and every
    following byte is shifted in from the right.
    """
    if isinstance(data, (int, str)):
        raise TypeError(f"decode needs a byte sequence, got {type(data).__name__}")
    raw = bytearray(data)
    if not raw:
        raise ContractViolation("cannot decode an empty byte sequence", "decode")

    if endianness is Endianness.LITTLE_ENDIAN:
        raw.reverse()

    out = raw[0]
    if signedness.is_signed and out >= 0x80:
        out -= 0x100

    for b in raw[1:]:
        out = (out << 8) | b
    return out


@dataclass(frozen=True)
class ByteCodec:
    """Encoder/decoder bound to one byte order."""
    endianness: Endianness

    def encode(self, signedness: Signedness, size: Size, value: int) -> Optional[bytes]:
        return encode(self.endianness, signedness, size, value)

    def decode(self, signedness: Signedness, data: ByteLike) -> int:
        return decode(self.endianness, signedness, data)

    def read(self, stream: KaitaiStream, signedness: Signedness, size: Size) -> int:
        """Read `size.bytes` bytes from `stream` and decode them.

        Raises EOFError (from the stream) when fewer bytes remain.
        """
        return self.decode(signedness, stream.read_bytes(size.bytes))

    def write(
        self,
        buffer: bytearray,
        offset: int,
        signedness: Signedness,
        size: Size,
        value: int,
    ) -> bool:
        """Encode `value` into `buffer[offset:offset + size.bytes]`.

        Returns False, leaving the buffer untouched, if the value is out of
        range for the width.
        """
        if offset < 0 or offset + size.bytes > len(buffer):
            raise ValueError(
                f"write of {size.bytes} bytes at {offset:#x} exceeds "
                f"buffer of {len(buffer)} bytes"
            )
        encoded = self.encode(signedness, size, value)
        if encoded is None:
            return False
        buffer[offset:offset + size.bytes] = encoded
        return True

    def __repr__(self) -> str:
        return f"<ByteCodec {self.endianness.value}-endian>"


BIG_ENDIAN_CODEC = ByteCodec(Endianness.BIG_ENDIAN)
LITTLE_ENDIAN_CODEC = ByteCodec(Endianness.LITTLE_ENDIAN)
