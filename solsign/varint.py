"""Compact variable-width encoding of 16-bit counts"""

from .errors import Incomplete


MAX_VALUE = 0xffff


class ByteReader:
    """Sequential reader over a byte buffer"""

    def __init__(self, data: bytes, offset: int = 0):
        self.data = bytes(data)
        self.offset = offset

    def read(self, size: int) -> bytes:
        """Read exactly `size` bytes or raise Incomplete"""
        end = self.offset + size
        if end > len(self.data):
            raise Incomplete()
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def read_byte(self) -> int:
        """Read a single byte"""
        return self.read(1)[0]


def encode_length(length: int) -> bytes:
    """Encode length as compact-u16"""
    if length < 0 or length > MAX_VALUE:
        raise ValueError(f'{length} does not fit in a compact-u16')
    result = []
    while length > 0x7f:
        result.append((length & 0x7f) | 0x80)
        length >>= 7
    result.append(length)
    return bytes(result)


def decode_length(reader: ByteReader) -> int:
    """
    Decode a compact-u16 from the reader

    The third byte is combined without masking, so anything above the
    16-bit range is truncated rather than rejected.
    """
    b0 = reader.read_byte()
    value = b0 & 0x7f
    if b0 & 0x80:
        b1 = reader.read_byte()
        value |= (b1 & 0x7f) << 7
        if b1 & 0x80:
            b2 = reader.read_byte()
            value |= b2 << 14
    return value & MAX_VALUE
