"""
pool_pricing/dex/byte_reader.py

Fixed-width little-endian reads over raw account data.

Every read is bounds-checked and raises OutOfBoundsError instead of
returning a zero value for a truncated buffer. All functions are pure.
"""
import struct

from ..errors import OutOfBoundsError


# Solana pubkey (32 bytes, base58 encoded)
PUBKEY_LENGTH = 32

_U8 = struct.Struct('<B')
_U16 = struct.Struct('<H')
_I32 = struct.Struct('<i')
_U64 = struct.Struct('<Q')
# u128 is stored as two u64 halves, low half first
_U128 = struct.Struct('<QQ')


def _check_bounds(buf: bytes, offset: int, width: int) -> None:
    if offset < 0 or offset + width > len(buf):
        raise OutOfBoundsError(offset, width, len(buf))


def read_u8(buf: bytes, offset: int) -> int:
    _check_bounds(buf, offset, _U8.size)
    return _U8.unpack_from(buf, offset)[0]


def read_u16_le(buf: bytes, offset: int) -> int:
    _check_bounds(buf, offset, _U16.size)
    return _U16.unpack_from(buf, offset)[0]


def read_i32_le(buf: bytes, offset: int) -> int:
    """Read a two's-complement i32 (b'\\xff\\xff\\xff\\xff' -> -1)."""
    _check_bounds(buf, offset, _I32.size)
    return _I32.unpack_from(buf, offset)[0]


def read_u64_le(buf: bytes, offset: int) -> int:
    _check_bounds(buf, offset, _U64.size)
    return _U64.unpack_from(buf, offset)[0]


def read_u128_le(buf: bytes, offset: int) -> int:
    """
    Read a u128 assembled as (high << 64) | low.

    Bytes [offset, offset+8) hold the low 64 bits and
    [offset+8, offset+16) the high 64 bits.
    """
    _check_bounds(buf, offset, _U128.size)
    low, high = _U128.unpack_from(buf, offset)
    return (high << 64) | low


def read_bytes(buf: bytes, offset: int, length: int) -> bytes:
    """Copy `length` raw bytes starting at `offset`."""
    if length < 0:
        raise OutOfBoundsError(offset, length, len(buf))
    _check_bounds(buf, offset, length)
    return bytes(buf[offset:offset + length])


def read_pubkey(buf: bytes, offset: int) -> bytes:
    """Copy a 32-byte public key verbatim."""
    return read_bytes(buf, offset, PUBKEY_LENGTH)
