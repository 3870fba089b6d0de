import pytest

from pool_pricing.dex.byte_reader import (
    read_bytes,
    read_i32_le,
    read_pubkey,
    read_u8,
    read_u16_le,
    read_u64_le,
    read_u128_le,
)
from pool_pricing.errors import OutOfBoundsError


def test_little_endian_unsigned_reads():
    buf = bytes([0x34, 0x12, 0x78, 0x56, 0x34, 0x12, 0x00, 0x00, 0x00, 0x00])
    assert read_u8(buf, 0) == 0x34
    assert read_u16_le(buf, 0) == 0x1234
    assert read_u64_le(buf, 2) == 0x12345678


def test_i32_is_twos_complement():
    assert read_i32_le(b"\xff\xff\xff\xff", 0) == -1
    assert read_i32_le(b"\x00\x00\x00\x80", 0) == -(2**31)
    assert read_i32_le(b"\xff\xff\xff\x7f", 0) == 2**31 - 1


def test_u128_combines_low_and_high_halves():
    low = (0x0102030405060708).to_bytes(8, "little")
    high = (0x1112131415161718).to_bytes(8, "little")
    assert read_u128_le(b"\xaa" + low + high, 1) == (0x1112131415161718 << 64) | 0x0102030405060708
    assert read_u128_le(b"\xff" * 16, 0) == 2**128 - 1


def test_pubkey_is_copied_verbatim():
    buf = bytes(range(64))
    key = read_pubkey(buf, 16)
    assert key == bytes(range(16, 48))
    assert isinstance(key, bytes)


def test_read_at_exact_end_succeeds():
    buf = bytes(8)
    assert read_u64_le(buf, 0) == 0
    assert read_bytes(buf, 8, 0) == b""


@pytest.mark.parametrize(
    "reader,width",
    [(read_u8, 1), (read_u16_le, 2), (read_i32_le, 4), (read_u64_le, 8), (read_u128_le, 16), (read_pubkey, 32)],
)
def test_overrun_raises_instead_of_zero(reader, width):
    buf = bytes(width + 3)
    with pytest.raises(OutOfBoundsError) as exc:
        reader(buf, 4)
    assert exc.value.width == width
    assert exc.value.size == width + 3


def test_negative_offset_is_out_of_bounds():
    with pytest.raises(OutOfBoundsError):
        read_u16_le(bytes(8), -1)


def test_out_of_bounds_is_a_value_error():
    with pytest.raises(ValueError):
        read_u64_le(b"\x00", 0)
