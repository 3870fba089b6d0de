"""
pool_pricing/dex/pubkey.py

Base58 text form of 32-byte account addresses.

Leading zero bytes map to leading '1' characters, so the all-zero key
encodes to 32 '1's and the round trip preserves them.
"""
import base58

from ..errors import FieldOutOfRangeError, InvalidLengthError
from .byte_reader import PUBKEY_LENGTH


BASE58_ALPHABET = base58.BITCOIN_ALPHABET.decode('ascii')

# Longest base58 form of a 32-byte value
MAX_ADDRESS_LENGTH = 44


def pubkey_to_string(data: bytes) -> str:
    """Convert 32-byte pubkey to base58 string."""
    if len(data) != PUBKEY_LENGTH:
        raise InvalidLengthError("pubkey", len(data), (PUBKEY_LENGTH,))
    return base58.b58encode(bytes(data)).decode('ascii')


def string_to_pubkey(address: str) -> bytes:
    """Decode a base58 address back to its 32 raw bytes."""
    if not address or len(address) > MAX_ADDRESS_LENGTH:
        raise FieldOutOfRangeError("address", address)
    try:
        raw = base58.b58decode(address)
    except ValueError as e:
        raise FieldOutOfRangeError("address", address) from e
    if len(raw) != PUBKEY_LENGTH:
        raise InvalidLengthError("pubkey", len(raw), (PUBKEY_LENGTH,))
    return raw


def is_zero_pubkey(data: bytes) -> bool:
    """True for the default (all-zero) pubkey."""
    return not any(data)
