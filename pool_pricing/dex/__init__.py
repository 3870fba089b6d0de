"""
pool_pricing/dex package

Pool account decoders (constant-product and concentrated-liquidity),
byte-level readers and base58 addresses.
"""
from typing import Union

from ..errors import InvalidLengthError
from .orca.layouts import (
    WHIRLPOOL_SIZE,
    WHIRLPOOL_SIZE_WITH_DISCRIMINATOR,
    ConcentratedLiquidityPoolState,
    decode_concentrated_liquidity,
)
from .pubkey import pubkey_to_string, string_to_pubkey
from .raydium.layouts import (
    POOL_STATE_SIZE,
    ConstantProductPoolState,
    decode_constant_product,
)

PoolState = Union[ConstantProductPoolState, ConcentratedLiquidityPoolState]


def decode_pool_account(data: bytes) -> PoolState:
    """
    Decode a pool account by its size.

    752 bytes -> ConstantProductPoolState,
    653/661 bytes -> ConcentratedLiquidityPoolState.
    """
    size = len(data)
    if size == POOL_STATE_SIZE:
        return decode_constant_product(data)
    if size in (WHIRLPOOL_SIZE, WHIRLPOOL_SIZE_WITH_DISCRIMINATOR):
        return decode_concentrated_liquidity(data)
    raise InvalidLengthError(
        "pool_account",
        size,
        (POOL_STATE_SIZE, WHIRLPOOL_SIZE, WHIRLPOOL_SIZE_WITH_DISCRIMINATOR),
    )


__all__ = [
    'PoolState',
    'ConstantProductPoolState',
    'ConcentratedLiquidityPoolState',
    'decode_pool_account',
    'decode_constant_product',
    'decode_concentrated_liquidity',
    'pubkey_to_string',
    'string_to_pubkey',
]
