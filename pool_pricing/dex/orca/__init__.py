"""
pool_pricing/dex/orca package

Orca Whirlpools (concentrated liquidity) decoding and pricing.
"""
from .decoder import OrcaDecoder, decode_orca_whirlpool
from .layouts import (
    MAX_SQRT_PRICE,
    MAX_TICK_INDEX,
    MIN_SQRT_PRICE,
    MIN_TICK_INDEX,
    WHIRLPOOL_SIZE,
    WHIRLPOOL_SIZE_WITH_DISCRIMINATOR,
    ConcentratedLiquidityPoolState,
    decode_concentrated_liquidity,
)
from .math import OrcaMath, sqrt_price_to_price, tick_to_price

__all__ = [
    'OrcaDecoder',
    'decode_orca_whirlpool',
    'MIN_SQRT_PRICE',
    'MAX_SQRT_PRICE',
    'MIN_TICK_INDEX',
    'MAX_TICK_INDEX',
    'WHIRLPOOL_SIZE',
    'WHIRLPOOL_SIZE_WITH_DISCRIMINATOR',
    'ConcentratedLiquidityPoolState',
    'decode_concentrated_liquidity',
    'OrcaMath',
    'sqrt_price_to_price',
    'tick_to_price',
]
