"""
pool_pricing/dex/raydium package

Constant-product AMM pool decoding and pricing.
"""
from .decoder import RaydiumDecoder, decode_raydium_pool
from .layouts import POOL_STATE_SIZE, ConstantProductPoolState, decode_constant_product
from .math import constant_product_price

__all__ = [
    'RaydiumDecoder',
    'decode_raydium_pool',
    'POOL_STATE_SIZE',
    'ConstantProductPoolState',
    'decode_constant_product',
    'constant_product_price',
]
