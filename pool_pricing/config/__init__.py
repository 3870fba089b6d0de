"""
pool_pricing/config package

Pool list configuration.
"""
from .loader import (
    KIND_CONCENTRATED_LIQUIDITY,
    KIND_CONSTANT_PRODUCT,
    ConfigError,
    PoolConfig,
    PricingConfig,
    load_config,
    parse_config,
)

__all__ = [
    'KIND_CONSTANT_PRODUCT',
    'KIND_CONCENTRATED_LIQUIDITY',
    'ConfigError',
    'PoolConfig',
    'PricingConfig',
    'load_config',
    'parse_config',
]
