"""
pool_pricing package

Spot prices from on-chain AMM / CLMM pool accounts.
"""
from .errors import (
    DecimalsOutOfRangeError,
    FieldOutOfRangeError,
    InvalidLengthError,
    OutOfBoundsError,
    PoolPricingError,
)

__version__ = "0.1.0"

__all__ = [
    'PoolPricingError',
    'InvalidLengthError',
    'OutOfBoundsError',
    'FieldOutOfRangeError',
    'DecimalsOutOfRangeError',
]
