"""
pool_pricing/dex/raydium/math.py

Constant-product (x * y = k) spot price from raw vault reserves.

All functions are pure (no I/O).
"""
import math

from ...errors import DecimalsOutOfRangeError, FieldOutOfRangeError

# 10**-324 is below the smallest subnormal double
FLOAT_MIN_DECIMAL_EXPONENT = 324


def _to_tokens(reserve: int, decimals: int) -> float:
    """reserve / 10**decimals, without building 10**decimals when it can only round to 0.0."""
    if decimals - len(str(reserve)) > FLOAT_MIN_DECIMAL_EXPONENT:
        return 0.0
    try:
        # int / int keeps huge powers of ten exact until the final division
        return reserve / 10 ** decimals
    except OverflowError as e:
        raise FieldOutOfRangeError("reserve", reserve) from e


def constant_product_price(
    base_reserve: int,
    quote_reserve: int,
    base_decimals: int,
    quote_decimals: int,
) -> float:
    """
    Spot price of one base token in quote tokens.

    Formula:
    base_actual = base_reserve / 10^base_decimals
    quote_actual = quote_reserve / 10^quote_decimals
    price = quote_actual / base_actual

    An empty base side ("no liquidity") yields 0.0 instead of an error, as
    does a base side whose decimal shift underflows a float. Decimal counts
    have no upper bound here.

    Args:
        base_reserve: Raw base vault amount (atomic units)
        quote_reserve: Raw quote vault amount (atomic units)
        base_decimals: Decimals of the base mint
        quote_decimals: Decimals of the quote mint

    Returns:
        Quote tokens per one base token

    Raises:
        FieldOutOfRangeError: the ratio does not fit a finite float
    """
    if base_reserve < 0 or quote_reserve < 0:
        raise ValueError("reserves must be non-negative")
    if base_decimals < 0:
        raise DecimalsOutOfRangeError("base_decimals", base_decimals)
    if quote_decimals < 0:
        raise DecimalsOutOfRangeError("quote_decimals", quote_decimals)

    base_actual = _to_tokens(base_reserve, base_decimals)
    if base_actual <= 0:
        return 0.0

    quote_actual = _to_tokens(quote_reserve, quote_decimals)
    price = quote_actual / base_actual
    if not math.isfinite(price):
        raise FieldOutOfRangeError("price", price)
    return price
