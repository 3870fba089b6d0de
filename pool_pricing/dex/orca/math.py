"""
pool_pricing/dex/orca/math.py

Price conversions for concentrated-liquidity pools.

sqrt_price is stored on-chain as an unsigned Q64.64 fixed-point number:
the square root of (raw token B units per raw token A unit), scaled by 2^64.
Decimal arithmetic keeps values near the u128 ceiling from losing precision
before the final float conversion.
"""
import math
from decimal import Decimal, localcontext

from ...errors import DecimalsOutOfRangeError, FieldOutOfRangeError
from .layouts import MAX_TICK_INDEX, MIN_TICK_INDEX

DECIMAL_PRECISION = 80

Q64_SHIFT = 64
Q64_SCALE = 1 << Q64_SHIFT
U128_MAX = (1 << 128) - 1

MAX_DECIMALS = 18

# Each tick moves the raw price by one basis point
TICK_BASE = Decimal("1.0001")


def _check_decimals(name: str, value: int) -> None:
    if value < 0 or value > MAX_DECIMALS:
        raise DecimalsOutOfRangeError(name, value, MAX_DECIMALS)


def _check_tick(tick: int) -> None:
    if not MIN_TICK_INDEX <= tick <= MAX_TICK_INDEX:
        raise FieldOutOfRangeError("tick", tick, MIN_TICK_INDEX, MAX_TICK_INDEX)


def _to_price(value: Decimal) -> float:
    price = float(value)
    if not math.isfinite(price) or price < 0:
        raise FieldOutOfRangeError("price", price)
    return price


class OrcaMath:
    """Q64.64 and tick conversions. Stateless; every method is static."""

    @staticmethod
    def sqrt_price_x64_to_price(sqrt_price: int, decimals_a: int, decimals_b: int) -> float:
        """
        Token B per whole token A.

        (sqrt_price / 2^64)^2 gives raw units; shifting by
        10^(decimals_a - decimals_b) turns that into whole tokens.

        Args:
            sqrt_price: Q64.64 value from the pool account
            decimals_a: Mint decimals of token A (0..18)
            decimals_b: Mint decimals of token B (0..18)

        Returns:
            Human-scale price as float
        """
        _check_decimals("decimals_a", decimals_a)
        _check_decimals("decimals_b", decimals_b)
        if sqrt_price < 0 or sqrt_price > U128_MAX:
            raise FieldOutOfRangeError("sqrt_price", sqrt_price, 0, U128_MAX)

        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            ratio = Decimal(sqrt_price) / Decimal(Q64_SCALE)
            scaled = ratio * ratio * Decimal(10) ** (decimals_a - decimals_b)

        return _to_price(scaled)

    @staticmethod
    def price_to_sqrt_price_x64(price: float, decimals_a: int, decimals_b: int) -> int:
        """Q64.64 sqrt_price for a human-scale price (truncated)."""
        _check_decimals("decimals_a", decimals_a)
        _check_decimals("decimals_b", decimals_b)
        if price <= 0:
            raise ValueError(f"price must be positive, got: {price}")

        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            raw = Decimal(price) * Decimal(10) ** (decimals_b - decimals_a)
            result = raw.sqrt() * Decimal(Q64_SCALE)

        return int(result)

    @staticmethod
    def tick_to_price(tick: int, decimals_a: int, decimals_b: int) -> float:
        # Lower edge of the tick: 1.0001^tick, then the same decimal shift
        _check_decimals("decimals_a", decimals_a)
        _check_decimals("decimals_b", decimals_b)
        _check_tick(tick)

        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            scaled = (TICK_BASE ** tick) * Decimal(10) ** (decimals_a - decimals_b)

        return _to_price(scaled)

    @staticmethod
    def tick_to_sqrt_price_x64(tick: int) -> int:
        _check_tick(tick)
        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            result = TICK_BASE.sqrt() ** tick * Decimal(Q64_SCALE)
        return int(result)


def sqrt_price_to_price(sqrt_price_q64: int, decimals_a: int, decimals_b: int) -> float:
    return OrcaMath.sqrt_price_x64_to_price(sqrt_price_q64, decimals_a, decimals_b)


def tick_to_price(tick: int, decimals_a: int, decimals_b: int) -> float:
    return OrcaMath.tick_to_price(tick, decimals_a, decimals_b)
