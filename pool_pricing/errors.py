"""
pool_pricing/errors.py

Failure kinds raised while decoding pool accounts and deriving prices.
"""
from typing import Optional


class PoolPricingError(ValueError):
    """Base class for malformed-input failures in decoders and price math."""


class InvalidLengthError(PoolPricingError):
    """Account buffer is not one of the accepted sizes for a layout."""

    def __init__(self, layout: str, got: int, expected: tuple):
        self.layout = layout
        self.got = got
        self.expected = tuple(expected)
        sizes = " or ".join(str(n) for n in self.expected)
        super().__init__(f"{layout}: invalid length {got} bytes, expected {sizes}")


class OutOfBoundsError(PoolPricingError):
    """A fixed-width read would run past the end of the buffer."""

    def __init__(self, offset: int, width: int, size: int):
        self.offset = offset
        self.width = width
        self.size = size
        super().__init__(
            f"read of {width} bytes at offset {offset} exceeds buffer of {size} bytes"
        )


class FieldOutOfRangeError(PoolPricingError):
    """A decoded value violates its documented domain."""

    def __init__(self, field: str, value, low=None, high=None):
        self.field = field
        self.value = value
        self.low = low
        self.high = high
        if low is not None and high is not None:
            msg = f"{field}={value} outside [{low}, {high}]"
        else:
            msg = f"{field}={value} is out of range"
        super().__init__(msg)


class DecimalsOutOfRangeError(PoolPricingError):
    """Decimal count passed to price math is negative or exceeds the sanity bound."""

    def __init__(self, name: str, value: int, max_decimals: Optional[int] = None):
        self.name = name
        self.value = value
        self.max_decimals = max_decimals
        if value < 0:
            msg = f"{name}={value} must be non-negative"
        else:
            msg = f"{name}={value} outside [0, {max_decimals}]"
        super().__init__(msg)


class RpcError(RuntimeError):
    """JSON-RPC or HTTP transport failure."""


class AccountNotFoundError(RpcError):
    """The requested account does not exist on chain."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Account not found: {address}")
