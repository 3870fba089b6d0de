"""
pool_pricing/market package

USD prices for quote tokens.
"""
from .quote_price import QuotePrice, QuotePriceClient

__all__ = [
    'QuotePrice',
    'QuotePriceClient',
]
