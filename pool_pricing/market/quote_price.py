"""
pool_pricing/market/quote_price.py

Quote-token USD price client (Jupiter Price API).

Converts a pool ratio into USD by multiplying with the quote token's
USD price. Prices are cached in a TtlCache the caller owns.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from ..rpc.cache import TtlCache

logger = logging.getLogger(__name__)


# Jupiter Price API Configuration
JUPITER_PRICE_URL = "https://api.jup.ag/price/v2"

# Cache TTL
DEFAULT_CACHE_TTL = 30  # seconds


@dataclass(frozen=True)
class QuotePrice:
    """USD price of one token mint."""
    mint: str
    usd: float
    source: str = "jupiter"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mint": self.mint,
            "usd": self.usd,
            "source": self.source,
        }


class QuotePriceClient:
    """
    Client for USD prices of quote mints.

    Features:
    - REST-based price fetching
    - Response caching through an injected TtlCache
    - Failures reported as None, never raised
    """

    def __init__(
        self,
        base_url: str = JUPITER_PRICE_URL,
        cache: Optional[TtlCache] = None,
        request_timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize QuotePriceClient.

        Args:
            base_url: Price API URL
            cache: Cache for fetched prices (a private one is created if None)
            request_timeout: Request timeout in seconds
            session: HTTP session (anything with a requests-style `get`)
        """
        self._base_url = base_url
        self._cache = cache if cache is not None else TtlCache(default_ttl=DEFAULT_CACHE_TTL)
        self._timeout = request_timeout
        self._session = session if session is not None else requests.Session()

    @property
    def cache(self) -> TtlCache:
        return self._cache

    def _get_cache_key(self, mint: str) -> str:
        return f"quote_price:{mint}"

    def fetch_price(self, mint: str, use_cache: bool = True) -> Optional[QuotePrice]:
        """
        Fetch USD price for a mint.

        Args:
            mint: Token mint address (base58)
            use_cache: Whether to use cached data

        Returns:
            QuotePrice or None if unavailable
        """
        key = self._get_cache_key(mint)
        if use_cache:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug(f"[quote_price] Cache hit for {mint[:8]}...")
                return cached

        try:
            response = self._session.get(
                self._base_url,
                params={"ids": mint},
                timeout=self._timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"[quote_price] Failed to fetch price for {mint}: {e}")
            return None

        price = self._parse_response(data, mint)
        if price is not None:
            self._cache.set(key, price)
        return price

    def _parse_response(self, data: Dict[str, Any], mint: str) -> Optional[QuotePrice]:
        """
        Parse Price API response.

        Response format:
        {
            "data": {
                "<mint>": {"id": "<mint>", "type": "derivedPrice", "price": "147.12"}
            }
        }
        """
        entry = (data.get("data") or {}).get(mint) if isinstance(data, dict) else None
        if not entry or entry.get("price") is None:
            logger.warning(f"[quote_price] No price for {mint}")
            return None

        try:
            usd = float(entry["price"])
        except (TypeError, ValueError):
            logger.warning(f"[quote_price] Unparseable price for {mint}: {entry['price']!r}")
            return None

        if not math.isfinite(usd) or usd < 0:
            logger.warning(f"[quote_price] Invalid price for {mint}: {usd}")
            return None

        return QuotePrice(mint=mint, usd=usd)

    def close(self) -> None:
        self._session.close()
