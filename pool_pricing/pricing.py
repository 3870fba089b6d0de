"""
pool_pricing/pricing.py

PoolPricer - fetch a pool account, decode it, read reserves and derive
a spot price.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config.loader import KIND_CONCENTRATED_LIQUIDITY, KIND_CONSTANT_PRODUCT, PoolConfig
from .dex.orca.decoder import OrcaDecoder
from .dex.orca.math import sqrt_price_to_price
from .dex.pubkey import pubkey_to_string
from .dex.raydium.decoder import MAX_SANE_DECIMALS, RaydiumDecoder
from .dex.raydium.math import constant_product_price
from .errors import FieldOutOfRangeError
from .market.quote_price import QuotePriceClient
from .rpc.client import SolanaRpcClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceQuote:
    """Units of quote token per one unit of base token."""
    price: float
    base_decimals: int
    quote_decimals: int
    pool_address: Optional[str] = None
    kind: Optional[str] = None
    usd_price: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "price": self.price,
            "base_decimals": self.base_decimals,
            "quote_decimals": self.quote_decimals,
            "pool_address": self.pool_address,
            "kind": self.kind,
            "usd_price": self.usd_price,
        }

    def inverted(self) -> "PriceQuote":
        """Same quote seen from the other side of the pair."""
        return PriceQuote(
            price=1.0 / self.price if self.price > 0 else 0.0,
            base_decimals=self.quote_decimals,
            quote_decimals=self.base_decimals,
            pool_address=self.pool_address,
            kind=self.kind,
            usd_price=None,
        )

    def with_usd(self, quote_usd: float) -> "PriceQuote":
        return PriceQuote(
            price=self.price,
            base_decimals=self.base_decimals,
            quote_decimals=self.quote_decimals,
            pool_address=self.pool_address,
            kind=self.kind,
            usd_price=self.price * quote_usd,
        )


class PoolPricer:
    """
    Prices configured pools through an RPC client.

    Decoding and price math are pure; this class owns only the fetch
    sequence (pool account, then vault balances or mint decimals).
    """

    def __init__(
        self,
        rpc: SolanaRpcClient,
        quote_prices: Optional[QuotePriceClient] = None,
    ):
        """
        Initialize PoolPricer.

        Args:
            rpc: Client used for account, balance and mint lookups
            quote_prices: Optional USD price source for quote mints
        """
        self._rpc = rpc
        self._quote_prices = quote_prices
        self._raydium = RaydiumDecoder()
        self._orca = OrcaDecoder()

    def price_constant_product(self, address: str) -> PriceQuote:
        """
        Price a constant-product pool from its vault balances.

        Args:
            address: Pool account address

        Returns:
            PriceQuote (quote per base)
        """
        pool = self._raydium.decode_pool(self._rpc.get_account_data(address))

        # Decimals drive 10**n below; reject garbage before it gets there
        for name in ("base_decimal", "quote_decimal"):
            value = getattr(pool, name)
            if value > MAX_SANE_DECIMALS:
                raise FieldOutOfRangeError(name, value, 0, MAX_SANE_DECIMALS)

        vaults = self._raydium.extract_vaults(pool)
        balances = self._rpc.get_token_balances([vaults["base"], vaults["quote"]])
        base_reserve = balances[vaults["base"]]
        quote_reserve = balances[vaults["quote"]]

        price = constant_product_price(
            base_reserve, quote_reserve, pool.base_decimal, pool.quote_decimal
        )
        if price == 0.0:
            logger.warning(f"[pricer] Pool {address} has no base liquidity")

        logger.debug(
            f"[pricer] {address[:8]}... base={base_reserve} quote={quote_reserve} price={price}"
        )
        return PriceQuote(
            price=price,
            base_decimals=pool.base_decimal,
            quote_decimals=pool.quote_decimal,
            pool_address=address,
            kind=KIND_CONSTANT_PRODUCT,
        )

    def price_concentrated_liquidity(
        self,
        address: str,
        decimals_a: Optional[int] = None,
        decimals_b: Optional[int] = None,
    ) -> PriceQuote:
        """
        Price a Whirlpool from its sqrt_price.

        Args:
            address: Pool account address
            decimals_a: Token A decimals (fetched from the mint if None)
            decimals_b: Token B decimals (fetched from the mint if None)

        Returns:
            PriceQuote (token B per token A)
        """
        pool = self._orca.decode_whirlpool(self._rpc.get_account_data(address))

        if decimals_a is None:
            decimals_a = self._rpc.get_token_decimals(pubkey_to_string(pool.token_mint_a))
        if decimals_b is None:
            decimals_b = self._rpc.get_token_decimals(pubkey_to_string(pool.token_mint_b))

        if not self._orca.validate_pool(pool):
            logger.warning(f"[pricer] Whirlpool {address} failed validation, price may be stale")

        price = sqrt_price_to_price(pool.sqrt_price, decimals_a, decimals_b)
        logger.debug(
            f"[pricer] {address[:8]}... sqrt_price={pool.sqrt_price} "
            f"tick={pool.tick_current_index} price={price}"
        )
        return PriceQuote(
            price=price,
            base_decimals=decimals_a,
            quote_decimals=decimals_b,
            pool_address=address,
            kind=KIND_CONCENTRATED_LIQUIDITY,
        )

    def price_pool(self, pool: PoolConfig) -> PriceQuote:
        """
        Price one configured pool, with optional inversion and USD value.

        `quote_mint` names the quote side of the reported price, so with
        `invert` it is the pool's original base mint.

        Args:
            pool: Pool entry from the config file

        Returns:
            PriceQuote
        """
        if pool.kind == KIND_CONSTANT_PRODUCT:
            quote = self.price_constant_product(pool.address)
        elif pool.kind == KIND_CONCENTRATED_LIQUIDITY:
            quote = self.price_concentrated_liquidity(
                pool.address, pool.decimals_a, pool.decimals_b
            )
        else:
            raise ValueError(f"Unknown pool kind: {pool.kind}")

        if pool.invert:
            quote = quote.inverted()

        # USD is applied after inversion
        if pool.quote_mint and self._quote_prices is not None:
            quote_usd = self._quote_prices.fetch_price(pool.quote_mint)
            if quote_usd is not None:
                quote = quote.with_usd(quote_usd.usd)

        logger.info(f"[pricer] {pool.name}: {quote.price:.10g}")
        return quote
