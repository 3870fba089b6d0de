"""
pool_pricing/dex/orca/decoder.py

OrcaDecoder - Whirlpool account bytes in, ConcentratedLiquidityPoolState
and display/price summaries out.
"""
import base64
import logging
from typing import Any, Dict

from ..pubkey import pubkey_to_string
from .layouts import ConcentratedLiquidityPoolState, decode_concentrated_liquidity
from .math import OrcaMath

logger = logging.getLogger(__name__)

WSOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


class OrcaDecoder:
    """Stateless wrapper over the Whirlpool layout with logging."""

    SOL_MINT = WSOL_MINT
    USDC_MINT = USDC_MINT

    def decode_whirlpool(self, data: bytes) -> ConcentratedLiquidityPoolState:
        """
        Args:
            data: Account data, 653 bytes or 661 with the account discriminator

        Returns:
            ConcentratedLiquidityPoolState

        Raises:
            PoolPricingError: wrong length or sqrt_price/tick out of range
        """
        try:
            pool = decode_concentrated_liquidity(data)
        except ValueError as e:
            logger.error(f"[orca] Whirlpool decode failed ({len(data)} bytes): {e}")
            raise

        logger.debug(
            f"[orca] {pubkey_to_string(pool.token_mint_a)[:8]}.."
            f"/{pubkey_to_string(pool.token_mint_b)[:8]}.. "
            f"tick={pool.tick_current_index} sqrt_price={pool.sqrt_price}"
        )
        return pool

    def decode_from_base64(self, data: str) -> ConcentratedLiquidityPoolState:
        return self.decode_whirlpool(base64.b64decode(data, validate=True))

    def get_pool_info(self, pool: ConcentratedLiquidityPoolState) -> Dict[str, Any]:
        """Mints and vaults as base58 plus the pricing-relevant scalars."""
        info = {
            name: pubkey_to_string(getattr(pool, name))
            for name in ("token_mint_a", "token_mint_b", "token_vault_a", "token_vault_b")
        }
        info.update(
            tick_current_index=pool.tick_current_index,
            tick_spacing=pool.tick_spacing,
            sqrt_price=pool.sqrt_price,
            liquidity=pool.liquidity,
            fee_fraction=pool.fee_fraction,
            is_initialized=pool.is_initialized,
        )
        return info

    def validate_pool(self, pool: ConcentratedLiquidityPoolState) -> bool:
        """False (with a warning) when the pool cannot be quoted from."""
        if pool.liquidity == 0:
            logger.warning("[orca] Whirlpool has zero in-range liquidity")
            return False
        if pool.tick_spacing == 0:
            logger.warning("[orca] Whirlpool has tick_spacing 0")
            return False
        return True

    def is_sol_usdc_pool(self, pool: ConcentratedLiquidityPoolState) -> bool:
        mints = {pubkey_to_string(pool.token_mint_a), pubkey_to_string(pool.token_mint_b)}
        return mints == {self.SOL_MINT, self.USDC_MINT}

    def get_price_info(
        self,
        pool: ConcentratedLiquidityPoolState,
        decimals_a: int,
        decimals_b: int,
    ) -> Dict[str, Any]:
        """
        Spot price next to the price at the lower edge of the current tick.

        Args:
            pool: Decoded Whirlpool
            decimals_a: Mint decimals of token A
            decimals_b: Mint decimals of token B

        Returns:
            Dict with current_price, tick_price and the inputs behind them
        """
        spot = OrcaMath.sqrt_price_x64_to_price(pool.sqrt_price, decimals_a, decimals_b)
        tick_floor = OrcaMath.tick_to_price(pool.tick_current_index, decimals_a, decimals_b)
        return {
            "current_price": spot,
            "tick_price": tick_floor,
            "tick_index": pool.tick_current_index,
            "sqrt_price": pool.sqrt_price,
            "liquidity": pool.liquidity,
            "decimals_a": decimals_a,
            "decimals_b": decimals_b,
        }


def decode_orca_whirlpool(data: bytes) -> ConcentratedLiquidityPoolState:
    return OrcaDecoder().decode_whirlpool(data)
