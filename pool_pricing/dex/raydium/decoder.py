"""
pool_pricing/dex/raydium/decoder.py

Raydium Pool Decoder - High-level interface for constant-product pool data.
"""
import base64
import logging
from typing import Any, Dict

from ..pubkey import is_zero_pubkey, pubkey_to_string
from .layouts import ConstantProductPoolState, decode_constant_product

logger = logging.getLogger(__name__)

# Realistic upper bound for SPL token decimals
MAX_SANE_DECIMALS = 18


class RaydiumDecoder:
    """
    High-level decoder for constant-product pool accounts.
    """

    def decode_pool(self, data: bytes) -> ConstantProductPoolState:
        """
        Decode pool state from raw bytes.

        Args:
            data: Raw account data (bytes)

        Returns:
            ConstantProductPoolState object
        """
        try:
            pool = decode_constant_product(data)
        except ValueError as e:
            logger.error(f"[raydium] Failed to decode pool: {e}")
            raise
        logger.debug(
            f"[raydium] Decoded pool: base={pubkey_to_string(pool.base_mint)[:8]}... "
            f"quote={pubkey_to_string(pool.quote_mint)[:8]}... status={pool.get_status_string()}"
        )
        return pool

    def decode_pool_from_base64(self, data: str) -> ConstantProductPoolState:
        """
        Decode pool from the base64 payload returned by getAccountInfo.

        Args:
            data: Base64 encoded account data

        Returns:
            ConstantProductPoolState object
        """
        return self.decode_pool(base64.b64decode(data, validate=True))

    def get_pool_info(self, pool: ConstantProductPoolState) -> Dict[str, Any]:
        """
        Get human-readable pool info.

        Args:
            pool: Decoded ConstantProductPoolState

        Returns:
            Dict with pool information
        """
        return {
            "status": pool.get_status_string(),
            "is_swappable": pool.is_swappable,
            "base_mint": pubkey_to_string(pool.base_mint),
            "quote_mint": pubkey_to_string(pool.quote_mint),
            "lp_mint": pubkey_to_string(pool.lp_mint),
            "base_decimal": pool.base_decimal,
            "quote_decimal": pool.quote_decimal,
            "market_id": pubkey_to_string(pool.market_id),
            "vaults": self.extract_vaults(pool),
        }

    def validate_pool(self, pool: ConstantProductPoolState) -> bool:
        """
        Check fields the layout decode does not enforce.

        Args:
            pool: Decoded ConstantProductPoolState

        Returns:
            True if pool can be priced from its vault balances
        """
        if pool.base_decimal > MAX_SANE_DECIMALS or pool.quote_decimal > MAX_SANE_DECIMALS:
            logger.warning(
                f"[raydium] Implausible decimals: base={pool.base_decimal} quote={pool.quote_decimal}"
            )
            return False

        if is_zero_pubkey(pool.base_vault) or is_zero_pubkey(pool.quote_vault):
            logger.warning("[raydium] Pool has an empty vault address")
            return False

        return True

    def extract_vaults(self, pool: ConstantProductPoolState) -> Dict[str, str]:
        """
        Base58 vault addresses for balance queries.

        Args:
            pool: Decoded ConstantProductPoolState

        Returns:
            Dict with "base" and "quote" vault addresses
        """
        return {
            "base": pubkey_to_string(pool.base_vault),
            "quote": pubkey_to_string(pool.quote_vault),
        }


def decode_raydium_pool(data: bytes) -> ConstantProductPoolState:
    """
    Convenience function to decode a constant-product pool.

    Args:
        data: Raw account data

    Returns:
        ConstantProductPoolState object
    """
    decoder = RaydiumDecoder()
    return decoder.decode_pool(data)
