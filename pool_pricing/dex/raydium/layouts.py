"""
pool_pricing/dex/raydium/layouts.py

Constant-product AMM pool account layout (752-byte liquidity state).

The vault/mint offsets below were established against live accounts by
locating a known token mint and working back from it. Published SDK
layouts for this account version place the vaults at 192/224 and are
wrong; do not "fix" the table from them.
"""
from dataclasses import dataclass
from typing import Any, Dict

from ...errors import InvalidLengthError
from ..byte_reader import read_pubkey, read_u64_le
from ..pubkey import pubkey_to_string


POOL_STATE_SIZE = 752

# AMM status values (u64 at offset 0)
AMM_STATUS_UNINITIALIZED = 0
AMM_STATUS_INITIALIZED = 1
AMM_STATUS_DISABLED = 2
AMM_STATUS_WITHDRAW_ONLY = 3
AMM_STATUS_LIQUIDITY_ONLY = 4
AMM_STATUS_ORDERBOOK_ONLY = 5
AMM_STATUS_SWAP_ONLY = 6
AMM_STATUS_WAITING_TRADE = 7

_STATUS_NAMES = {
    AMM_STATUS_UNINITIALIZED: "UNINITIALIZED",
    AMM_STATUS_INITIALIZED: "INITIALIZED",
    AMM_STATUS_DISABLED: "DISABLED",
    AMM_STATUS_WITHDRAW_ONLY: "WITHDRAW_ONLY",
    AMM_STATUS_LIQUIDITY_ONLY: "LIQUIDITY_ONLY",
    AMM_STATUS_ORDERBOOK_ONLY: "ORDERBOOK_ONLY",
    AMM_STATUS_SWAP_ONLY: "SWAP_ONLY",
    AMM_STATUS_WAITING_TRADE: "WAITING_TRADE",
}

# Scalar u64 fields: name -> offset
SCALAR_OFFSETS = {
    "status": 0,
    "nonce": 8,
    "max_order": 16,
    "depth": 24,
    "quote_decimal": 32,
    "base_decimal": 40,
    "state": 48,
    "reset_flag": 56,
    "min_size": 64,
    "vol_max_cut_ratio": 72,
    "amount_wave_ratio": 80,
}

# Pubkey fields: name -> offset (32 bytes each)
PUBKEY_OFFSETS = {
    "quote_vault": 336,
    "base_vault": 368,
    "quote_mint": 400,
    "base_mint": 432,
    "lp_mint": 464,
    "open_orders": 496,
    "market_id": 528,
    "market_program_id": 560,
    "target_orders": 592,
    "withdraw_queue": 624,
    "lp_vault": 656,
    "owner": 688,
}


@dataclass(frozen=True)
class ConstantProductPoolState:
    """Decoded constant-product pool. Pubkey fields hold raw 32-byte keys."""
    # Scalars (u64)
    status: int
    nonce: int
    max_order: int
    depth: int
    quote_decimal: int
    base_decimal: int
    state: int
    reset_flag: int
    min_size: int
    vol_max_cut_ratio: int
    amount_wave_ratio: int

    # Vaults
    quote_vault: bytes
    base_vault: bytes

    # Mints
    quote_mint: bytes
    base_mint: bytes
    lp_mint: bytes

    # Market / admin accounts
    open_orders: bytes
    market_id: bytes
    market_program_id: bytes
    target_orders: bytes
    withdraw_queue: bytes
    lp_vault: bytes
    owner: bytes

    def to_dict(self) -> Dict[str, Any]:
        """Scalars as ints, pubkeys as base58 strings."""
        out: Dict[str, Any] = {name: getattr(self, name) for name in SCALAR_OFFSETS}
        for name in PUBKEY_OFFSETS:
            out[name] = pubkey_to_string(getattr(self, name))
        out["status_name"] = self.get_status_string()
        return out

    @property
    def is_initialized(self) -> bool:
        return self.status != AMM_STATUS_UNINITIALIZED

    @property
    def is_swappable(self) -> bool:
        """Check if the pool accepts swaps in its current status."""
        return self.status in (
            AMM_STATUS_INITIALIZED,
            AMM_STATUS_SWAP_ONLY,
        )

    def get_status_string(self) -> str:
        """Get human-readable status."""
        return _STATUS_NAMES.get(self.status, f"UNKNOWN({self.status})")


def decode_constant_product(data: bytes) -> ConstantProductPoolState:
    """
    Decode a constant-product pool account.

    Args:
        data: Raw account data, exactly 752 bytes

    Returns:
        ConstantProductPoolState

    Raises:
        InvalidLengthError: If data is not exactly 752 bytes
    """
    if len(data) != POOL_STATE_SIZE:
        raise InvalidLengthError("constant_product_pool", len(data), (POOL_STATE_SIZE,))

    fields: Dict[str, Any] = {}
    for name, offset in SCALAR_OFFSETS.items():
        fields[name] = read_u64_le(data, offset)
    for name, offset in PUBKEY_OFFSETS.items():
        fields[name] = read_pubkey(data, offset)

    return ConstantProductPoolState(**fields)
