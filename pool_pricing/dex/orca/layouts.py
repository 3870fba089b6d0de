"""
pool_pricing/dex/orca/layouts.py

Orca Whirlpools CLMM account layout definitions.

Accepted sizes are 653 bytes, or 661 bytes with an 8-byte leading
discriminator that is skipped. Offsets below are relative to the first
byte after the discriminator. The 384 trailing reward-schedule bytes are
not decoded.
"""
from dataclasses import dataclass
from typing import Any, Dict

from ...errors import FieldOutOfRangeError, InvalidLengthError
from ..byte_reader import (
    read_bytes,
    read_i32_le,
    read_pubkey,
    read_u8,
    read_u16_le,
    read_u64_le,
    read_u128_le,
)
from ..pubkey import pubkey_to_string


DISCRIMINATOR_LENGTH = 8
WHIRLPOOL_SIZE = 653
WHIRLPOOL_SIZE_WITH_DISCRIMINATOR = WHIRLPOOL_SIZE + DISCRIMINATOR_LENGTH

# Valid sqrt_price domain (Q64.64)
MIN_SQRT_PRICE = 4295048016
MAX_SQRT_PRICE = 79226673515401279992447579055

# Valid tick domain
MIN_TICK_INDEX = -443636
MAX_TICK_INDEX = 443636

# Offsets relative to the post-discriminator region
OFFSET_WHIRLPOOLS_CONFIG = 0
OFFSET_WHIRLPOOL_BUMP = 32
OFFSET_TICK_SPACING = 33
OFFSET_TICK_SPACING_SEED = 35
OFFSET_FEE_RATE = 37
OFFSET_PROTOCOL_FEE_RATE = 39
OFFSET_LIQUIDITY = 41
OFFSET_SQRT_PRICE = 57
OFFSET_TICK_CURRENT_INDEX = 73
OFFSET_PROTOCOL_FEE_OWED_A = 77
OFFSET_PROTOCOL_FEE_OWED_B = 85
OFFSET_TOKEN_MINT_A = 93
OFFSET_TOKEN_VAULT_A = 125
OFFSET_FEE_GROWTH_GLOBAL_A = 157
OFFSET_TOKEN_MINT_B = 173
OFFSET_TOKEN_VAULT_B = 205
OFFSET_FEE_GROWTH_GLOBAL_B = 237
OFFSET_REWARD_LAST_UPDATED_TIMESTAMP = 253

# fee_rate is stored in hundredths of a basis point
FEE_RATE_DENOMINATOR = 1_000_000
# protocol_fee_rate is stored in basis points of the fee
PROTOCOL_FEE_RATE_DENOMINATOR = 10_000


@dataclass(frozen=True)
class ConcentratedLiquidityPoolState:
    """
    Decoded Orca Whirlpool CLMM state.

    Pubkey fields hold raw 32-byte keys; sqrt_price is Q64.64.
    """
    whirlpools_config: bytes        # Pubkey
    whirlpool_bump: int             # u8
    tick_spacing: int               # u16
    tick_spacing_seed: bytes        # [u8; 2]
    fee_rate: int                   # u16
    protocol_fee_rate: int          # u16
    liquidity: int                  # u128
    sqrt_price: int                 # u128
    tick_current_index: int         # i32
    protocol_fee_owed_a: int        # u64
    protocol_fee_owed_b: int        # u64

    token_mint_a: bytes             # Pubkey
    token_vault_a: bytes            # Pubkey
    fee_growth_global_a: int        # u128
    token_mint_b: bytes             # Pubkey
    token_vault_b: bytes            # Pubkey
    fee_growth_global_b: int        # u128

    reward_last_updated_timestamp: int  # u64

    has_discriminator: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "whirlpools_config": pubkey_to_string(self.whirlpools_config),
            "whirlpool_bump": self.whirlpool_bump,
            "tick_spacing": self.tick_spacing,
            "tick_spacing_seed": self.tick_spacing_seed.hex(),
            "fee_rate": self.fee_rate,
            "protocol_fee_rate": self.protocol_fee_rate,
            "liquidity": self.liquidity,
            "sqrt_price": self.sqrt_price,
            "tick_current_index": self.tick_current_index,
            "protocol_fee_owed_a": self.protocol_fee_owed_a,
            "protocol_fee_owed_b": self.protocol_fee_owed_b,
            "token_mint_a": pubkey_to_string(self.token_mint_a),
            "token_vault_a": pubkey_to_string(self.token_vault_a),
            "fee_growth_global_a": self.fee_growth_global_a,
            "token_mint_b": pubkey_to_string(self.token_mint_b),
            "token_vault_b": pubkey_to_string(self.token_vault_b),
            "fee_growth_global_b": self.fee_growth_global_b,
            "reward_last_updated_timestamp": self.reward_last_updated_timestamp,
        }

    @property
    def is_initialized(self) -> bool:
        """Check if pool has active liquidity."""
        return self.liquidity > 0

    @property
    def fee_fraction(self) -> float:
        """Swap fee as a fraction (3000 -> 0.003)."""
        return self.fee_rate / FEE_RATE_DENOMINATOR

    @property
    def protocol_fee_fraction(self) -> float:
        """Share of the swap fee taken by the protocol (300 -> 0.03)."""
        return self.protocol_fee_rate / PROTOCOL_FEE_RATE_DENOMINATOR


def decode_concentrated_liquidity(data: bytes) -> ConcentratedLiquidityPoolState:
    """
    Decode Orca Whirlpool state from raw bytes.

    Args:
        data: Raw account data, 653 bytes or 661 bytes with discriminator

    Returns:
        ConcentratedLiquidityPoolState object

    Raises:
        InvalidLengthError: If data is not 653 or 661 bytes
        FieldOutOfRangeError: If sqrt_price or tick_current_index is invalid
    """
    if len(data) == WHIRLPOOL_SIZE:
        base = 0
    elif len(data) == WHIRLPOOL_SIZE_WITH_DISCRIMINATOR:
        base = DISCRIMINATOR_LENGTH
    else:
        raise InvalidLengthError(
            "concentrated_liquidity_pool",
            len(data),
            (WHIRLPOOL_SIZE, WHIRLPOOL_SIZE_WITH_DISCRIMINATOR),
        )

    sqrt_price = read_u128_le(data, base + OFFSET_SQRT_PRICE)
    if not MIN_SQRT_PRICE <= sqrt_price <= MAX_SQRT_PRICE:
        raise FieldOutOfRangeError("sqrt_price", sqrt_price, MIN_SQRT_PRICE, MAX_SQRT_PRICE)

    tick_current_index = read_i32_le(data, base + OFFSET_TICK_CURRENT_INDEX)
    if not MIN_TICK_INDEX <= tick_current_index <= MAX_TICK_INDEX:
        raise FieldOutOfRangeError(
            "tick_current_index", tick_current_index, MIN_TICK_INDEX, MAX_TICK_INDEX
        )

    return ConcentratedLiquidityPoolState(
        whirlpools_config=read_pubkey(data, base + OFFSET_WHIRLPOOLS_CONFIG),
        whirlpool_bump=read_u8(data, base + OFFSET_WHIRLPOOL_BUMP),
        tick_spacing=read_u16_le(data, base + OFFSET_TICK_SPACING),
        tick_spacing_seed=read_bytes(data, base + OFFSET_TICK_SPACING_SEED, 2),
        fee_rate=read_u16_le(data, base + OFFSET_FEE_RATE),
        protocol_fee_rate=read_u16_le(data, base + OFFSET_PROTOCOL_FEE_RATE),
        liquidity=read_u128_le(data, base + OFFSET_LIQUIDITY),
        sqrt_price=sqrt_price,
        tick_current_index=tick_current_index,
        protocol_fee_owed_a=read_u64_le(data, base + OFFSET_PROTOCOL_FEE_OWED_A),
        protocol_fee_owed_b=read_u64_le(data, base + OFFSET_PROTOCOL_FEE_OWED_B),
        token_mint_a=read_pubkey(data, base + OFFSET_TOKEN_MINT_A),
        token_vault_a=read_pubkey(data, base + OFFSET_TOKEN_VAULT_A),
        fee_growth_global_a=read_u128_le(data, base + OFFSET_FEE_GROWTH_GLOBAL_A),
        token_mint_b=read_pubkey(data, base + OFFSET_TOKEN_MINT_B),
        token_vault_b=read_pubkey(data, base + OFFSET_TOKEN_VAULT_B),
        fee_growth_global_b=read_u128_le(data, base + OFFSET_FEE_GROWTH_GLOBAL_B),
        reward_last_updated_timestamp=read_u64_le(
            data, base + OFFSET_REWARD_LAST_UPDATED_TIMESTAMP
        ),
        has_discriminator=bool(base),
    )
