#!/usr/bin/env python3
"""pool_pricing/config/loader.py

YAML loader for the list of pools to price.

Validates only what the pricer relies on; unknown keys are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

KIND_CONSTANT_PRODUCT = "constant_product"
KIND_CONCENTRATED_LIQUIDITY = "concentrated_liquidity"
POOL_KINDS = (KIND_CONSTANT_PRODUCT, KIND_CONCENTRATED_LIQUIDITY)

MAX_DECIMALS = 18

DEFAULT_TIMEOUT = 10.0
DEFAULT_PRICE_CACHE_TTL = 30.0


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class PoolConfig:
    name: str
    kind: str
    address: str
    quote_mint: Optional[str] = None  # quote of the reported (post-invert) price
    invert: bool = False
    decimals_a: Optional[int] = None  # concentrated_liquidity only
    decimals_b: Optional[int] = None


@dataclass(frozen=True)
class PricingConfig:
    pools: Tuple[PoolConfig, ...]
    rpc_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    price_cache_ttl: float = DEFAULT_PRICE_CACHE_TTL
    path: Optional[str] = field(default=None, compare=False)


def _require(d: Dict[str, Any], key: str, where: str) -> Any:
    if key not in d or d[key] in (None, ""):
        raise ConfigError(f"Missing required key: {where}.{key}")
    return d[key]


def _optional_decimals(d: Dict[str, Any], key: str, where: str) -> Optional[int]:
    value = d.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{where}.{key} must be an integer, got: {value!r}")
    if not 0 <= value <= MAX_DECIMALS:
        raise ConfigError(f"{where}.{key} must be within 0..{MAX_DECIMALS}, got: {value}")
    return value


def _positive_number(raw: Dict[str, Any], key: str, default: float) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{key} must be a positive number, got: {value!r}")
    return float(value)


def parse_pool(raw: Any, index: int) -> PoolConfig:
    """Validate one entry of the `pools` list."""
    where = f"pools[{index}]"
    if not isinstance(raw, dict):
        raise ConfigError(f"{where} must be a mapping")

    name = str(_require(raw, "name", where))
    address = str(_require(raw, "address", where))
    kind = _require(raw, "kind", where)
    if kind not in POOL_KINDS:
        raise ConfigError(f"{where}.kind must be one of {'|'.join(POOL_KINDS)}, got: {kind}")

    invert = raw.get("invert", False)
    if not isinstance(invert, bool):
        raise ConfigError(f"{where}.invert must be a boolean")

    quote_mint = raw.get("quote_mint")
    return PoolConfig(
        name=name,
        kind=kind,
        address=address,
        quote_mint=str(quote_mint) if quote_mint else None,
        invert=invert,
        decimals_a=_optional_decimals(raw, "decimals_a", where),
        decimals_b=_optional_decimals(raw, "decimals_b", where),
    )


def parse_config(raw: Any, path: Optional[str] = None) -> PricingConfig:
    """Validate an already-parsed YAML document."""
    if not isinstance(raw, dict):
        raise ConfigError("pool config must be a YAML mapping (dict at top-level)")

    pools = raw.get("pools")
    if not isinstance(pools, list) or not pools:
        raise ConfigError("pools must be a non-empty list")

    rpc_url = raw.get("rpc_url")
    return PricingConfig(
        pools=tuple(parse_pool(p, i) for i, p in enumerate(pools)),
        rpc_url=str(rpc_url) if rpc_url else None,
        timeout=_positive_number(raw, "timeout", DEFAULT_TIMEOUT),
        price_cache_ttl=_positive_number(raw, "price_cache_ttl", DEFAULT_PRICE_CACHE_TTL),
        path=path,
    )


def load_config(path: str) -> PricingConfig:
    """Load and validate a pool pricing config file."""
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config not found: {p}")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {p}: {e}") from e

    return parse_config(raw, path=str(p))
