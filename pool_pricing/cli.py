#!/usr/bin/env python3
"""pool_pricing/cli.py

Print spot prices for AMM / CLMM pools.

Usage:
    pool-price --config pools.yaml
    pool-price --pool <address> --kind concentrated_liquidity --decimals-a 9 --decimals-b 6
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence, Tuple

from .config.loader import POOL_KINDS, ConfigError, PoolConfig, PricingConfig, load_config
from .errors import PoolPricingError, RpcError
from .market.quote_price import QuotePriceClient
from .pricing import PoolPricer, PriceQuote
from .rpc.cache import TtlCache
from .rpc.client import SolanaRpcClient

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_POOL_FAILED = 1
EXIT_USAGE = 2


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pool-price",
        description="Spot prices from constant-product and concentrated-liquidity pool accounts.",
    )
    ap.add_argument("--config", help="Path to YAML pool config")
    ap.add_argument("--pool", help="Single pool address (instead of --config)")
    ap.add_argument("--kind", choices=POOL_KINDS, help="Pool kind for --pool")
    ap.add_argument("--name", default=None, help="Display name for --pool")
    ap.add_argument("--decimals-a", type=int, default=None, help="Token A decimals (CLMM)")
    ap.add_argument("--decimals-b", type=int, default=None, help="Token B decimals (CLMM)")
    ap.add_argument("--quote-mint", default=None, help="Quote mint for USD conversion")
    ap.add_argument("--invert", action="store_true", help="Report base per quote")
    ap.add_argument("--rpc-url", default=None, help="RPC endpoint (default: $SOLANA_RPC_URL)")
    ap.add_argument("--json", action="store_true", help="One JSON object per pool")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="-v info, -vv debug")
    return ap


def _single_pool_config(args: argparse.Namespace) -> PricingConfig:
    if args.kind is None:
        raise ConfigError("--kind is required with --pool")
    for flag, value in (("--decimals-a", args.decimals_a), ("--decimals-b", args.decimals_b)):
        if value is not None and not 0 <= value <= 18:
            raise ConfigError(f"{flag} must be within 0..18, got: {value}")
    pool = PoolConfig(
        name=args.name or args.pool,
        kind=args.kind,
        address=args.pool,
        quote_mint=args.quote_mint,
        invert=args.invert,
        decimals_a=args.decimals_a,
        decimals_b=args.decimals_b,
    )
    return PricingConfig(pools=(pool,), rpc_url=args.rpc_url)


def _format(pool: PoolConfig, quote: PriceQuote, as_json: bool) -> str:
    if as_json:
        return json.dumps({"name": pool.name, **quote.to_dict()}, sort_keys=True)
    line = f"{pool.name}: {quote.price:.10g}"
    if quote.usd_price is not None:
        line += f" (${quote.usd_price:,.6f})"
    return line


def run(
    pricer: PoolPricer,
    pools: Sequence[PoolConfig],
    as_json: bool = False,
) -> Tuple[int, List[str]]:
    """Price every pool; returns (exit code, output lines)."""
    lines: List[str] = []
    failed = 0
    for pool in pools:
        try:
            quote = pricer.price_pool(pool)
        except (PoolPricingError, RpcError) as e:
            failed += 1
            logger.error(f"[cli] {pool.name}: {type(e).__name__}: {e}")
            continue
        lines.append(_format(pool, quote, as_json))

    return (EXIT_POOL_FAILED if failed else EXIT_OK), lines


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if bool(args.config) == bool(args.pool):
        _eprint("ERROR: exactly one of --config or --pool is required")
        return EXIT_USAGE

    try:
        cfg = load_config(args.config) if args.config else _single_pool_config(args)
    except ConfigError as e:
        _eprint(f"ERROR: {e}")
        return EXIT_USAGE

    rpc = SolanaRpcClient(rpc_url=args.rpc_url or cfg.rpc_url, timeout=cfg.timeout)
    quote_prices = QuotePriceClient(cache=TtlCache(default_ttl=cfg.price_cache_ttl))
    try:
        code, lines = run(PoolPricer(rpc, quote_prices=quote_prices), cfg.pools, args.json)
    finally:
        rpc.close()
        quote_prices.close()
    for line in lines:
        print(line)
    return code


if __name__ == "__main__":
    raise SystemExit(main())
