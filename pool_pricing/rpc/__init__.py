"""
pool_pricing/rpc package

JSON-RPC account fetch and caller-owned TTL caching.
"""
from .cache import TtlCache
from .client import DEFAULT_RPC_URL, SolanaRpcClient

__all__ = [
    'TtlCache',
    'SolanaRpcClient',
    'DEFAULT_RPC_URL',
]
