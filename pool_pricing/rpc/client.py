"""
pool_pricing/rpc/client.py

SolanaRpcClient: account data and token balances over Solana JSON-RPC.

Environment:
    SOLANA_RPC_URL: RPC endpoint URL (default: https://api.mainnet-beta.solana.com)
"""
from __future__ import annotations

import base64
import binascii
import itertools
import logging
import os
import time
from typing import Any, Dict, List, Optional

import requests

from ..errors import AccountNotFoundError, RpcError

logger = logging.getLogger(__name__)


DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"

# HTTP statuses worth retrying
RETRYABLE_STATUS = (429, 500, 502, 503, 504)
# JSON-RPC error codes worth retrying (rate limit, node behind)
RETRYABLE_RPC_CODES = (429, -32005)


class SolanaRpcClient:
    """JSON-RPC client for the account reads pool pricing needs.

    Retries rate limits, 5xx responses, timeouts and connection errors
    with exponential backoff, up to `max_retries` extra attempts.
    """

    DEFAULT_TIMEOUT = 10  # seconds
    MAX_RETRIES = 3
    INITIAL_DELAY_MS = 250
    MAX_DELAY_MS = 8000

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        initial_delay_ms: float = INITIAL_DELAY_MS,
        session: Optional[requests.Session] = None,
        sleep=time.sleep,
    ):
        """Initialize SolanaRpcClient.

        Args:
            rpc_url: Solana RPC endpoint URL. Reads SOLANA_RPC_URL from env if None.
            timeout: Request timeout in seconds.
            max_retries: Extra attempts after the first failure.
            initial_delay_ms: First backoff delay, doubled per retry.
            session: HTTP session (anything with a requests-style `post`).
            sleep: Sleep function, replaced in tests.
        """
        self.rpc_url = rpc_url or os.getenv("SOLANA_RPC_URL", DEFAULT_RPC_URL)
        self.timeout = timeout
        self.max_retries = max_retries
        self.initial_delay_ms = initial_delay_ms
        self._session = session if session is not None else requests.Session()
        self._sleep = sleep
        self._ids = itertools.count(1)

    def _backoff(self, attempt: int) -> None:
        delay_ms = min(self.initial_delay_ms * (2 ** attempt), self.MAX_DELAY_MS)
        self._sleep(delay_ms / 1000.0)

    def _make_request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Make JSON-RPC request with error handling and backoff."""
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }

        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries + 1):
            try:
                response = self._session.post(
                    self.rpc_url,
                    json=payload,
                    timeout=self.timeout,
                )
                if response.status_code in RETRYABLE_STATUS:
                    last_error = RpcError(f"{method}: HTTP {response.status_code}")
                    logger.warning(
                        f"[rpc] {method} HTTP {response.status_code} "
                        f"(attempt {attempt + 1}/{self.max_retries + 1})"
                    )
                    if attempt < self.max_retries:
                        self._backoff(attempt)
                    continue
                response.raise_for_status()
                result = response.json()
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                last_error = e
                logger.warning(f"[rpc] {method} transport error: {e}")
                if attempt < self.max_retries:
                    self._backoff(attempt)
                continue
            except requests.HTTPError as e:
                raise RpcError(f"{method}: {e}") from e
            except ValueError as e:
                raise RpcError(f"{method}: invalid JSON response") from e

            if not isinstance(result, dict):
                raise RpcError(f"{method}: response body is not a JSON object: {result!r:.200}")

            if "error" in result:
                error = result["error"] or {}
                code = error.get("code") if isinstance(error, dict) else None
                if code in RETRYABLE_RPC_CODES and attempt < self.max_retries:
                    last_error = RpcError(f"{method}: JSON-RPC error: {error}")
                    logger.warning(f"[rpc] {method} JSON-RPC error {code}, retrying")
                    self._backoff(attempt)
                    continue
                raise RpcError(f"{method}: JSON-RPC error: {error}")

            return result.get("result")

        raise RpcError(f"{method}: failed after {self.max_retries + 1} attempts") from last_error

    @staticmethod
    def _value(result: Any, method: str) -> Any:
        if not isinstance(result, dict) or "value" not in result:
            raise RpcError(f"{method}: malformed result {result!r:.200}")
        value = result["value"]
        if value is not None and not isinstance(value, dict):
            raise RpcError(f"{method}: malformed value {value!r:.200}")
        return value

    def get_account_data(self, address: str) -> bytes:
        """Fetch raw account data (base64 decoded).

        Raises:
            AccountNotFoundError: If the account does not exist
            RpcError: On transport or response errors
        """
        result = self._make_request(
            "getAccountInfo",
            [address, {"encoding": "base64"}],
        )
        value = self._value(result, "getAccountInfo")
        if value is None:
            raise AccountNotFoundError(address)

        data = value.get("data")
        if not isinstance(data, list) or not data or data[-1] != "base64":
            raise RpcError(f"getAccountInfo: unexpected data encoding for {address}")
        try:
            raw = base64.b64decode(data[0], validate=True)
        except binascii.Error as e:
            raise RpcError(f"getAccountInfo: invalid base64 for {address}") from e

        logger.debug(f"[rpc] Fetched {len(raw)} bytes for {address}")
        return raw

    def get_token_account_balance(self, address: str) -> int:
        """Raw (undecimaled) token amount held by a token account."""
        result = self._make_request("getTokenAccountBalance", [address])
        value = self._value(result, "getTokenAccountBalance")
        if value is None:
            raise AccountNotFoundError(address)
        try:
            return int(value["amount"])
        except (KeyError, TypeError, ValueError) as e:
            raise RpcError(f"getTokenAccountBalance: bad amount for {address}") from e

    def get_token_decimals(self, mint: str) -> int:
        """Decimals of a token mint."""
        result = self._make_request("getTokenSupply", [mint])
        value = self._value(result, "getTokenSupply")
        if value is None:
            raise AccountNotFoundError(mint)
        try:
            return int(value["decimals"])
        except (KeyError, TypeError, ValueError) as e:
            raise RpcError(f"getTokenSupply: bad decimals for {mint}") from e

    def get_token_balances(self, addresses: List[str]) -> Dict[str, int]:
        """Raw token amounts for several token accounts."""
        return {address: self.get_token_account_balance(address) for address in addresses}

    def close(self) -> None:
        self._session.close()
