import base64
import struct

import pytest
import requests

from pool_pricing.dex.orca import layouts as orca_layouts
from pool_pricing.dex.raydium.layouts import PUBKEY_OFFSETS, POOL_STATE_SIZE, SCALAR_OFFSETS


def pubkey_bytes(seed: int) -> bytes:
    """Distinct, recognisable 32-byte key for a given seed."""
    return bytes((seed + i) % 256 for i in range(32))


def build_constant_product(**overrides) -> bytes:
    buf = bytearray(POOL_STATE_SIZE)
    scalars = {"status": 6, "nonce": 254, "quote_decimal": 9, "base_decimal": 6}
    scalars.update({k: v for k, v in overrides.items() if k in SCALAR_OFFSETS})
    for name, value in scalars.items():
        struct.pack_into("<Q", buf, SCALAR_OFFSETS[name], value)
    for seed, (name, offset) in enumerate(PUBKEY_OFFSETS.items(), start=1):
        key = overrides.get(name, pubkey_bytes(seed * 10))
        buf[offset:offset + 32] = key
    return bytes(buf)


def build_whirlpool(discriminator: bool = False, **overrides) -> bytes:
    fields = {
        "sqrt_price": 1 << 64,
        "tick_current_index": 0,
        "liquidity": 123_456_789_012_345_678_901,
        "tick_spacing": 64,
        "fee_rate": 3000,
        "protocol_fee_rate": 300,
    }
    fields.update(overrides)

    buf = bytearray(orca_layouts.WHIRLPOOL_SIZE)
    L = orca_layouts
    buf[L.OFFSET_WHIRLPOOLS_CONFIG:L.OFFSET_WHIRLPOOLS_CONFIG + 32] = pubkey_bytes(1)
    buf[L.OFFSET_WHIRLPOOL_BUMP] = 255
    struct.pack_into("<H", buf, L.OFFSET_TICK_SPACING, fields["tick_spacing"])
    buf[L.OFFSET_TICK_SPACING_SEED:L.OFFSET_TICK_SPACING_SEED + 2] = b"\x40\x00"
    struct.pack_into("<H", buf, L.OFFSET_FEE_RATE, fields["fee_rate"])
    struct.pack_into("<H", buf, L.OFFSET_PROTOCOL_FEE_RATE, fields["protocol_fee_rate"])
    liquidity = fields["liquidity"]
    struct.pack_into("<QQ", buf, L.OFFSET_LIQUIDITY, liquidity & (2**64 - 1), liquidity >> 64)
    sqrt_price = fields["sqrt_price"]
    struct.pack_into("<QQ", buf, L.OFFSET_SQRT_PRICE, sqrt_price & (2**64 - 1), sqrt_price >> 64)
    struct.pack_into("<i", buf, L.OFFSET_TICK_CURRENT_INDEX, fields["tick_current_index"])
    struct.pack_into("<Q", buf, L.OFFSET_PROTOCOL_FEE_OWED_A, 11)
    struct.pack_into("<Q", buf, L.OFFSET_PROTOCOL_FEE_OWED_B, 22)
    buf[L.OFFSET_TOKEN_MINT_A:L.OFFSET_TOKEN_MINT_A + 32] = pubkey_bytes(100)
    buf[L.OFFSET_TOKEN_VAULT_A:L.OFFSET_TOKEN_VAULT_A + 32] = pubkey_bytes(110)
    struct.pack_into("<QQ", buf, L.OFFSET_FEE_GROWTH_GLOBAL_A, 5, 1)
    buf[L.OFFSET_TOKEN_MINT_B:L.OFFSET_TOKEN_MINT_B + 32] = pubkey_bytes(200)
    buf[L.OFFSET_TOKEN_VAULT_B:L.OFFSET_TOKEN_VAULT_B + 32] = pubkey_bytes(210)
    struct.pack_into("<QQ", buf, L.OFFSET_FEE_GROWTH_GLOBAL_B, 7, 0)
    struct.pack_into("<Q", buf, L.OFFSET_REWARD_LAST_UPDATED_TIMESTAMP, 1_700_000_000)

    if discriminator:
        return bytes.fromhex("3f95d10ce1806309") + bytes(buf)
    return bytes(buf)


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)


class FakeSession:
    """Replays queued responses; records every call."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []
        self.closed = False

    def _next(self):
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url, json=None, timeout=None):
        self.calls.append(("POST", url, json))
        return self._next()

    def get(self, url, params=None, timeout=None):
        self.calls.append(("GET", url, params))
        return self._next()

    def close(self):
        self.closed = True


class RoutingSession(FakeSession):
    """Answers JSON-RPC calls from a {(method, first_param): result} table."""

    def __init__(self, table):
        super().__init__()
        self.table = table

    def post(self, url, json=None, timeout=None):
        self.calls.append(("POST", url, json))
        key = (json["method"], json["params"][0])
        return FakeResponse({"jsonrpc": "2.0", "id": json["id"], "result": self.table[key]})


def account_result(data: bytes):
    return {
        "context": {"slot": 1},
        "value": {
            "data": [base64.b64encode(data).decode("ascii"), "base64"],
            "executable": False,
            "lamports": 6124800,
            "owner": "675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8",
        },
    }


def balance_result(amount: int, decimals: int):
    return {
        "context": {"slot": 1},
        "value": {"amount": str(amount), "decimals": decimals, "uiAmountString": "0"},
    }


@pytest.fixture
def cp_bytes():
    return build_constant_product()


@pytest.fixture
def whirlpool_bytes():
    return build_whirlpool()


@pytest.fixture
def delays():
    """Collects backoff delays instead of sleeping."""
    return []
