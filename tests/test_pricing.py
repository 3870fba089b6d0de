import pytest

from conftest import (
    FakeResponse,
    FakeSession,
    RoutingSession,
    account_result,
    balance_result,
    build_constant_product,
    build_whirlpool,
    pubkey_bytes,
)
from pool_pricing.config.loader import PoolConfig
from pool_pricing.dex.pubkey import pubkey_to_string
from pool_pricing.errors import FieldOutOfRangeError, InvalidLengthError
from pool_pricing.market.quote_price import QuotePriceClient
from pool_pricing.pricing import PoolPricer, PriceQuote
from pool_pricing.rpc.client import SolanaRpcClient

WSOL = "So11111111111111111111111111111111111111112"
BASE_VAULT = pubkey_to_string(pubkey_bytes(20))
QUOTE_VAULT = pubkey_to_string(pubkey_bytes(10))
MINT_A = pubkey_to_string(pubkey_bytes(100))
MINT_B = pubkey_to_string(pubkey_bytes(200))


def make_pricer(table, quote_prices=None):
    session = RoutingSession(table)
    rpc = SolanaRpcClient(rpc_url="http://rpc.test", session=session, sleep=lambda s: None)
    return PoolPricer(rpc, quote_prices=quote_prices), session


def cp_table(data=None, base=33_091_969_630_000, quote=12_410_680_000_000):
    return {
        ("getAccountInfo", "CpPool"): account_result(data or build_constant_product()),
        ("getTokenAccountBalance", BASE_VAULT): balance_result(base, 6),
        ("getTokenAccountBalance", QUOTE_VAULT): balance_result(quote, 9),
    }


def test_price_constant_product_pool():
    pricer, session = make_pricer(cp_table())
    quote = pricer.price_constant_product("CpPool")
    assert quote.price == pytest.approx(0.000375, abs=1e-6)
    assert (quote.base_decimals, quote.quote_decimals) == (6, 9)
    assert quote.kind == "constant_product"
    assert quote.pool_address == "CpPool"
    methods = [call[2]["method"] for call in session.calls]
    assert methods == ["getAccountInfo", "getTokenAccountBalance", "getTokenAccountBalance"]


def test_constant_product_empty_pool_is_zero():
    pricer, _ = make_pricer(cp_table(base=0))
    assert pricer.price_constant_product("CpPool").price == 0.0


def test_constant_product_rejects_implausible_decimals():
    pricer, _ = make_pricer(cp_table(data=build_constant_product(base_decimal=2**40)))
    with pytest.raises(FieldOutOfRangeError):
        pricer.price_constant_product("CpPool")


def test_constant_product_wrong_account_size():
    pricer, _ = make_pricer({("getAccountInfo", "CpPool"): account_result(bytes(100))})
    with pytest.raises(InvalidLengthError):
        pricer.price_constant_product("CpPool")


def test_price_whirlpool_with_explicit_decimals():
    pricer, session = make_pricer({("getAccountInfo", "Whirl"): account_result(build_whirlpool())})
    quote = pricer.price_concentrated_liquidity("Whirl", decimals_a=9, decimals_b=6)
    assert quote.price == pytest.approx(1000.0, abs=1e-3)
    assert len(session.calls) == 1


def test_price_whirlpool_fetches_mint_decimals():
    table = {
        ("getAccountInfo", "Whirl"): account_result(build_whirlpool(discriminator=True)),
        ("getTokenSupply", MINT_A): {"context": {}, "value": {"amount": "1", "decimals": 9}},
        ("getTokenSupply", MINT_B): {"context": {}, "value": {"amount": "1", "decimals": 9}},
    }
    pricer, _ = make_pricer(table)
    quote = pricer.price_concentrated_liquidity("Whirl")
    assert quote.price == pytest.approx(1.0, abs=1e-4)
    assert quote.kind == "concentrated_liquidity"


def test_price_pool_inverts_and_adds_usd():
    oracle = QuotePriceClient(
        session=FakeSession([FakeResponse({"data": {WSOL: {"id": WSOL, "price": "200"}}})])
    )
    pricer, _ = make_pricer(cp_table(), quote_prices=oracle)

    quote = pricer.price_pool(PoolConfig(name="AURA/SOL", kind="constant_product", address="CpPool", quote_mint=WSOL))
    assert quote.usd_price == pytest.approx(0.000375 * 200, rel=1e-2)

    inverted = pricer.price_pool(PoolConfig(name="SOL/AURA", kind="constant_product", address="CpPool", invert=True))
    assert inverted.price == pytest.approx(1 / 0.000375, rel=1e-2)
    assert (inverted.base_decimals, inverted.quote_decimals) == (9, 6)
    assert inverted.usd_price is None


def test_price_pool_unknown_kind():
    pricer, _ = make_pricer({})
    with pytest.raises(ValueError):
        pricer.price_pool(PoolConfig(name="x", kind="orderbook", address="A"))


def test_price_quote_helpers():
    zero = PriceQuote(price=0.0, base_decimals=6, quote_decimals=9)
    assert zero.inverted().price == 0.0
    assert PriceQuote(price=2.0, base_decimals=6, quote_decimals=9).with_usd(10.0).usd_price == 20.0
    assert zero.to_dict()["quote_decimals"] == 9


def test_inverted_usd_uses_reported_quote_mint():
    aura = "AuraMint1111111111111111111111111111111111"
    oracle = QuotePriceClient(
        session=FakeSession([FakeResponse({"data": {aura: {"id": aura, "price": "0.02"}}})])
    )
    pricer, _ = make_pricer(cp_table(), quote_prices=oracle)
    quote = pricer.price_pool(
        PoolConfig(name="SOL/AURA", kind="constant_product", address="CpPool", quote_mint=aura, invert=True)
    )
    assert quote.price == pytest.approx(1 / 0.000375, rel=1e-2)
    assert quote.usd_price == pytest.approx(quote.price * 0.02)
    assert oracle.cache.get(f"quote_price:{aura}").mint == aura
