import json

from conftest import RoutingSession, account_result, build_whirlpool
from pool_pricing import cli
from pool_pricing.config.loader import PoolConfig
from pool_pricing.pricing import PoolPricer
from pool_pricing.rpc.client import SolanaRpcClient


def make_pricer(table):
    rpc = SolanaRpcClient(rpc_url="http://rpc.test", session=RoutingSession(table), sleep=lambda s: None)
    return PoolPricer(rpc)


def test_run_formats_text_and_json():
    pricer = make_pricer({("getAccountInfo", "Whirl"): account_result(build_whirlpool())})
    pool = PoolConfig(name="SOL/USDC", kind="concentrated_liquidity", address="Whirl", decimals_a=9, decimals_b=6)

    code, lines = cli.run(pricer, [pool])
    assert code == cli.EXIT_OK
    assert lines == ["SOL/USDC: 1000"]

    code, lines = cli.run(pricer, [pool], as_json=True)
    record = json.loads(lines[0])
    assert record["name"] == "SOL/USDC"
    assert record["price"] == 1000.0


def test_run_reports_failed_pools():
    pricer = make_pricer({("getAccountInfo", "Bad"): account_result(bytes(10))})
    pool = PoolConfig(name="bad", kind="constant_product", address="Bad")
    code, lines = cli.run(pricer, [pool])
    assert code == cli.EXIT_POOL_FAILED
    assert lines == []


def test_main_requires_one_source(capsys):
    assert cli.main([]) == cli.EXIT_USAGE
    assert "exactly one" in capsys.readouterr().err


def test_main_pool_requires_kind(capsys):
    assert cli.main(["--pool", "Whirl"]) == cli.EXIT_USAGE
    assert "--kind" in capsys.readouterr().err


def test_main_rejects_bad_decimals(capsys):
    assert cli.main(["--pool", "W", "--kind", "concentrated_liquidity", "--decimals-a", "30"]) == cli.EXIT_USAGE


def test_main_missing_config(tmp_path, capsys):
    assert cli.main(["--config", str(tmp_path / "none.yaml")]) == cli.EXIT_USAGE
    assert "not found" in capsys.readouterr().err


def test_main_single_pool(monkeypatch, capsys):
    table = {("getAccountInfo", "Whirl"): account_result(build_whirlpool())}

    class StubClient(SolanaRpcClient):
        def __init__(self, rpc_url=None, timeout=10):
            super().__init__(rpc_url=rpc_url, timeout=timeout, session=RoutingSession(table))

    monkeypatch.setattr(cli, "SolanaRpcClient", StubClient)
    code = cli.main(["--pool", "Whirl", "--kind", "concentrated_liquidity", "--decimals-a", "9", "--decimals-b", "9"])
    assert code == cli.EXIT_OK
    assert capsys.readouterr().out.strip() == "Whirl: 1"


def test_run_keeps_going_after_malformed_node_reply():
    table = {
        ("getAccountInfo", "Odd"): {"context": {"slot": 1}, "value": ["x"]},
        ("getAccountInfo", "Whirl"): account_result(build_whirlpool()),
    }
    pricer = make_pricer(table)
    pools = [
        PoolConfig(name="odd", kind="concentrated_liquidity", address="Odd", decimals_a=9, decimals_b=9),
        PoolConfig(name="good", kind="concentrated_liquidity", address="Whirl", decimals_a=9, decimals_b=9),
    ]
    code, lines = cli.run(pricer, pools)
    assert code == cli.EXIT_POOL_FAILED
    assert lines == ["good: 1"]
