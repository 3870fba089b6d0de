import pytest

from conftest import build_constant_product, build_whirlpool
from pool_pricing.dex import (
    ConcentratedLiquidityPoolState,
    ConstantProductPoolState,
    decode_pool_account,
)
from pool_pricing.errors import InvalidLengthError


def test_dispatch_by_length():
    assert isinstance(decode_pool_account(build_constant_product()), ConstantProductPoolState)
    assert isinstance(decode_pool_account(build_whirlpool()), ConcentratedLiquidityPoolState)
    assert isinstance(decode_pool_account(build_whirlpool(discriminator=True)), ConcentratedLiquidityPoolState)


def test_record_types_are_independent():
    assert not issubclass(ConstantProductPoolState, ConcentratedLiquidityPoolState)
    assert not issubclass(ConcentratedLiquidityPoolState, ConstantProductPoolState)


@pytest.mark.parametrize("size", [0, 165, 652, 700, 751, 753])
def test_unknown_length(size):
    with pytest.raises(InvalidLengthError) as exc:
        decode_pool_account(bytes(size))
    assert exc.value.expected == (752, 653, 661)
