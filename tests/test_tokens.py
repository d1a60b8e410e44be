import pytest

from bridgeswap.core.errors import InsufficientBalanceError
from bridgeswap.core.tokens import allowance_of, ensure_balance
from bridgeswap.core.utils import format_units
from tests.conftest import FakeWeb3

WETH_ARB = "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1"
OWNER = "0x19e7e376e7c213b7e7e7e46cc70a5dd086daff2a"


def test_ensure_balance_returns_balance():
    web3 = FakeWeb3(balances={WETH_ARB: 10**16})
    assert ensure_balance(web3, WETH_ARB, OWNER, 3 * 10**15) == 10**16


def test_ensure_balance_reports_human_amounts():
    web3 = FakeWeb3(balances={WETH_ARB: 10**15})

    with pytest.raises(InsufficientBalanceError, match=r"Required: 0\.003, Available: 0\.001"):
        ensure_balance(web3, WETH_ARB, OWNER, 3 * 10**15)


def test_allowance_of():
    web3 = FakeWeb3(allowance=42)
    assert allowance_of(web3, WETH_ARB, OWNER, OWNER) == 42


@pytest.mark.parametrize(
    "value, decimals, expected",
    [(0, 18, "0"), (3 * 10**15, 18, "0.003"), (10**19, 18, "10"), (1_500_000, 6, "1.5")],
)
def test_format_units(value, decimals, expected):
    assert format_units(value, decimals) == expected
