import pytest
from web3 import Web3

from bridgeswap.core.calldata import (
    APPROVE_SELECTOR,
    decode_approve_call_data,
    generate_approve_call_data,
)

SPENDER = Web3.to_checksum_address("0xbebebeb035351f58602e0c1c8b59ecbff5d5f47b")


def test_approve_selector_matches_erc20():
    assert APPROVE_SELECTOR == bytes.fromhex("095ea7b3")


@pytest.mark.parametrize(
    "spender, amount",
    [
        (SPENDER, 0),
        (SPENDER, 3 * 10**15),
        ("0x924a9f036260DdD5808007E1AA95f08eD08aA569", 2**256 - 1),
    ],
)
def test_approve_call_data_decodes_to_inputs(spender, amount):
    call_data = generate_approve_call_data(spender, amount)

    assert call_data[:4] == APPROVE_SELECTOR
    assert len(call_data) == 4 + 32 * 2
    assert decode_approve_call_data(call_data) == (Web3.to_checksum_address(spender), amount)


def test_lowercase_spender_is_accepted():
    call_data = generate_approve_call_data(SPENDER.lower(), 5)
    assert decode_approve_call_data(call_data)[0] == SPENDER


def test_non_integer_amount_is_rejected():
    with pytest.raises(TypeError):
        generate_approve_call_data(SPENDER, "100")


def test_decode_rejects_other_selectors():
    with pytest.raises(ValueError):
        decode_approve_call_data(bytes.fromhex("a9059cbb") + b"\x00" * 64)
