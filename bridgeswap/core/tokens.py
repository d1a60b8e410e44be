"""Token balance and allowance helpers."""

from __future__ import annotations

from web3 import Web3
from web3.contract import Contract

from bridgeswap.contracts import ERC20_ABI_FILE, load_contract
from bridgeswap.core.errors import InsufficientBalanceError
from bridgeswap.core.utils import format_units, get_logger

LOGGER = get_logger("bridgeswap.tokens")


def get_contract(web3: Web3, token_address: str) -> Contract:
    """Return an ERC20 contract instance for ``token_address``."""
    return load_contract(web3, ERC20_ABI_FILE, token_address)


def balance_of(web3: Web3, token_address: str, owner: str) -> int:
    """Fetch the ERC20 balance."""
    contract = get_contract(web3, token_address)
    return contract.functions.balanceOf(Web3.to_checksum_address(owner)).call()


def allowance_of(web3: Web3, token_address: str, owner: str, spender: str) -> int:
    """Fetch the ERC20 allowance."""
    contract = get_contract(web3, token_address)
    return contract.functions.allowance(
        Web3.to_checksum_address(owner),
        Web3.to_checksum_address(spender),
    ).call()


def ensure_balance(
    web3: Web3,
    token_address: str,
    owner: str,
    required: int,
    *,
    decimals: int = 18,
) -> int:
    """Return the balance of ``owner`` or raise if it is below ``required``."""
    balance = balance_of(web3, token_address, owner)
    if balance < required:
        raise InsufficientBalanceError(
            f"Insufficient balance. Required: {format_units(required, decimals)}, "
            f"Available: {format_units(balance, decimals)}",
            required=required,
            available=balance,
        )
    LOGGER.debug("Balance of %s for %s is %s", token_address, owner, balance)
    return balance


__all__ = ["allowance_of", "balance_of", "ensure_balance", "get_contract"]
