"""ERC20 calldata helpers."""

from __future__ import annotations

from typing import Tuple

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from web3 import Web3

APPROVE_SIGNATURE = "approve(address,uint256)"
APPROVE_SELECTOR = bytes(Web3.keccak(text=APPROVE_SIGNATURE)[:4])


def generate_approve_call_data(spender: str, amount: int) -> bytes:
    """Encode an ERC20 ``approve(spender, amount)`` call."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"approve amount must be an int, got {type(amount).__name__}")
    args = abi_encode(["address", "uint256"], [Web3.to_checksum_address(spender), amount])
    return APPROVE_SELECTOR + args


def decode_approve_call_data(call_data: bytes) -> Tuple[str, int]:
    """Return ``(spender, amount)`` from approve calldata."""
    if call_data[:4] != APPROVE_SELECTOR:
        raise ValueError(f"Not an approve call: selector 0x{call_data[:4].hex()}")
    spender, amount = abi_decode(["address", "uint256"], call_data[4:])
    return Web3.to_checksum_address(spender), int(amount)


__all__ = [
    "APPROVE_SELECTOR",
    "APPROVE_SIGNATURE",
    "decode_approve_call_data",
    "generate_approve_call_data",
]
