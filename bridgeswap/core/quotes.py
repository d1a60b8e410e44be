"""Quoting utilities for the Bebop PMM API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from web3 import Web3

from bridgeswap.core.errors import QuoteError
from bridgeswap.core.utils import get_logger, hex_to_bytes

LOGGER = get_logger("bridgeswap.quotes")

DEFAULT_BEBOP_API = "https://api.bebop.xyz/pmm"
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class SwapCallData:
    """Target contract and calldata of a quoted swap."""

    to: str
    data: bytes


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or error.get("errorMessage") or error)
    return str(error)


def generate_swap_call_data(
    user_address: str,
    amount: int,
    sell_token: str,
    buy_token: str,
    taker_address: str,
    destination_chain_name: str,
    *,
    api_base: str = DEFAULT_BEBOP_API,
    timeout: int = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> SwapCallData:
    """Request a Bebop quote and return the swap transaction target and calldata.

    ``taker_address`` is the contract that will execute the swap (the Across
    multicall handler) and ``user_address`` receives the bought tokens.
    """
    url = f"{api_base.rstrip('/')}/{destination_chain_name}/v3/quote"
    params: Dict[str, str] = {
        "buy_tokens": Web3.to_checksum_address(buy_token),
        "sell_tokens": Web3.to_checksum_address(sell_token),
        "sell_amounts": str(amount),
        "taker_address": Web3.to_checksum_address(taker_address),
        "receiver_address": Web3.to_checksum_address(user_address),
        "approval_type": "Standard",
        "gasless": "false",
        "skip_validation": "true",
    }

    http = session or requests
    try:
        response = http.get(url, params=params, timeout=timeout)
    except requests.RequestException as exc:
        raise ConnectionError(f"Failed to fetch Bebop quote from {url}: {exc}") from exc

    try:
        payload = response.json()
    except ValueError:
        payload = {}

    error = payload.get("error") if isinstance(payload, dict) else None
    if error:
        raise QuoteError(_error_message(error))

    try:
        response.raise_for_status()
    except requests.RequestException as exc:
        raise ConnectionError(f"Bebop quote request to {url} failed: {exc}") from exc

    tx = payload.get("tx") or {}
    if not tx.get("to") or not tx.get("data"):
        raise QuoteError("Bebop API response missing transaction payload")

    result = SwapCallData(to=Web3.to_checksum_address(tx["to"]), data=hex_to_bytes(tx["data"]))
    LOGGER.info("Bebop quote for %s %s -> %s via %s", amount, sell_token, buy_token, result.to)
    return result


__all__ = ["DEFAULT_BEBOP_API", "SwapCallData", "generate_swap_call_data"]
