"""Cross-chain message construction for the post-bridge approve and swap."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Sequence

from eth_abi import encode as abi_encode
from web3 import Web3

from bridgeswap.config import AppConfig
from bridgeswap.core import quotes
from bridgeswap.core.calldata import generate_approve_call_data
from bridgeswap.core.errors import ContractMismatchError
from bridgeswap.core.quotes import SwapCallData
from bridgeswap.core.utils import get_logger

LOGGER = get_logger("bridgeswap.message")

# Instructions((address target, bytes callData, uint256 value)[] calls, address fallbackRecipient)
INSTRUCTIONS_TYPE = "((address,bytes,uint256)[],address)"

UpdateFn = Callable[[int], bytes]


@dataclass(frozen=True)
class CrossChainAction:
    """One call executed on the destination chain after the fill."""

    target: str
    call_data: bytes
    value: int = 0
    update: Optional[UpdateFn] = field(default=None, compare=False, repr=False)

    def with_output_amount(self, output_amount: int) -> "CrossChainAction":
        if self.update is None:
            return self
        return replace(self, call_data=self.update(output_amount))


@dataclass(frozen=True)
class CrossChainMessage:
    """Ordered actions plus the address that receives funds if they fail."""

    actions: Sequence[CrossChainAction]
    fallback_recipient: str

    def with_output_amount(self, output_amount: int) -> "CrossChainMessage":
        """Return a copy with every action's calldata regenerated for ``output_amount``."""
        return CrossChainMessage(
            actions=[action.with_output_amount(output_amount) for action in self.actions],
            fallback_recipient=self.fallback_recipient,
        )

    def encode(self) -> bytes:
        calls = [
            (Web3.to_checksum_address(action.target), bytes(action.call_data), int(action.value))
            for action in self.actions
        ]
        return abi_encode([INSTRUCTIONS_TYPE], [(calls, Web3.to_checksum_address(self.fallback_recipient))])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actions": [
                {"target": action.target, "callData": Web3.to_hex(action.call_data), "value": action.value}
                for action in self.actions
            ],
            "fallbackRecipient": self.fallback_recipient,
        }


def build_cross_chain_message(
    *,
    config: AppConfig,
    user_address: str,
    input_amount: int,
    quote_fn: Callable[..., SwapCallData] = quotes.generate_swap_call_data,
) -> CrossChainMessage:
    """Build the ``[approve, swap]`` message executed after the bridge fill.

    The first quote is sized on ``input_amount`` and only pins the swap
    contract and a calldata shape for fee estimation; each action's update
    regenerates its calldata once the bridged output amount is known.
    """
    output_token = config.route.output_token
    bebop = config.bebop

    def fetch_swap(amount: int) -> SwapCallData:
        return quote_fn(
            user_address,
            amount,
            output_token,
            bebop.buy_token,
            bebop.taker_address,
            bebop.chain_name,
            api_base=bebop.api_base,
            timeout=config.defaults.api_timeout,
        )

    initial = fetch_swap(input_amount)
    swap_contract = Web3.to_checksum_address(initial.to)

    def update_approve(output_amount: int) -> bytes:
        return generate_approve_call_data(swap_contract, output_amount)

    def update_swap(output_amount: int) -> bytes:
        updated = fetch_swap(output_amount)
        if updated.to.lower() != swap_contract.lower():
            raise ContractMismatchError(expected=swap_contract, actual=updated.to)
        LOGGER.info("Swap calldata refreshed for output amount %s", output_amount)
        return updated.data

    actions: List[CrossChainAction] = [
        CrossChainAction(
            target=output_token,
            call_data=generate_approve_call_data(swap_contract, input_amount),
            update=update_approve,
        ),
        CrossChainAction(
            target=swap_contract,
            call_data=initial.data,
            update=update_swap,
        ),
    ]

    return CrossChainMessage(actions=actions, fallback_recipient=Web3.to_checksum_address(user_address))


__all__ = [
    "CrossChainAction",
    "CrossChainMessage",
    "INSTRUCTIONS_TYPE",
    "UpdateFn",
    "build_cross_chain_message",
]
