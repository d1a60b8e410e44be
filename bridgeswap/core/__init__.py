"""Core domain logic for the bridge-and-swap flow."""

from .bridge import AcrossClient, Deposit, ProgressEvent, Quote
from .calldata import decode_approve_call_data, generate_approve_call_data
from .errors import BridgeError, ContractMismatchError, InsufficientBalanceError, QuoteError
from .message import CrossChainAction, CrossChainMessage, build_cross_chain_message
from .quotes import SwapCallData, generate_swap_call_data

__all__ = [
    "AcrossClient",
    "BridgeError",
    "ContractMismatchError",
    "CrossChainAction",
    "CrossChainMessage",
    "Deposit",
    "InsufficientBalanceError",
    "ProgressEvent",
    "Quote",
    "QuoteError",
    "SwapCallData",
    "build_cross_chain_message",
    "decode_approve_call_data",
    "generate_approve_call_data",
    "generate_swap_call_data",
]
