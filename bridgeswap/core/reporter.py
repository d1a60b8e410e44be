"""Console reporting for the bridge-and-swap run."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Union

from web3 import Web3

from bridgeswap.config import ChainConfig
from bridgeswap.core.bridge import STATUS_SUCCESS, STEP_APPROVE, STEP_DEPOSIT, STEP_FILL, ProgressEvent
from bridgeswap.core.utils import get_logger


def create_transaction_url(chain: ChainConfig, tx_hash: Union[str, bytes]) -> str:
    """Return the block explorer page for ``tx_hash`` on ``chain``."""
    tx_hash = Web3.to_hex(hexstr=tx_hash) if isinstance(tx_hash, str) else Web3.to_hex(tx_hash)
    return f"{chain.explorer_url}/tx/{tx_hash}"


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return Web3.to_hex(value)
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return str(value)


class Reporter:
    """Step banners, status lines and explorer links."""

    def __init__(
        self,
        *,
        origin_chain: ChainConfig,
        destination_chain: ChainConfig,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.origin_chain = origin_chain
        self.destination_chain = destination_chain
        self.logger = logger or get_logger("bridgeswap.reporter")

    def step(self, message: str) -> None:
        self.logger.info("==> %s", message)

    def success(self, message: str) -> None:
        self.logger.info("✅ %s", message)

    def error(self, message: str, exc: Optional[BaseException] = None) -> None:
        if exc is None:
            self.logger.error("❌ %s", message)
        else:
            self.logger.error("❌ %s: %s", message, exc)

    def json(self, label: str, payload: Any) -> None:
        if hasattr(payload, "to_dict"):
            payload = payload.to_dict()
        self.logger.info("%s:\n%s", label, json.dumps(payload, indent=2, default=_json_default))

    def report_progress(self, event: ProgressEvent) -> None:
        """Render a bridge progress event; only completed stages are reported."""
        if event.status != STATUS_SUCCESS:
            self.logger.debug("%s: %s", event.step, event.status)
            return

        if event.step == STEP_APPROVE:
            self.success(f"Approve TX: {create_transaction_url(self.origin_chain, event.tx_hash)}")
        elif event.step == STEP_DEPOSIT:
            self.success(f"Deposit TX: {create_transaction_url(self.origin_chain, event.tx_hash)}")
            self.success(f"Deposit ID: {event.deposit_id}")
        elif event.step == STEP_FILL:
            self.success(f"Fill TX: {create_transaction_url(self.destination_chain, event.tx_hash)}")
            self.success("Swap completed successfully" if event.action_success else "Swap failed")


__all__ = ["Reporter", "create_transaction_url"]
