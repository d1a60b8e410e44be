"""Across bridge client: quote, deposit and fill tracking."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Mapping, Optional

import requests
from web3 import Web3
from web3.logs import DISCARD
from web3.types import TxReceipt

from bridgeswap.config import AcrossConfig, ChainConfig, RouteConfig
from bridgeswap.contracts import SPOKE_POOL_ABI_FILE, load_contract
from bridgeswap.core.calldata import generate_approve_call_data
from bridgeswap.core.errors import BridgeError
from bridgeswap.core.message import CrossChainMessage
from bridgeswap.core.tokens import allowance_of
from bridgeswap.core.utils import get_logger, hex_to_bytes
from bridgeswap.core.wallet import UserWallet, Web3Factory, default_web3_factory

LOGGER = get_logger("bridgeswap.bridge")

# Appended to deposit calldata, followed by the 2-byte integrator id.
INTEGRATOR_DELIMITER = bytes.fromhex("1dc0de")
DEFAULT_FILL_DEADLINE_BUFFER = 6 * 60 * 60
CALLS_FAILED_TOPIC = bytes(Web3.keccak(text="CallsFailed((address,bytes,uint256)[],address)"))
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

STEP_APPROVE = "approve"
STEP_DEPOSIT = "deposit"
STEP_FILL = "fill"
STATUS_PENDING = "txPending"
STATUS_SUCCESS = "txSuccess"


@dataclass(frozen=True)
class ProgressEvent:
    """A stage update reported while a quote is executed."""

    step: str
    status: str
    tx_hash: Optional[str] = None
    tx_receipt: Optional[Any] = None
    deposit_id: Optional[int] = None
    action_success: Optional[bool] = None


ProgressCallback = Callable[[ProgressEvent], None]


@dataclass(frozen=True)
class Deposit:
    """Arguments for SpokePool ``depositV3``."""

    spoke_pool_address: str
    destination_spoke_pool_address: Optional[str]
    origin_chain_id: int
    destination_chain_id: int
    recipient: str
    input_token: str
    output_token: str
    input_amount: int
    output_amount: int
    exclusive_relayer: str
    quote_timestamp: int
    fill_deadline: int
    exclusivity_deadline: int
    message: bytes

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["message"] = Web3.to_hex(self.message)
        data["input_amount"] = str(self.input_amount)
        data["output_amount"] = str(self.output_amount)
        return data


@dataclass(frozen=True)
class Quote:
    """Bridge quote; ``deposit`` is what :meth:`AcrossClient.execute_quote` consumes."""

    deposit: Deposit
    cross_chain_message: CrossChainMessage
    fees: Mapping[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "deposit": self.deposit.to_dict(),
            "crossChainMessage": self.cross_chain_message.to_dict(),
            "totalRelayFee": (self.fees.get("totalRelayFee") or {}).get("total"),
        }


class AcrossClient:
    """Thin consumer of the Across HTTP API and the origin SpokePool."""

    def __init__(
        self,
        *,
        config: AcrossConfig,
        destination_chain: ChainConfig,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
        web3_factory: Optional[Web3Factory] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.destination_chain = destination_chain
        self.timeout = timeout
        self.session = session or requests.Session()
        self.web3_factory = web3_factory or default_web3_factory
        self._sleep = sleep

    @property
    def integrator_tag(self) -> bytes:
        return INTEGRATOR_DELIMITER + hex_to_bytes(self.config.integrator_id)

    def _get(self, path: str, params: Mapping[str, Any]) -> requests.Response:
        url = f"{self.config.api_base}/{path}"
        try:
            return self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ConnectionError(f"Failed to reach Across API at {url}: {exc}") from exc

    def get_suggested_fees(
        self,
        *,
        route: RouteConfig,
        input_amount: int,
        recipient: str,
        message: bytes,
    ) -> Dict[str, Any]:
        """Fetch Across suggested fees for ``input_amount`` along ``route``."""
        response = self._get(
            "suggested-fees",
            {
                "inputToken": route.input_token,
                "outputToken": route.output_token,
                "originChainId": route.origin_chain_id,
                "destinationChainId": route.destination_chain_id,
                "amount": str(input_amount),
                "recipient": recipient,
                "message": Web3.to_hex(message),
            },
        )
        try:
            response.raise_for_status()
        except requests.RequestException as exc:
            raise BridgeError(f"Across suggested-fees request failed: {exc} {response.text}") from exc
        return response.json()

    def get_quote(
        self,
        *,
        route: RouteConfig,
        input_amount: int,
        cross_chain_message: CrossChainMessage,
    ) -> Quote:
        """Quote a bridge deposit that executes ``cross_chain_message`` on arrival.

        Fees are computed against the message built from the initial calldata;
        the actions are then updated for the resulting output amount.
        """
        recipient = self.config.multicall_handler
        fees = self.get_suggested_fees(
            route=route,
            input_amount=input_amount,
            recipient=recipient,
            message=cross_chain_message.encode(),
        )
        if fees.get("isAmountTooLow"):
            raise BridgeError(f"Input amount {input_amount} is below the Across minimum")

        if fees.get("outputAmount") is not None:
            output_amount = int(fees["outputAmount"])
        else:
            output_amount = input_amount - int(fees["totalRelayFee"]["total"])
        if output_amount <= 0:
            raise BridgeError(f"Relay fee exceeds input amount {input_amount}")

        LOGGER.info("Across quote: input=%s output=%s", input_amount, output_amount)
        updated_message = cross_chain_message.with_output_amount(output_amount)

        quote_timestamp = int(fees["timestamp"])
        deposit = Deposit(
            spoke_pool_address=Web3.to_checksum_address(fees["spokePoolAddress"]),
            destination_spoke_pool_address=fees.get("destinationSpokePoolAddress"),
            origin_chain_id=route.origin_chain_id,
            destination_chain_id=route.destination_chain_id,
            recipient=recipient,
            input_token=route.input_token,
            output_token=route.output_token,
            input_amount=input_amount,
            output_amount=output_amount,
            exclusive_relayer=Web3.to_checksum_address(fees.get("exclusiveRelayer") or ZERO_ADDRESS),
            quote_timestamp=quote_timestamp,
            fill_deadline=int(fees.get("fillDeadline") or quote_timestamp + DEFAULT_FILL_DEADLINE_BUFFER),
            exclusivity_deadline=int(fees.get("exclusivityDeadline") or 0),
            message=updated_message.encode(),
        )
        return Quote(deposit=deposit, cross_chain_message=updated_message, fees=fees)

    def execute_quote(
        self,
        *,
        wallet: UserWallet,
        deposit: Deposit,
        on_progress: ProgressCallback,
    ) -> None:
        """Approve if needed, deposit, then wait for the destination fill."""
        self._approve(wallet, deposit, on_progress)
        deposit_id = self._deposit(wallet, deposit, on_progress)
        self._wait_for_fill(deposit, deposit_id, on_progress)

    def _approve(self, wallet: UserWallet, deposit: Deposit, on_progress: ProgressCallback) -> None:
        allowance = allowance_of(wallet.web3, deposit.input_token, wallet.address, deposit.spoke_pool_address)
        if allowance >= deposit.input_amount:
            LOGGER.info("SpokePool allowance %s covers input amount, skipping approve", allowance)
            return

        on_progress(ProgressEvent(step=STEP_APPROVE, status=STATUS_PENDING))
        receipt = wallet.send_transaction(
            {
                "to": deposit.input_token,
                "data": Web3.to_hex(generate_approve_call_data(deposit.spoke_pool_address, deposit.input_amount)),
            }
        )
        self._ensure_success(receipt, STEP_APPROVE)
        on_progress(
            ProgressEvent(
                step=STEP_APPROVE,
                status=STATUS_SUCCESS,
                tx_hash=Web3.to_hex(receipt["transactionHash"]),
                tx_receipt=receipt,
            )
        )

    def _deposit(self, wallet: UserWallet, deposit: Deposit, on_progress: ProgressCallback) -> int:
        spoke_pool = load_contract(wallet.web3, SPOKE_POOL_ABI_FILE, deposit.spoke_pool_address)
        call_data = spoke_pool.encode_abi(
            "depositV3",
            args=[
                wallet.address,
                Web3.to_checksum_address(deposit.recipient),
                deposit.input_token,
                deposit.output_token,
                deposit.input_amount,
                deposit.output_amount,
                deposit.destination_chain_id,
                deposit.exclusive_relayer,
                deposit.quote_timestamp,
                deposit.fill_deadline,
                deposit.exclusivity_deadline,
                deposit.message,
            ],
        )

        on_progress(ProgressEvent(step=STEP_DEPOSIT, status=STATUS_PENDING))
        receipt = wallet.send_transaction(
            {
                "to": deposit.spoke_pool_address,
                "data": Web3.to_hex(hex_to_bytes(call_data) + self.integrator_tag),
            }
        )
        self._ensure_success(receipt, STEP_DEPOSIT)

        deposit_id = self._parse_deposit_id(spoke_pool, receipt)

        on_progress(
            ProgressEvent(
                step=STEP_DEPOSIT,
                status=STATUS_SUCCESS,
                tx_hash=Web3.to_hex(receipt["transactionHash"]),
                tx_receipt=receipt,
                deposit_id=deposit_id,
            )
        )
        return deposit_id

    @staticmethod
    def _parse_deposit_id(spoke_pool: Any, receipt: TxReceipt) -> int:
        # Upgraded SpokePools emit FundsDeposited (bytes32 addresses, uint256 id) from depositV3.
        for event in (spoke_pool.events.FundsDeposited(), spoke_pool.events.V3FundsDeposited()):
            logs = event.process_receipt(receipt, errors=DISCARD)
            if logs:
                return int(logs[0]["args"]["depositId"])
        raise BridgeError(
            f"Deposit receipt {Web3.to_hex(receipt['transactionHash'])} contains no FundsDeposited "
            "or V3FundsDeposited event"
        )

    def get_deposit_status(self, *, origin_chain_id: int, deposit_id: int) -> Dict[str, Any]:
        response = self._get(
            "deposit/status",
            {"originChainId": origin_chain_id, "depositId": deposit_id},
        )
        if response.status_code == 404:
            # Indexer has not seen the deposit yet.
            return {"status": "pending"}
        try:
            response.raise_for_status()
        except requests.RequestException as exc:
            raise BridgeError(f"Across deposit status request failed: {exc}") from exc
        return response.json()

    def _wait_for_fill(self, deposit: Deposit, deposit_id: int, on_progress: ProgressCallback) -> None:
        on_progress(ProgressEvent(step=STEP_FILL, status=STATUS_PENDING, deposit_id=deposit_id))
        while True:
            status = self.get_deposit_status(origin_chain_id=deposit.origin_chain_id, deposit_id=deposit_id)
            state = status.get("status")
            if state == "filled" and status.get("fillTx"):
                fill_tx = status["fillTx"]
                break
            if state in ("expired", "refunded"):
                raise BridgeError(f"Deposit {deposit_id} was {state} before being filled")
            LOGGER.debug("Deposit %s status %s, polling again", deposit_id, state)
            self._sleep(self.config.poll_interval)

        destination = self.web3_factory(self.destination_chain.ensure_rpc_url())
        receipt = destination.eth.wait_for_transaction_receipt(fill_tx)
        self._ensure_success(receipt, STEP_FILL)
        on_progress(
            ProgressEvent(
                step=STEP_FILL,
                status=STATUS_SUCCESS,
                tx_hash=Web3.to_hex(receipt["transactionHash"]),
                tx_receipt=receipt,
                deposit_id=deposit_id,
                action_success=self._actions_succeeded(receipt),
            )
        )

    def _actions_succeeded(self, receipt: TxReceipt) -> bool:
        handler = self.config.multicall_handler.lower()
        for log in receipt["logs"]:
            topics = log.get("topics") or []
            if str(log.get("address", "")).lower() == handler and topics and bytes(topics[0]) == CALLS_FAILED_TOPIC:
                return False
        return True

    @staticmethod
    def _ensure_success(receipt: TxReceipt, step: str) -> None:
        if receipt["status"] != 1:
            raise BridgeError(f"{step} transaction {Web3.to_hex(receipt['transactionHash'])} reverted")


__all__ = [
    "AcrossClient",
    "Deposit",
    "ProgressCallback",
    "ProgressEvent",
    "Quote",
    "STATUS_PENDING",
    "STATUS_SUCCESS",
    "STEP_APPROVE",
    "STEP_DEPOSIT",
    "STEP_FILL",
]
