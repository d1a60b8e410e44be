"""Signing wallet bound to the origin chain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.types import TxReceipt

from bridgeswap.config import ChainConfig
from bridgeswap.core.utils import ensure_web3_connected, get_logger

LOGGER = get_logger("bridgeswap.wallet")

Web3Factory = Callable[[str], Web3]


def default_web3_factory(url: str) -> Web3:
    return Web3(Web3.HTTPProvider(url))


@dataclass(frozen=True)
class UserWallet:
    """A web3 client paired with the local account that signs for it."""

    web3: Web3
    account: LocalAccount
    chain: ChainConfig

    @property
    def address(self) -> str:
        return self.account.address

    def send_transaction(self, tx: Dict[str, Any]) -> TxReceipt:
        """Fill gas and fee fields, sign, broadcast and wait for the receipt."""
        params = dict(tx)
        params.setdefault("from", self.address)
        params.setdefault("value", 0)
        params.setdefault("chainId", self.chain.chain_id)
        params["nonce"] = self.web3.eth.get_transaction_count(self.address)

        if "gas" not in params:
            params["gas"] = int(self.web3.eth.estimate_gas(params) * 1.1)  # add a 10% buffer

        gas_price = self.web3.eth.gas_price
        max_priority_fee = getattr(self.web3.eth, "max_priority_fee", gas_price)
        params.setdefault("maxPriorityFeePerGas", max_priority_fee)
        params.setdefault("maxFeePerGas", gas_price + max_priority_fee)

        signed = self.account.sign_transaction(params)
        tx_hash = self.web3.eth.send_raw_transaction(signed.raw_transaction)
        LOGGER.info("Broadcast transaction %s on %s", Web3.to_hex(tx_hash), self.chain.name)
        return self.web3.eth.wait_for_transaction_receipt(tx_hash)


def create_user_wallet(
    private_key: str,
    chain: ChainConfig,
    *,
    web3_factory: Optional[Web3Factory] = None,
) -> UserWallet:
    """Create a signing wallet for ``chain`` from ``private_key``."""
    rpc_url = chain.ensure_rpc_url()
    web3 = (web3_factory or default_web3_factory)(rpc_url)
    ensure_web3_connected(web3, expected_chain_id=chain.chain_id)

    account = Account.from_key(private_key)
    LOGGER.info("Connected to chain %s as %s", chain.chain_id, account.address)
    return UserWallet(web3=web3, account=account, chain=chain)


__all__ = ["UserWallet", "Web3Factory", "create_user_wallet", "default_web3_factory"]
