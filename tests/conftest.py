from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
import requests

from bridgeswap.config import load_config

PRIVATE_KEY = "0x" + "11" * 32
ENV = {"PRIVATE_KEY": PRIVATE_KEY, "RPC_URL": "http://localhost:8545"}


class DummyResponse:
    def __init__(self, payload: Any, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code
        self.text = str(payload)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class DummySession:
    """Returns queued responses in order and records every request."""

    def __init__(self, *responses: DummyResponse):
        self.responses = list(responses)
        self.requests: List[Dict[str, Any]] = []

    def get(self, url, params=None, timeout=None):
        self.requests.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        return self.responses.pop(0)


class _Call:
    def __init__(self, value):
        self._value = value

    def call(self):
        return self._value


class _Functions:
    def __init__(self, web3: "FakeWeb3", address: str):
        self._web3 = web3
        self._address = address

    def balanceOf(self, owner):
        self._web3.calls.append(("balanceOf", self._address, owner))
        return _Call(self._web3.balances.get(self._address.lower(), 0))

    def allowance(self, owner, spender):
        self._web3.calls.append(("allowance", self._address, owner, spender))
        return _Call(self._web3.allowance)


class _Contract:
    def __init__(self, web3: "FakeWeb3", address: str):
        self.address = address
        self.functions = _Functions(web3, address)


class _Eth:
    def __init__(self, web3: "FakeWeb3"):
        self._web3 = web3

    @property
    def chain_id(self):
        return self._web3.chain_id

    def contract(self, address=None, abi=None):
        return _Contract(self._web3, address)

    def wait_for_transaction_receipt(self, tx_hash):
        self._web3.calls.append(("wait_for_transaction_receipt", tx_hash))
        return self._web3.receipts[tx_hash]


class FakeWeb3:
    """Read-only stand-in for a connected ``Web3`` client."""

    def __init__(
        self,
        *,
        chain_id: int = 42161,
        balances: Optional[Dict[str, int]] = None,
        allowance: int = 0,
        receipts: Optional[Dict[str, Any]] = None,
    ):
        self.chain_id = chain_id
        self.balances = {address.lower(): value for address, value in (balances or {}).items()}
        self.allowance = allowance
        self.receipts = receipts or {}
        self.calls: List[tuple] = []
        self.eth = _Eth(self)

    def is_connected(self):
        return True


@pytest.fixture
def config():
    return load_config(environ=ENV)
