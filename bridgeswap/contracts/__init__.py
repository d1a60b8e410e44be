"""Contract ABIs shipped with bridgeswap (ERC20 and the Across SpokePool)."""

from functools import lru_cache
from importlib import resources
from typing import Any, List
import json

from web3 import Web3
from web3.contract import Contract

ERC20_ABI_FILE = "erc20.json"
SPOKE_POOL_ABI_FILE = "spoke_pool.json"


@lru_cache(maxsize=None)
def load_contract_abi(filename: str) -> List[Any]:
    """Load an ABI JSON file from the contracts package."""
    with resources.files(__package__).joinpath(filename).open("r", encoding="utf-8") as fh:
        return json.load(fh)


def load_contract(web3: Web3, filename: str, address: str) -> Contract:
    """Bind the ABI in ``filename`` to ``address`` on ``web3``."""
    return web3.eth.contract(address=Web3.to_checksum_address(address), abi=load_contract_abi(filename))


__all__ = ["ERC20_ABI_FILE", "SPOKE_POOL_ABI_FILE", "load_contract", "load_contract_abi"]
