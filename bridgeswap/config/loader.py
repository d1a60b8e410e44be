"""Config loader for the bridge-and-swap demo."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, MutableMapping, Optional

from web3 import Web3


class ConfigError(ValueError):
    """Raised when configuration data is invalid or missing."""


class MissingConfigurationError(ConfigError):
    """Raised when a required environment variable is not set."""


REQUIRED_ENV_VARS = ("PRIVATE_KEY", "RPC_URL")


def _require_keys(data: Mapping[str, Any], keys: Iterable[str], context: str) -> None:
    missing = [key for key in keys if key not in data]
    if missing:
        raise ConfigError(f"{context} missing required keys: {', '.join(missing)}")


def _to_checksum(value: str, *, field_name: str) -> str:
    try:
        return Web3.to_checksum_address(value)
    except Exception as exc:  # web3 raises ValueError for malformed inputs
        raise ConfigError(f"Invalid address for {field_name}: {value}") from exc


@dataclass(frozen=True)
class ChainConfig:
    """Configuration for a blockchain network."""

    chain_id: int
    name: str
    explorer_url: str
    rpc_url: Optional[str] = None

    def ensure_rpc_url(self) -> str:
        """Return the RPC URL or raise if it is missing."""
        if not self.rpc_url:
            raise ConfigError(f"RPC URL required for {self.name} but not configured")
        return self.rpc_url


@dataclass(frozen=True)
class RouteConfig:
    """Bridge route, fixed for the whole run."""

    origin_chain_id: int
    destination_chain_id: int
    input_token: str
    output_token: str


@dataclass(frozen=True)
class BebopConfig:
    """Parameters for the Bebop PMM quote API."""

    api_base: str
    chain_name: str
    buy_token: str
    taker_address: str


@dataclass(frozen=True)
class AcrossConfig:
    """Parameters for the Across bridge API and contracts."""

    api_base: str
    integrator_id: str
    multicall_handler: str
    poll_interval: float


@dataclass(frozen=True)
class DefaultsConfig:
    """Default operational parameters."""

    input_amount: Decimal
    input_decimals: int
    api_timeout: int

    @property
    def input_amount_wei(self) -> int:
        return int(self.input_amount.scaleb(self.input_decimals))


@dataclass(frozen=True)
class AppConfig:
    """Typed wrapper around the demo configuration."""

    origin_chain: ChainConfig
    destination_chain: ChainConfig
    route: RouteConfig
    bebop: BebopConfig
    across: AcrossConfig
    defaults: DefaultsConfig
    private_key: str = field(repr=False)


def _load_json(path: Path) -> MutableMapping[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file contains invalid JSON: {path}") from exc


def _load_default_json() -> MutableMapping[str, Any]:
    with resources.files(__package__).joinpath("default_config.json").open("r", encoding="utf-8") as fh:
        return json.load(fh)


def require_env(environ: Mapping[str, str]) -> Dict[str, str]:
    """Return the required environment variables, failing fast on any gap."""
    values = {name: (environ.get(name) or "").strip() for name in REQUIRED_ENV_VARS}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise MissingConfigurationError(f"{' or '.join(missing)} is not set")
    return values


def _chain(data: Mapping[str, Any], context: str, rpc_url: Optional[str]) -> ChainConfig:
    _require_keys(data, ["chain_id", "name", "explorer_url"], context)
    return ChainConfig(
        chain_id=int(data["chain_id"]),
        name=str(data["name"]),
        explorer_url=str(data["explorer_url"]).rstrip("/"),
        rpc_url=rpc_url or data.get("rpc_url"),
    )


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Load and validate configuration data.

    Environment variables are checked before the config file is read so a
    missing secret is reported ahead of anything else.
    """
    environ = os.environ if environ is None else environ
    env = require_env(environ)

    data = _load_json(config_path) if config_path else _load_default_json()

    _require_keys(data, ["chains", "route", "bebop", "across", "defaults"], "config")

    chains = data["chains"]
    _require_keys(chains, ["origin", "destination"], "chains")
    origin_chain = _chain(chains["origin"], "origin chain", env["RPC_URL"])
    destination_chain = _chain(
        chains["destination"],
        "destination chain",
        (environ.get("DESTINATION_RPC_URL") or "").strip() or None,
    )

    route = data["route"]
    _require_keys(route, ["input_token", "output_token"], "route")
    route_config = RouteConfig(
        origin_chain_id=origin_chain.chain_id,
        destination_chain_id=destination_chain.chain_id,
        input_token=_to_checksum(route["input_token"], field_name="route input_token"),
        output_token=_to_checksum(route["output_token"], field_name="route output_token"),
    )

    bebop = data["bebop"]
    _require_keys(bebop, ["api_base", "chain_name", "buy_token", "taker_address"], "bebop")
    bebop_config = BebopConfig(
        api_base=str(bebop["api_base"]).rstrip("/"),
        chain_name=str(bebop["chain_name"]),
        buy_token=_to_checksum(bebop["buy_token"], field_name="bebop buy_token"),
        taker_address=_to_checksum(bebop["taker_address"], field_name="bebop taker_address"),
    )

    across = data["across"]
    _require_keys(across, ["api_base", "integrator_id", "multicall_handler", "poll_interval"], "across")
    across_config = AcrossConfig(
        api_base=str(across["api_base"]).rstrip("/"),
        integrator_id=str(across["integrator_id"]),
        multicall_handler=_to_checksum(across["multicall_handler"], field_name="across multicall_handler"),
        poll_interval=float(across["poll_interval"]),
    )
    integrator_hex = across_config.integrator_id[2:] if across_config.integrator_id.startswith("0x") else across_config.integrator_id
    if len(integrator_hex) != 4:
        raise ConfigError("across.integrator_id must be a 2-byte hex string")
    try:
        bytes.fromhex(integrator_hex)
    except ValueError as exc:
        raise ConfigError(f"across.integrator_id is not valid hex: {across_config.integrator_id}") from exc
    if across_config.poll_interval <= 0:
        raise ConfigError("across.poll_interval must be positive")

    defaults = data["defaults"]
    _require_keys(defaults, ["input_amount", "input_decimals", "api_timeout"], "defaults")
    try:
        input_amount = Decimal(str(defaults["input_amount"]))
    except InvalidOperation as exc:
        raise ConfigError(f"defaults.input_amount is not a number: {defaults['input_amount']}") from exc
    defaults_config = DefaultsConfig(
        input_amount=input_amount,
        input_decimals=int(defaults["input_decimals"]),
        api_timeout=int(defaults["api_timeout"]),
    )
    if defaults_config.input_amount <= 0:
        raise ConfigError("defaults.input_amount must be positive")
    if defaults_config.input_decimals < 0:
        raise ConfigError("defaults.input_decimals cannot be negative")
    if defaults_config.api_timeout <= 0:
        raise ConfigError("defaults.api_timeout must be positive")

    return AppConfig(
        origin_chain=origin_chain,
        destination_chain=destination_chain,
        route=route_config,
        bebop=bebop_config,
        across=across_config,
        defaults=defaults_config,
        private_key=env["PRIVATE_KEY"],
    )


__all__ = [
    "AcrossConfig",
    "AppConfig",
    "BebopConfig",
    "ChainConfig",
    "ConfigError",
    "DefaultsConfig",
    "MissingConfigurationError",
    "RouteConfig",
    "load_config",
    "require_env",
]
