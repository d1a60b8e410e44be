"""Configuration utilities for the bridge-and-swap demo."""

from .loader import (
    AcrossConfig,
    AppConfig,
    BebopConfig,
    ChainConfig,
    ConfigError,
    DefaultsConfig,
    MissingConfigurationError,
    RouteConfig,
    load_config,
    require_env,
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
