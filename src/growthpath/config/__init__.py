"""Configuration package for Growth Path."""

from growthpath.config.app_config import (
    AppConfig,
    BackendConfig,
    ConfigError,
    ProviderConfig,
    ServerConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "BackendConfig",
    "ConfigError",
    "ProviderConfig",
    "ServerConfig",
    "clear_config_cache",
    "load_app_config",
]
