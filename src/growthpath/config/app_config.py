"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults. Secrets are never stored in the file:
the config only names the environment variables that hold them.

Usage:
    from growthpath.config.app_config import load_app_config

    config = load_app_config()
    url, key = config.backend.require_credentials()
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Relative to the working directory
CONFIG_FILE = Path("data/config/app_config_v1.yaml")


class ConfigError(Exception):
    """Required configuration is missing."""

    pass


@dataclass
class BackendConfig:
    """Managed backend (Supabase) connection settings."""

    url_env: str = "SUPABASE_URL"
    key_env: str = "SUPABASE_ANON_KEY"

    def get_url(self) -> str | None:
        """Get backend URL from environment variable."""
        return os.environ.get(self.url_env) or None

    def get_key(self) -> str | None:
        """Get backend public key from environment variable."""
        return os.environ.get(self.key_env) or None

    def require_credentials(self) -> tuple[str, str]:
        """Return (url, key), failing when either is unset.

        Raises:
            ConfigError: If the URL or the key is missing.
        """
        url = self.get_url()
        key = self.get_key()
        if not url or not key:
            raise ConfigError("Missing Supabase environment variables")
        return url, key


@dataclass
class ProviderConfig:
    """Configuration for the chat-completion provider."""

    base_url: str | None
    default_model: str
    api_key_env: str | None = None
    timeout: float = 60.0

    def get_api_key(self) -> str | None:
        """Get API key from environment variable."""
        if self.api_key_env:
            return os.environ.get(self.api_key_env) or None
        return None


@dataclass
class ServerConfig:
    """HTTP server settings."""

    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class AppConfig:
    """Backend, LLM provider and server settings."""

    backend: BackendConfig = field(default_factory=BackendConfig)
    providers: dict[str, ProviderConfig] = field(default_factory=dict)
    default_provider: str = "groq"
    server: ServerConfig = field(default_factory=ServerConfig)

    def get_llm_provider(self) -> ProviderConfig:
        """Get the configured default LLM provider."""
        try:
            return self.providers[self.default_provider]
        except KeyError:
            raise ConfigError(
                f"Unknown LLM provider '{self.default_provider}'"
            ) from None


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Built-in settings used where the YAML file is silent."""
    return {
        "backend": {
            "url_env": "SUPABASE_URL",
            "key_env": "SUPABASE_ANON_KEY",
        },
        "llm": {
            "default_provider": "groq",
            "providers": {
                "groq": {
                    "base_url": "https://api.groq.com/openai/v1",
                    "default_model": "llama-3.3-70b-versatile",
                    "api_key_env": "GROQ_API_KEY",
                    "timeout": 60,
                },
                "openai": {
                    "base_url": "https://api.openai.com/v1",
                    "default_model": "gpt-4o-mini",
                    "api_key_env": "OPENAI_API_KEY",
                    "timeout": 60,
                },
            },
        },
        "server": {
            "host": "127.0.0.1",
            "port": 8000,
            "cors_origins": ["*"],
        },
    }


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Build AppConfig from the merged settings dict."""
    backend_data = data.get("backend", {})
    backend = BackendConfig(
        url_env=backend_data.get("url_env", "SUPABASE_URL"),
        key_env=backend_data.get("key_env", "SUPABASE_ANON_KEY"),
    )

    llm_data = data.get("llm", {})
    providers = {}
    for name, pconfig in llm_data.get("providers", {}).items():
        providers[name] = ProviderConfig(
            base_url=pconfig.get("base_url"),
            default_model=pconfig.get("default_model", "default"),
            api_key_env=pconfig.get("api_key_env"),
            timeout=float(pconfig.get("timeout", 60)),
        )

    server_data = data.get("server", {})
    server = ServerConfig(
        host=server_data.get("host", "127.0.0.1"),
        port=int(server_data.get("port", 8000)),
        cors_origins=list(server_data.get("cors_origins", ["*"])),
    )

    return AppConfig(
        backend=backend,
        providers=providers,
        default_provider=llm_data.get("default_provider", "groq"),
        server=server,
    )


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config, merging the YAML file over defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        The cached AppConfig.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data = _get_defaults()

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        file_data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
        data = _merge(data, file_data)
    else:
        logger.info("using_default_config")

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Forget the cached config so the next load rereads the file."""
    global _cached_config
    _cached_config = None
