"""Tests for app configuration.

Tests config loading, provider settings, and the backend credential check.
"""

import pytest

from growthpath.config import app_config
from growthpath.config.app_config import (
    AppConfig,
    BackendConfig,
    ConfigError,
    ProviderConfig,
    clear_config_cache,
    load_app_config,
)


class TestLoadAppConfig:
    """Tests for load_app_config function."""

    def test_load_config_from_yaml(self):
        """Loads config from app_config_v1.yaml."""
        config = load_app_config()
        assert isinstance(config, AppConfig)
        assert config.default_provider == "groq"

    def test_config_has_providers(self):
        """Config includes groq and openai."""
        config = load_app_config()
        assert "groq" in config.providers
        assert "openai" in config.providers

    def test_groq_provider(self):
        """Groq uses its OpenAI-compatible endpoint."""
        provider = load_app_config().get_llm_provider()
        assert isinstance(provider, ProviderConfig)
        assert provider.base_url == "https://api.groq.com/openai/v1"
        assert provider.default_model == "llama-3.3-70b-versatile"
        assert provider.api_key_env == "GROQ_API_KEY"

    def test_cached(self):
        """Second call returns the cached object."""
        assert load_app_config() is load_app_config()

    def test_missing_file_uses_defaults(self, tmp_path, monkeypatch):
        """Defaults apply when the YAML file is absent."""
        monkeypatch.setattr(app_config, "CONFIG_FILE", tmp_path / "missing.yaml")
        clear_config_cache()

        config = load_app_config()

        assert config.server.port == 8000
        assert config.providers["groq"].timeout == 60

    def test_file_overrides_defaults(self, tmp_path, monkeypatch):
        """YAML values merge over defaults."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "llm:\n"
            "  default_provider: openai\n"
            "  providers:\n"
            "    groq:\n"
            "      timeout: 10\n"
            "server:\n"
            "  port: 9000\n"
        )
        monkeypatch.setattr(app_config, "CONFIG_FILE", path)

        config = load_app_config(force_reload=True)

        assert config.default_provider == "openai"
        assert config.server.port == 9000
        assert config.providers["groq"].timeout == 10
        # Untouched keys keep their defaults
        assert config.providers["groq"].default_model == "llama-3.3-70b-versatile"

    def test_unknown_provider(self):
        """Unknown default provider raises ConfigError."""
        config = AppConfig(default_provider="nope")
        with pytest.raises(ConfigError, match="Unknown LLM provider"):
            config.get_llm_provider()


class TestBackendConfig:
    """Tests for backend credentials."""

    def test_require_credentials(self, monkeypatch):
        """Returns URL and key from the environment."""
        monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")

        assert BackendConfig().require_credentials() == ("https://demo.supabase.co", "anon-key")

    @pytest.mark.parametrize("missing", ["SUPABASE_URL", "SUPABASE_ANON_KEY"])
    def test_missing_credentials(self, monkeypatch, missing):
        """Either variable missing is a ConfigError."""
        monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
        monkeypatch.delenv(missing)

        with pytest.raises(ConfigError, match="Missing Supabase environment variables"):
            BackendConfig().require_credentials()
