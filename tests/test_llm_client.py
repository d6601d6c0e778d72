"""Tests for the chat-completion client."""

from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from growthpath.config import ProviderConfig
from growthpath.llm.client import (
    LLMClient,
    LLMConfig,
    LLMConnectionError,
    LLMError,
    LLMResponse,
    LLMResponseError,
    Message,
)

REQUEST = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")


class TestLLMConfig:
    """Tests for LLMConfig dataclass."""

    def test_default_config(self):
        """Defaults point at Groq."""
        config = LLMConfig()

        assert config.provider == "groq"
        assert config.base_url == "https://api.groq.com/openai/v1"
        assert config.model == "llama-3.3-70b-versatile"
        assert config.timeout == 60.0
        assert config.api_key is None

    def test_from_provider_reads_key_from_env(self):
        """API key comes from the provider's environment variable."""
        provider = ProviderConfig(
            base_url="https://api.openai.com/v1",
            default_model="gpt-4o-mini",
            api_key_env="OPENAI_API_KEY",
            timeout=30,
        )
        with patch.dict("os.environ", {"OPENAI_API_KEY": "test-key"}):
            config = LLMConfig.from_provider("openai", provider)

        assert config.provider == "openai"
        assert config.model == "gpt-4o-mini"
        assert config.timeout == 30
        assert config.api_key == "test-key"

    def test_from_app_config_default_provider(self, monkeypatch):
        """App config selects Groq with GROQ_API_KEY."""
        monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
        config = LLMConfig.from_app_config()

        assert config.provider == "groq"
        assert config.api_key == "gsk-test"


class TestMessage:
    """Tests for Message dataclass."""

    def test_message_to_dict(self):
        """Messages serialize to role/content dicts."""
        assert Message(role="user", content="Hi").to_dict() == {"role": "user", "content": "Hi"}


class TestLLMResponse:
    """Tests for LLMResponse dataclass."""

    def test_total_tokens(self):
        """Token total read from usage, 0 when absent."""
        assert LLMResponse("x", "m", "groq", usage={"total_tokens": 30}).total_tokens == 30
        assert LLMResponse("x", "m", "groq").total_tokens == 0


class TestLLMClientMocked:
    """Tests for LLMClient using mocks (no real API calls)."""

    @pytest.fixture
    def mock_openai_client(self):
        """Create a mock OpenAI client."""
        with patch("growthpath.llm.client.OpenAI") as mock:
            mock_instance = MagicMock()
            mock.return_value = mock_instance
            mock_instance.factory = mock
            yield mock_instance

    def _response(self, content="Test response"):
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = content
        response.model = "llama-3.3-70b-versatile"
        response.usage.prompt_tokens = 10
        response.usage.completion_tokens = 20
        response.usage.total_tokens = 30
        return response

    def test_client_initialization(self, mock_openai_client):
        """OpenAI SDK is pointed at the configured endpoint without retries."""
        LLMClient(config=LLMConfig(api_key="gsk-test", timeout=15))

        mock_openai_client.factory.assert_called_once_with(
            base_url="https://api.groq.com/openai/v1",
            api_key="gsk-test",
            timeout=15,
            max_retries=0,
        )

    def test_has_api_key(self, mock_openai_client):
        """has_api_key reflects the configured key."""
        assert LLMClient(config=LLMConfig(api_key="gsk-test")).has_api_key
        assert not LLMClient(config=LLMConfig()).has_api_key

    def test_model_override(self, mock_openai_client):
        """Model can be overridden."""
        client = LLMClient(config=LLMConfig(), model="llama-3.1-8b-instant")
        assert client.config.model == "llama-3.1-8b-instant"

    def test_chat_success(self, mock_openai_client):
        """Successful completion returns content and usage."""
        mock_openai_client.chat.completions.create.return_value = self._response()

        client = LLMClient(config=LLMConfig(api_key="gsk-test"))
        response = client.chat([Message(role="user", content="Hello")])

        assert response.content == "Test response"
        assert response.total_tokens == 30

    def test_simple_chat_request_body(self, mock_openai_client):
        """simple_chat sends system and user messages with overrides."""
        mock_openai_client.chat.completions.create.return_value = self._response("Insight")

        client = LLMClient(config=LLMConfig(api_key="gsk-test"))
        content = client.simple_chat("Be brief", "Analyze", temperature=0.5, max_tokens=200)

        assert content == "Insight"
        mock_openai_client.chat.completions.create.assert_called_once_with(
            model="llama-3.3-70b-versatile",
            messages=[
                {"role": "system", "content": "Be brief"},
                {"role": "user", "content": "Analyze"},
            ],
            temperature=0.5,
            max_tokens=200,
        )

    def test_chat_empty_choices(self, mock_openai_client):
        """No choices raises LLMResponseError."""
        response = MagicMock()
        response.choices = []
        mock_openai_client.chat.completions.create.return_value = response

        client = LLMClient(config=LLMConfig())
        with pytest.raises(LLMResponseError, match="Empty response"):
            client.chat([Message(role="user", content="Hello")])

    def test_chat_none_content(self, mock_openai_client):
        """Missing content becomes an empty string."""
        mock_openai_client.chat.completions.create.return_value = self._response(None)

        client = LLMClient(config=LLMConfig())
        assert client.simple_chat("s", "u") == ""

    def test_chat_connection_error(self, mock_openai_client):
        """Connection failures raise LLMConnectionError."""
        mock_openai_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=REQUEST
        )

        client = LLMClient(config=LLMConfig())
        with pytest.raises(LLMConnectionError, match="Could not connect to groq"):
            client.chat([Message(role="user", content="Hello")])

    def test_chat_timeout(self, mock_openai_client):
        """Timeouts count as connection failures."""
        mock_openai_client.chat.completions.create.side_effect = openai.APITimeoutError(
            request=REQUEST
        )

        client = LLMClient(config=LLMConfig())
        with pytest.raises(LLMConnectionError):
            client.chat([Message(role="user", content="Hello")])

    def test_chat_api_error(self, mock_openai_client):
        """Other API failures raise LLMError."""
        mock_openai_client.chat.completions.create.side_effect = openai.APIError(
            "invalid api key", request=REQUEST, body=None
        )

        client = LLMClient(config=LLMConfig())
        with pytest.raises(LLMError, match="groq API error"):
            client.chat([Message(role="user", content="Hello")])
