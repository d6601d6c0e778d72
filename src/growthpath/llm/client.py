"""Chat-completion client.

Wraps the OpenAI SDK, which speaks the chat-completion protocol served by
Groq's OpenAI-compatible endpoint as well as by OpenAI itself.

Supported providers:
- groq: Groq cloud (default, llama-3.3-70b-versatile)
- openai: OpenAI API
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Literal

import openai
import structlog
from openai import OpenAI

from growthpath.config.app_config import ProviderConfig, load_app_config

logger = structlog.get_logger(__name__)

Provider = Literal["groq", "openai"]
Role = Literal["system", "user", "assistant"]


@dataclass
class LLMConfig:
    """Provider endpoint, model and request defaults."""

    provider: Provider = "groq"
    base_url: str = "https://api.groq.com/openai/v1"
    model: str = "llama-3.3-70b-versatile"
    temperature: float = 0.7
    max_tokens: int = 500
    timeout: float = 60.0
    api_key: str | None = None

    @classmethod
    def from_provider(cls, name: str, provider: ProviderConfig) -> LLMConfig:
        """Build client config from an application provider entry."""
        return cls(
            provider=name,  # type: ignore[arg-type]
            base_url=provider.base_url or "",
            model=provider.default_model,
            timeout=provider.timeout,
            api_key=provider.get_api_key(),
        )

    @classmethod
    def from_app_config(cls) -> LLMConfig:
        """Config for the application's default provider."""
        app = load_app_config()
        return cls.from_provider(app.default_provider, app.get_llm_provider())


@dataclass
class Message:
    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class LLMResponse:
    """First choice of a completion plus usage numbers."""

    content: str
    model: str
    provider: Provider
    usage: dict[str, int] = field(default_factory=dict)
    latency_ms: int = 0

    @property
    def total_tokens(self) -> int:
        return self.usage.get("total_tokens", 0)


class LLMError(Exception):
    """A chat-completion call failed."""

    pass


class LLMConnectionError(LLMError):
    """Provider unreachable or timed out."""

    pass


class LLMResponseError(LLMError):
    """Provider answered without a usable choice."""

    pass


class LLMClient:
    """Single-endpoint chat-completion client. No retries."""

    def __init__(
        self,
        config: LLMConfig | None = None,
        model: str | None = None,
    ):
        self.config = config or LLMConfig.from_app_config()
        if model is not None:
            self.config.model = model

        # The SDK refuses to build without a key; has_api_key guards real calls
        self._client = OpenAI(
            base_url=self.config.base_url,
            api_key=self.config.api_key or "not-configured",
            timeout=self.config.timeout,
            max_retries=0,
        )
        logger.info(
            "llm_client_initialized",
            provider=self.config.provider,
            model=self.config.model,
        )

    @property
    def has_api_key(self) -> bool:
        """Whether a bearer token is configured."""
        return bool(self.config.api_key)

    def chat(
        self,
        messages: list[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Request one completion for a message list.

        Raises:
            LLMConnectionError: Provider unreachable or timed out
            LLMResponseError: Response had no choices
            LLMError: Any other API failure (auth, rate limit, 5xx)
        """
        started = time.monotonic()
        try:
            completion = self._client.chat.completions.create(
                model=self.config.model,
                messages=[m.to_dict() for m in messages],
                temperature=self.config.temperature if temperature is None else temperature,
                max_tokens=self.config.max_tokens if max_tokens is None else max_tokens,
            )
        except openai.APIConnectionError as e:
            raise LLMConnectionError(
                f"Could not connect to {self.config.provider} at {self.config.base_url}: {e}"
            ) from e
        except openai.OpenAIError as e:
            raise LLMError(f"{self.config.provider} API error: {e}") from e

        if not completion.choices:
            raise LLMResponseError("Empty response from LLM")

        usage = {}
        if completion.usage:
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens,
            }
        latency_ms = int((time.monotonic() - started) * 1000)

        logger.debug(
            "llm_response",
            provider=self.config.provider,
            model=completion.model,
            tokens=usage.get("total_tokens", 0),
            latency_ms=latency_ms,
        )
        return LLMResponse(
            content=completion.choices[0].message.content or "",
            model=completion.model,
            provider=self.config.provider,
            usage=usage,
            latency_ms=latency_ms,
        )

    def simple_chat(
        self,
        system_prompt: str,
        user_message: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """System prompt plus one user message; returns the reply text."""
        response = self.chat(
            [Message("system", system_prompt), Message("user", user_message)],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.content
