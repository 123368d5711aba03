"""OpenAI provider using openai SDK with native async.

OpenRouter and Groq expose the same chat completions API and reuse this class
with their own base_url.
"""

import asyncio
import logging
import os
import time
from typing import Any

from openai import AsyncOpenAI

from config.config_loader import GenerationParams, ModelConfig
from docchat.models import ConversationTurn, ModelResponse
from docchat.providers.base import AIProvider, ProviderError

logger = logging.getLogger(__name__)


def _request_params(params: GenerationParams) -> dict[str, Any]:
    """Map GenerationParams to chat completion kwargs, dropping unset values."""
    kwargs: dict[str, Any] = {
        "temperature": params.temperature,
        "max_tokens": params.max_tokens,
        "top_p": params.top_p,
        "frequency_penalty": params.frequency_penalty,
        "presence_penalty": params.presence_penalty,
    }
    return {k: v for k, v in kwargs.items() if v is not None}


class OpenAIProvider(AIProvider):
    """OpenAI provider via openai SDK."""

    requires_base_url = False

    def __init__(self, config: ModelConfig) -> None:
        super().__init__(config)
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(config.name, f"Missing API key: {config.api_key_env}")
        if self.requires_base_url and not config.base_url:
            raise ProviderError(config.name, f"base_url is required for {type(self).__name__}")
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=config.base_url,
            default_headers=config.headers or None,
        )

    async def complete(
        self,
        messages: list[ConversationTurn],
        *,
        model: str,
        params: GenerationParams,
    ) -> ModelResponse:
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(
                    model=model,
                    messages=[m.as_message() for m in messages],
                    **_request_params(params),
                ),
                timeout=self._config.timeout_sec,
            )
        except TimeoutError as exc:
            raise ProviderError(self._config.name, f"Request timed out after {self._config.timeout_sec}s") from exc
        except Exception as exc:
            raise ProviderError(self._config.name, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        choice = response.choices[0] if response.choices else None
        content = (choice.message.content or "").strip() if choice else ""
        if not content:
            raise ProviderError(self._config.name, f"No response content from {self._config.label()}")

        token_count: int | None = None
        if response.usage:
            token_count = response.usage.total_tokens

        logger.info(
            "%s %s: %.2fs, %s tokens",
            self._config.label(),
            model,
            latency,
            token_count,
        )

        return ModelResponse(
            provider=self._config.name,
            model=model,
            content=content,
            latency_sec=latency,
            token_count=token_count,
        )
