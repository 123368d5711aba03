"""Gemini provider using google-genai SDK with native async."""

import asyncio
import logging
import os
import time

from google import genai
from google.genai import types as genai_types

from config.config_loader import GenerationParams, ModelConfig
from docchat.models import ConversationTurn, ModelResponse
from docchat.providers.base import AIProvider, ProviderError

logger = logging.getLogger(__name__)

_ROLE_MAP = {"user": "user", "assistant": "model"}


def _split_messages(
    messages: list[ConversationTurn],
) -> tuple[str | None, list[genai_types.Content]]:
    """Separate system turns (system_instruction) from user/model contents."""
    system_parts = [m.content for m in messages if m.role == "system"]
    contents = [
        genai_types.Content(role=_ROLE_MAP[m.role], parts=[genai_types.Part(text=m.content)])
        for m in messages
        if m.role != "system"
    ]
    system_instruction = "\n\n".join(system_parts) if system_parts else None
    return system_instruction, contents


class GeminiProvider(AIProvider):
    """Google Gemini provider via google-genai SDK."""

    def __init__(self, config: ModelConfig) -> None:
        super().__init__(config)
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(config.name, f"Missing API key: {config.api_key_env}")
        self._client = genai.Client(api_key=api_key)

    async def complete(
        self,
        messages: list[ConversationTurn],
        *,
        model: str,
        params: GenerationParams,
    ) -> ModelResponse:
        system_instruction, contents = _split_messages(messages)
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=model,
                    contents=contents,
                    config=genai_types.GenerateContentConfig(
                        system_instruction=system_instruction,
                        max_output_tokens=params.max_tokens,
                        temperature=params.temperature,
                        top_p=params.top_p,
                    ),
                ),
                timeout=self._config.timeout_sec,
            )
        except TimeoutError as exc:
            raise ProviderError(self._config.name, f"Request timed out after {self._config.timeout_sec}s") from exc
        except Exception as exc:
            raise ProviderError(self._config.name, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        content = (response.text or "").strip()
        if not content:
            raise ProviderError(self._config.name, "No response content from Google Gemini")

        token_count: int | None = None
        if response.usage_metadata:
            token_count = response.usage_metadata.total_token_count

        logger.info(
            "Gemini %s: %.2fs, %s tokens",
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
