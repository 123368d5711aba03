"""Offline provider that answers deterministically without any network call.

Select it per model with `sdk: mock` in settings.yaml.
"""

import asyncio
import logging

from config.config_loader import GenerationParams
from docchat.models import ConversationTurn, ModelResponse
from docchat.providers.base import AIProvider, ProviderError

logger = logging.getLogger(__name__)


class MockProvider(AIProvider):
    """Deterministic stand-in for a hosted provider."""

    async def complete(
        self,
        messages: list[ConversationTurn],
        *,
        model: str,
        params: GenerationParams,
    ) -> ModelResponse:
        user_turns = [m for m in messages if m.role == "user"]
        if not user_turns:
            raise ProviderError(self._config.name, "No user message to answer")

        if self._config.delay_sec > 0:
            await asyncio.sleep(self._config.delay_sec)

        prompt = user_turns[-1].content
        first_line = prompt.strip().splitlines()[0] if prompt.strip() else ""
        words = prompt.split()
        content = (
            f"## {self._config.label()} Response\n\n"
            f"Read {len(words)} words of input beginning with: \"{first_line[:80]}\".\n\n"
            f"- Model: {model}\n"
            f"- Max tokens: {params.max_tokens}\n"
        )
        logger.debug("Mock %s answered %d-word prompt", self._config.name, len(words))

        return ModelResponse(
            provider=self._config.name,
            model=model,
            content=content,
            latency_sec=self._config.delay_sec,
            token_count=len(words),
        )
