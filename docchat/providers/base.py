"""Abstract base for all AI model providers."""

import logging
from abc import ABC, abstractmethod

from config.config_loader import GenerationParams, ModelConfig, PromptsConfig
from docchat.errors import ChatError
from docchat.models import ChatRequest, ConversationTurn, ModelResponse
from docchat.prompting import build_messages

logger = logging.getLogger(__name__)


class ProviderError(ChatError):
    """Raised when a provider call fails."""

    def __init__(self, provider_name: str, message: str) -> None:
        self.provider_name = provider_name
        super().__init__(f"[{provider_name}] {message}")


class AIProvider(ABC):
    """Abstract base for all AI model providers.

    Subclasses implement `complete`, a single request against one model.
    `chat` layers the shared prompt, the history window and the one-shot
    fallback model on top of it.
    """

    def __init__(self, config: ModelConfig) -> None:
        self._config = config

    @property
    def config(self) -> ModelConfig:
        return self._config

    def name(self) -> str:
        """Return the short provider name (e.g. 'groq', 'gemini')."""
        return self._config.name

    def model_string(self) -> str:
        """Return the primary model identifier string."""
        return self._config.model

    @abstractmethod
    async def complete(
        self,
        messages: list[ConversationTurn],
        *,
        model: str,
        params: GenerationParams,
    ) -> ModelResponse:
        """Send one chat request to the given model.

        Raises:
            ProviderError: On API failure, timeout, or empty response.
        """
        ...

    async def chat(self, request: ChatRequest, prompts: PromptsConfig) -> ModelResponse:
        """Answer a request, retrying once against the fallback model.

        Raises:
            ProviderError: If the primary and fallback attempts both fail.
        """
        cfg = self._config
        messages = build_messages(
            prompts,
            cfg.label(),
            request,
            history_window=cfg.history_window,
            context_chars=cfg.context_chars,
        )
        try:
            return await self.complete(messages, model=cfg.model, params=cfg.params)
        except ProviderError as exc:
            if not cfg.fallback_model:
                raise
            logger.warning(
                "Provider %s failed on %s, retrying with fallback %s: %s",
                cfg.name, cfg.model, cfg.fallback_model, exc,
            )

        fallback_messages = build_messages(
            prompts,
            cfg.label(),
            request,
            history_window=cfg.fallback_history_window,
            context_chars=cfg.fallback_context_chars,
            fallback=True,
        )
        try:
            response = await self.complete(
                fallback_messages,
                model=cfg.fallback_model,
                params=cfg.fallback_params,
            )
        except ProviderError as exc:
            raise ProviderError(
                cfg.name, f"{cfg.label()} service is currently unavailable: {exc}"
            ) from exc
        response.used_fallback = True
        return response
