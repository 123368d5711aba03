"""Query orchestration: provider selection, fan-out, synthesis and fallback path."""

import asyncio
import logging
import time
from collections.abc import Sequence

from config.config_loader import AppConfig, MOCK_SDK
from docchat.errors import AllProvidersFailed, ConfigurationError, FanOutTimeout
from docchat.fanout import fan_out
from docchat.models import ChatRequest, ConversationTurn, QueryResult, QueryState, SynthesisInput
from docchat.providers.base import AIProvider, ProviderError
from docchat.providers.gemini import GeminiProvider
from docchat.providers.groq import GroqProvider
from docchat.providers.mock import MockProvider
from docchat.providers.openai_provider import OpenAIProvider
from docchat.providers.openrouter import OpenRouterProvider
from docchat.synthesis import synthesize

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: dict[str, type[AIProvider]] = {
    "openai": OpenAIProvider,
    "openrouter": OpenRouterProvider,
    "groq": GroqProvider,
    "gemini": GeminiProvider,
    MOCK_SDK: MockProvider,
}


def build_providers(config: AppConfig, names: Sequence[str] | None = None) -> dict[str, AIProvider]:
    """Build available providers, optionally restricted to names. Keyed by name."""
    wanted = list(names) if names else sorted(config.available_providers)
    providers: dict[str, AIProvider] = {}
    for name in wanted:
        if name not in config.available_providers:
            logger.warning("Provider '%s' not available, skipping", name)
            continue
        model_cfg = config.models[name]
        provider_cls = PROVIDER_CLASSES.get(model_cfg.sdk)
        if provider_cls is None:
            logger.warning("Provider '%s' has unknown sdk '%s', skipping", name, model_cfg.sdk)
            continue
        try:
            providers[name] = provider_cls(model_cfg)
        except ProviderError as exc:
            logger.warning("Failed to instantiate provider '%s': %s", name, exc)
    return providers


def pick_provider(providers: dict[str, AIProvider], preferred: str) -> AIProvider | None:
    """Return the preferred provider, else the first available one, else None."""
    if preferred in providers:
        return providers[preferred]
    return next(iter(providers.values()), None)


class Orchestrator:
    """Answers user queries with every configured provider.

    Per query: IDLE -> FANNING_OUT -> {AWAITING_SYNTHESIS | DIRECT_RETURN |
    ALL_FAILED} -> DONE. Queries share no state beyond the provider clients.
    """

    def __init__(
        self,
        providers: dict[str, AIProvider],
        config: AppConfig,
        synthesizer_name: str | None = None,
    ) -> None:
        if synthesizer_name and synthesizer_name not in providers:
            raise ConfigurationError(f"Unknown synthesizer: {synthesizer_name}")
        self._providers = providers
        self._config = config
        self._synthesizer_name = synthesizer_name or config.defaults.synthesizer

    @property
    def providers(self) -> dict[str, AIProvider]:
        return self._providers

    def _timeout_for(self, request: ChatRequest) -> float:
        if request.context:
            return self._config.defaults.document_timeout_sec
        return self._config.defaults.chat_timeout_sec

    async def _single_provider(self, request: ChatRequest, start: float) -> QueryResult:
        """Answer with one provider after the fan-out timed out."""
        provider = pick_provider(self._providers, self._config.defaults.fallback_provider)
        if provider is None:
            raise ConfigurationError("No AI providers configured. Check API keys in .env.")
        timeout_sec = self._config.defaults.chat_timeout_sec
        logger.info("Falling back to single provider %s", provider.name())
        try:
            response = await asyncio.wait_for(
                provider.chat(request, self._config.prompts),
                timeout=timeout_sec,
            )
        except TimeoutError as exc:
            raise AllProvidersFailed(
                "AI service is currently unavailable. Please try again in a moment."
            ) from exc
        except ProviderError as exc:
            logger.warning("Single-provider fallback failed: %s", exc)
            raise AllProvidersFailed(
                "AI service is currently unavailable. Please try again in a moment."
            ) from exc
        except Exception as exc:
            logger.warning("Single-provider fallback unexpected failure: %s", exc)
            raise AllProvidersFailed(
                "AI service is currently unavailable. Please try again in a moment."
            ) from exc

        return QueryResult(
            answer=response.content,
            state=QueryState.DIRECT_RETURN,
            succeeded=1,
            attempted=1,
            duration_sec=time.monotonic() - start,
            single_provider=True,
        )

    async def run(self, request: ChatRequest) -> QueryResult:
        """Run one query through fan-out and synthesis.

        Raises:
            ConfigurationError: If no providers are configured.
            AllProvidersFailed: If no provider produced an answer.
        """
        if not self._providers:
            raise ConfigurationError("No AI providers configured. Check API keys in .env.")

        start = time.monotonic()
        state = QueryState.FANNING_OUT
        logger.debug("Query state: %s", state.value)

        providers = list(self._providers.values())
        try:
            results = await fan_out(providers, request, self._config.prompts, self._timeout_for(request))
        except FanOutTimeout as exc:
            logger.warning("%s", exc)
            return await self._single_provider(request, start)

        synthesis_input = SynthesisInput(
            results=tuple(results),
            question=request.question,
            context=request.context,
        )
        succeeded = len(synthesis_input.successful())
        if succeeded == 0:
            state = QueryState.ALL_FAILED
        elif succeeded == 1:
            state = QueryState.DIRECT_RETURN
        else:
            state = QueryState.AWAITING_SYNTHESIS
        logger.debug("Query state: %s", state.value)

        synthesis = await synthesize(
            synthesis_input,
            synthesizer=pick_provider(self._providers, self._synthesizer_name),
            prompts=self._config.prompts,
            params=self._config.defaults.synthesis_params,
            labels={name: p.config.label() for name, p in self._providers.items()},
        )

        return QueryResult(
            answer=synthesis.text,
            state=synthesis.state,
            succeeded=succeeded,
            attempted=len(results),
            duration_sec=time.monotonic() - start,
            synthesizer=synthesis.synthesizer,
            fell_back=synthesis.fell_back,
        )

    async def answer(
        self,
        message: str,
        history: Sequence[ConversationTurn] = (),
        context: str | None = None,
        source_name: str = "Document",
    ) -> str:
        """Return one answer string for the UI layer."""
        request = ChatRequest(
            question=message,
            history=tuple(history),
            context=context,
            source_name=source_name,
        )
        result = await self.run(request)
        return result.answer
