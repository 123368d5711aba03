"""Fan-out: call every provider concurrently under one global timeout."""

import asyncio
import logging

from config.config_loader import PromptsConfig
from docchat.errors import ConfigurationError, FanOutTimeout
from docchat.models import ChatRequest, ProviderResult
from docchat.providers.base import AIProvider, ProviderError

logger = logging.getLogger(__name__)

# Quality gate: synthesis needs at least this many answers
_MIN_QUALITY_RESPONSES = 2


async def _call_provider(
    provider: AIProvider,
    request: ChatRequest,
    prompts: PromptsConfig,
) -> ProviderResult:
    """Call a single provider (primary model, then its fallback model).

    Never raises. Failures become a ProviderResult carrying the error.
    """
    try:
        response = await provider.chat(request, prompts)
    except ProviderError as exc:
        logger.warning("Provider %s failed: %s", provider.name(), exc)
        return ProviderResult(provider=provider.name(), error=str(exc))
    except Exception as exc:
        logger.warning("Provider %s unexpected failure: %s", provider.name(), exc)
        return ProviderResult(provider=provider.name(), error=f"Unexpected error: {exc}")
    return ProviderResult(provider=provider.name(), content=response.content)


async def fan_out(
    providers: list[AIProvider],
    request: ChatRequest,
    prompts: PromptsConfig,
    timeout_sec: float,
) -> list[ProviderResult]:
    """Run all providers concurrently for one request.

    Args:
        providers: AIProvider instances to query.
        request: The question, history and optional context.
        prompts: Prompt templates from config.
        timeout_sec: Global budget for the whole batch.

    Returns:
        One ProviderResult per provider, in invocation order.

    Raises:
        ConfigurationError: If providers is empty.
        FanOutTimeout: If the batch does not finish within timeout_sec.
            Outstanding calls are cancelled and their results discarded.
    """
    if not providers:
        raise ConfigurationError("No AI providers configured. Check API keys in .env.")

    logger.info("Fanning out to %d providers (timeout %gs)", len(providers), timeout_sec)

    tasks = [_call_provider(p, request, prompts) for p in providers]
    try:
        results = await asyncio.wait_for(asyncio.gather(*tasks), timeout=timeout_sec)
    except TimeoutError as exc:
        logger.warning("Fan-out exceeded %gs, discarding all provider results", timeout_sec)
        raise FanOutTimeout(timeout_sec) from exc

    succeeded = sum(1 for r in results if r.ok)
    logger.info("Fan-out complete: %d/%d providers succeeded", succeeded, len(providers))

    if len(providers) >= _MIN_QUALITY_RESPONSES and 0 < succeeded < _MIN_QUALITY_RESPONSES:
        logger.warning(
            "Only %d/%d providers responded. Returning a single answer without synthesis.",
            succeeded,
            len(providers),
        )

    return list(results)
