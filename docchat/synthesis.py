"""Final synthesis: merge provider answers into one, or fall back deterministically."""

import logging

from config.config_loader import GenerationParams, PromptsConfig
from docchat.errors import AllProvidersFailed, SynthesisFailed
from docchat.models import ConversationTurn, ProviderResult, QueryState, Synthesis, SynthesisInput
from docchat.providers.base import AIProvider, ProviderError

logger = logging.getLogger(__name__)


def _format_responses(results: list[ProviderResult], labels: dict[str, str]) -> str:
    """Label each successful response by provider for the synthesis prompt."""
    parts = [
        f"--- Response {i} from {labels.get(r.provider, r.provider)} ---\n{r.content}"
        for i, r in enumerate(results, start=1)
    ]
    return "\n\n".join(parts)


def longest_response(results: list[ProviderResult]) -> str:
    """Return the longest content by character count; first wins on ties."""
    best = results[0]
    for result in results[1:]:
        if len(result.content or "") > len(best.content or ""):
            best = result
    return best.content or ""


async def _call_synthesizer(
    synthesizer: AIProvider,
    prompt: str,
    prompts: PromptsConfig,
    params: GenerationParams,
) -> str:
    messages = [
        ConversationTurn("system", prompts.synthesis_system),
        ConversationTurn("user", prompt),
    ]
    try:
        response = await synthesizer.complete(
            messages,
            model=synthesizer.model_string(),
            params=params,
        )
    except ProviderError as exc:
        raise SynthesisFailed(f"Synthesizer {synthesizer.name()} failed: {exc}") from exc
    except Exception as exc:
        raise SynthesisFailed(f"Synthesizer {synthesizer.name()} unexpected failure: {exc}") from exc
    if not response.content or not response.content.strip():
        raise SynthesisFailed(f"Synthesizer {synthesizer.name()} returned empty content")
    return response.content.strip()


async def synthesize(
    synthesis_input: SynthesisInput,
    synthesizer: AIProvider | None,
    prompts: PromptsConfig,
    params: GenerationParams,
    labels: dict[str, str] | None = None,
) -> Synthesis:
    """Reduce provider results to exactly one answer.

    Args:
        synthesis_input: All ProviderResults plus the question and context.
        synthesizer: Provider that merges answers. None skips straight to
            the longest-response fallback.
        prompts: Prompt templates from config.
        params: Generation parameters for the synthesis call.
        labels: Optional provider name -> display name mapping.

    Returns:
        Synthesis with the final text and terminal state.

    Raises:
        AllProvidersFailed: If no result carries content.
    """
    successful = synthesis_input.successful()

    if not successful:
        errors = "; ".join(r.error or "no content" for r in synthesis_input.results)
        logger.warning("All providers failed: %s", errors)
        raise AllProvidersFailed("All AI services failed to provide a response. Please try again.")

    if len(successful) == 1:
        logger.info("Single successful response from %s, returning directly", successful[0].provider)
        return Synthesis(text=successful[0].content or "", state=QueryState.DIRECT_RETURN)

    if synthesizer is None:
        logger.warning("No synthesizer available, returning longest of %d responses", len(successful))
        return Synthesis(text=longest_response(successful), state=QueryState.DONE, fell_back=True)

    prompt = prompts.synthesis.format(
        responses=_format_responses(successful, labels or {}),
        question=synthesis_input.question,
        context_length=len(synthesis_input.context or ""),
    )

    logger.info("Synthesizing %d responses via %s", len(successful), synthesizer.name())

    try:
        text = await _call_synthesizer(synthesizer, prompt, prompts, params)
    except SynthesisFailed as exc:
        logger.warning("%s. Returning longest response instead.", exc)
        return Synthesis(
            text=longest_response(successful),
            state=QueryState.DONE,
            synthesizer=synthesizer.name(),
            fell_back=True,
        )

    return Synthesis(text=text, state=QueryState.DONE, synthesizer=synthesizer.name())
