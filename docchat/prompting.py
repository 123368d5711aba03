"""Build provider request messages from one shared prompt template."""

from config.config_loader import PromptsConfig
from docchat.models import ChatRequest, ConversationTurn


def truncate(text: str, limit: int) -> str:
    """Cut text to at most limit characters."""
    return text if len(text) <= limit else text[:limit]


def _wrap_context(template: str, request: ChatRequest, limit: int) -> str:
    context = request.context or ""
    snippet = truncate(context, limit)
    truncation_note = ""
    if len(snippet) < len(context):
        truncation_note = (
            f"\n[Note: This is a partial view of the document. "
            f"Total length: {len(context)} characters]\n"
        )
    return template.format(
        source_label=f"{request.source_name} Context",
        context=snippet,
        truncation_note=truncation_note,
        question=request.question,
    )


def build_messages(
    prompts: PromptsConfig,
    provider_label: str,
    request: ChatRequest,
    *,
    history_window: int,
    context_chars: int,
    fallback: bool = False,
) -> list[ConversationTurn]:
    """Assemble system prompt, trailing history and the (context-wrapped) question.

    Args:
        prompts: Prompt templates from config.
        provider_label: Display name substituted into the system prompt.
        request: The user's question, history and optional context.
        history_window: How many trailing history turns to keep.
        context_chars: Character budget for the context before wrapping.
        fallback: Use the shorter fallback context template.
    """
    messages = [ConversationTurn("system", prompts.system.format(provider=provider_label))]
    if history_window > 0:
        messages.extend(request.history[-history_window:])

    if request.context:
        template = prompts.fallback_context if fallback else prompts.context
        content = _wrap_context(template, request, context_chars)
    else:
        content = request.question
    messages.append(ConversationTurn("user", content))
    return messages
