"""OpenRouter provider using openai SDK (OpenAI-compatible API)."""

from docchat.providers.openai_provider import OpenAIProvider


class OpenRouterProvider(OpenAIProvider):
    """OpenRouter provider via OpenAI-compatible API.

    Attribution headers (HTTP-Referer, X-Title) come from the model config.
    """

    requires_base_url = True
