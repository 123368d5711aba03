"""Groq provider using openai SDK (OpenAI-compatible API)."""

from docchat.providers.openai_provider import OpenAIProvider


class GroqProvider(OpenAIProvider):
    """Groq provider via OpenAI-compatible API."""

    requires_base_url = True
