"""Shared pytest fixtures."""

from unittest.mock import AsyncMock

import pytest

from config.config_loader import AppConfig, DefaultsConfig, GenerationParams, ModelConfig, PromptsConfig
from docchat.models import ChatRequest, ConversationTurn, ModelResponse
from docchat.providers.base import AIProvider


def make_model_config(name: str = "test_model", **overrides) -> ModelConfig:
    values = dict(
        name=name,
        sdk="test",
        model=f"{name}-model",
        api_key_env="TEST_API_KEY",
        timeout_sec=30,
        fallback_model=f"{name}-fallback",
    )
    values.update(overrides)
    return ModelConfig(**values)


def make_response(provider: str, content: str, model: str = "stub-model") -> ModelResponse:
    return ModelResponse(
        provider=provider,
        model=model,
        content=content,
        latency_sec=0.1,
        token_count=10,
    )


class StubProvider(AIProvider):
    """Test double AIProvider."""

    def __init__(self, provider_name: str = "stub", response_content: str = "Stub response", **config) -> None:
        super().__init__(make_model_config(provider_name, **config))
        self._response_content = response_content
        # Shadow the class method with an AsyncMock at the instance level.
        # ABC check passes because complete is defined in the class body below.
        self.complete = AsyncMock(  # type: ignore[assignment]
            return_value=make_response(provider_name, response_content)
        )

    async def complete(self, messages, *, model, params) -> ModelResponse:  # type: ignore[override]
        """Default implementation; replaced by AsyncMock in __init__."""
        return make_response(self.name(), self._response_content, model)


@pytest.fixture
def sample_model_config() -> ModelConfig:
    return make_model_config()


@pytest.fixture
def sample_prompts_config() -> PromptsConfig:
    return PromptsConfig(
        system="You are {provider}.",
        context="{source_label}:\n{context}{truncation_note}\nQuestion: {question}",
        fallback_context="{source_label}:\n{context}\nQ: {question}",
        synthesis_system="You merge answers.",
        synthesis="Question: {question}\nContext length: {context_length}\n\n{responses}\n\nMerge:",
        summary="Summarize {source_name}.",
    )


@pytest.fixture
def sample_defaults_config() -> DefaultsConfig:
    return DefaultsConfig(
        synthesizer="groq",
        fallback_provider="groq",
        document_timeout_sec=5.0,
        chat_timeout_sec=5.0,
        synthesis_params=GenerationParams(temperature=0.3, max_tokens=3000, top_p=0.9),
    )


@pytest.fixture
def sample_app_config(
    sample_defaults_config: DefaultsConfig,
    sample_prompts_config: PromptsConfig,
) -> AppConfig:
    names = ["openai", "openrouter", "groq", "gemini"]
    return AppConfig(
        defaults=sample_defaults_config,
        models={n: make_model_config(n) for n in names},
        prompts=sample_prompts_config,
        available_providers=set(names),
    )


@pytest.fixture
def sample_history() -> tuple[ConversationTurn, ...]:
    return (
        ConversationTurn("user", "What is this document about?"),
        ConversationTurn("assistant", "It describes a caching layer."),
    )


@pytest.fixture
def sample_request(sample_history) -> ChatRequest:
    return ChatRequest(
        question="Which eviction policy does it use?",
        history=sample_history,
        context="The cache evicts entries with an LRU policy once it holds 10,000 items.",
        source_name="design.txt",
    )


@pytest.fixture
def four_stub_providers() -> dict[str, StubProvider]:
    return {
        "openai": StubProvider("openai", "OpenAI says LRU."),
        "openrouter": StubProvider("openrouter", "OpenRouter says LRU with 10,000 items."),
        "groq": StubProvider("groq", "Groq says LRU."),
        "gemini": StubProvider("gemini", "Gemini says least recently used."),
    }
