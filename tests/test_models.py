"""Tests for docchat/models.py dataclasses."""

import dataclasses

import pytest

from docchat.models import ChatRequest, ConversationTurn, ModelResponse, ProviderResult, SynthesisInput


def test_conversation_turn_fields():
    turn = ConversationTurn("user", "Hello")
    assert turn.role == "user"
    assert turn.as_message() == {"role": "user", "content": "Hello"}


def test_conversation_turn_rejects_unknown_role():
    with pytest.raises(ValueError, match="Unknown conversation role"):
        ConversationTurn("tool", "output")


def test_provider_result_is_immutable():
    result = ProviderResult(provider="groq", content="Answer")
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.content = "changed"  # type: ignore[misc]


def test_provider_result_ok():
    assert ProviderResult("groq", content="Answer").ok
    assert not ProviderResult("groq", error="[groq] 429").ok
    assert not ProviderResult("groq", content="").ok


def test_synthesis_input_successful_keeps_order():
    results = (
        ProviderResult("openai", content="A"),
        ProviderResult("openrouter", error="boom"),
        ProviderResult("groq", content="B"),
    )
    synthesis_input = SynthesisInput(results=results, question="Q?")
    assert [r.provider for r in synthesis_input.successful()] == ["openai", "groq"]


def test_chat_request_defaults():
    request = ChatRequest(question="Hi")
    assert request.history == ()
    assert request.context is None
    assert request.source_name == "Document"


def test_model_response_optional_token_count():
    r = ModelResponse(
        provider="gemini",
        model="gemini-1.5-flash",
        content="Some answer.",
        latency_sec=0.9,
        token_count=None,
    )
    assert r.token_count is None
    assert r.used_fallback is False
