"""Unit tests for docchat/healthcheck.py. No real API calls."""

import asyncio
from unittest.mock import AsyncMock

import docchat.healthcheck as hc
from docchat.healthcheck import run_health_checks
from docchat.providers.base import ProviderError
from tests.conftest import StubProvider, make_response


async def test_all_providers_pass():
    """All providers succeed -> all marked ok, no errors."""
    providers = {
        "groq": StubProvider("groq", "OK"),
        "gemini": StubProvider("gemini", "OK"),
    }

    results = await run_health_checks(providers)

    assert results["groq"] == (True, "")
    assert results["gemini"] == (True, "")


async def test_ping_uses_primary_model_and_tiny_budget():
    provider = StubProvider("openai", "OK")

    await run_health_checks({"openai": provider})

    kwargs = provider.complete.await_args.kwargs
    assert kwargs["model"] == "openai-model"
    assert kwargs["params"].max_tokens == 5


async def test_one_provider_fails():
    """A provider that raises returns ok=False with the error message."""
    providers = {
        "openai": StubProvider("openai"),
        "openrouter": StubProvider("openrouter"),
    }
    providers["openai"].complete = AsyncMock(return_value=make_response("openai", "OK"))
    providers["openrouter"].complete = AsyncMock(
        side_effect=ProviderError("openrouter", "403 Forbidden")
    )

    results = await run_health_checks(providers)

    assert results["openai"] == (True, "")
    ok, err = results["openrouter"]
    assert ok is False
    assert "403" in err


async def test_all_providers_fail():
    """All fail -> all marked False."""
    providers = {
        "openai": StubProvider("openai"),
        "groq": StubProvider("groq"),
    }
    for name, p in providers.items():
        p.complete = AsyncMock(side_effect=Exception(f"{name} down"))

    results = await run_health_checks(providers)

    for name in providers:
        ok, err = results[name]
        assert ok is False
        assert name in err


async def test_empty_providers():
    results = await run_health_checks({})
    assert results == {}


async def test_timeout_counts_as_failure(monkeypatch):
    """A provider that hangs past the timeout is marked as failed."""
    providers = {"slow": StubProvider("slow")}

    async def hang(*args, **kwargs):
        await asyncio.sleep(9999)

    providers["slow"].complete = AsyncMock(side_effect=hang)
    monkeypatch.setattr(hc, "_TIMEOUT_SEC", 0.05)

    results = await run_health_checks(providers)

    ok, err = results["slow"]
    assert ok is False
    assert err == "TimeoutError"
