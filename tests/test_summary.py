"""Tests for document loading and summaries."""

from unittest.mock import AsyncMock

import pytest

from docchat.context import load_context
from docchat.errors import AllProvidersFailed
from docchat.orchestrator import Orchestrator
from docchat.summary import summarize
from tests.conftest import StubProvider


def test_load_context_strips_and_names(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("\n  Cache design notes.  \n\n", encoding="utf-8")

    document = load_context(path)

    assert document.text == "Cache design notes."
    assert document.source_name == "notes.txt"


def test_load_context_replaces_bad_bytes(tmp_path):
    path = tmp_path / "bin.txt"
    path.write_bytes(b"ok \xff\xfe text")

    document = load_context(path)

    assert document.text.startswith("ok ")
    assert "�" in document.text


async def test_summarize_runs_pipeline_and_tags(tmp_path, sample_app_config):
    path = tmp_path / "design.txt"
    path.write_text("The cache evicts with LRU.", encoding="utf-8")
    document = load_context(path)

    summary_text = "## Caching\n\n- LRU eviction\n- Great performance for the web app"
    provider = StubProvider("groq", summary_text)
    orchestrator = Orchestrator({"groq": provider}, sample_app_config)

    summary = await summarize(orchestrator, document, sample_app_config.prompts.summary)

    assert summary.source_name == "design.txt"
    assert summary.text == summary_text
    assert summary.key_points == ["LRU eviction", "Great performance for the web app"]
    assert "Technology" in summary.topics
    assert "Caching" in summary.topics
    assert summary.sentiment == "positive"

    user_message = provider.complete.await_args.args[0][-1].content
    assert "Summarize design.txt." in user_message
    assert "The cache evicts with LRU." in user_message


async def test_summarize_propagates_failures(tmp_path, sample_app_config):
    path = tmp_path / "doc.txt"
    path.write_text("text", encoding="utf-8")
    provider = StubProvider("groq")
    provider.complete = AsyncMock(side_effect=RuntimeError("boom"))
    orchestrator = Orchestrator({"groq": provider}, sample_app_config)

    with pytest.raises(AllProvidersFailed):
        await summarize(orchestrator, load_context(path), "Summarize {source_name}.")
