"""Tests for docchat/output.py."""

import pytest
from rich.console import Console

import docchat.output as output
from docchat.models import QueryResult, QueryState, Summary


@pytest.fixture
def recorded(monkeypatch) -> Console:
    console = Console(record=True, width=100, force_terminal=False)
    monkeypatch.setattr(output, "console", console)
    return console


def _result(**overrides) -> QueryResult:
    values = dict(
        answer="## Eviction\nThe cache uses LRU.",
        state=QueryState.DONE,
        succeeded=3,
        attempted=4,
        duration_sec=2.34,
        synthesizer="groq",
    )
    values.update(overrides)
    return QueryResult(**values)


def test_answer_meta_synthesized():
    assert output._answer_meta(_result()) == "Duration: 2.3s | synthesized from 3/4 answers"


def test_answer_meta_direct_and_fallback():
    direct = _result(state=QueryState.DIRECT_RETURN, succeeded=1, synthesizer=None)
    assert output._answer_meta(direct).endswith("| 1/4 answers")
    fell_back = _result(fell_back=True)
    assert output._answer_meta(fell_back).endswith("| 3/4 answers")


def test_answer_meta_single_provider():
    single = _result(state=QueryState.DIRECT_RETURN, succeeded=1, attempted=1, single_provider=True)
    assert output._answer_meta(single).endswith("single provider")


def test_print_answer_renders_markdown(recorded):
    output.print_answer(_result())
    text = recorded.export_text()
    assert "Answer" in text
    assert "Eviction" in text
    assert "The cache uses LRU." in text
    assert "##" not in text


def test_print_summary_shows_tags(recorded):
    summary = Summary(
        source_name="design.txt",
        text="A short summary.",
        key_points=["LRU eviction", "10,000 items"],
        topics=["Technology"],
        sentiment="positive",
    )
    output.print_summary(summary)
    text = recorded.export_text()
    assert "Summary: design.txt" in text
    assert "Sentiment: positive" in text
    assert "Topics: Technology" in text
    assert "• LRU eviction" in text


def test_print_summary_without_tags(recorded):
    summary = Summary(source_name="x.txt", text="Nothing much.", key_points=[], topics=[])
    output.print_summary(summary)
    text = recorded.export_text()
    assert "Sentiment: neutral" in text
    assert "Topics" not in text
    assert "Key points" not in text
