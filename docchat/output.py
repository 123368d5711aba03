"""Rich console output for answers and summaries."""

import logging

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from docchat.models import QueryResult, Summary

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

_SENTIMENT_STYLES = {"positive": "green", "neutral": "yellow", "negative": "red"}


def _answer_meta(result: QueryResult) -> str:
    if result.single_provider:
        mode = "single provider"
    elif result.synthesizer and not result.fell_back:
        mode = f"synthesized from {result.succeeded}/{result.attempted} answers"
    else:
        mode = f"{result.succeeded}/{result.attempted} answers"
    return f"Duration: {result.duration_sec:.1f}s | {mode}"


def print_answer(result: QueryResult) -> None:
    """Print the final answer using Rich markdown."""
    console.print(Rule("[bold green]Answer[/bold green]"))
    console.print(Text(_answer_meta(result), style="dim"))
    console.print(Markdown(result.answer))


def print_summary(summary: Summary) -> None:
    """Print a document summary with its extracted tags."""
    console.print(Rule(f"[bold green]Summary: {summary.source_name}[/bold green]"))
    console.print(Markdown(summary.text))

    style = _SENTIMENT_STYLES.get(summary.sentiment, "white")
    lines = [f"[bold]Sentiment:[/bold] [{style}]{summary.sentiment}[/{style}]"]
    if summary.topics:
        lines.append(f"[bold]Topics:[/bold] {', '.join(summary.topics)}")
    if summary.key_points:
        lines.append("[bold]Key points:[/bold]")
        lines.extend(f"  • {point}" for point in summary.key_points)
    console.print(Panel("\n".join(lines), title="Tags", border_style="dim"))
