"""Click CLI: orchestrates config loading, provider selection, answering and output."""

import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from config.config_loader import AppConfig, load_config
from docchat.context import DocumentContext, load_context
from docchat.errors import ChatError, ConfigurationError
from docchat.healthcheck import run_health_checks
from docchat.models import ChatRequest, ConversationTurn, QueryResult
from docchat.orchestrator import Orchestrator, build_providers
from docchat.output import print_answer, print_summary
from docchat.providers.base import AIProvider
from docchat.summary import summarize

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

_EXIT_WORDS = {"exit", "quit", ":q"}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _parse_provider_names(providers_arg: str | None) -> list[str] | None:
    """Split a comma-separated --providers value. None means all available."""
    if not providers_arg:
        return None
    names = [n.strip() for n in providers_arg.split(",") if n.strip()]
    return names or None


def _check_and_filter_providers(all_providers: dict[str, AIProvider]) -> dict[str, AIProvider]:
    """Run health checks, print results, and ask user what to do on failures.

    Returns the filtered dict of working providers. Exits if the user
    declines to continue or no providers pass.
    """
    console.print("\n[bold]Checking providers...[/bold]")
    results: dict[str, tuple[bool, str]] = asyncio.run(run_health_checks(all_providers))

    failed_names: list[str] = []
    for name in sorted(results):
        ok, err = results[name]
        if ok:
            console.print(f"  [green]OK  [/green] {name}")
        else:
            short_err = err.splitlines()[0][:120] if err else "unknown error"
            console.print(f"  [red]FAIL[/red] {name}: {short_err}")
            failed_names.append(name)

    if not failed_names:
        console.print()
        return all_providers

    working = {n: p for n, p in all_providers.items() if n not in failed_names}

    if not working:
        console.print("\n[bold red]Error:[/bold red] No providers passed the health check.")
        sys.exit(1)

    console.print(
        f"\n[yellow]{len(failed_names)} provider(s) failed:[/yellow] {', '.join(failed_names)}"
    )
    console.print(f"Working providers: {', '.join(sorted(working))}")

    if not click.confirm("Continue with working providers only?", default=True):
        sys.exit(0)

    console.print()
    return working


async def _ask(orchestrator: Orchestrator, request: ChatRequest) -> QueryResult:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"Asking {len(orchestrator.providers)} providers...", total=None)
        return await orchestrator.run(request)


async def _run_interactive(
    orchestrator: Orchestrator,
    document: DocumentContext | None,
    first_question: str | None,
) -> None:
    """Question loop with an append-only conversation history.

    Runs on one event loop so the provider clients keep their connection pools.
    """
    history: list[ConversationTurn] = []
    question = first_question
    console.print("[dim]Type 'exit' to quit.[/dim]")
    while True:
        if not question:
            question = click.prompt("You", default="", show_default=False).strip()
        if not question or question.lower() in _EXIT_WORDS:
            return

        request = ChatRequest(
            question=question,
            history=tuple(history),
            context=document.text if document else None,
            source_name=document.source_name if document else "Document",
        )
        try:
            result = await _ask(orchestrator, request)
        except ChatError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
        else:
            print_answer(result)
            history.append(ConversationTurn("user", question))
            history.append(ConversationTurn("assistant", result.answer))
        question = None


def _build_orchestrator(
    config: AppConfig,
    providers_arg: str | None,
    synthesizer: str | None,
    skip_health_check: bool,
) -> Orchestrator:
    all_providers = build_providers(config, _parse_provider_names(providers_arg))

    if not all_providers:
        console.print("[bold red]Error:[/bold red] No providers available. Check API keys in .env.")
        sys.exit(1)

    if not skip_health_check:
        all_providers = _check_and_filter_providers(all_providers)

    try:
        return Orchestrator(all_providers, config, synthesizer_name=synthesizer)
    except ConfigurationError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(1)


@click.command()
@click.argument("question", required=False)
@click.option("--file", "context_file", type=click.Path(exists=True, dir_okay=False),
              help="Plain-text document to use as context")
@click.option("--summarize", "do_summarize", is_flag=True, help="Summarize --file instead of answering a question")
@click.option("--interactive", is_flag=True, help="Keep asking follow-up questions with history")
@click.option("--providers", "providers_arg", default=None,
              help="Comma-separated provider list (default: all with API keys)")
@click.option("--synthesizer", default=None, help="Which provider merges answers (default: from config)")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.option("--skip-health-check", is_flag=True, default=False,
              help="Skip the API connectivity check at startup")
def main(
    question: str | None,
    context_file: str | None,
    do_summarize: bool,
    interactive: bool,
    providers_arg: str | None,
    synthesizer: str | None,
    verbose: bool,
    skip_health_check: bool,
) -> None:
    """docchat -- Ask questions about a document with several AI providers at once.

    \b
    Examples:
      docchat "What is retrieval augmented generation?"
      docchat "What are the main findings?" --file paper.txt
      docchat --file paper.txt --summarize
      docchat --file paper.txt --interactive --providers groq,gemini
    """
    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config()
    except FileNotFoundError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    document = load_context(Path(context_file)) if context_file else None

    if do_summarize and document is None:
        console.print("[bold red]Error:[/bold red] --summarize needs --file.")
        sys.exit(1)
    if not (question or do_summarize or interactive):
        console.print("[bold red]Error:[/bold red] Provide a QUESTION argument, --summarize, or --interactive.")
        sys.exit(1)

    orchestrator = _build_orchestrator(config, providers_arg, synthesizer, skip_health_check)

    if interactive:
        asyncio.run(_run_interactive(orchestrator, document, question))
        return

    try:
        if do_summarize:
            summary = asyncio.run(summarize(orchestrator, document, config.prompts.summary))
            print_summary(summary)
            return

        request = ChatRequest(
            question=question,
            context=document.text if document else None,
            source_name=document.source_name if document else "Document",
        )
        print_answer(asyncio.run(_ask(orchestrator, request)))
    except ChatError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
