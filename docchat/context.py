"""Plain-text document context handed to the orchestrator."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DocumentContext:
    text: str
    source_name: str


def load_context(path: Path) -> DocumentContext:
    """Read a text file as UTF-8, replacing undecodable bytes."""
    text = path.read_text(encoding="utf-8", errors="replace").strip()
    return DocumentContext(text=text, source_name=path.name)
