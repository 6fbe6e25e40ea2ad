"""Read-only document snapshots borrowed from the document-sync layer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional, Protocol

__all__ = [
    "CursorPosition",
    "DocumentSnapshot",
    "DocumentStore",
    "StaticDocumentStore",
]


@dataclass(frozen=True, slots=True)
class CursorPosition:
    """Zero-based ``(line, character)`` location inside a document."""

    line: int
    character: int


@dataclass(frozen=True, slots=True)
class DocumentSnapshot:
    """Immutable view of one open text buffer at the moment of a request."""

    uri: str
    text: str
    version: Optional[int] = None

    @property
    def lines(self) -> list[str]:
        """Return the buffer split on ``\\n`` without other normalisation."""
        return self.text.split("\n")

    def line_at(self, index: int) -> str | None:
        """Return the line at ``index`` or ``None`` when it does not exist."""
        lines = self.lines
        if index < 0 or index >= len(lines):
            return None
        return lines[index]

    def contains(self, position: CursorPosition) -> bool:
        """Return True when ``position`` lies within the document bounds."""
        line = self.line_at(position.line)
        if line is None:
            return False
        return 0 <= position.character <= len(line)


class DocumentStore(Protocol):
    """Anything that can hand out snapshots by URI."""

    def get(self, uri: str) -> DocumentSnapshot | None:
        ...


class StaticDocumentStore:
    """Fixed mapping of URI to text, used by the CLI probe and tests."""

    def __init__(self, documents: Mapping[str, str] | None = None) -> None:
        self._documents = dict(documents or {})

    def get(self, uri: str) -> DocumentSnapshot | None:
        text = self._documents.get(uri)
        if text is None:
            return None
        return DocumentSnapshot(uri=uri, text=text)
