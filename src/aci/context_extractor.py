"""Select the trailing source window that accompanies a completion prompt."""

from __future__ import annotations

from dataclasses import dataclass

from .documents import CursorPosition, DocumentSnapshot

__all__ = ["CONTEXT_WINDOW_LINES", "ContextWindow", "extract_context"]

CONTEXT_WINDOW_LINES = 5


@dataclass(frozen=True, slots=True)
class ContextWindow:
    """Preceding lines plus the cursor line, and the cursor line on its own."""

    lines: tuple[str, ...]
    current_line: str
    start_line: int

    @property
    def text(self) -> str:
        """Return the window joined back into one block of source."""
        return "\n".join(self.lines)


def extract_context(
    snapshot: DocumentSnapshot,
    position: CursorPosition,
    *,
    window: int = CONTEXT_WINDOW_LINES,
) -> ContextWindow | None:
    """Return the context window ending at ``position.line``.

    ``None`` is returned when the cursor line does not exist in the snapshot.
    """
    lines = snapshot.lines
    if position.line < 0 or position.line >= len(lines):
        return None

    start = max(0, position.line - window)
    return ContextWindow(
        lines=tuple(lines[start : position.line + 1]),
        current_line=lines[position.line],
        start_line=start,
    )
