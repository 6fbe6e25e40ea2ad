from __future__ import annotations

from aci.context_extractor import CONTEXT_WINDOW_LINES, extract_context
from aci.documents import CursorPosition, DocumentSnapshot


def _snapshot(count: int) -> DocumentSnapshot:
    text = "\n".join(f"line {index}" for index in range(count))
    return DocumentSnapshot(uri="file:///sample.py", text=text)


def test_window_holds_five_preceding_lines_and_cursor_line() -> None:
    window = extract_context(_snapshot(10), CursorPosition(line=7, character=0))

    assert window is not None
    assert window.lines == ("line 2", "line 3", "line 4", "line 5", "line 6", "line 7")
    assert window.current_line == "line 7"
    assert window.start_line == 2
    assert window.text == "line 2\nline 3\nline 4\nline 5\nline 6\nline 7"


def test_window_never_extends_before_first_line() -> None:
    window = extract_context(_snapshot(10), CursorPosition(line=2, character=0))

    assert window is not None
    assert window.lines == ("line 0", "line 1", "line 2")
    assert window.start_line == 0


def test_window_bounds_hold_for_every_cursor_line() -> None:
    snapshot = _snapshot(12)
    for line in range(12):
        window = extract_context(snapshot, CursorPosition(line=line, character=0))
        assert window is not None
        assert len(window.lines) <= CONTEXT_WINDOW_LINES + 1
        assert window.lines[-1] == f"line {line}"
        assert window.start_line + len(window.lines) - 1 == line


def test_cursor_line_outside_document_yields_none() -> None:
    snapshot = _snapshot(3)
    assert extract_context(snapshot, CursorPosition(line=3, character=0)) is None
    assert extract_context(snapshot, CursorPosition(line=-1, character=0)) is None


def test_only_newline_separates_lines() -> None:
    snapshot = DocumentSnapshot(uri="file:///crlf.py", text="a = 1\r\nb = 2")
    window = extract_context(snapshot, CursorPosition(line=1, character=0))

    assert window is not None
    assert window.lines == ("a = 1\r", "b = 2")
