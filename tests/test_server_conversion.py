from __future__ import annotations

from types import SimpleNamespace

from lsprotocol import types

from aci.handlers.hover import HoverResult
from aci.parsers import parse_completions, parse_signature
from aci.server import (
    WorkspaceDocuments,
    from_lsp_completion_item,
    to_lsp_completion_item,
    to_lsp_hover,
    to_lsp_signature_help,
)


def test_candidates_become_plain_text_completion_items() -> None:
    items = [to_lsp_completion_item(candidate) for candidate in parse_completions("1. a = 1\n2. b = 2")]

    assert [item.label for item in items] == ["a = 1", "b = 2"]
    assert [item.sort_text for item in items] == ["00000", "00001"]
    assert all(item.kind == types.CompletionItemKind.Text for item in items)
    assert items[1].insert_text == "b = 2"


def test_lsp_item_round_trips_into_resolver_input() -> None:
    item = types.CompletionItem(
        label="total += 1",
        sort_text="00003",
        documentation=types.MarkupContent(kind=types.MarkupKind.Markdown, value="old docs"),
        data={"origin": "ai"},
    )

    converted = from_lsp_completion_item(item)

    assert converted.label == "total += 1"
    assert converted.sort_text == "00003"
    assert converted.documentation == "old docs"
    assert converted.data == {"origin": "ai"}


def test_signature_help_conversion_keeps_indices() -> None:
    result = parse_signature("add(left, right)", active_parameter=1)
    assert result is not None

    help_ = to_lsp_signature_help(result)

    assert help_.active_signature == 0
    assert help_.active_parameter == 1
    signature = help_.signatures[0]
    assert signature.label == "add(left, right)"
    assert [parameter.label for parameter in signature.parameters] == ["left", "right"]
    assert signature.parameters[0].documentation == "Parameter 1"


def test_hover_conversion_uses_markdown() -> None:
    hover = to_lsp_hover(HoverResult(value="**len** returns a size."))

    assert hover.contents.kind == types.MarkupKind.Markdown
    assert hover.contents.value == "**len** returns a size."


def test_workspace_documents_only_serve_open_buffers() -> None:
    opened = SimpleNamespace(source="x = 1\ny = 2", version=3)
    workspace = SimpleNamespace(
        text_documents={"file:///open.py": opened},
        get_text_document=lambda uri: opened,
    )
    documents = WorkspaceDocuments(SimpleNamespace(workspace=workspace))

    snapshot = documents.get("file:///open.py")

    assert snapshot is not None
    assert snapshot.lines == ["x = 1", "y = 2"]
    assert snapshot.version == 3
    assert documents.get("file:///closed.py") is None
