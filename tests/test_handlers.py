from __future__ import annotations

import logging
import threading

import pytest

from aci.config import Settings
from aci.documents import CursorPosition
from aci.handlers.base import PositionRequest, request_logger
from aci.handlers.completion import run as run_completion
from aci.handlers.hover import HoverResult, run as run_hover
from aci.handlers.resolve import CompletionItem, run as run_resolve
from aci.handlers.signature import run as run_signature_help
from aci.models import ConfigurationError, HuggingFaceClient, InferenceStatusError

DOCUMENT_URI = "file:///workspace/calculator.py"


def _at(line: int, character: int, uri: str = DOCUMENT_URI) -> PositionRequest:
    return PositionRequest(uri=uri, position=CursorPosition(line=line, character=character))


def test_completion_prompts_with_trailing_window(client, transport, documents) -> None:
    transport.generate("1. print(total)\n2. return total")

    candidates = run_completion(_at(11, 5), client=client, documents=documents)

    assert [candidate.label for candidate in candidates] == ["print(total)", "return total"]
    assert [candidate.sort_text for candidate in candidates] == ["00000", "00001"]
    prompt = transport.prompts[0]
    assert "def area(radius):" in prompt
    assert "total = add(1, area(2)," in prompt
    assert "import math" not in prompt
    assert "value = os.path.join" not in prompt
    assert transport.payloads[0]["parameters"]["max_new_tokens"] == 150


def test_completion_for_unknown_document_skips_inference(client, transport, documents) -> None:
    assert run_completion(_at(0, 0, uri="file:///missing.py"), client=client, documents=documents) == []
    assert transport.payloads == []


def test_completion_for_line_outside_document_skips_inference(client, transport, documents) -> None:
    assert run_completion(_at(99, 0), client=client, documents=documents) == []
    assert transport.payloads == []


def test_completion_timeout_degrades_to_empty_list(client, transport, documents, caplog) -> None:
    transport.error = TimeoutError("slow upstream")

    with caplog.at_level(logging.WARNING):
        assert run_completion(_at(4, 0), client=client, documents=documents) == []
    assert "timed out" in caplog.text


def test_completion_upstream_failure_degrades_to_empty_list(client, transport, documents, caplog) -> None:
    transport.error = InferenceStatusError(502, "bad gateway")

    assert run_completion(_at(4, 0), client=client, documents=documents) == []
    assert "status 502" in caplog.text
    assert "timed out" not in caplog.text


def test_missing_credential_propagates_from_handlers(monkeypatch, transport, documents) -> None:
    monkeypatch.delenv("HUGGINGFACE_API_KEY", raising=False)
    unconfigured = HuggingFaceClient(host="example.test", path="/x", transport=transport)

    with pytest.raises(ConfigurationError):
        run_completion(_at(4, 0), client=unconfigured, documents=documents)
    with pytest.raises(ConfigurationError):
        run_hover(_at(12, 10), client=unconfigured, documents=documents)
    assert transport.payloads == []


def test_cancelled_request_never_reaches_upstream(client, transport, documents) -> None:
    cancel = threading.Event()
    cancel.set()

    assert run_completion(_at(4, 0), client=client, documents=documents, cancel_event=cancel) == []
    assert transport.payloads == []


def test_reply_arriving_after_cancellation_is_discarded(client, transport, documents) -> None:
    cancel = threading.Event()
    transport.generate("1. x = 1")
    transport.on_call = cancel.set

    assert run_completion(_at(4, 0), client=client, documents=documents, cancel_event=cancel) == []
    assert len(transport.payloads) == 1


def test_injected_logger_receives_request_messages(client, transport, documents, caplog) -> None:
    log = request_logger("completion", logging.getLogger("tests.injected"))

    with caplog.at_level(logging.INFO, logger="tests.injected"):
        run_completion(_at(99, 0), client=client, documents=documents, logger=log)

    records = [record for record in caplog.records if record.name == "tests.injected"]
    assert records
    assert all(record.getMessage().startswith("[completion:") for record in records)


def test_resolve_fills_detail_and_documentation(client, transport) -> None:
    transport.generate("Adds two numbers.\nReturns sum.")
    item = CompletionItem(label="add(a, b)", sort_text="00000")

    resolved = run_resolve(item, client=client)

    assert resolved.detail == "Adds two numbers."
    assert resolved.documentation == "Returns sum."
    assert resolved.sort_text == "00000"
    assert item.detail is None
    assert '"add(a, b)"' in transport.prompts[0]


def test_resolve_single_line_reply_reuses_summary(client, transport) -> None:
    transport.generate("Adds two numbers.")

    resolved = run_resolve(CompletionItem(label="add(a, b)"), client=client)

    assert resolved.detail == resolved.documentation == "Adds two numbers."


@pytest.mark.parametrize("error", [TimeoutError("slow"), None])
def test_resolve_returns_input_item_when_no_answer(client, transport, error) -> None:
    transport.error = error
    item = CompletionItem(label="add(a, b)")

    assert run_resolve(item, client=client) is item


def test_signature_help_for_open_call(client, transport, documents) -> None:
    transport.generate("add(left, right)")

    result = run_signature_help(_at(11, 23), client=client, documents=documents)

    assert result is not None
    assert result.signatures[0].label == "add(left, right)"
    assert [parameter.label for parameter in result.signatures[0].parameters] == ["left", "right"]
    assert result.active_signature == 0
    assert result.active_parameter == 2
    assert '"add"' in transport.prompts[0]


def test_signature_help_active_parameter_ignores_reply(client, transport, documents) -> None:
    transport.generate("add(left, right, extra, more)")

    result = run_signature_help(_at(11, 13), client=client, documents=documents)

    assert result is not None
    assert result.active_parameter == 0


def test_signature_help_without_open_call_skips_inference(client, transport, documents) -> None:
    assert run_signature_help(_at(0, 6), client=client, documents=documents) is None
    assert run_signature_help(_at(12, 200), client=client, documents=documents) is None
    assert run_signature_help(_at(50, 0), client=client, documents=documents) is None
    assert transport.payloads == []


def test_signature_help_timeout_returns_none(client, transport, documents) -> None:
    transport.error = TimeoutError("slow")
    assert run_signature_help(_at(11, 23), client=client, documents=documents) is None


def test_hover_explains_dotted_word(client, transport, documents) -> None:
    transport.generate("  Joins path components.  ")

    result = run_hover(_at(12, 10), client=client, documents=documents)

    assert result == HoverResult(value="Joins path components.")
    prompt = transport.prompts[0]
    assert '"os.path.join"' in prompt
    assert '"value = os.path.join(base, name)"' in prompt


def test_hover_with_empty_reply_uses_placeholder(client, transport, documents) -> None:
    result = run_hover(_at(12, 0), client=client, documents=documents)

    assert result is not None
    assert result.value == "No information available for 'value'"
    assert result.kind == "markdown"


@pytest.mark.parametrize(("line", "character"), [(12, 5), (12, 32), (12, -1), (40, 0), (1, 0)])
def test_hover_rejects_positions_without_word(client, transport, documents, line, character) -> None:
    assert run_hover(_at(line, character), client=client, documents=documents) is None
    assert transport.payloads == []


def test_hover_timeout_returns_none(client, transport, documents) -> None:
    transport.error = TimeoutError("slow")
    assert run_hover(_at(12, 10), client=client, documents=documents) is None


def test_settings_control_budget_and_language(client, transport, documents) -> None:
    settings = Settings(language="Cython")
    settings.max_tokens.hover = 32

    run_hover(_at(12, 10), client=client, documents=documents, settings=settings)

    assert transport.payloads[0]["parameters"]["max_new_tokens"] == 32
    assert "Cython" in transport.prompts[0]
