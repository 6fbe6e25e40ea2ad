from __future__ import annotations

import pytest

from aci.prompts import (
    COMPLETION_RESPONSE_FORMAT,
    DOC_RESPONSE_FORMAT,
    CompletionPrompt,
    DocResolvePrompt,
    HoverPrompt,
    SignaturePrompt,
    render_completion_prompt,
    render_prompt,
)


def _ordered(text: str, *markers: str) -> bool:
    positions = [text.index(marker) for marker in markers]
    return positions == sorted(positions)


def test_completion_prompt_sections_appear_in_order() -> None:
    prompt = render_completion_prompt(
        CompletionPrompt(context="import os\npath = os.getcwd()", current_line="path = os.getcwd()")
    )

    assert prompt.startswith("You are an intelligent and helpful Python coding assistant.")
    assert _ordered(prompt, "### Context", "### Current Line", "### Objective", "### Response Format")
    assert "import os\npath = os.getcwd()" in prompt
    assert COMPLETION_RESPONSE_FORMAT in prompt
    assert prompt.endswith("\n1.")


def test_doc_resolve_prompt_quotes_label_and_requests_summary_first() -> None:
    prompt = render_prompt(DocResolvePrompt(label="sorted(items)"))

    assert '"sorted(items)"' in prompt
    assert _ordered(prompt, "documentation assistant", "### Code", "### Objective", "### Response Format")
    assert prompt.rstrip().endswith(DOC_RESPONSE_FORMAT)


def test_signature_and_hover_prompts_carry_their_inputs() -> None:
    signature = render_prompt(SignaturePrompt(function_name="json.dumps"))
    hover = render_prompt(HoverPrompt(word="enumerate", line="for i, x in enumerate(xs):"))

    assert '"json.dumps"' in signature
    assert '"enumerate"' in hover
    assert '"for i, x in enumerate(xs):"' in hover
    assert _ordered(hover, "### Code", "### Context", "### Objective", "### Response Format")


def test_language_is_substituted_into_templates() -> None:
    prompt = render_prompt(SignaturePrompt(function_name="Vec::new", language="Rust"))

    assert "Rust API assistant" in prompt
    assert "Python" not in prompt


def test_render_prompt_rejects_unknown_request() -> None:
    with pytest.raises(TypeError):
        render_prompt("not a prompt request")  # type: ignore[arg-type]
