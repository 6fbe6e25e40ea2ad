"""Prompt templates shared across the code-intelligence request handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

DEFAULT_LANGUAGE = "Python"

COMPLETION_RESPONSE_FORMAT = (
    "Return up to 3 suggestions as a numbered list (1., 2., 3.). "
    "Do not repeat the current line and do not add explanations."
)
DOC_RESPONSE_FORMAT = (
    "Write the summary on the first line. "
    "Put any detailed explanation on the following lines."
)
SIGNATURE_RESPONSE_FORMAT = (
    "Respond with a single line of the form name(param1, param2, ...). "
    "Do not add explanations."
)
HOVER_RESPONSE_FORMAT = "Respond with a brief technical explanation formatted in Markdown."


@dataclass(frozen=True, slots=True)
class CompletionPrompt:
    """Inputs for predicting the next line(s) of code."""

    context: str
    current_line: str
    language: str = DEFAULT_LANGUAGE
    kind: Literal["completion"] = "completion"


@dataclass(frozen=True, slots=True)
class DocResolvePrompt:
    """Inputs for documenting a completion candidate."""

    label: str
    language: str = DEFAULT_LANGUAGE
    kind: Literal["completion_resolve"] = "completion_resolve"


@dataclass(frozen=True, slots=True)
class SignaturePrompt:
    """Inputs for recalling the signature of a called function."""

    function_name: str
    language: str = DEFAULT_LANGUAGE
    kind: Literal["signature_help"] = "signature_help"


@dataclass(frozen=True, slots=True)
class HoverPrompt:
    """Inputs for explaining the token under the cursor."""

    word: str
    line: str
    language: str = DEFAULT_LANGUAGE
    kind: Literal["hover"] = "hover"


PromptRequest = Union[CompletionPrompt, DocResolvePrompt, SignaturePrompt, HoverPrompt]


def _section(title: str, body: str) -> str:
    return f"### {title}\n{body}"


def _assemble(role: str, inputs: list[str], objective: str, response_format: str) -> str:
    blocks = [role, *inputs, _section("Objective", objective), _section("Response Format", response_format)]
    return "\n\n".join(blocks)


def render_completion_prompt(request: CompletionPrompt) -> str:
    """Render the next-line prediction prompt, primed with the first list marker."""
    prompt = _assemble(
        f"You are an intelligent and helpful {request.language} coding assistant.",
        [
            _section("Context", f"Here is the recent {request.language} code context:\n{request.context}"),
            _section("Current Line", f"The user is typing:\n{request.current_line}"),
        ],
        (
            f"Predict the next line(s) of valid {request.language} code the user is likely to write. "
            "Suggestions should be clean, executable and relevant to the context."
        ),
        COMPLETION_RESPONSE_FORMAT,
    )
    return f"{prompt}\n\n1."


def render_doc_resolve_prompt(request: DocResolvePrompt) -> str:
    """Render the docstring prompt for a completion candidate."""
    return _assemble(
        f"You are a {request.language} documentation assistant.",
        [_section("Code", f'"{request.label}"')],
        (
            "Write a short but informative docstring for the code above, in the style of "
            f"{request.language}'s built-in documentation."
        ),
        DOC_RESPONSE_FORMAT,
    )


def render_signature_prompt(request: SignaturePrompt) -> str:
    """Render the prompt asking for a function signature."""
    return _assemble(
        f"You are a {request.language} API assistant.",
        [_section("Function", f'"{request.function_name}"')],
        f"Provide the signature (name and parameters) of the {request.language} function above.",
        SIGNATURE_RESPONSE_FORMAT,
    )


def render_hover_prompt(request: HoverPrompt) -> str:
    """Render the hover explanation prompt for a token and its line."""
    return _assemble(
        f"You are a helpful AI assistant specialised in {request.language} programming.",
        [
            _section("Code", f'"{request.word}"'),
            _section("Context", f'"{request.line}"'),
        ],
        (
            f"Explain what the {request.language} token or function above does in one or two "
            "concise sentences. The user is hovering over it in their editor."
        ),
        HOVER_RESPONSE_FORMAT,
    )


def render_prompt(request: PromptRequest) -> str:
    """Render any prompt request by dispatching on its concrete type."""
    if isinstance(request, CompletionPrompt):
        return render_completion_prompt(request)
    if isinstance(request, DocResolvePrompt):
        return render_doc_resolve_prompt(request)
    if isinstance(request, SignaturePrompt):
        return render_signature_prompt(request)
    if isinstance(request, HoverPrompt):
        return render_hover_prompt(request)
    raise TypeError(f"Unsupported prompt request: {type(request).__name__}")


__all__ = [
    "COMPLETION_RESPONSE_FORMAT",
    "CompletionPrompt",
    "DEFAULT_LANGUAGE",
    "DOC_RESPONSE_FORMAT",
    "DocResolvePrompt",
    "HOVER_RESPONSE_FORMAT",
    "HoverPrompt",
    "PromptRequest",
    "SIGNATURE_RESPONSE_FORMAT",
    "SignaturePrompt",
    "render_completion_prompt",
    "render_doc_resolve_prompt",
    "render_hover_prompt",
    "render_prompt",
    "render_signature_prompt",
]
