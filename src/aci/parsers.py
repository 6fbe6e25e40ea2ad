"""Parsers that turn free-form generated text into structured results.

The response formats requested in :mod:`aci.prompts` are not enforced by the
upstream model, so every parser accepts arbitrary text and falls back to a
usable shape.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

__all__ = [
    "CompletionCandidate",
    "NO_DOCUMENTATION",
    "ParameterDescription",
    "SignatureDescription",
    "SignatureHelpResult",
    "parse_completions",
    "parse_documentation",
    "parse_signature",
    "sort_key",
]

NO_DOCUMENTATION = "No documentation available."

_LIST_MARKER = re.compile(r"\d+\.")
_PARAMETERS = re.compile(r"\((.*?)\)")


@dataclass(slots=True)
class CompletionCandidate:
    """One suggested continuation, ranked by ``sort_text``."""

    label: str
    insert_text: str
    sort_text: str
    kind: Literal["text"] = "text"


@dataclass(slots=True)
class ParameterDescription:
    """Label and placeholder documentation for one signature parameter."""

    label: str
    documentation: str


@dataclass(slots=True)
class SignatureDescription:
    """Rendered signature text with its parameter list."""

    label: str
    documentation: str = NO_DOCUMENTATION
    parameters: list[ParameterDescription] = field(default_factory=list)


@dataclass(slots=True)
class SignatureHelpResult:
    """Signature help reply; ``active_parameter`` comes from the cursor line."""

    signatures: list[SignatureDescription]
    active_signature: int = 0
    active_parameter: int = 0


def sort_key(index: int) -> str:
    """Return a zero-padded key so lexical order matches list order."""
    return f"{index:05d}"


def parse_completions(text: str) -> list[CompletionCandidate]:
    """Split a numbered suggestion list into ranked candidates."""
    suggestions = [segment.strip() for segment in _LIST_MARKER.split(text)]
    suggestions = [segment for segment in suggestions if segment]

    if not suggestions:
        whole = text.strip()
        if not whole:
            return []
        return [CompletionCandidate(label=whole, insert_text=whole, sort_text=sort_key(0))]

    return [
        CompletionCandidate(label=suggestion, insert_text=suggestion, sort_text=sort_key(index))
        for index, suggestion in enumerate(suggestions)
    ]


def parse_documentation(text: str) -> tuple[str, str] | None:
    """Return ``(detail, documentation)`` from a summary-first reply."""
    if not text.strip():
        return None
    lines = text.split("\n")
    detail = lines[0].strip()
    documentation = "\n".join(lines[1:]).strip()
    return detail, documentation or detail


def parse_signature(text: str, *, active_parameter: int = 0) -> SignatureHelpResult | None:
    """Build signature help from a ``name(a, b)`` style reply."""
    label = text.strip()
    if not label:
        return None

    parameters: list[ParameterDescription] = []
    match = _PARAMETERS.search(label)
    if match and match.group(1):
        for index, raw in enumerate(match.group(1).split(","), start=1):
            parameters.append(ParameterDescription(label=raw.strip(), documentation=f"Parameter {index}"))

    # TODO: ask the model for per-signature documentation instead of the sentinel.
    signature = SignatureDescription(label=label, documentation=NO_DOCUMENTATION, parameters=parameters)
    return SignatureHelpResult(
        signatures=[signature],
        active_signature=0,
        active_parameter=active_parameter,
    )
