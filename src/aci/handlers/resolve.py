"""Completion resolve: attach a summary and documentation to a candidate."""

from __future__ import annotations

import dataclasses
import threading
from dataclasses import dataclass
from typing import Any, Optional

from ..config import Settings
from ..documents import DocumentStore
from ..models.inference_client import InferenceClient, LoggerLike
from ..parsers import parse_documentation
from ..prompts import DocResolvePrompt, render_doc_resolve_prompt
from . import RequestKind
from .base import invoke_inference, request_logger


@dataclass(slots=True)
class CompletionItem:
    """Completion item as exchanged with the editor for resolution."""

    label: str
    detail: Optional[str] = None
    documentation: Optional[str] = None
    insert_text: Optional[str] = None
    sort_text: Optional[str] = None
    kind: str = "text"
    data: Any = None


def run(
    item: CompletionItem,
    *,
    client: InferenceClient,
    documents: Optional[DocumentStore] = None,
    settings: Optional[Settings] = None,
    logger: Optional[LoggerLike] = None,
    cancel_event: Optional[threading.Event] = None,
) -> CompletionItem:
    """Return ``item`` with detail and documentation filled in when available.

    On any recoverable failure the input item is returned unchanged.
    """
    settings = settings or Settings()
    log = logger or request_logger(RequestKind.COMPLETION_RESOLVE)

    if not item.label.strip():
        log.warning("Completion item has no label to document")
        return item

    prompt = render_doc_resolve_prompt(DocResolvePrompt(label=item.label, language=settings.language))
    text = invoke_inference(
        client,
        prompt,
        settings.max_tokens.completion_resolve,
        log=log,
        cancel_event=cancel_event,
    )
    if text is None:
        return item

    try:
        parsed = parse_documentation(text)
    except Exception:
        log.exception("Error parsing documentation reply")
        return item
    if parsed is None:
        return item

    detail, documentation = parsed
    return dataclasses.replace(item, detail=detail, documentation=documentation)
