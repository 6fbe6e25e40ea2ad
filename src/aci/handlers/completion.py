"""Completion: predict the next line(s) of code after the cursor line."""

from __future__ import annotations

import threading
from typing import Optional

from ..config import Settings
from ..context_extractor import extract_context
from ..documents import DocumentStore
from ..models.inference_client import InferenceClient, LoggerLike
from ..parsers import CompletionCandidate, parse_completions
from ..prompts import CompletionPrompt, render_completion_prompt
from . import RequestKind
from .base import PositionRequest, invoke_inference, request_logger, resolve_document


def run(
    request: PositionRequest,
    *,
    client: InferenceClient,
    documents: DocumentStore,
    settings: Optional[Settings] = None,
    logger: Optional[LoggerLike] = None,
    cancel_event: Optional[threading.Event] = None,
) -> list[CompletionCandidate]:
    """Return ranked completion candidates, or ``[]`` when none are available."""
    settings = settings or Settings()
    log = logger or request_logger(RequestKind.COMPLETION)
    position = request.position
    log.info("Completion requested at %d:%d", position.line, position.character)

    snapshot = resolve_document(documents, request.uri, log)
    if snapshot is None:
        return []

    window = extract_context(snapshot, position)
    if window is None:
        log.warning("Line %d is outside the document", position.line)
        return []

    prompt = render_completion_prompt(
        CompletionPrompt(
            context=window.text,
            current_line=window.current_line,
            language=settings.language,
        )
    )
    text = invoke_inference(
        client,
        prompt,
        settings.max_tokens.completion,
        log=log,
        cancel_event=cancel_event,
    )
    if text is None:
        return []

    try:
        candidates = parse_completions(text)
    except Exception:
        log.exception("Error parsing completion reply")
        return []
    log.debug("Returning %d completion candidate(s)", len(candidates))
    return candidates
