"""Hover: explain the token under the cursor."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Literal, Optional

from ..config import Settings
from ..documents import DocumentStore
from ..models.inference_client import InferenceClient, LoggerLike
from ..prompts import HoverPrompt, render_hover_prompt
from ..text_position import word_range_at
from . import RequestKind
from .base import PositionRequest, invoke_inference, request_logger, resolve_document


@dataclass(slots=True)
class HoverResult:
    """Markdown hover contents."""

    value: str
    kind: Literal["markdown"] = "markdown"


def run(
    request: PositionRequest,
    *,
    client: InferenceClient,
    documents: DocumentStore,
    settings: Optional[Settings] = None,
    logger: Optional[LoggerLike] = None,
    cancel_event: Optional[threading.Event] = None,
) -> HoverResult | None:
    """Return an explanation of the word at the cursor, or ``None``."""
    settings = settings or Settings()
    log = logger or request_logger(RequestKind.HOVER)
    position = request.position

    snapshot = resolve_document(documents, request.uri, log)
    if snapshot is None:
        return None

    line = snapshot.line_at(position.line)
    if line is None:
        log.warning("Invalid line position for hover: %d", position.line)
        return None
    if position.character < 0 or position.character >= len(line):
        log.warning("Position character %d beyond line length", position.character)
        return None

    word_range = word_range_at(line, position.character)
    if word_range is None:
        log.warning("No word at position for hover")
        return None
    word = word_range.slice(line)

    log.info("Getting hover info for word '%s'", word)
    prompt = render_hover_prompt(HoverPrompt(word=word, line=line, language=settings.language))
    text = invoke_inference(
        client,
        prompt,
        settings.max_tokens.hover,
        log=log,
        cancel_event=cancel_event,
    )
    if text is None:
        return None

    return HoverResult(value=text.strip() or f"No information available for '{word}'")
