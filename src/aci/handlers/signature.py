"""Signature help: describe the call surrounding the cursor."""

from __future__ import annotations

import threading
from typing import Optional

from ..config import Settings
from ..documents import DocumentStore
from ..models.inference_client import InferenceClient, LoggerLike
from ..parsers import SignatureHelpResult, parse_signature
from ..prompts import SignaturePrompt, render_signature_prompt
from ..text_position import callee_name_at, open_call_paren_index, parameter_index_at
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
) -> SignatureHelpResult | None:
    """Return signature help for the open call at the cursor, or ``None``."""
    settings = settings or Settings()
    log = logger or request_logger(RequestKind.SIGNATURE_HELP)
    position = request.position

    snapshot = resolve_document(documents, request.uri, log)
    if snapshot is None:
        return None
    if not snapshot.contains(position):
        log.warning("Position %d:%d is outside the document", position.line, position.character)
        return None

    line = snapshot.lines[position.line]
    if open_call_paren_index(line, position.character) == -1:
        log.debug("No open call before the cursor")
        return None
    function_name = callee_name_at(line, position.character)
    if not function_name:
        log.debug("No function name before the open call")
        return None

    prompt = render_signature_prompt(SignaturePrompt(function_name=function_name, language=settings.language))
    text = invoke_inference(
        client,
        prompt,
        settings.max_tokens.signature_help,
        log=log,
        cancel_event=cancel_event,
    )
    if text is None:
        return None

    try:
        return parse_signature(text, active_parameter=parameter_index_at(line, position.character))
    except Exception:
        log.exception("Error parsing signature reply")
        return None
