"""Shared helpers for the request orchestrators."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Any, MutableMapping, Optional

from ..documents import CursorPosition, DocumentSnapshot, DocumentStore
from ..models.inference_client import (
    ConfigurationError,
    InferenceClient,
    InferenceError,
    InferenceTimeoutError,
    LoggerLike,
)
from . import RequestKind

__all__ = [
    "PositionRequest",
    "RequestLogger",
    "invoke_inference",
    "is_cancelled",
    "request_logger",
    "resolve_document",
]

LOGGER = logging.getLogger("aci.handlers")


@dataclass(slots=True)
class PositionRequest:
    """Document URI plus cursor position, shared by position-based requests."""

    uri: str
    position: CursorPosition


class RequestLogger(logging.LoggerAdapter):
    """Logger adapter that tags every message with the request kind and id."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = self.extra or {}
        return f"[{extra.get('request_kind')}:{extra.get('request_id')}] {msg}", kwargs


def request_logger(kind: RequestKind | str, base: Optional[logging.Logger] = None) -> RequestLogger:
    """Return a logger scoped to a single request."""
    label = kind.value if isinstance(kind, RequestKind) else str(kind)
    return RequestLogger(base or LOGGER, {"request_kind": label, "request_id": uuid.uuid4().hex[:8]})


def is_cancelled(cancel_event: Optional[threading.Event]) -> bool:
    """Return True when the caller signalled cancellation."""
    return cancel_event is not None and cancel_event.is_set()


def resolve_document(
    documents: DocumentStore,
    uri: str,
    log: LoggerLike,
) -> DocumentSnapshot | None:
    """Fetch the snapshot for ``uri`` and log when it is unknown."""
    snapshot = documents.get(uri)
    if snapshot is None:
        log.warning("Document not found: %s", uri)
    return snapshot


def invoke_inference(
    client: InferenceClient,
    prompt: str,
    max_tokens: int,
    *,
    log: LoggerLike,
    cancel_event: Optional[threading.Event] = None,
) -> str | None:
    """Call the client and map every recoverable failure to ``None``.

    ``None`` means the caller should return its empty result. A
    :class:`ConfigurationError` is re-raised unchanged.
    """
    if is_cancelled(cancel_event):
        log.info("Request cancelled before inference")
        return None

    try:
        text = client.infer(prompt, max_tokens, logger=log)
    except ConfigurationError:
        raise
    except InferenceTimeoutError as error:
        log.warning("Inference timed out, returning empty result: %s", error)
        return None
    except InferenceError as error:
        log.error("Inference failed, returning empty result: %s", error)
        return None
    except Exception:
        log.exception("Unexpected inference client failure")
        return None

    if is_cancelled(cancel_event):
        log.info("Request cancelled during inference; discarding reply")
        return None
    return text
