"""Map editor request kinds to their orchestrators."""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from pydantic import ValidationError
from pydantic.type_adapter import TypeAdapter

from .config import Settings
from .documents import DocumentStore
from .handlers import RequestKind
from .handlers.base import PositionRequest
from .handlers.completion import run as run_completion
from .handlers.hover import run as run_hover
from .handlers.resolve import CompletionItem, run as run_resolve
from .handlers.signature import run as run_signature_help
from .models.inference_client import InferenceClient

Runner = Callable[..., Any]

# Request type each orchestrator expects, paired with the orchestrator itself.
ROUTES: Dict[RequestKind, Tuple[type, Runner]] = {
    RequestKind.COMPLETION: (PositionRequest, run_completion),
    RequestKind.COMPLETION_RESOLVE: (CompletionItem, run_resolve),
    RequestKind.SIGNATURE_HELP: (PositionRequest, run_signature_help),
    RequestKind.HOVER: (PositionRequest, run_hover),
}

_ADAPTERS: Dict[type, TypeAdapter] = {}


class RequestRouter:
    """Run the orchestrator for a request kind against shared client and documents."""

    def __init__(
        self,
        *,
        client: InferenceClient,
        documents: DocumentStore,
        settings: Optional[Settings] = None,
    ) -> None:
        self._client = client
        self._documents = documents
        self._settings = settings or Settings()

    @property
    def settings(self) -> Settings:
        return self._settings

    def dispatch(
        self,
        kind: RequestKind | str,
        payload: Any,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> Any:
        """Build the typed request from ``payload`` and return the orchestrator's result.

        Raises ``KeyError`` for an unknown kind and ``ValueError`` when the
        payload cannot be turned into the request type.
        """
        request_type, runner = ROUTES[request_kind(kind)]
        return runner(
            to_request(payload, request_type),
            client=self._client,
            documents=self._documents,
            settings=self._settings,
            cancel_event=cancel_event,
        )

    def available_kinds(self) -> Iterable[RequestKind]:
        return ROUTES.keys()


def request_kind(kind: RequestKind | str) -> RequestKind:
    if isinstance(kind, RequestKind):
        return kind
    try:
        return RequestKind(kind)
    except ValueError as error:
        known = ", ".join(item.value for item in RequestKind)
        raise KeyError(f"Unknown request kind '{kind}' (known: {known})") from error


def to_request(payload: Any, request_type: type) -> Any:
    if isinstance(payload, request_type):
        return payload
    adapter = _ADAPTERS.get(request_type)
    if adapter is None:
        adapter = _ADAPTERS[request_type] = TypeAdapter(request_type)
    try:
        return adapter.validate_python(payload)
    except ValidationError as error:
        raise ValueError(f"Payload for {request_type.__name__} did not validate: {error}") from error


__all__ = ["ROUTES", "RequestRouter", "request_kind", "to_request"]
