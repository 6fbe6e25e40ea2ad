"""Language-server adapter that exposes the orchestrators over LSP."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from .config import Settings
from .documents import CursorPosition, DocumentSnapshot, DocumentStore
from .handlers import RequestKind
from .handlers.base import PositionRequest
from .handlers.hover import HoverResult
from .handlers.resolve import CompletionItem
from .models import ConfigurationError, HuggingFaceClient
from .models.inference_client import InferenceClient
from .parsers import CompletionCandidate, SignatureHelpResult
from .router import RequestRouter

__all__ = [
    "SERVER_NAME",
    "SERVER_VERSION",
    "WorkspaceDocuments",
    "build_server",
    "complete",
    "hover",
    "resolve_completion",
    "signature_help",
    "start",
    "from_lsp_completion_item",
    "to_lsp_completion_item",
    "to_lsp_hover",
    "to_lsp_signature_help",
]

LOGGER = logging.getLogger(__name__)

SERVER_NAME = "aci-language-server"
SERVER_VERSION = "0.1.0"
SIGNATURE_TRIGGER_CHARACTERS = ["(", ","]

T = TypeVar("T")


class WorkspaceDocuments:
    """Read-only view over the documents synchronised by the language server."""

    def __init__(self, server: LanguageServer) -> None:
        self._server = server

    def get(self, uri: str) -> DocumentSnapshot | None:
        if uri not in self._server.workspace.text_documents:
            return None
        document = self._server.workspace.get_text_document(uri)
        return DocumentSnapshot(uri=uri, text=document.source, version=document.version)


def to_lsp_completion_item(candidate: CompletionCandidate) -> types.CompletionItem:
    """Convert a parsed candidate into a plain-text LSP completion item."""
    return types.CompletionItem(
        label=candidate.label,
        kind=types.CompletionItemKind.Text,
        sort_text=candidate.sort_text,
        insert_text=candidate.insert_text,
    )


def from_lsp_completion_item(item: types.CompletionItem) -> CompletionItem:
    """Convert an LSP completion item into the resolver's input shape."""
    documentation = item.documentation
    if isinstance(documentation, types.MarkupContent):
        documentation = documentation.value
    return CompletionItem(
        label=item.label,
        detail=item.detail,
        documentation=documentation,
        insert_text=item.insert_text,
        sort_text=item.sort_text,
        data=item.data,
    )


def to_lsp_signature_help(result: SignatureHelpResult) -> types.SignatureHelp:
    """Convert parsed signature help into its LSP shape."""
    return types.SignatureHelp(
        signatures=[
            types.SignatureInformation(
                label=signature.label,
                documentation=signature.documentation,
                parameters=[
                    types.ParameterInformation(label=parameter.label, documentation=parameter.documentation)
                    for parameter in signature.parameters
                ],
            )
            for signature in result.signatures
        ],
        active_signature=result.active_signature,
        active_parameter=result.active_parameter,
    )


def to_lsp_hover(result: HoverResult) -> types.Hover:
    """Convert a hover result into Markdown hover contents."""
    return types.Hover(contents=types.MarkupContent(kind=types.MarkupKind.Markdown, value=result.value))


def _position_request(params: types.TextDocumentPositionParams) -> PositionRequest:
    return PositionRequest(
        uri=params.text_document.uri,
        position=CursorPosition(line=params.position.line, character=params.position.character),
    )


def _guarded(kind: RequestKind, fallback: T, call: Callable[[], T]) -> T:
    """Run ``call`` and degrade a configuration failure to ``fallback``."""
    try:
        return call()
    except ConfigurationError as error:
        LOGGER.error("%s request cannot be served: %s", kind.value, error)
        return fallback


def complete(router: RequestRouter, params: types.CompletionParams) -> list[types.CompletionItem]:
    candidates = _guarded(
        RequestKind.COMPLETION,
        [],
        lambda: router.dispatch(RequestKind.COMPLETION, _position_request(params)),
    )
    return [to_lsp_completion_item(candidate) for candidate in candidates]


def resolve_completion(router: RequestRouter, params: types.CompletionItem) -> types.CompletionItem:
    resolved = _guarded(
        RequestKind.COMPLETION_RESOLVE,
        None,
        lambda: router.dispatch(RequestKind.COMPLETION_RESOLVE, from_lsp_completion_item(params)),
    )
    if resolved is not None:
        params.detail = resolved.detail
        params.documentation = resolved.documentation
    return params


def signature_help(router: RequestRouter, params: types.SignatureHelpParams) -> types.SignatureHelp | None:
    result = _guarded(
        RequestKind.SIGNATURE_HELP,
        None,
        lambda: router.dispatch(RequestKind.SIGNATURE_HELP, _position_request(params)),
    )
    return to_lsp_signature_help(result) if result is not None else None


def hover(router: RequestRouter, params: types.HoverParams) -> types.Hover | None:
    result = _guarded(
        RequestKind.HOVER,
        None,
        lambda: router.dispatch(RequestKind.HOVER, _position_request(params)),
    )
    return to_lsp_hover(result) if result is not None else None


def build_server(
    settings: Settings,
    *,
    client: Optional[InferenceClient] = None,
    documents: Optional[DocumentStore] = None,
) -> LanguageServer:
    """Create a language server wired to the code-intelligence handlers."""
    server = LanguageServer(SERVER_NAME, SERVER_VERSION)
    inference = client or settings.build_client()
    if isinstance(inference, HuggingFaceClient) and not inference.configured:
        LOGGER.error("Hugging Face API key is missing; AI features will return empty results.")

    router = RequestRouter(
        client=inference,
        documents=documents if documents is not None else WorkspaceDocuments(server),
        settings=settings,
    )
    LOGGER.info("Language server initialised with Hugging Face inference")

    # Requests are not cancelled mid-flight; the client timeout bounds each one.
    @server.feature(types.TEXT_DOCUMENT_COMPLETION, types.CompletionOptions(resolve_provider=True))
    @server.thread()
    def on_completion(ls: LanguageServer, params: types.CompletionParams) -> list[types.CompletionItem]:
        return complete(router, params)

    @server.feature(types.COMPLETION_ITEM_RESOLVE)
    @server.thread()
    def on_completion_resolve(ls: LanguageServer, params: types.CompletionItem) -> types.CompletionItem:
        return resolve_completion(router, params)

    @server.feature(
        types.TEXT_DOCUMENT_SIGNATURE_HELP,
        types.SignatureHelpOptions(trigger_characters=SIGNATURE_TRIGGER_CHARACTERS),
    )
    @server.thread()
    def on_signature_help(ls: LanguageServer, params: types.SignatureHelpParams) -> types.SignatureHelp | None:
        return signature_help(router, params)

    @server.feature(types.TEXT_DOCUMENT_HOVER)
    @server.thread()
    def on_hover(ls: LanguageServer, params: types.HoverParams) -> types.Hover | None:
        return hover(router, params)

    return server


def start(settings: Settings, start_fn: Optional[Callable[[LanguageServer], Any]] = None) -> None:
    """Build the server and serve it over stdio."""
    server = build_server(settings)
    if start_fn is not None:
        start_fn(server)
        return
    server.start_io()
