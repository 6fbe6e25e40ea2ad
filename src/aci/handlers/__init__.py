"""Request kinds handled by the code-intelligence orchestrators."""

from __future__ import annotations

from enum import Enum


class RequestKind(str, Enum):
    """Enumeration of the supported editor request kinds."""

    COMPLETION = "completion"
    COMPLETION_RESOLVE = "completion_resolve"
    SIGNATURE_HELP = "signature_help"
    HOVER = "hover"


__all__ = ["RequestKind"]
