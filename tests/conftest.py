from __future__ import annotations

import json
import sys
import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from aci.documents import StaticDocumentStore  # noqa: E402
from aci.models import HuggingFaceClient  # noqa: E402

DOCUMENT_URI = "file:///workspace/calculator.py"

DOCUMENT_TEXT = textwrap.dedent(
    """
    import math


    def add(left, right):
        return left + right


    def area(radius):
        return math.pi * radius ** 2


    total = add(1, area(2),
    value = os.path.join(base, name)
    """
).lstrip("\n")


@dataclass(slots=True)
class RecordingTransport:
    """Transport double that records payloads and replays a canned reply."""

    reply: Any = None
    error: Exception | None = None
    on_call: Callable[[], None] | None = None
    payloads: list[dict[str, Any]] = field(default_factory=list)

    def __call__(self, payload: dict[str, Any]) -> str:
        self.payloads.append(payload)
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        if isinstance(self.reply, str):
            return self.reply
        return json.dumps(self.reply)

    @property
    def prompts(self) -> list[str]:
        return [payload["inputs"] for payload in self.payloads]

    def generate(self, text: str) -> None:
        """Reply with a single ``generated_text`` object."""
        self.reply = [{"generated_text": text}]


@pytest.fixture()
def transport() -> RecordingTransport:
    """Recording transport with an empty generation by default."""
    return RecordingTransport(reply=[{"generated_text": ""}])


@pytest.fixture()
def client(transport: RecordingTransport) -> HuggingFaceClient:
    """Client configured with a credential and the recording transport."""
    return HuggingFaceClient(
        api_key="test-key",
        host="api-inference.example.test",
        path="/models/example/code-model",
        transport=transport,
    )


@pytest.fixture()
def documents() -> StaticDocumentStore:
    """Document store holding a small Python module."""
    return StaticDocumentStore({DOCUMENT_URI: DOCUMENT_TEXT})
