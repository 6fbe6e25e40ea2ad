"""Client base class shared by all text-generation integrations."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError
from pydantic.type_adapter import TypeAdapter

__all__ = [
    "ConfigurationError",
    "GeneratedText",
    "GenerationParameters",
    "InferenceClient",
    "InferenceError",
    "InferenceRequest",
    "InferenceStatusError",
    "InferenceTimeoutError",
    "InferenceTransportError",
    "extract_generated_text",
]

LOGGER = logging.getLogger(__name__)

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


class InferenceError(RuntimeError):
    """Base error raised for inference client failures."""


class ConfigurationError(InferenceError):
    """Raised when the client cannot be used at all, e.g. no API credential."""


class InferenceTimeoutError(InferenceError):
    """Raised when the upstream call did not complete within the timeout."""


class InferenceTransportError(InferenceError):
    """Raised by transports when the request could not be delivered."""


class InferenceStatusError(InferenceTransportError):
    """Raised by transports when the upstream answered with a non-2xx status."""

    def __init__(self, status: int, body: str = "") -> None:
        super().__init__(f"HTTP {status}")
        self.status = status
        self.body = body


@dataclass(slots=True)
class GeneratedText:
    """Minimal shape of one upstream generation."""

    generated_text: str


_GENERATION_ADAPTER: TypeAdapter[GeneratedText] = TypeAdapter(GeneratedText)


def extract_generated_text(body: Any) -> Optional[str]:
    """Return ``generated_text`` from an object or from the first array element."""
    candidate = body
    if isinstance(body, list):
        if not body:
            return None
        candidate = body[0]
    try:
        return _GENERATION_ADAPTER.validate_python(candidate).generated_text
    except ValidationError:
        return None


@dataclass(slots=True)
class GenerationParameters:
    """Sampling parameters forwarded with every request."""

    temperature: float = 0.3
    top_p: float = 0.95
    do_sample: bool = True
    return_full_text: bool = False


@dataclass(slots=True)
class InferenceRequest:
    """Single text-generation request."""

    prompt: str
    max_tokens: int = 100
    parameters: GenerationParameters = field(default_factory=GenerationParameters)

    def to_payload(self) -> Dict[str, Any]:
        """Render the JSON body expected by the text-generation endpoint."""
        return {
            "inputs": self.prompt,
            "parameters": {
                "max_new_tokens": self.max_tokens,
                "return_full_text": self.parameters.return_full_text,
                "do_sample": self.parameters.do_sample,
                "temperature": self.parameters.temperature,
                "top_p": self.parameters.top_p,
            },
        }


class InferenceClient:
    """Single-attempt client that normalises upstream replies to text.

    ``infer`` returns the generated text, or ``""`` when the upstream answered
    badly or could not be reached. Only :class:`ConfigurationError` and
    :class:`InferenceTimeoutError` escape to the caller.
    """

    def __init__(
        self,
        *,
        parameters: Optional[GenerationParameters] = None,
        logger: Optional[LoggerLike] = None,
    ) -> None:
        self._parameters = parameters or GenerationParameters()
        self._logger = logger or LOGGER

    @property
    def parameters(self) -> GenerationParameters:
        """Return the sampling parameters used for every request."""
        return self._parameters

    def infer(self, prompt: str, max_tokens: int = 100, *, logger: Optional[LoggerLike] = None) -> str:
        """Run one generation and return its text, or ``""`` when unavailable."""
        log = logger or self._logger
        self._preflight()

        request = InferenceRequest(prompt=prompt, max_tokens=max_tokens, parameters=self._parameters)
        payload = request.to_payload()
        try:
            raw = self._raw_invoke(payload)
        except InferenceTimeoutError:
            log.error("Inference request timed out")
            raise
        except InferenceStatusError as error:
            log.error("Inference request failed with status %s", error.status)
            if error.body:
                log.error("Response: %s", error.body)
            return ""
        except InferenceTransportError as error:
            log.error("Inference request could not be delivered: %s", error)
            return ""

        return self._extract_text(raw, log)

    def _preflight(self) -> None:
        """Validate configuration before any network attempt. Subclasses may override."""

    def _raw_invoke(self, payload: Dict[str, Any]) -> str:
        """Perform the transport call. Subclasses must implement."""
        raise NotImplementedError("Subclasses must implement _raw_invoke().")

    @staticmethod
    def _extract_text(raw: str, log: LoggerLike) -> str:
        """Decode the response body and pull out the generated text."""
        try:
            body = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as error:
            log.error("Error parsing inference response: %s", error)
            return ""

        text = extract_generated_text(body)
        if text is None:
            log.warning("Unexpected inference response format: %.200s", raw)
            return ""
        return text
