"""Production client for the Hugging Face text-generation Inference API."""

from __future__ import annotations

import json
import os
from typing import Any, Callable, Dict, Optional

from .inference_client import (
    ConfigurationError,
    GenerationParameters,
    InferenceClient,
    InferenceStatusError,
    InferenceTimeoutError,
    InferenceTransportError,
    LoggerLike,
)

__all__ = ["DEFAULT_TIMEOUT", "HuggingFaceClient", "Transport"]


Transport = Callable[[Dict[str, Any]], str]

DEFAULT_TIMEOUT = 5.0


class HuggingFaceClient(InferenceClient):
    """Thin adapter around a Hugging Face text-generation endpoint."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        host: Optional[str] = None,
        path: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        parameters: Optional[GenerationParameters] = None,
        transport: Optional[Transport] = None,
        logger: Optional[LoggerLike] = None,
    ) -> None:
        super().__init__(parameters=parameters, logger=logger)
        self._api_key = api_key if api_key is not None else os.getenv("HUGGINGFACE_API_KEY")
        self._host = host if host is not None else os.getenv("HUGGINGFACE_API_URL")
        self._path = path if path is not None else os.getenv("HUGGINGFACE_API_PATH")
        self._timeout = timeout if timeout > 0 else DEFAULT_TIMEOUT
        self._transport = transport or self._http_transport

    @property
    def configured(self) -> bool:
        """Return True when an API credential is available."""
        return bool(self._api_key)

    @property
    def timeout(self) -> float:
        """Return the request timeout in seconds."""
        return self._timeout

    @property
    def url(self) -> str:
        """Return the endpoint URL built from the configured host and path."""
        host = (self._host or "").strip().rstrip("/")
        path = (self._path or "").strip()
        if path and not path.startswith("/"):
            path = f"/{path}"
        if host.startswith(("http://", "https://")):
            return f"{host}{path}"
        return f"https://{host}{path}"

    def _preflight(self) -> None:
        if not self._api_key:
            raise ConfigurationError("Hugging Face API key is missing; set HUGGINGFACE_API_KEY.")

    def _raw_invoke(self, payload: Dict[str, Any]) -> str:
        """Send the request over the configured transport."""
        try:
            return self._transport(payload)
        except (InferenceTransportError, InferenceTimeoutError):
            raise
        except TimeoutError as error:
            raise InferenceTimeoutError("Inference request timed out.") from error
        except Exception as error:
            raise InferenceTransportError(f"Transport rejected the request: {error}") from error

    def _http_transport(self, payload: Dict[str, Any]) -> str:
        """Default HTTPS transport with a hard timeout and no retry."""
        import http.client
        import urllib.error
        import urllib.parse
        import urllib.request

        if not urllib.parse.urlsplit(self.url).netloc:
            raise InferenceTransportError("No inference host configured; set HUGGINGFACE_API_URL.")

        self._logger.debug("Inference request to %s: %s", self.url, json.dumps(payload))

        data = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(
            self.url,
            data=data,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            method="POST",
        )

        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                raw = response.read()
                status = getattr(response, "status", 200)
        except TimeoutError as error:
            raise InferenceTimeoutError(f"No response within {self._timeout:g}s.") from error
        except urllib.error.HTTPError as error:
            message = error.read().decode("utf-8", errors="ignore")
            raise InferenceStatusError(error.code, message) from error
        except urllib.error.URLError as error:
            if isinstance(error.reason, TimeoutError):
                raise InferenceTimeoutError(f"No response within {self._timeout:g}s.") from error
            raise InferenceTransportError(f"Failed to reach inference endpoint: {error.reason}") from error
        except (ValueError, OSError, http.client.HTTPException) as error:
            raise InferenceTransportError(f"Malformed inference request: {error}") from error

        text = raw.decode("utf-8", errors="replace")
        if not 200 <= status < 300:
            raise InferenceStatusError(status, text)
        return text
