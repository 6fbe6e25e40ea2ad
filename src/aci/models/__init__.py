"""Convenience exports for the text-generation client implementations."""

from .huggingface import DEFAULT_TIMEOUT, HuggingFaceClient
from .inference_client import (
    ConfigurationError,
    GenerationParameters,
    InferenceClient,
    InferenceError,
    InferenceRequest,
    InferenceStatusError,
    InferenceTimeoutError,
    InferenceTransportError,
)

__all__ = [
    "ConfigurationError",
    "DEFAULT_TIMEOUT",
    "GenerationParameters",
    "HuggingFaceClient",
    "InferenceClient",
    "InferenceError",
    "InferenceRequest",
    "InferenceStatusError",
    "InferenceTimeoutError",
    "InferenceTransportError",
]
