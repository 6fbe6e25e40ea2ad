"""Settings resolution from an optional YAML file and the process environment."""

from __future__ import annotations

import copy
import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import DEFAULT_TIMEOUT, GenerationParameters, HuggingFaceClient
from .models.inference_client import LoggerLike
from .prompts import DEFAULT_LANGUAGE

__all__ = [
    "ApiSettings",
    "ConfigError",
    "DEFAULT_CONFIG_TEMPLATE",
    "MaxTokens",
    "Settings",
    "load_config",
    "load_settings",
]

DEFAULT_CONFIG_TEMPLATE: Dict[str, Any] = {
    "api": {
        "host": "",
        "path": "",
        "api_key": "",
        "timeout": DEFAULT_TIMEOUT,
    },
    "generation": {
        "temperature": 0.3,
        "top_p": 0.95,
        "do_sample": True,
    },
    "max_tokens": {
        "completion": 150,
        "completion_resolve": 100,
        "signature_help": 100,
        "hover": 100,
    },
    "language": DEFAULT_LANGUAGE,
    "logging": {
        "level": "INFO",
    },
}

ENV_HOST = "HUGGINGFACE_API_URL"
ENV_PATH = "HUGGINGFACE_API_PATH"
ENV_KEY = "HUGGINGFACE_API_KEY"
ENV_TIMEOUT = "ACI_TIMEOUT"
ENV_LOG_LEVEL = "ACI_LOG_LEVEL"


class ConfigError(ValueError):
    """Raised when the configuration file cannot be used."""


@dataclass(slots=True)
class ApiSettings:
    """Where and how to reach the text-generation endpoint."""

    host: str = ""
    path: str = ""
    api_key: str = field(default="", repr=False)
    timeout: float = DEFAULT_TIMEOUT


@dataclass(slots=True)
class MaxTokens:
    """Generation budget per request kind."""

    completion: int = 150
    completion_resolve: int = 100
    signature_help: int = 100
    hover: int = 100


@dataclass(slots=True)
class Settings:
    """Resolved runtime configuration."""

    api: ApiSettings = field(default_factory=ApiSettings)
    generation: GenerationParameters = field(default_factory=GenerationParameters)
    max_tokens: MaxTokens = field(default_factory=MaxTokens)
    language: str = DEFAULT_LANGUAGE
    log_level: str = "INFO"

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "Settings":
        """Build settings from a configuration mapping shaped like the template."""
        api_cfg = _section(config, "api")
        generation_cfg = _section(config, "generation")
        tokens_cfg = _section(config, "max_tokens")
        logging_cfg = _section(config, "logging")

        defaults = MaxTokens()
        max_tokens = MaxTokens(
            completion=_positive_int(tokens_cfg.get("completion"), defaults.completion),
            completion_resolve=_positive_int(tokens_cfg.get("completion_resolve"), defaults.completion_resolve),
            signature_help=_positive_int(tokens_cfg.get("signature_help"), defaults.signature_help),
            hover=_positive_int(tokens_cfg.get("hover"), defaults.hover),
        )
        generation = GenerationParameters(
            temperature=_non_negative_float(generation_cfg.get("temperature"), 0.3),
            top_p=_non_negative_float(generation_cfg.get("top_p"), 0.95),
            do_sample=_bool(generation_cfg.get("do_sample"), True),
        )
        api = ApiSettings(
            host=_string(api_cfg.get("host")),
            path=_string(api_cfg.get("path")),
            api_key=_string(api_cfg.get("api_key")),
            timeout=_positive_float(api_cfg.get("timeout"), DEFAULT_TIMEOUT),
        )
        language = _string(config.get("language")) or DEFAULT_LANGUAGE
        log_level = (_string(logging_cfg.get("level")) or "INFO").upper()
        return cls(
            api=api,
            generation=generation,
            max_tokens=max_tokens,
            language=language,
            log_level=log_level,
        )

    def build_client(self, *, logger: Optional[LoggerLike] = None) -> HuggingFaceClient:
        """Construct the inference client described by these settings."""
        return HuggingFaceClient(
            api_key=self.api.api_key,
            host=self.api.host,
            path=self.api.path,
            timeout=self.api.timeout,
            parameters=self.generation,
            logger=logger,
        )

    def redacted(self) -> Dict[str, Any]:
        """Return the settings as a mapping with the credential masked."""
        payload = asdict(self)
        payload["api"]["api_key"] = "***" if self.api.api_key else ""
        return payload


def load_config(config_path: Path) -> Dict[str, Any]:
    """Load YAML configuration from disk and return it as a dictionary."""
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ConfigError(f"Failed to parse config: {error}") from error

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping at the top level.")
    return data


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Merge the template, an optional YAML file and the environment into settings."""
    env = os.environ if environ is None else environ
    config = copy.deepcopy(DEFAULT_CONFIG_TEMPLATE)
    if config_path is not None:
        _merge(config, load_config(config_path))
        for name in ("api", "generation", "max_tokens", "logging"):
            # An empty ``name:`` key loads as None.
            if config.get(name) is None:
                config[name] = {}
            elif not isinstance(config[name], dict):
                raise ConfigError(f"'{name}' must be a mapping in {config_path}")

    api_cfg = config["api"]
    if env.get(ENV_HOST):
        api_cfg["host"] = env[ENV_HOST]
    if env.get(ENV_PATH):
        api_cfg["path"] = env[ENV_PATH]
    if env.get(ENV_KEY):
        api_cfg["api_key"] = env[ENV_KEY]
    if env.get(ENV_TIMEOUT):
        api_cfg["timeout"] = env[ENV_TIMEOUT]
    if env.get(ENV_LOG_LEVEL):
        config["logging"]["level"] = env[ENV_LOG_LEVEL]

    return Settings.from_config(config)


def _merge(target: Dict[str, Any], overrides: Mapping[str, Any]) -> None:
    for key, value in overrides.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge(current, value)
        else:
            target[key] = value


def _section(config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = config.get(name)
    return value if isinstance(value, Mapping) else {}


def _string(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _positive_int(value: Any, default: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _positive_float(value: Any, default: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _non_negative_float(value: Any, default: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 0 else default


def _bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "on"}:
            return True
        if lowered in {"false", "0", "no", "off"}:
            return False
    return default
