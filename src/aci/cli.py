"""CLI commands for running and probing the code-intelligence server."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Optional

import typer

from .config import ConfigError, Settings, load_settings
from .documents import CursorPosition, StaticDocumentStore
from .handlers import RequestKind
from .handlers.base import PositionRequest
from .handlers.resolve import CompletionItem
from .models import ConfigurationError
from .router import RequestRouter

APP_HELP = "AI-assisted code intelligence language server."
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

app = typer.Typer(help=APP_HELP)


def configure_logging(level: str) -> None:
    """Send log records to stderr; stdout carries the protocol stream."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.basicConfig(level=resolved, format=LOG_FORMAT, stream=sys.stderr, force=True)


def _load(config_path: Optional[Path]) -> Settings:
    """Resolve settings, turning configuration problems into a CLI exit."""
    try:
        return load_settings(config_path)
    except ConfigError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=1) from error


def _json_safe(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, list):
        return [_json_safe(item) for item in value]
    return value


@app.command()
def serve(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Optional YAML configuration file."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level."),
) -> None:
    """Start the language server on stdio."""
    settings = _load(config)
    configure_logging(log_level or settings.log_level)

    from .server import start

    start(settings)


@app.command()
def probe(
    kind: RequestKind = typer.Argument(..., help="Request kind to run."),
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file to read."),
    line: int = typer.Option(0, "--line", "-l", help="Zero-based cursor line."),
    character: int = typer.Option(0, "--character", "-c", help="Zero-based cursor column."),
    label: str = typer.Option("", "--label", help="Completion label for completion_resolve."),
    config: Optional[Path] = typer.Option(None, "--config", help="Optional YAML configuration file."),
) -> None:
    """Run one request against a file on disk and print the JSON result."""
    settings = _load(config)
    configure_logging(settings.log_level)

    uri = path.resolve().as_uri()
    documents = StaticDocumentStore({uri: path.read_text(encoding="utf-8")})
    router = RequestRouter(client=settings.build_client(), documents=documents, settings=settings)

    if kind is RequestKind.COMPLETION_RESOLVE:
        if not label:
            raise typer.BadParameter("--label is required for completion_resolve")
        payload: Any = CompletionItem(label=label)
    else:
        payload = PositionRequest(uri=uri, position=CursorPosition(line=line, character=character))

    try:
        result = router.dispatch(kind, payload)
    except ConfigurationError as error:
        typer.echo(f"Configuration error: {error}", err=True)
        raise typer.Exit(code=1) from error

    typer.echo(json.dumps(_json_safe(result), indent=2))


@app.command("show-config")
def show_config(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Optional YAML configuration file."),
) -> None:
    """Print the resolved settings with the credential redacted."""
    settings = _load(config)
    typer.echo(json.dumps(settings.redacted(), indent=2))


if __name__ == "__main__":
    app()
