"""
LAMP CLI Utilities.

Shared helpers used across CLI modules.
"""

from __future__ import annotations

import logging
import platform
import sys
from pathlib import Path

import typer

from lamp._version import get_version
from lamp.core.config import LampConfig, load_config, resolve_log_level
from lamp.core.errors import ConfigError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        python_version = platform.python_version()
        python_impl = platform.python_implementation()

        typer.echo(f"LAMP version {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(f"  Python:        {python_impl} {python_version}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


def load_cli_config(path: Path | None) -> LampConfig:
    """Load configuration and set up logging, exiting with code 1 on bad config."""
    try:
        config = load_config(path)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    logging.basicConfig(
        level=getattr(logging, resolve_log_level(config)),
        format=LOG_FORMAT,
    )
    return config


def read_source(file: Path | None, expr: str | None) -> str:
    """
    Resolve the text a command operates on.

    Precedence: ``--expr`` text, then FILE ("-" reads stdin), then stdin.
    Exits with code 1 if the file cannot be read.
    """
    if expr is not None:
        return expr
    if file is None or str(file) == "-":
        return sys.stdin.read()
    try:
        return file.read_text(encoding="utf-8")
    except OSError as e:
        typer.echo(f"Error: cannot read {file}: {e}", err=True)
        raise typer.Exit(code=1)
