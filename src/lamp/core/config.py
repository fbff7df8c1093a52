"""
Configuration for the LAMP command-line tools.

Settings come from an optional ``lamp.toml``:

    [repl]
    prompt = "> "
    exit_command = "exit"
    show_tokens = false

    [output]
    style = "canonical"   # or "tree"

    [logging]
    level = "WARNING"

The LAMP_LOG_LEVEL environment variable overrides ``[logging] level``.

Usage:
    from lamp.core.config import load_config

    config = load_config()              # ./lamp.toml if present, else defaults
    config = load_config(Path("x.toml"))
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .lexer import is_identifier_char

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "lamp.toml"

# Environment variable name
LOG_LEVEL_VAR = "LAMP_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class OutputStyle(StrEnum):
    """How parsed Code is written out."""

    CANONICAL = "canonical"
    TREE = "tree"


@dataclass
class ReplConfig:
    """Command loop configuration."""

    prompt: str = "> "
    exit_command: str = "exit"  # Identifier that ends the loop
    show_tokens: bool = False


@dataclass
class OutputConfig:
    """Output configuration."""

    style: OutputStyle = OutputStyle.CANONICAL


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"


@dataclass
class LampConfig:
    """Complete configuration, defaults filled in."""

    repl: ReplConfig = field(default_factory=ReplConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    source: Path | None = None  # File the settings were read from


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table")
    return section


def _parse_level(value: Any, origin: str) -> str:
    level = str(value).upper().strip()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"Unknown log level {value!r} in {origin}. Valid values: {', '.join(_LOG_LEVELS)}")
    return level


def _typed(
    section: dict[str, Any], name: str, key: str, default: Any, expected: type, origin: str
) -> Any:
    value = section.get(key, default)
    if not isinstance(value, expected):
        raise ConfigError(
            f"[{name}] {key} must be a {expected.__name__} in {origin}, got {value!r}"
        )
    return value


def _parse_exit_command(value: str, origin: str) -> str:
    # Must read back as a single Identifier
    if not value or not value[0].isalpha() or not all(is_identifier_char(c) for c in value[1:]):
        raise ConfigError(f"[repl] exit_command {value!r} in {origin} is not an identifier")
    return value


def parse_config(data: dict[str, Any], source: Path | None = None) -> LampConfig:
    """Build a LampConfig from already-decoded TOML data."""
    origin = str(source) if source else "configuration"
    repl = _section(data, "repl")
    output = _section(data, "output")
    log = _section(data, "logging")

    style_value = output.get("style", OutputStyle.CANONICAL.value)
    try:
        style = OutputStyle(style_value)
    except ValueError:
        raise ConfigError(
            f"Unknown output style {style_value!r} in {origin}. Valid values: canonical, tree"
        ) from None

    return LampConfig(
        repl=ReplConfig(
            prompt=_typed(repl, "repl", "prompt", "> ", str, origin),
            exit_command=_parse_exit_command(
                _typed(repl, "repl", "exit_command", "exit", str, origin), origin
            ),
            show_tokens=_typed(repl, "repl", "show_tokens", False, bool, origin),
        ),
        output=OutputConfig(style=style),
        logging=LoggingConfig(level=_parse_level(log.get("level", "WARNING"), origin)),
        source=source,
    )


def load_config(path: Path | None = None) -> LampConfig:
    """
    Load configuration from ``path``, or from ./lamp.toml when it exists.

    Args:
        path: Explicit config file. Must exist when given.

    Returns:
        LampConfig with defaults for anything not set.

    Raises:
        ConfigError: If the file is missing (explicit path), is not valid
            TOML, or holds invalid values.
    """
    if path is None:
        candidate = Path.cwd() / CONFIG_FILENAME
        if not candidate.exists():
            logger.debug("No %s found, using defaults", CONFIG_FILENAME)
            return LampConfig()
        path = candidate

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    logger.debug("Loaded configuration from %s", path)
    return parse_config(data, source=path)


def resolve_log_level(config: LampConfig) -> str:
    """
    Determine the effective log level.

    Resolution order:
    1. LAMP_LOG_LEVEL, when set to a known level
    2. ``[logging] level`` from the configuration
    """
    env_value = os.environ.get(LOG_LEVEL_VAR, "").upper().strip()
    if env_value == "":
        return config.logging.level
    if env_value in _LOG_LEVELS:
        return env_value

    logger.warning(
        "Unknown %s value '%s'. Valid values: %s. Using %s.",
        LOG_LEVEL_VAR,
        env_value,
        ", ".join(_LOG_LEVELS),
        config.logging.level,
    )
    return config.logging.level
