"""
Interactive command loop.

Reads one line at a time, parses it and echoes every expression in the
configured output style. There is no evaluator here: a runtime that
consumes Code would sit where the echo is.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

import typer

from lamp.cli.utils import load_cli_config
from lamp.core.config import LampConfig, OutputStyle
from lamp.core.errors import LampError
from lamp.core.ir.code import Identifier
from lamp.core.lexer import tokenize
from lamp.core.parser import parse
from lamp.core.printer import format_tree, to_source

logger = logging.getLogger(__name__)


class Repl:
    """Line-oriented read/parse/echo loop."""

    def __init__(self, config: LampConfig) -> None:
        self.config = config
        self.exit_code = Identifier(name=config.repl.exit_command)

    def handle_line(self, line: str) -> bool:
        """
        Process one line of input.

        Returns:
            False when the line asks to leave the loop, True otherwise.
        """
        text = line.strip()
        if not text:
            return True

        try:
            tokens = tokenize(text)
            codes = parse(tokens)
        except LampError as e:
            # Malformed input is discarded; the loop keeps going
            typer.echo(f"Error: {e}", err=True)
            return True

        if codes and codes[0] == self.exit_code:
            return False

        if self.config.repl.show_tokens:
            for tok in tokens:
                if not tok.is_trivia:
                    typer.echo(f"  {tok!r}")

        for code in codes:
            if self.config.output.style == OutputStyle.TREE:
                typer.echo(format_tree(code))
            else:
                typer.echo(to_source(code))
        return True

    def run(self, stream: TextIO) -> None:
        """Prompt and handle lines until the exit command or end of input."""
        while True:
            typer.echo(self.config.repl.prompt, nl=False)
            line = stream.readline()
            if line == "":
                typer.echo("")
                logger.debug("End of input, leaving command loop")
                return
            if not self.handle_line(line):
                return


def repl_command(
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to lamp.toml"),
) -> None:
    """
    Start the interactive read/parse/echo loop.

    Type the exit command (default: exit) or send end of input to leave.
    """
    cfg = load_cli_config(config)
    Repl(cfg).run(sys.stdin)
