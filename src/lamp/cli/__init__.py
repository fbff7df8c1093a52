"""
LAMP CLI Package.

- reader.py: tokens / parse commands
- repl.py: interactive command loop
- utils.py: Shared utilities
"""

from __future__ import annotations

import typer

from lamp.cli.reader import parse_command, tokens_command
from lamp.cli.repl import repl_command
from lamp.cli.utils import version_callback

app = typer.Typer(
    help="""LAMP – reader for a homoiconic expression language

Commands:
  • tokens: show the token stream for some source text
  • parse: show the Code tree for some source text
  • repl: read, parse and echo lines interactively
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """LAMP CLI main callback for global options."""
    pass


app.command(name="tokens")(tokens_command)
app.command(name="parse")(parse_command)
app.command(name="repl")(repl_command)


def main() -> None:
    """Console script entry point."""
    app()


__all__ = [
    "app",
    "main",
    "version_callback",
]
