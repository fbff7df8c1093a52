"""
Reader CLI commands.

Commands that show what the lexer and parser make of some source text.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from lamp.cli.utils import load_cli_config, read_source
from lamp.core.config import OutputStyle
from lamp.core.errors import LampError
from lamp.core.lexer import tokenize
from lamp.core.parser import parse, parse_program
from lamp.core.printer import format_tree, to_source

console = Console()


def _fail(error: LampError) -> typer.Exit:
    kind = getattr(error, "kind", None)
    label = f"{type(error).__name__} [{kind}]" if kind else type(error).__name__
    typer.echo(f"Error: {label}: {error}", err=True)
    return typer.Exit(code=1)


def tokens_command(
    file: Path | None = typer.Argument(None, help="Source file ('-' or omitted reads stdin)"),
    expr: str | None = typer.Option(None, "--expr", "-e", help="Source text to tokenize"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to lamp.toml"),
) -> None:
    """
    Tokenize source text and print one row per token.
    """
    load_cli_config(config)
    source = read_source(file, expr)

    try:
        tokens = tokenize(source)
    except LampError as e:
        raise _fail(e)

    table = Table(title=f"{len(tokens)} tokens")
    table.add_column("Kind")
    table.add_column("Start", justify="right")
    table.add_column("Length", justify="right")
    table.add_column("Value")
    for tok in tokens:
        value = "" if tok.value is None else repr(tok.value)
        table.add_row(
            Text(tok.kind.name),
            Text(str(tok.start)),
            Text(str(tok.length)),
            Text(value),
        )
    console.print(table)


def parse_command(
    file: Path | None = typer.Argument(None, help="Source file ('-' or omitted reads stdin)"),
    expr: str | None = typer.Option(None, "--expr", "-e", help="Source text to parse"),
    program: bool = typer.Option(False, "--program", help="Wrap the expressions as [pgm ...]"),
    style: OutputStyle | None = typer.Option(
        None, "--style", "-s", help="Output style: 'canonical' or 'tree'"
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to lamp.toml"),
) -> None:
    """
    Parse source text and print each top-level expression.
    """
    cfg = load_cli_config(config)
    source = read_source(file, expr)
    out_style = style or cfg.output.style

    try:
        tokens = tokenize(source)
        codes = [parse_program(tokens)] if program else parse(tokens)
    except LampError as e:
        raise _fail(e)

    for code in codes:
        if out_style == OutputStyle.TREE:
            typer.echo(format_tree(code))
        else:
            typer.echo(to_source(code))
