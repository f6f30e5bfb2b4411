"""Command line interface for jrni."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from journal import commands
from journal.config import JournalConfig
from journal.errors import JournalError

console = Console()
app = typer.Typer(help="jrni - a plain-text journal indexed by tag and id", no_args_is_help=True)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _config(ctx: typer.Context) -> JournalConfig:
    return ctx.obj


def _fail(exc: Exception) -> None:
    console.print(f"[red]{escape(str(exc))}[/red]", soft_wrap=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(
        None, "--path", "-p", metavar="DIR", help="Path to the journal contents directory"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Resolve the journal directory from --path, $JRNI_PATH or ~/sink/journal."""
    _setup_logging(verbose)
    ctx.obj = JournalConfig.from_env(path)


@app.command("n")
def new(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Filename of the entry"),
    tags: Optional[str] = typer.Option(None, "--tags", "-t", help="Tags to apply"),
    stdin: bool = typer.Option(False, "--stdin", help="Read body from stdin"),
) -> None:
    """Create a new entry."""
    body = sys.stdin.read() if stdin else ""
    try:
        path = commands.new_entry(_config(ctx), name, tags, body)
    except (JournalError, OSError) as exc:
        _fail(exc)
    typer.echo(str(path))


@app.command("t")
def tags(
    ctx: typer.Context,
    tag: Optional[str] = typer.Argument(
        None, metavar="TAG", help="If specified, list the entries with this tag"
    ),
) -> None:
    """Get a listing of tags with associated entry count."""
    if tag is not None:
        for path in commands.entries_with_tag(_config(ctx), tag):
            typer.echo(str(path))
        return

    counts = commands.tag_counts(_config(ctx))
    if not counts:
        console.print("[yellow]No tags found.[/yellow]")
        return

    table = Table(title="Tags")
    table.add_column("Tag")
    table.add_column("Entries", justify="right")
    for tag, count in counts:
        table.add_row(escape(tag), str(count))
    console.print(table)


@app.command("id")
def ids(
    ctx: typer.Context,
    entry_id: Optional[str] = typer.Argument(
        None, metavar="ID", help="If specified, edit the file with this id"
    ),
) -> None:
    """Query for ids."""
    config = _config(ctx)
    if entry_id is None:
        for value in commands.entry_ids(config):
            typer.echo(value)
        return

    try:
        path = commands.edit_by_id(config, entry_id)
    except OSError as exc:
        _fail(exc)
    if path is None:
        console.print(f"Couldn't find entry by id '{entry_id}'", soft_wrap=True, markup=False)
        return
    typer.echo(str(path))


if __name__ == "__main__":
    app()
