"""Main CLI application."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional

import typer
from jinja2 import TemplateError
from rich.console import Console
from rich.logging import RichHandler

from koldpress.commands.books import execute_get_book, execute_list_books
from koldpress.commands.extract import execute_extract
from koldpress.config import Config, ConfigError, load_config
from koldpress.core.library import Library
from koldpress.core.store import StoreError

app = typer.Typer(
    name="koldpress",
    help="Export highlights from a Kobo e-reader database.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

books_app = typer.Typer(help="Inspect books in the library", no_args_is_help=True)
app.add_typer(books_app, name="books")

highlights_app = typer.Typer(help="Export highlights", no_args_is_help=True)
app.add_typer(highlights_app, name="highlights")


@dataclass
class AppState:
    """Options shared by every subcommand."""

    config_path: Path | None = None
    db_path: Path | None = None


def init_logging(verbosity: int) -> None:
    """Send log records to stderr; -v for info, -vv for debug."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config(ctx: typer.Context, **overrides) -> Config:
    state: AppState = ctx.obj
    try:
        config = load_config(state.config_path, db_path=state.db_path, **overrides)
        config.validate_db_path()
    except ConfigError as e:
        err_console.print(f"[red]Invalid config: {e}[/]")
        raise typer.Exit(1)
    return config


def _open_library(config: Config) -> Library:
    try:
        return Library(config.validate_db_path())
    except StoreError as e:
        err_console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    db_path: Annotated[
        Optional[Path],
        typer.Option(
            "--db-path",
            "-d",
            help="Path to the Kobo sqlite database",
        ),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to the config file (default: ~/.config/koldpress/config.yaml)",
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase log verbosity (-v info, -vv debug)",
        ),
    ] = 0,
) -> None:
    """Export highlights from a Kobo e-reader database."""
    init_logging(verbose)
    ctx.obj = AppState(config_path=config_path, db_path=db_path)


@books_app.command("list")
def list_books(ctx: typer.Context) -> None:
    """List all books in the library."""
    config = _load_config(ctx)
    with _open_library(config) as library:
        try:
            execute_list_books(library, console)
        except StoreError as e:
            err_console.print(f"[red]Error: {e}[/]")
            raise typer.Exit(1)


@books_app.command("get")
def get_book(
    ctx: typer.Context,
    content_id: Annotated[
        str,
        typer.Argument(help="Content ID of the book"),
    ],
) -> None:
    """Show a single book."""
    config = _load_config(ctx)
    with _open_library(config) as library:
        try:
            found = execute_get_book(library, content_id, console)
        except StoreError as e:
            err_console.print(f"[red]Error: {e}[/]")
            raise typer.Exit(1)
    if not found:
        raise typer.Exit(1)


@highlights_app.command("extract")
def extract(
    ctx: typer.Context,
    extract_all: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Export highlights of every book",
        ),
    ] = False,
    book_id: Annotated[
        Optional[str],
        typer.Option(
            "--book",
            "-b",
            help="Content ID of the book to export (default: choose interactively)",
        ),
    ] = None,
    output_format: Annotated[
        Optional[str],
        typer.Option(
            "--format",
            "-f",
            help="Output format: json or markdown",
        ),
    ] = None,
    template: Annotated[
        Optional[Path],
        typer.Option(
            "--template",
            "-t",
            help="Jinja2 template for markdown output",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output file (default: stdout)",
        ),
    ] = None,
) -> None:
    """Export highlights grouped by chapter."""
    if output_format is not None and output_format not in ("json", "markdown"):
        err_console.print(
            f"[red]Invalid format: {output_format}. Use json or markdown.[/]"
        )
        raise typer.Exit(1)

    if extract_all and book_id is not None:
        err_console.print("[red]Error: --all and --book cannot be combined[/]")
        raise typer.Exit(1)

    config = _load_config(
        ctx, output_format=output_format, template_path=template
    )
    with _open_library(config) as library:
        try:
            written = execute_extract(
                library,
                console=err_console,
                extract_all=extract_all,
                book_id=book_id,
                output_format=config.output_format,
                template_path=config.template_path,
                output=output,
            )
        except (StoreError, TemplateError) as e:
            err_console.print(f"[red]Error: {e}[/]")
            raise typer.Exit(1)
    if not written:
        raise typer.Exit(1)
