"""Highlights extract command implementation."""

import logging
from pathlib import Path

import questionary
from questionary import Style
from rich.console import Console

from koldpress.core.library import Library
from koldpress.core.output_writer import OutputFormat, OutputWriter
from koldpress.models.library import Book

log = logging.getLogger(__name__)

# Custom questionary style
SELECT_STYLE = Style([
    ("qmark", "fg:cyan bold"),
    ("question", "bold"),
    ("answer", "fg:cyan bold"),
    ("pointer", "fg:cyan bold"),
    ("highlighted", "fg:cyan bold"),
    ("instruction", "fg:gray"),
])


QUIT = "quit"


def select_book(books: list[Book]) -> Book | None:
    """Interactively pick a book. Returns None if the user quits."""
    choices = [questionary.Choice(title=str(book), value=book) for book in books]
    # questionary substitutes the title for a None value
    choices.append(questionary.Choice(title="[Quit]", value=QUIT))

    result = questionary.select(
        "Select a book:",
        choices=choices,
        style=SELECT_STYLE,
        instruction="(Use arrow keys, Enter to select)",
    ).ask()

    return result if isinstance(result, Book) else None


def execute_extract(
    library: Library,
    console: Console,
    extract_all: bool = False,
    book_id: str | None = None,
    output_format: OutputFormat = "json",
    template_path: Path | None = None,
    output: Path | None = None,
) -> bool:
    """Execute the highlights extract command.

    Returns False when the requested book does not exist or the library
    is empty. Quitting the book selection writes nothing and returns True.
    """
    writer = OutputWriter(output_format, template_path)

    if extract_all:
        books = library.get_highlights()
        text = writer.render_library(books)
    else:
        if book_id is not None:
            book = library.get_book(book_id)
            if book is None:
                console.print(f"[red]No book found with content ID: {book_id}[/]")
                return False
        else:
            books_available = library.list_books()
            if not books_available:
                console.print("[yellow]No books found in the database.[/]")
                return False
            book = select_book(books_available)
            if book is None:
                return True

        log.info("Retrieving highlights for %s", book)
        chapters = library.get_highlights_for_book(book)
        text = writer.render_chapters(chapters, book_title=book.title)

    path = writer.write(text, output)
    if path is not None:
        console.print(f"[green]Wrote highlights to {path}[/]")
    return True
