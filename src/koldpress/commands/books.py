"""Books command implementation."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from koldpress.core.library import Library
from koldpress.models.library import Book


def display_books(books: list[Book], console: Console) -> None:
    """Display books in a table."""
    table = Table(title="Books", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="white")
    table.add_column("Author", style="green")
    table.add_column("Content ID", style="dim")

    for i, book in enumerate(books):
        table.add_row(str(i + 1), book.title, book.author or "Unknown", book.content_id)

    console.print()
    console.print(table)
    console.print()


def execute_list_books(library: Library, console: Console) -> None:
    """Execute the books list command."""
    books = library.list_books()
    if not books:
        console.print("[yellow]No books found in the database.[/]")
        return
    display_books(books, console)


def execute_get_book(library: Library, content_id: str, console: Console) -> bool:
    """Execute the books get command. Returns False if the book is missing."""
    book = library.get_book(content_id)
    if book is None:
        console.print(f"[red]No book found with content ID: {content_id}[/]")
        return False

    console.print()
    console.print(
        Panel(
            f"[bold]{book.title}[/]\n\n"
            f"[dim]Author:[/] {book.author or 'Unknown'}\n"
            f"[dim]Content ID:[/] {book.content_id}",
            title="Book Information",
            border_style="green",
        )
    )
    console.print()
    return True
