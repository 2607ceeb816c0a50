"""Fold an ordered highlight stream into books and chapters."""

from collections.abc import Callable, Iterable, Iterator
from typing import TypeVar

from koldpress.models.highlight import ResolvedHighlight
from koldpress.models.library import Chapter

T = TypeVar("T")


def contiguous_runs(
    items: Iterable[T], key: Callable[[T], str]
) -> Iterator[tuple[str, list[T]]]:
    """Yield (key, run) for consecutive items sharing a key.

    Equal keys that are not adjacent produce separate runs.
    """
    current_key: str | None = None
    run: list[T] = []
    for item in items:
        item_key = key(item)
        if run and item_key != current_key:
            yield current_key, run
            run = []
        current_key = item_key
        run.append(item)
    if run:
        yield current_key, run


def _chapter_title(item: ResolvedHighlight) -> str:
    return item.chapter_title or ""


def group_into_chapters(resolved: Iterable[ResolvedHighlight]) -> list[Chapter]:
    """Group consecutive highlights with the same chapter title.

    The input must already be in reading order. A title that comes back
    after another chapter opens a new chapter rather than rejoining the
    earlier one.
    """
    return [
        Chapter(title=title, highlights=[item.highlight for item in run])
        for title, run in contiguous_runs(resolved, _chapter_title)
    ]


def group_by_book(resolved: Iterable[ResolvedHighlight]) -> dict[str, list[Chapter]]:
    """Group a library-wide stream into chapters per book title."""
    books: dict[str, list[Chapter]] = {}
    for title, run in contiguous_runs(resolved, lambda r: r.highlight.book_title):
        books.setdefault(title, []).extend(group_into_chapters(run))
    return books
