"""Select exportable highlights and attach their chapter titles."""

import logging

from koldpress.core.resolver import ChapterTitleResolver
from koldpress.core.store import KoboStore
from koldpress.models.content import ChapterTitleCandidate, ContentKind
from koldpress.models.highlight import Highlight, ResolvedHighlight

log = logging.getLogger(__name__)


def resolve_highlights(
    highlights: list[Highlight],
    resolver: ChapterTitleResolver,
    unit_chapters: dict[str, ChapterTitleCandidate | None],
) -> list[ResolvedHighlight]:
    """Drop hidden or empty highlights and pair the rest with a chapter.

    A highlight in a known content unit takes that unit's resolution;
    any other id is matched against the chapter titles directly.
    """
    resolved = []
    for highlight in highlights:
        if not highlight.is_exportable:
            continue
        if highlight.content_id in unit_chapters:
            candidate = unit_chapters[highlight.content_id]
        else:
            candidate = resolver.match_id(highlight.content_id)
        resolved.append(
            ResolvedHighlight(
                highlight=highlight,
                chapter_title=candidate.title if candidate else None,
                chapter_volume_index=candidate.volume_index if candidate else None,
                chapter_content_id=candidate.content_id if candidate else None,
            )
        )
    return resolved


def sort_key(item: ResolvedHighlight, by_book: bool = False) -> tuple:
    """Canonical order: chapter reading order, unresolved last, then progress.

    Chapters sharing a volume index are kept apart by their content id.
    """
    chapter_index = item.chapter_volume_index
    key = (
        chapter_index is None,
        chapter_index or 0,
        item.chapter_content_id or "",
        item.highlight.chapter_progress,
    )
    if by_book:
        return (item.highlight.book_title, item.highlight.volume_id) + key
    return key


class HighlightQuery:
    """Produce the ordered stream of resolved highlights."""

    def __init__(self, store: KoboStore):
        self.store = store

    def fetch(self, book_id: str | None = None) -> list[ResolvedHighlight]:
        """Resolved highlights for one book, or the whole library."""
        items = self.store.fetch_content_items(book_id)
        candidates = [
            ChapterTitleCandidate.from_content_item(item)
            for item in items
            if item.kind == ContentKind.CHAPTER_TITLE
        ]
        units = [i for i in items if i.kind == ContentKind.HIGHLIGHTABLE_UNIT]

        resolver = ChapterTitleResolver(candidates)
        unit_chapters = resolver.resolve_all(units)

        highlights = self.store.fetch_highlights(book_id)
        resolved = resolve_highlights(highlights, resolver, unit_chapters)
        log.info(
            "Kept %d of %d highlights%s",
            len(resolved),
            len(highlights),
            f" for book {book_id}" if book_id else "",
        )

        resolved.sort(key=lambda item: sort_key(item, by_book=book_id is None))
        return resolved
