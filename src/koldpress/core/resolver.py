"""Resolve highlightable content units to their chapter titles.

Kobo does not link a highlight to the table-of-contents entry it sits
under. Chapter-title rows use the id of the unit they point into plus an
anchor suffix, so a unit's chapter is found by prefix search over the
sorted candidate ids. Units with no matching entry inherit the nearest
preceding chapter title of the same book in reading order.
"""

import logging
from bisect import bisect_left
from collections import defaultdict
from collections.abc import Iterable

from koldpress.models.content import ChapterTitleCandidate, ContentItem

log = logging.getLogger(__name__)


class _BookChapters:
    """Chapter-title candidates of one book in reading order."""

    def __init__(self, candidates: list[ChapterTitleCandidate]):
        self.candidates = sorted(
            candidates, key=lambda c: (c.volume_index, c.content_id)
        )
        self.volume_indices = [c.volume_index for c in self.candidates]

    def preceding(self, volume_index: int) -> ChapterTitleCandidate | None:
        """Candidate with the largest volume index strictly below the given one."""
        position = bisect_left(self.volume_indices, volume_index)
        if position == 0:
            return None
        return self.candidates[position - 1]


class ChapterTitleResolver:
    """Index of chapter-title candidates answering per-unit lookups."""

    def __init__(self, candidates: Iterable[ChapterTitleCandidate]):
        self._by_id: dict[str, ChapterTitleCandidate] = {}
        for candidate in candidates:
            self._by_id.setdefault(candidate.content_id, candidate)

        self._sorted_ids = sorted(self._by_id)
        # Longest first, so anchor-prefix lookups prefer the closest entry
        self._id_lengths = sorted({len(i) for i in self._sorted_ids}, reverse=True)

        grouped: dict[str | None, list[ChapterTitleCandidate]] = defaultdict(list)
        for candidate in self._by_id.values():
            grouped[candidate.book_id].append(candidate)
        self._books = {book_id: _BookChapters(c) for book_id, c in grouped.items()}

    def __len__(self) -> int:
        return len(self._sorted_ids)

    def match_prefix(self, content_id: str) -> ChapterTitleCandidate | None:
        """Candidate whose id starts with ``content_id``.

        When several match, the lexicographically smallest id wins.
        """
        if not content_id:
            return None
        position = bisect_left(self._sorted_ids, content_id)
        if position < len(self._sorted_ids):
            candidate_id = self._sorted_ids[position]
            if candidate_id.startswith(content_id):
                return self._by_id[candidate_id]
        return None

    def match_direct(self, content_id: str) -> ChapterTitleCandidate | None:
        """Candidate whose id equals ``content_id`` or is its longest prefix."""
        for length in self._id_lengths:
            if length > len(content_id):
                continue
            candidate = self._by_id.get(content_id[:length])
            if candidate is not None:
                return candidate
        return None

    def match_id(self, content_id: str) -> ChapterTitleCandidate | None:
        """Resolve a raw highlight id that is not a known content unit."""
        return self.match_prefix(content_id) or self.match_direct(content_id)

    def resolve(self, target: ContentItem) -> ChapterTitleCandidate | None:
        """Chapter-title candidate a highlightable unit belongs to.

        Tries a prefix match first, then falls back to the nearest
        preceding chapter title of the same book. Returns None when the
        unit comes before every chapter title of its book.
        """
        candidate = self.match_prefix(target.content_id)
        if candidate is not None:
            return candidate

        chapters = self._books.get(target.book_id)
        if chapters is None:
            return None
        return chapters.preceding(target.volume_index)

    def resolve_all(
        self, targets: Iterable[ContentItem]
    ) -> dict[str, ChapterTitleCandidate | None]:
        """Resolve every target, keyed by content id."""
        resolved = {target.content_id: self.resolve(target) for target in targets}
        unresolved = sum(1 for c in resolved.values() if c is None)
        log.debug(
            "Resolved %d content units against %d chapter titles (%d unresolved)",
            len(resolved),
            len(self),
            unresolved,
        )
        return resolved

    def title_for(self, target: ContentItem) -> str | None:
        """Chapter title of a unit, or None; shorthand for ``resolve(target).title``."""
        candidate = self.resolve(target)
        return candidate.title if candidate else None
