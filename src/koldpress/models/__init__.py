"""Data models."""

from koldpress.models.content import (
    ChapterTitleCandidate,
    ContentItem,
    ContentKind,
)
from koldpress.models.highlight import (
    Highlight,
    ResolvedHighlight,
)
from koldpress.models.library import (
    Book,
    Chapter,
)

__all__ = [
    # Content models
    "ContentKind",
    "ContentItem",
    "ChapterTitleCandidate",
    # Highlight models
    "Highlight",
    "ResolvedHighlight",
    # Library models
    "Book",
    "Chapter",
]
