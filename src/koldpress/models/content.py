"""Data models for rows of the Kobo content table."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class ContentKind(str, Enum):
    """Kind of a content row, derived from its ContentType code."""

    BOOK = "book"
    HIGHLIGHTABLE_UNIT = "highlightable_unit"
    CHAPTER_TITLE = "chapter_title"
    OTHER = "other"

    @classmethod
    def from_content_type(cls, content_type: int | str | None) -> "ContentKind":
        # ContentType is a TEXT column in Kobo databases
        try:
            code = int(content_type)
        except (TypeError, ValueError):
            return cls.OTHER
        return CONTENT_TYPE_KINDS.get(code, cls.OTHER)


# Kobo ContentType codes
CONTENT_TYPE_KINDS = {
    6: ContentKind.BOOK,
    9: ContentKind.HIGHLIGHTABLE_UNIT,
    899: ContentKind.CHAPTER_TITLE,
}


class ContentItem(BaseModel):
    """Single addressable unit of reading content."""

    model_config = ConfigDict(frozen=True)

    content_id: str
    kind: ContentKind
    title: str | None = None
    book_title: str | None = None  # None for top-level books
    volume_index: int = 0
    book_id: str | None = None

    @field_validator("volume_index", mode="before")
    @classmethod
    def _volume_index_null_is_zero(cls, value):
        return 0 if value is None else value


class ChapterTitleCandidate(BaseModel):
    """Table-of-contents entry a highlight may belong to."""

    model_config = ConfigDict(frozen=True)

    content_id: str
    title: str
    volume_index: int
    book_id: str | None = None

    @classmethod
    def from_content_item(cls, item: ContentItem) -> "ChapterTitleCandidate":
        return cls(
            content_id=item.content_id,
            title=item.title or "",
            volume_index=item.volume_index,
            book_id=item.book_id,
        )
