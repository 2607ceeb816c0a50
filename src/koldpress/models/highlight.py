"""Data models for highlights read from the Bookmark table."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Highlight(BaseModel):
    """A user-saved excerpt tied to a highlightable content unit."""

    model_config = ConfigDict(frozen=True)

    content_id: str  # the unit the highlight was made in, not unique
    text: str | None = None
    hidden: bool = Field(default=False, exclude=True)
    volume_id: str = Field(default="", exclude=True)
    chapter_progress: float = 0.0
    book_title: str = Field(default="", exclude=True)

    @field_validator("hidden", mode="before")
    @classmethod
    def _hidden_null_is_false(cls, value):
        return False if value is None else value

    @field_validator("chapter_progress", mode="before")
    @classmethod
    def _progress_null_is_zero(cls, value):
        return 0.0 if value is None else value

    @property
    def is_exportable(self) -> bool:
        """Visible highlights with non-blank text."""
        return not self.hidden and bool(self.text and self.text.strip())


class ResolvedHighlight(BaseModel):
    """Highlight paired with the chapter it was resolved to."""

    model_config = ConfigDict(frozen=True)

    highlight: Highlight
    chapter_title: str | None = None
    chapter_volume_index: int | None = None
    chapter_content_id: str | None = None
