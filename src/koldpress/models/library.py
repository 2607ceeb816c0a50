"""Data models exposed to the export layer."""

from pydantic import BaseModel, Field

from koldpress.models.highlight import Highlight


class Book(BaseModel):
    """Top-level importable e-book."""

    title: str
    author: str | None = None
    content_id: str

    def __str__(self) -> str:
        return f"{self.title} - {self.author or 'Unknown'}"


class Chapter(BaseModel):
    """Run of highlights sharing a chapter title.

    An empty title means the chapter could not be resolved.
    """

    title: str = ""
    highlights: list[Highlight] = Field(default_factory=list)
    children: list["Chapter"] = Field(default_factory=list)
