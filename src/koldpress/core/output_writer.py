"""Render grouped highlights as JSON or a Markdown template."""

import sys
from pathlib import Path
from typing import Literal

from jinja2 import Environment, FileSystemLoader, PackageLoader, select_autoescape
from pydantic import TypeAdapter

from koldpress.models.library import Chapter

OutputFormat = Literal["json", "markdown"]

DEFAULT_TEMPLATE = "highlights.md.j2"

_chapters_adapter = TypeAdapter(list[Chapter])
_library_adapter = TypeAdapter(dict[str, list[Chapter]])


class OutputWriter:
    """Write grouped highlights to a file or stdout."""

    def __init__(
        self,
        output_format: OutputFormat = "json",
        template_path: Path | None = None,
    ):
        """Initialize output writer.

        Args:
            output_format: "json" or "markdown"
            template_path: Jinja2 template used instead of the bundled one
                (markdown only)
        """
        self.output_format = output_format
        self.template_path = template_path

    def _environment(self) -> Environment:
        if self.template_path is not None:
            loader = FileSystemLoader(str(self.template_path.parent))
        else:
            loader = PackageLoader("koldpress", "templates")
        return Environment(
            loader=loader,
            autoescape=select_autoescape(enabled_extensions=("html",)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def _render_markdown(self, books: dict[str, list[Chapter]]) -> str:
        env = self._environment()
        name = self.template_path.name if self.template_path else DEFAULT_TEMPLATE
        return env.get_template(name).render(books=books)

    def render_chapters(self, chapters: list[Chapter], book_title: str = "") -> str:
        """Render the chapters of a single book."""
        if self.output_format == "json":
            return _chapters_adapter.dump_json(chapters, indent=2).decode()
        return self._render_markdown({book_title: chapters})

    def render_library(self, books: dict[str, list[Chapter]]) -> str:
        """Render chapters of every book, keyed by book title."""
        if self.output_format == "json":
            return _library_adapter.dump_json(books, indent=2).decode()
        return self._render_markdown(books)

    def write(self, text: str, output: Path | None = None) -> Path | None:
        """Write rendered text to ``output``, or stdout when it is None."""
        if output is None:
            sys.stdout.write(text)
            if not text.endswith("\n"):
                sys.stdout.write("\n")
            return None

        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        return output
