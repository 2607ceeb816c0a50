"""Export Kobo highlights grouped by book and chapter."""

__version__ = "0.1.0"
