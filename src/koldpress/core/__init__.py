"""Highlight resolution and grouping over a Kobo database."""

from koldpress.core.library import Library
from koldpress.core.store import QueryFailure, StoreError, StoreUnavailable

__all__ = ["Library", "StoreError", "StoreUnavailable", "QueryFailure"]
