"""
World Explorer exception hierarchy.

Provider chains convert ``TransportError`` and ``SchemaError`` into
"try the next provider"; they never reach callers of the fetcher.
``NotFoundError`` is only raised on request (``ResolvedMatch.require()``),
resolution itself returns a typed result.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class WorldExplorerError(Exception):
    """Base exception for all World Explorer errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.message = message
        self.details = details or {}
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self) -> str:
        base = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            base = f"{base} ({details_str})"
        if self.original_error is not None:
            base = f"{base} | Caused by: {type(self.original_error).__name__}: {self.original_error}"
        return base


class TransportError(WorldExplorerError):
    """Network failure, timeout, or non-success HTTP status from an upstream source."""


class SchemaError(WorldExplorerError):
    """Upstream response did not have the expected shape."""


class NotFoundError(WorldExplorerError):
    """A boundary feature could not be matched to any registry record."""


class PartialDataError(WorldExplorerError):
    """
    Some optional fields were unavailable.

    Kept for completeness of the taxonomy: the enrichment pipeline omits
    missing optional fields instead of raising this.
    """
