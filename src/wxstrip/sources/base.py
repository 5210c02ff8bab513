"""Error types shared by the source fetchers and parsers."""

from __future__ import annotations


class SourceError(Exception):
    """Raised when a source document cannot be obtained or understood."""


class FetchError(SourceError):
    """Raised when a transport or HTTP status failure prevents a fetch."""


class ParseError(SourceError):
    """Raised when a fetched document is malformed."""
