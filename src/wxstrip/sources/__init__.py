"""Source fetchers and parsers for telemetry and forecast documents."""

from __future__ import annotations

from .base import FetchError, ParseError, SourceError
from .forecast import parse_forecast
from .http import fetch_document
from .telemetry import parse_telemetry, parse_telemetry_csv, parse_telemetry_html

__all__ = [
    "FetchError",
    "ParseError",
    "SourceError",
    "fetch_document",
    "parse_forecast",
    "parse_telemetry",
    "parse_telemetry_csv",
    "parse_telemetry_html",
]
