"""Timeline record types."""

from __future__ import annotations

from .hour import VALUE_FIELDS, HourRecord

__all__ = ["HourRecord", "VALUE_FIELDS"]
