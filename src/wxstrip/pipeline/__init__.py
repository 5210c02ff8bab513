"""Pipeline helpers for normalizing, merging and rendering hour records."""

from __future__ import annotations

from .accumulate import DataAvailabilityError, StripResult, render_strip
from .merge import build_timeline, merge, merge_into, sorted_hours, timeline_frame
from .normalize import c_to_f, hour_key, mm_to_in

__all__ = [
    "DataAvailabilityError",
    "StripResult",
    "build_timeline",
    "c_to_f",
    "hour_key",
    "merge",
    "merge_into",
    "mm_to_in",
    "render_strip",
    "sorted_hours",
    "timeline_frame",
]
