"""Unit conversion and hour-key normalization helpers."""

from __future__ import annotations

import pandas as pd

MM_PER_IN = 25.4


def c_to_f(temp_c: float) -> float:
    return temp_c * 9.0 / 5.0 + 32.0


def mm_to_in(mm: float) -> float:
    return mm / MM_PER_IN


def hour_key(value: object, tz: str) -> pd.Timestamp:
    """
    Truncate a timestamp to the whole hour in the local timezone.

    Naive values are taken to already be local time. The minutes are dropped
    from the local wall clock, so zones with half-hour offsets still key on
    :00 and a repeated DST hour keeps its own offset.
    """

    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise ValueError(f"Not a timestamp: {value!r}")
    if ts.tzinfo is None:
        ts = ts.tz_localize(tz, ambiguous=True, nonexistent="shift_forward")
    local = ts.tz_convert(tz)
    return local - pd.Timedelta(
        minutes=local.minute,
        seconds=local.second,
        microseconds=local.microsecond,
        nanoseconds=local.nanosecond,
    )
