"""Merge utilities for combining partial hour records into one timeline."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, MutableMapping

import pandas as pd

from wxstrip.models.hour import VALUE_FIELDS, HourRecord

Timeline = MutableMapping[pd.Timestamp, HourRecord]


def merge(existing: HourRecord, partial: HourRecord) -> HourRecord:
    """
    Overlay the fields ``partial`` sets onto ``existing``.

    A field left as ``None`` in ``partial`` never clears a value already
    present, so the telemetry and forecast passes can land in either order.
    """

    updates = {name: value for name, value in partial.values().items() if value is not None}
    if not updates:
        return existing
    return replace(existing, **updates)


def merge_into(timeline: Timeline, partial: HourRecord) -> HourRecord:
    """Insert ``partial`` at its hour or merge it with the record already there."""

    present = timeline.get(partial.hour)
    merged = partial if present is None else merge(present, partial)
    timeline[partial.hour] = merged
    return merged


def build_timeline(*batches: Iterable[HourRecord]) -> dict[pd.Timestamp, HourRecord]:
    """
    Fold parser outputs into a fresh timeline, earlier batches first.
    """

    timeline: dict[pd.Timestamp, HourRecord] = {}
    for batch in batches:
        for record in batch:
            merge_into(timeline, record)
    return timeline


def sorted_hours(timeline: Timeline) -> list[pd.Timestamp]:
    return sorted(timeline)


def timeline_frame(timeline: Timeline) -> pd.DataFrame:
    """
    Return the timeline as a chronologically sorted DataFrame.
    """

    columns = ["hour", *VALUE_FIELDS]
    if not timeline:
        return pd.DataFrame(columns=columns)
    rows = [{"hour": hour, **timeline[hour].values()} for hour in sorted_hours(timeline)]
    return pd.DataFrame(rows, columns=columns)
