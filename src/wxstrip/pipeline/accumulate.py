"""Hour-by-hour accumulation walk that paints the strip."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
import logging
from typing import Mapping, Optional

import numpy as np
import pandas as pd

from wxstrip.config import StripConfig
from wxstrip.models.hour import HourRecord
from wxstrip.pipeline.normalize import hour_key
from wxstrip.render.bitmap import new_bitmap, paint_cell, paint_column, paint_marker
from wxstrip.render.palette import temperature_color

LOGGER = logging.getLogger("wxstrip.pipeline.accumulate")

HOUR = pd.Timedelta(hours=1)
TEMP_ROW = 0
TICK_ROW = 1
PAST = "past"
FUTURE = "future"


class DataAvailabilityError(RuntimeError):
    """Raised when the timeline has no record to start the walk from."""


@dataclass(frozen=True)
class ColumnState:
    hour: pd.Timestamp
    column: int
    branch: str
    total: float
    temp: Optional[float]


@dataclass
class StripResult:
    """A painted strip plus the per-column trace that produced it."""

    bitmap: np.ndarray
    now: pd.Timestamp
    graph_start: pd.Timestamp
    graph_end: pd.Timestamp
    columns: list[ColumnState] = field(default_factory=list)

    def totals(self) -> dict[pd.Timestamp, float]:
        return {state.hour: state.total for state in self.columns}

    def column_for(self, hour: pd.Timestamp) -> Optional[ColumnState]:
        for state in self.columns:
            if state.hour == hour:
                return state
        return None


@dataclass
class Accumulator:
    """
    Running snow total since the last daily reset.

    ``start_depth`` is the lowest observed depth since the reset; ``None``
    until an observation arrives.
    """

    total: float = 0.0
    start_depth: Optional[float] = None

    def reset(self, depth: Optional[float], *, rebase: bool) -> None:
        if self.total > 0:
            self.total = 0.0
        if rebase:
            self.start_depth = depth

    def observe(self, depth: float) -> None:
        """Fold in an observed depth; the total never drops within a period."""

        if self.start_depth is None or depth < self.start_depth:
            self.start_depth = depth
        self.total = max(self.total, depth - self.start_depth)

    def add(self, amount: float) -> None:
        if amount > 0:
            self.total += amount


def _at_hour(day: date, hour: int, tz: str) -> pd.Timestamp:
    naive = pd.Timestamp(day.year, day.month, day.day, hour)
    return naive.tz_localize(tz, ambiguous=True, nonexistent="shift_forward")


def graph_window(now: pd.Timestamp, config: StripConfig) -> tuple[pd.Timestamp, pd.Timestamp]:
    """Return the visible ``[start, end)`` hours for a given ``now``."""

    start = now - pd.Timedelta(hours=config.lead_hours)
    return start, start + pd.Timedelta(hours=config.window_hours)


def walk_anchor(now: pd.Timestamp, graph_start: pd.Timestamp, config: StripConfig) -> pd.Timestamp:
    """
    Return the reset boundary on the day before ``now``, moved earlier a day
    at a time until it is not after ``graph_start``.
    """

    day = now.date() - timedelta(days=1)
    anchor = _at_hour(day, config.reset_hour, config.timezone)
    while anchor > graph_start:
        day -= timedelta(days=1)
        anchor = _at_hour(day, config.reset_hour, config.timezone)
    return anchor


def find_seed(timeline: Mapping[pd.Timestamp, HourRecord], anchor: pd.Timestamp, limit: pd.Timestamp) -> pd.Timestamp:
    """Scan forward from ``anchor`` to the first hour that has a record."""

    curr = anchor
    while curr not in timeline:
        curr += HOUR
        if curr >= limit:
            raise DataAvailabilityError(
                f"No timeline record between {anchor.isoformat()} and {limit.isoformat()}"
            )
    return curr


def snow_dots(amount: float) -> int:
    """Marker size tier for an hourly snowfall in inches."""

    if amount > 0.5:
        return 3
    if amount > 0.25:
        return 2
    if amount > 0:
        return 1
    return 0


def paint_ticks(bitmap: np.ndarray, col: int, hour: pd.Timestamp, config: StripConfig) -> None:
    if hour.hour == 0:
        paint_cell(bitmap, col, TICK_ROW, config.time_color, config)
        paint_cell(bitmap, col, TICK_ROW + 1, config.time_color, config)
    elif hour.hour == 12:
        paint_cell(bitmap, col, TICK_ROW, config.time_color, config)


def _observed_depth(record: Optional[HourRecord]) -> Optional[float]:
    return None if record is None else record.actual_snow


def _bar_row(total: float, config: StripConfig) -> int:
    return max(TICK_ROW, config.grid_height - int(max(total, 0.0)))


def render_strip(
    timeline: Mapping[pd.Timestamp, HourRecord],
    config: StripConfig,
    *,
    now: object | None = None,
) -> StripResult:
    """
    Walk the timeline hour by hour and paint the strip.

    Hours before the visible window only seed the running total. Visible hours
    before ``now`` use observations; ``now`` and later use the forecast.
    """

    current = hour_key(now if now is not None else pd.Timestamp.now(tz=config.timezone), config.timezone)
    graph_start, graph_end = graph_window(current, config)
    anchor = walk_anchor(current, graph_start, config)
    seed = find_seed(timeline, anchor, graph_end)
    LOGGER.debug("Walking %s..%s from seed %s (now %s)", graph_start, graph_end, seed, current)

    acc = Accumulator(start_depth=_observed_depth(timeline.get(seed)))
    bitmap = new_bitmap(config)
    result = StripResult(bitmap=bitmap, now=current, graph_start=graph_start, graph_end=graph_end)

    curr = seed
    while curr < graph_end:
        record = timeline.get(curr)
        if curr < graph_start:
            if curr.hour == config.reset_hour:
                acc.reset(_observed_depth(record), rebase=True)
            elif record is not None and record.actual_snow is not None:
                acc.observe(record.actual_snow)
            curr += HOUR
            continue

        col = (curr - graph_start) // HOUR
        if col >= config.grid_width:
            break
        if curr == current:
            paint_column(bitmap, col, TICK_ROW, config.time_color, config)
        paint_ticks(bitmap, col, curr, config)

        if curr.hour == config.reset_hour:
            # no depth at the reset leaves the baseline to the next observation
            acc.reset(_observed_depth(record), rebase=curr <= current)

        if record is None:
            curr += HOUR
            continue

        marker: tuple[int, tuple[int, int, int]] | None = None
        if curr >= current:
            branch = FUTURE
            temp = record.predicted_temp
            amount = record.predicted_snow or 0.0
            level = record.predicted_snow_level
            if level is None or level < config.snow_line:
                acc.add(amount)
                marker = (snow_dots(amount), config.flake_color)
            elif amount > 0:
                marker = (2, config.rain_color)
            bar_color = config.future_night_color if config.is_night(curr.hour) else config.future_day_color
        else:
            branch = PAST
            temp = record.actual_temp
            if record.actual_precip is not None and record.actual_precip > 0:
                if temp is not None and temp > config.rain_temp:
                    marker = (2, config.rain_color)
                else:
                    marker = (1, config.flake_color)
            if record.actual_snow is not None:
                acc.observe(record.actual_snow)
            bar_color = config.past_night_color if config.is_night(curr.hour) else config.past_day_color

        if temp is not None:
            paint_cell(bitmap, col, TEMP_ROW, temperature_color(temp, config), config)
        bar_row = _bar_row(acc.total, config)
        paint_column(bitmap, col, bar_row, bar_color, config)
        if marker is not None:
            marker_row = min(max(bar_row - 1, TICK_ROW), config.grid_height - 1)
            paint_marker(bitmap, col, marker_row, marker[0], marker[1], config)
        paint_ticks(bitmap, col, curr, config)

        result.columns.append(ColumnState(hour=curr, column=col, branch=branch, total=acc.total, temp=temp))
        curr += HOUR

    return result
