"""Parser for gridded weather-service forecasts."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Iterator, Mapping

import pandas as pd

from wxstrip.models.hour import HourRecord
from wxstrip.pipeline.normalize import c_to_f, hour_key, mm_to_in
from wxstrip.sources.base import ParseError

LOGGER = logging.getLogger("wxstrip.sources.forecast")

DURATION_RE = re.compile(r"PT(\d+)H")

SNOWFALL_SERIES = "snowfallAmount"
SNOW_LEVEL_SERIES = "snowLevel"
TEMPERATURE_SERIES = "temperature"


def _iter_intervals(
    properties: Mapping[str, Any],
    series: str,
    tz: str,
) -> Iterator[tuple[pd.Timestamp, int, float]]:
    """
    Yield ``(start hour, hour count, value)`` for each usable interval.
    """

    block = properties.get(series)
    if block is None:
        LOGGER.debug("Forecast has no %s series", series)
        return
    values = block.get("values") if isinstance(block, Mapping) else None
    if not isinstance(values, list):
        raise ParseError(f"Forecast series {series} has no values list")
    for entry in values:
        if not isinstance(entry, Mapping):
            raise ParseError(f"Forecast series {series} holds a non-object entry")
        valid_time = entry.get("validTime")
        if not isinstance(valid_time, str) or "/" not in valid_time:
            raise ParseError(f"Forecast {series} validTime {valid_time!r} is not start/duration")
        start_text, duration = valid_time.split("/", 1)
        try:
            start = hour_key(start_text, tz)
        except ValueError as exc:
            raise ParseError(f"Unparseable forecast start {start_text!r}") from exc

        match = DURATION_RE.search(duration)
        if match is None:
            LOGGER.warning("Unable to find range for %s in %s; skipping", duration, series)
            continue
        hours = int(match.group(1))
        if hours <= 0:
            LOGGER.warning("Empty range %s in %s; skipping", duration, series)
            continue

        value = entry.get("value")
        if value is None:
            LOGGER.debug("Null %s value at %s", series, start_text)
            continue
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise ParseError(f"Forecast {series} value {value!r} is not numeric") from exc
        yield start, hours, number


def _spread(
    properties: Mapping[str, Any],
    series: str,
    tz: str,
    build: Callable[[pd.Timestamp, float], HourRecord],
    *,
    split: bool,
) -> list[HourRecord]:
    records: list[HourRecord] = []
    for start, hours, value in _iter_intervals(properties, series, tz):
        per_hour = value / hours if split else value
        for offset in range(hours):
            records.append(build(start + pd.Timedelta(hours=offset), per_hour))
    return records


def parse_forecast(data: bytes | str, tz: str) -> list[HourRecord]:
    """
    Turn a gridpoint forecast document into partial hour records.

    Snowfall totals are converted to inches and divided evenly over the hours
    of their interval. Snow level (metres) and temperature (converted to °F)
    hold their value for every hour of the interval. Every record sets only
    the field of the series it came from.
    """

    try:
        doc = json.loads(data)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Forecast document is not valid JSON: {exc}") from exc
    properties = doc.get("properties") if isinstance(doc, Mapping) else None
    if not isinstance(properties, Mapping):
        raise ParseError("Forecast document has no properties block")

    snow = _spread(
        properties,
        SNOWFALL_SERIES,
        tz,
        lambda hour, v: HourRecord(hour=hour, predicted_snow=mm_to_in(v)),
        split=True,
    )
    levels = _spread(
        properties,
        SNOW_LEVEL_SERIES,
        tz,
        lambda hour, v: HourRecord(hour=hour, predicted_snow_level=v),
        split=False,
    )
    temps = _spread(
        properties,
        TEMPERATURE_SERIES,
        tz,
        lambda hour, v: HourRecord(hour=hour, predicted_temp=c_to_f(v)),
        split=False,
    )
    LOGGER.info(
        "Parsed forecast: %d snowfall, %d snow-level, %d temperature hours",
        len(snow),
        len(levels),
        len(temps),
    )
    return snow + levels + temps
