"""Parsers for past snow-telemetry observations."""

from __future__ import annotations

from io import StringIO
import json
import logging
from typing import Any, Callable, Mapping, Optional, Sequence

from bs4 import BeautifulSoup
import pandas as pd

from wxstrip.models.hour import HourRecord
from wxstrip.pipeline.normalize import c_to_f, hour_key, mm_to_in
from wxstrip.sources.base import ParseError

LOGGER = logging.getLogger("wxstrip.sources.telemetry")

TIME_KEY = "date_time"
SNOW_DEPTH_KEY = "snow_depth_set_1"
AIR_TEMP_KEY = "air_temp_set_1"
PRECIP_KEY = "precip_accum_one_hour_set_1"

# Station page table layout; data rows start after three header rows.
HTML_FIRST_ROW = 3
HTML_DATE_COL = 0
HTML_HOUR_COL = 1
HTML_TEMP_COL = 2
HTML_DEPTH_COL = 7

# Observations are stamped at the end of the hour they measure.
OBSERVATION_SHIFT = pd.Timedelta(hours=1)


def _load_json(data: bytes | str) -> Any:
    try:
        return json.loads(data)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Telemetry document is not valid JSON: {exc}") from exc


def _converter(units: Mapping[str, str], variable: str) -> Callable[[float], float]:
    unit = str(units.get(variable, "")).strip().lower()
    if unit in {"celsius", "c", "degc"}:
        return c_to_f
    if unit in {"millimeters", "mm"}:
        return mm_to_in
    return float


def _series(
    observations: Mapping[str, Any],
    key: str,
    length: int,
    convert: Callable[[float], float],
) -> list[Optional[float]]:
    raw = observations.get(key)
    if raw is None:
        return [None] * length
    if not isinstance(raw, Sequence) or isinstance(raw, (str, bytes)):
        raise ParseError(f"Telemetry series {key} is not a list")
    if len(raw) != length:
        raise ParseError(f"Telemetry series {key} has {len(raw)} values for {length} timestamps")
    values: list[Optional[float]] = []
    for item in raw:
        if item is None:
            values.append(None)
            continue
        try:
            values.append(convert(float(item)))
        except (TypeError, ValueError) as exc:
            raise ParseError(f"Telemetry series {key} holds a non-numeric value {item!r}") from exc
    return values


def parse_telemetry(data: bytes | str, tz: str) -> list[HourRecord]:
    """
    Turn a station time-series document into partial hour records.

    Each sample is attributed to the hour that just elapsed, so a sample
    stamped 10:00 produces the 09:00 record.
    """

    doc = _load_json(data)
    if not isinstance(doc, Mapping):
        raise ParseError("Telemetry document is not a JSON object")
    stations = doc.get("STATION") or []
    if not isinstance(stations, list) or not stations:
        raise ParseError("Telemetry document contains no stations")
    if len(stations) > 1:
        LOGGER.debug("Telemetry document has %d stations; using the first", len(stations))
    observations = stations[0].get("OBSERVATIONS") if isinstance(stations[0], Mapping) else None
    if not isinstance(observations, Mapping):
        raise ParseError("Telemetry station has no OBSERVATIONS block")
    times = observations.get(TIME_KEY)
    if not isinstance(times, Sequence) or isinstance(times, (str, bytes)):
        raise ParseError(f"Telemetry observations have no {TIME_KEY} list")

    units = doc.get("UNITS") or {}
    count = len(times)
    depths = _series(observations, SNOW_DEPTH_KEY, count, _converter(units, "snow_depth"))
    temps = _series(observations, AIR_TEMP_KEY, count, _converter(units, "air_temp"))
    precips = _series(observations, PRECIP_KEY, count, _converter(units, "precip_accum_one_hour"))

    records: list[HourRecord] = []
    for idx, stamp in enumerate(times):
        try:
            hour = hour_key(stamp, tz) - OBSERVATION_SHIFT
        except (TypeError, ValueError) as exc:
            raise ParseError(f"Unparseable telemetry timestamp {stamp!r}") from exc
        records.append(
            HourRecord(
                hour=hour,
                actual_snow=depths[idx],
                actual_temp=temps[idx],
                actual_precip=precips[idx],
            )
        )
    LOGGER.info("Parsed %d telemetry samples", len(records))
    return records


def parse_telemetry_csv(data: bytes | str, tz: str, *, depth_column: int = 4) -> list[HourRecord]:
    """
    Parse a data-portal CSV export of hourly snow depth.

    The first column holds a local ``YYYY-MM-DD HH:MM`` time. Rows are keyed
    at that hour as-is; blank or unreadable depths count as 0.
    """

    text = data.decode("utf-8") if isinstance(data, bytes) else data
    try:
        frame = pd.read_csv(StringIO(text), dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise ParseError(f"Telemetry CSV is malformed: {exc}") from exc
    if frame.shape[1] <= depth_column:
        raise ParseError(f"Telemetry CSV has {frame.shape[1]} columns; depth column is {depth_column}")

    records: list[HourRecord] = []
    for row in frame.itertuples(index=False):
        stamp = str(row[0]).strip()
        try:
            hour = hour_key(pd.to_datetime(stamp, format="%Y-%m-%d %H:%M"), tz)
        except (TypeError, ValueError) as exc:
            raise ParseError(f"Unparseable telemetry time {stamp!r}") from exc
        raw_depth = str(row[depth_column]).strip()
        depth = 0.0
        if raw_depth:
            try:
                depth = float(raw_depth)
            except ValueError:
                LOGGER.warning("Error parsing depth %r at %s, ignoring", raw_depth, stamp)
        records.append(HourRecord(hour=hour, actual_snow=depth))
    return records


def _cell_number(cells: Sequence[str], idx: int) -> Optional[float]:
    if idx >= len(cells) or not cells[idx]:
        return None
    try:
        return float(cells[idx])
    except ValueError:
        return None


def parse_telemetry_html(data: bytes | str, tz: str, *, now: object | None = None) -> list[HourRecord]:
    """
    Scrape the hourly table from a station data page.

    Rows carry a ``M/D`` date, an ``HHMM`` hour, the air temperature and the
    total snow depth. The page omits the year, so it comes from ``now``; a
    December row read in January belongs to the previous year.
    """

    current = hour_key(now if now is not None else pd.Timestamp.now(tz=tz), tz)
    soup = BeautifulSoup(data, "html.parser")
    rows = soup.select("table tr")
    if len(rows) <= HTML_FIRST_ROW:
        raise ParseError("Station page has no telemetry table rows")

    records: list[HourRecord] = []
    for tr in rows[HTML_FIRST_ROW:]:
        cells = [td.get_text(strip=True) for td in tr.find_all("td")]
        if len(cells) <= HTML_HOUR_COL:
            continue
        parts = cells[HTML_DATE_COL].split("/")
        if len(parts) != 2:
            continue
        try:
            month, day = int(parts[0]), int(parts[1])
            hhmm = int(cells[HTML_HOUR_COL])
        except ValueError:
            LOGGER.warning("Skipping station row with date %r hour %r", cells[HTML_DATE_COL], cells[HTML_HOUR_COL])
            continue
        year = current.year - 1 if current.month == 1 and month == 12 else current.year
        try:
            stamp = pd.Timestamp(year, month, day) + pd.Timedelta(hours=hhmm // 100)
        except ValueError:
            LOGGER.warning("Skipping station row with invalid date %s/%s", month, day)
            continue
        records.append(
            HourRecord(
                hour=hour_key(stamp, tz),
                actual_snow=_cell_number(cells, HTML_DEPTH_COL),
                actual_temp=_cell_number(cells, HTML_TEMP_COL),
            )
        )
    LOGGER.info("Parsed %d station table rows", len(records))
    return records
