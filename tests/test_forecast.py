import json
import logging

import pandas as pd
import pytest

from wxstrip.pipeline.merge import build_timeline
from wxstrip.sources.base import ParseError
from wxstrip.sources.forecast import parse_forecast

TZ = "America/Los_Angeles"
START = "2024-01-10T20:00:00+00:00"


def _doc(snowfall=None, snow_level=None, temperature=None) -> bytes:
    properties = {}
    if snowfall is not None:
        properties["snowfallAmount"] = {"uom": "wmoUnit:mm", "values": snowfall}
    if snow_level is not None:
        properties["snowLevel"] = {"uom": "wmoUnit:m", "values": snow_level}
    if temperature is not None:
        properties["temperature"] = {"uom": "wmoUnit:degC", "values": temperature}
    return json.dumps({"properties": properties}).encode("utf-8")


def _hours(start: str, count: int) -> list[pd.Timestamp]:
    first = pd.Timestamp(start).tz_convert(TZ)
    return [first + pd.Timedelta(hours=h) for h in range(count)]


def test_snowfall_is_spread_evenly_over_the_interval():
    records = parse_forecast(_doc(snowfall=[{"validTime": f"{START}/PT4H", "value": 4.0}]), TZ)
    assert [r.hour for r in records] == _hours(START, 4)
    for record in records:
        assert record.predicted_snow == pytest.approx((4.0 / 25.4) / 4)
        assert record.predicted_snow == pytest.approx(0.0394, abs=1e-4)
        assert record.predicted_temp is None
        assert record.predicted_snow_level is None


def test_snow_level_and_temperature_are_replicated():
    records = parse_forecast(
        _doc(
            snow_level=[{"validTime": f"{START}/PT2H", "value": 1000.0}],
            temperature=[{"validTime": f"{START}/PT3H", "value": 0.0}],
        ),
        TZ,
    )
    levels = [r.predicted_snow_level for r in records if r.predicted_snow_level is not None]
    temps = [r.predicted_temp for r in records if r.predicted_temp is not None]
    assert levels == [1000.0, 1000.0]
    assert temps == pytest.approx([32.0, 32.0, 32.0])


def test_series_merge_into_one_record_per_hour():
    records = parse_forecast(
        _doc(
            snowfall=[{"validTime": f"{START}/PT2H", "value": 25.4}],
            snow_level=[{"validTime": f"{START}/PT2H", "value": 900.0}],
            temperature=[{"validTime": f"{START}/PT1H", "value": -5.0}],
        ),
        TZ,
    )
    timeline = build_timeline(records)
    assert len(timeline) == 2
    first = timeline[pd.Timestamp("2024-01-10 12:00", tz=TZ)]
    assert first.predicted_snow == pytest.approx(0.5)
    assert first.predicted_snow_level == 900.0
    assert first.predicted_temp == pytest.approx(23.0)
    second = timeline[pd.Timestamp("2024-01-10 13:00", tz=TZ)]
    assert second.predicted_temp is None


def test_unmatched_duration_is_skipped_with_a_warning(caplog):
    caplog.set_level(logging.WARNING, logger="wxstrip.sources.forecast")
    records = parse_forecast(
        _doc(
            snowfall=[
                {"validTime": f"{START}/P1D", "value": 10.0},
                {"validTime": "2024-01-11T20:00:00+00:00/PT1H", "value": 2.54},
            ]
        ),
        TZ,
    )
    assert len(records) == 1
    assert records[0].predicted_snow == pytest.approx(0.1)
    assert "P1D" in caplog.text


def test_null_values_and_missing_series_are_ignored():
    records = parse_forecast(_doc(temperature=[{"validTime": f"{START}/PT1H", "value": None}]), TZ)
    assert records == []


def test_malformed_documents_raise_parse_errors():
    with pytest.raises(ParseError):
        parse_forecast(b"not json", TZ)
    with pytest.raises(ParseError, match="properties"):
        parse_forecast(json.dumps({"type": "Feature"}), TZ)
    with pytest.raises(ParseError, match="start/duration"):
        parse_forecast(_doc(snowfall=[{"validTime": START, "value": 1.0}]), TZ)
    with pytest.raises(ParseError):
        parse_forecast(_doc(snowfall=[{"validTime": "someday/PT1H", "value": 1.0}]), TZ)
