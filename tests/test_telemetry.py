import json

import pandas as pd
import pytest

from wxstrip.sources.base import ParseError
from wxstrip.sources.telemetry import parse_telemetry, parse_telemetry_csv, parse_telemetry_html

TZ = "America/Los_Angeles"


def _doc(times, depths=None, temps=None, precips=None, units=None) -> bytes:
    observations = {"date_time": times}
    if depths is not None:
        observations["snow_depth_set_1"] = depths
    if temps is not None:
        observations["air_temp_set_1"] = temps
    if precips is not None:
        observations["precip_accum_one_hour_set_1"] = precips
    payload = {"STATION": [{"STID": "TEST", "OBSERVATIONS": observations}]}
    if units is not None:
        payload["UNITS"] = units
    return json.dumps(payload).encode("utf-8")


def test_samples_are_attributed_to_the_previous_hour():
    records = parse_telemetry(
        _doc(["2024-01-10T17:00:00Z", "2024-01-10T18:00:00Z"], [10.0, 10.5], [27.0, 28.5], [0.0, 0.1]),
        TZ,
    )
    assert [r.hour for r in records] == [
        pd.Timestamp("2024-01-10 08:00", tz=TZ),
        pd.Timestamp("2024-01-10 09:00", tz=TZ),
    ]
    assert records[1].actual_snow == 10.5
    assert records[1].actual_temp == 28.5
    assert records[1].actual_precip == 0.1
    assert records[0].predicted_snow is None


def test_null_and_missing_series_stay_unset():
    records = parse_telemetry(_doc(["2024-01-10T17:00:00Z"], depths=[None], temps=[30.0]), TZ)
    assert records[0].actual_snow is None
    assert records[0].actual_temp == 30.0
    assert records[0].actual_precip is None


def test_metric_units_are_converted():
    records = parse_telemetry(
        _doc(
            ["2024-01-10T17:00:00Z"],
            [254.0],
            [0.0],
            [2.54],
            units={"snow_depth": "Millimeters", "air_temp": "Celsius", "precip_accum_one_hour": "Millimeters"},
        ),
        TZ,
    )
    assert records[0].actual_snow == pytest.approx(10.0)
    assert records[0].actual_temp == pytest.approx(32.0)
    assert records[0].actual_precip == pytest.approx(0.1)


def test_zero_stations_is_a_parse_error():
    with pytest.raises(ParseError, match="no stations"):
        parse_telemetry(json.dumps({"STATION": []}), TZ)


def test_length_mismatch_is_a_parse_error():
    with pytest.raises(ParseError, match="snow_depth_set_1"):
        parse_telemetry(_doc(["2024-01-10T17:00:00Z", "2024-01-10T18:00:00Z"], [10.0]), TZ)


def test_bad_timestamp_and_bad_json_are_parse_errors():
    with pytest.raises(ParseError, match="timestamp"):
        parse_telemetry(_doc(["yesterday-ish"], [10.0]), TZ)
    with pytest.raises(ParseError):
        parse_telemetry(b"<html>", TZ)


def test_csv_export_parses_local_times_and_tolerates_bad_depths(caplog):
    csv_text = (
        "Date/Time,Temp,RH,Wind,Depth\n"
        "2018-11-23 13:00,30,90,5,45\n"
        "2018-11-23 14:00,30,90,5,\n"
        "2018-11-23 15:00,30,90,5,n/a\n"
    )
    records = parse_telemetry_csv(csv_text.encode("utf-8"), TZ)
    assert [r.hour.hour for r in records] == [13, 14, 15]
    assert records[0].hour == pd.Timestamp("2018-11-23 13:00", tz=TZ)
    assert [r.actual_snow for r in records] == [45.0, 0.0, 0.0]
    assert "n/a" in caplog.text


def test_csv_with_bad_time_is_a_parse_error():
    with pytest.raises(ParseError):
        parse_telemetry_csv("Date,a,b,c,d\n11/23 1pm,1,2,3,4\n", TZ)


STATION_PAGE = """
<html><body>
<table>
  <tr><th colspan="8">Stevens Pass - Schmidt Haus</th></tr>
  <tr><th>Date</th><th>Hour</th><th>Temp</th><th>RH</th><th>Wind</th><th>Gust</th><th>24h</th><th>Total</th></tr>
  <tr><th></th><th>PST</th><th>F</th><th>%</th><th>mph</th><th>mph</th><th>in</th><th>in</th></tr>
  <tr><td>12/31</td><td>2300</td><td>24</td><td>95</td><td>3</td><td>8</td><td>4</td><td>61</td></tr>
  <tr><td>1/1</td><td>0000</td><td>23</td><td>96</td><td>2</td><td>6</td><td>5</td><td>62</td></tr>
  <tr><td>1/1</td><td>0100</td><td> </td><td>96</td><td>2</td><td>6</td><td>5</td><td>--</td></tr>
  <tr><td colspan="8">Data provided by the avalanche center</td></tr>
</table>
</body></html>
"""


def test_station_page_rows_parse_from_the_fourth_row():
    records = parse_telemetry_html(STATION_PAGE, TZ, now="2024-01-02T08:00:00-08:00")
    assert [r.hour for r in records] == [
        pd.Timestamp("2023-12-31 23:00", tz=TZ),
        pd.Timestamp("2024-01-01 00:00", tz=TZ),
        pd.Timestamp("2024-01-01 01:00", tz=TZ),
    ]
    assert records[0].actual_snow == 61.0
    assert records[0].actual_temp == 24.0
    assert records[1].actual_snow == 62.0
    assert records[2].actual_snow is None
    assert records[2].actual_temp is None
    assert records[0].actual_precip is None


def test_station_page_without_table_is_a_parse_error():
    with pytest.raises(ParseError):
        parse_telemetry_html(b"<html><body><p>maintenance</p></body></html>", TZ, now="2024-01-02T08:00:00-08:00")
