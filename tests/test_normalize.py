import pandas as pd
import pytest

from wxstrip.pipeline.normalize import c_to_f, hour_key, mm_to_in

TZ = "America/Los_Angeles"


def test_unit_conversions():
    assert c_to_f(0.0) == pytest.approx(32.0)
    assert c_to_f(-40.0) == pytest.approx(-40.0)
    assert c_to_f(100.0) == pytest.approx(212.0)
    assert mm_to_in(25.4) == pytest.approx(1.0)
    assert mm_to_in(4.0) == pytest.approx(0.15748, rel=1e-4)


def test_hour_key_converts_utc_and_truncates():
    key = hour_key("2024-01-10T20:45:12+00:00", TZ)
    assert key == pd.Timestamp("2024-01-10 12:00", tz=TZ)
    assert key.hour == 12
    assert key.minute == 0


def test_hour_key_treats_naive_values_as_local():
    key = hour_key("2024-07-04 09:30", TZ)
    assert key == pd.Timestamp("2024-07-04T16:00:00Z")


def test_hour_key_rejects_garbage():
    with pytest.raises(ValueError):
        hour_key("not a time", TZ)


def test_hour_key_truncates_half_hour_offset_zones():
    key = hour_key("2024-01-10T10:45:00+05:30", "Asia/Kolkata")
    assert key.minute == 0
    assert key == pd.Timestamp("2024-01-10 10:00", tz="Asia/Kolkata")
    assert hour_key("2024-01-10T05:15:00Z", "Asia/Kolkata") == key


def test_hour_key_keeps_repeated_dst_hour_apart():
    first = hour_key("2024-11-03T08:30:00Z", TZ)
    second = hour_key("2024-11-03T09:30:00Z", TZ)
    assert first == pd.Timestamp("2024-11-03T08:00:00Z")
    assert second == pd.Timestamp("2024-11-03T09:00:00Z")
    assert first.hour == second.hour == 1
