"""Example runner that renders a strip from small synthetic documents."""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from wxstrip.config import StripConfig
from wxstrip.pipeline import hour_key, timeline_frame
from wxstrip.runner import StripRunner


def _synthetic_docs(now: pd.Timestamp) -> tuple[bytes, bytes]:
    utc_now = now.tz_convert("UTC")
    stamps = [utc_now - pd.Timedelta(hours=h) for h in range(12, 0, -1)]
    telemetry = {
        "STATION": [
            {
                "OBSERVATIONS": {
                    "date_time": [ts.strftime("%Y-%m-%dT%H:%M:%SZ") for ts in stamps],
                    "snow_depth_set_1": [40.0 + 0.25 * i for i in range(len(stamps))],
                    "air_temp_set_1": [24.0 + 0.5 * i for i in range(len(stamps))],
                    "precip_accum_one_hour_set_1": [0.05] * len(stamps),
                }
            }
        ]
    }
    start = utc_now.strftime("%Y-%m-%dT%H:00:00+00:00")
    forecast = {
        "properties": {
            "snowfallAmount": {"values": [{"validTime": f"{start}/PT12H", "value": 76.2}]},
            "snowLevel": {"values": [{"validTime": f"{start}/PT24H", "value": 900.0}]},
            "temperature": {"values": [{"validTime": f"{start}/PT24H", "value": -2.0}]},
        }
    }
    return json.dumps(telemetry).encode(), json.dumps(forecast).encode()


def run_example() -> None:
    """
    Render a strip without network access and print the merged timeline head.
    """

    config = StripConfig()
    now = hour_key(pd.Timestamp.now(tz="UTC"), config.timezone)
    telemetry, forecast = _synthetic_docs(now)
    runner = StripRunner(config, now=now, telemetry_doc=telemetry, forecast_doc=forecast)
    path = runner.write(Path("strip_output/example_strip.png"))
    print(timeline_frame(runner.timeline).head())
    print(f"Wrote {path}")


if __name__ == "__main__":
    run_example()
