"""Shared configuration helpers for wxstrip."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Mapping

import requests

from wxstrip.render.palette import RGB, build_temp_colors

REPO_ROOT = Path(__file__).resolve().parents[2]

LOGGER = logging.getLogger("wxstrip.config")

SYNOPTIC_TIMESERIES_URL = "https://api.synopticdata.com/v2/stations/timeseries"
DEFAULT_FORECAST_URL = "https://api.weather.gov/gridpoints/SEW/164,65"
USER_AGENT = "wxstrip/0.1 (snow strip renderer)"


def _resolve_path_from_env(name: str, default: Path) -> Path:
    value = os.environ.get(name)
    if not value:
        return default
    candidate = Path(value).expanduser()
    if not candidate.is_absolute():
        candidate = (REPO_ROOT / candidate).resolve()
    return candidate


def get_output_dir() -> Path:
    """Return where strip images should be written."""

    return _resolve_path_from_env("WXSTRIP_OUTPUT_DIR", REPO_ROOT / "strip_output")


def get_env_float(name: str, fallback: float) -> float:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return fallback
    try:
        return float(value)
    except ValueError:
        LOGGER.warning("Invalid float for %s=%s; using %s", name, value, fallback)
        return fallback


def get_env_int(name: str, fallback: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return fallback
    try:
        return int(value)
    except ValueError:
        LOGGER.warning("Invalid int for %s=%s; using %s", name, value, fallback)
        return fallback


def get_log_level() -> int:
    """Return the logging level named by WXSTRIP_LOG_LEVEL."""

    name = os.environ.get("WXSTRIP_LOG_LEVEL", "INFO").upper()
    return getattr(logging, name, logging.INFO)


def configure_logging() -> None:
    logging.basicConfig(level=get_log_level(), format="%(levelname)s:%(name)s:%(message)s")


def build_telemetry_url(station: str, token: str | None, *, recent_minutes: int = 4320) -> str:
    """Construct a Synoptic timeseries URL for the snow-depth station."""

    params = {
        "stid": station,
        "recent": str(recent_minutes),
        "vars": "snow_depth,air_temp,precip_accum_one_hour",
        "units": "english",
        "obtimezone": "utc",
    }
    if token:
        params["token"] = token
    request = requests.Request("GET", SYNOPTIC_TIMESERIES_URL, params=params).prepare()
    return request.url


DEFAULT_TIMEZONE = os.environ.get("WXSTRIP_TIMEZONE", "America/Los_Angeles")
DEFAULT_STATION = os.environ.get("WXSTRIP_STATION", "STS50")
# metres, about 4470 ft
DEFAULT_SNOW_LINE = get_env_float("WXSTRIP_SNOW_LINE", 1363.0)
DEFAULT_TEMP_CMAP = os.environ.get("WXSTRIP_TEMP_CMAP", "cool")
TELEMETRY_FORMATS = ("json", "csv", "html")


@dataclass(frozen=True)
class StripConfig:
    """Geometry, thresholds and palette for one strip rendering."""

    grid_width: int = 64
    grid_height: int = 16
    cell_size: int = 16
    cell_spacing: int = 1

    timezone: str = DEFAULT_TIMEZONE
    snow_line: float = DEFAULT_SNOW_LINE
    reset_hour: int = 16
    night_start: int = 16
    night_end: int = 9
    lead_hours: int = 8
    window_hours: int = 64

    cold_temp: int = 20
    hot_temp: int = 40
    rain_temp: float = 34.0

    background_color: RGB = (0, 0, 0)
    past_day_color: RGB = (192, 192, 192)
    past_night_color: RGB = (255, 255, 255)
    future_day_color: RGB = (96, 144, 192)
    future_night_color: RGB = (128, 192, 255)
    time_color: RGB = (64, 64, 64)
    flake_color: RGB = (255, 255, 255)
    rain_color: RGB = (0, 128, 255)
    cold_color: RGB = (128, 0, 255)
    hot_color: RGB = (255, 64, 0)
    temp_cmap: str = DEFAULT_TEMP_CMAP
    temp_colors: Mapping[int, RGB] | None = None

    telemetry_url: str = ""
    telemetry_format: str = "json"
    forecast_url: str = DEFAULT_FORECAST_URL
    request_timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.temp_colors is None:
            table = build_temp_colors(self.cold_temp, self.hot_temp, cmap_name=self.temp_cmap)
            object.__setattr__(self, "temp_colors", table)

    @property
    def width_px(self) -> int:
        return self.grid_width * self.cell_size + (self.grid_width + 1) * self.cell_spacing

    @property
    def height_px(self) -> int:
        return self.grid_height * self.cell_size + (self.grid_height + 1) * self.cell_spacing

    def is_night(self, hour: int) -> bool:
        """Return True when an hour of day falls in the night colouring range."""

        return hour >= self.night_start or hour < self.night_end

    @classmethod
    def from_env(cls) -> "StripConfig":
        telemetry_url = os.environ.get("WXSTRIP_TELEMETRY_URL") or build_telemetry_url(
            os.environ.get("WXSTRIP_STATION", DEFAULT_STATION), os.environ.get("WXSTRIP_SYNOPTIC_TOKEN")
        )
        telemetry_format = os.environ.get("WXSTRIP_TELEMETRY_FORMAT", "json").strip().lower()
        if telemetry_format not in TELEMETRY_FORMATS:
            LOGGER.warning("Unknown WXSTRIP_TELEMETRY_FORMAT=%s; using json", telemetry_format)
            telemetry_format = "json"
        lead_hours = get_env_int("WXSTRIP_LEAD_HOURS", 8)
        if not 0 <= lead_hours <= 24:
            LOGGER.warning("WXSTRIP_LEAD_HOURS=%s out of range; using 8", lead_hours)
            lead_hours = 8
        return cls(
            timezone=os.environ.get("WXSTRIP_TIMEZONE", DEFAULT_TIMEZONE),
            snow_line=get_env_float("WXSTRIP_SNOW_LINE", DEFAULT_SNOW_LINE),
            lead_hours=lead_hours,
            temp_cmap=os.environ.get("WXSTRIP_TEMP_CMAP", DEFAULT_TEMP_CMAP),
            telemetry_url=telemetry_url,
            telemetry_format=telemetry_format,
            forecast_url=os.environ.get("WXSTRIP_FORECAST_URL", DEFAULT_FORECAST_URL),
            request_timeout=get_env_float("WXSTRIP_REQUEST_TIMEOUT", 30.0),
        )
