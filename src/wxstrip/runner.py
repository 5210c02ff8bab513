"""Orchestrate fetches, parsing, merging and rendering for wxstrip."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from functools import partial
from typing import Callable

import pandas as pd

from wxstrip.config import StripConfig, get_output_dir
from wxstrip.models.hour import HourRecord
from wxstrip.pipeline import StripResult, build_timeline, render_strip
from wxstrip.render.bitmap import encode_png, write_png
from wxstrip.sources import (
    fetch_document,
    parse_forecast,
    parse_telemetry,
    parse_telemetry_csv,
    parse_telemetry_html,
)

LOGGER = logging.getLogger("wxstrip.runner")

STRIP_FILENAME = "weatherstrip.png"

Fetcher = Callable[[str], bytes]
TelemetryParser = Callable[[bytes, str], list[HourRecord]]


class StripRunner:
    """Execute a full fetch → parse → merge → render workflow."""

    def __init__(
        self,
        config: StripConfig | None = None,
        *,
        fetcher: Fetcher | None = None,
        now: object | None = None,
        telemetry_doc: bytes | None = None,
        forecast_doc: bytes | None = None,
        telemetry_parser: TelemetryParser | None = None,
    ) -> None:
        self.config = config or StripConfig.from_env()
        self.fetcher = fetcher or self._default_fetcher
        self.now = now
        self.telemetry_doc = telemetry_doc
        self.forecast_doc = forecast_doc
        self.telemetry_parser = telemetry_parser or self._default_telemetry_parser()
        self.timeline: dict[pd.Timestamp, HourRecord] = {}

    def _default_fetcher(self, url: str) -> bytes:
        return fetch_document(url, timeout=self.config.request_timeout)

    def _default_telemetry_parser(self) -> TelemetryParser:
        fmt = self.config.telemetry_format
        if fmt == "csv":
            return parse_telemetry_csv
        if fmt == "html":
            return partial(parse_telemetry_html, now=self.now)
        return parse_telemetry

    def fetch(self) -> tuple[bytes, bytes]:
        """Return the raw telemetry and forecast documents, in that order."""

        telemetry = self.telemetry_doc
        if telemetry is None:
            telemetry = self.fetcher(self.config.telemetry_url)
        forecast = self.forecast_doc
        if forecast is None:
            forecast = self.fetcher(self.config.forecast_url)
        return telemetry, forecast

    def parse(self, telemetry: bytes, forecast: bytes) -> dict[pd.Timestamp, HourRecord]:
        tz = self.config.timezone
        self.timeline = build_timeline(self.telemetry_parser(telemetry, tz), parse_forecast(forecast, tz))
        LOGGER.info("Merged timeline holds %d hours", len(self.timeline))
        return self.timeline

    def render(self) -> StripResult:
        return render_strip(self.timeline, self.config, now=self.now)

    def run(self) -> StripResult:
        """Fetch both documents and render the strip."""

        telemetry, forecast = self.fetch()
        self.parse(telemetry, forecast)
        return self.render()

    def png_bytes(self) -> bytes:
        return encode_png(self.run().bitmap)

    def base64_png(self) -> str:
        return base64.b64encode(self.png_bytes()).decode("ascii")

    def write(self, path: Path | str | None = None) -> Path:
        """Render and write the strip, returning the written path."""

        out_path = Path(path) if path else get_output_dir() / STRIP_FILENAME
        result = self.run()
        write_png(result.bitmap, out_path)
        LOGGER.info("Saved strip to %s", out_path)
        return out_path
