"""Command-line entry point for wxstrip."""

from __future__ import annotations

from functools import partial
import json
from pathlib import Path

import click

from wxstrip.config import StripConfig, configure_logging, get_output_dir
from wxstrip.pipeline import DataAvailabilityError, timeline_frame
from wxstrip.render.bitmap import write_png
from wxstrip.runner import STRIP_FILENAME, StripRunner
from wxstrip.sources import SourceError, parse_telemetry_csv, parse_telemetry_html


def _read(path: Path | None) -> bytes | None:
    return path.read_bytes() if path else None


@click.command()
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="PNG path (defaults to WXSTRIP_OUTPUT_DIR/weatherstrip.png).",
)
@click.option(
    "--telemetry-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read the telemetry document from disk instead of fetching it.",
)
@click.option("--telemetry-csv", is_flag=True, help="Treat the telemetry document as a data-portal CSV export.")
@click.option("--telemetry-html", is_flag=True, help="Treat the telemetry document as a station data page.")
@click.option(
    "--forecast-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read the forecast document from disk instead of fetching it.",
)
@click.option("--now", "now_text", default=None, help="Render as if the current time were this ISO timestamp.")
@click.option("--dump", is_flag=True, help="Print the merged timeline as JSON records.")
def main(
    output: Path | None,
    telemetry_file: Path | None,
    telemetry_csv: bool,
    telemetry_html: bool,
    forecast_file: Path | None,
    now_text: str | None,
    dump: bool,
) -> None:
    """
    Build the snow strip once and write it as a PNG.
    """

    configure_logging()
    if telemetry_csv and telemetry_html:
        raise click.UsageError("--telemetry-csv and --telemetry-html are mutually exclusive")
    parser = None
    if telemetry_csv:
        parser = parse_telemetry_csv
    elif telemetry_html:
        parser = partial(parse_telemetry_html, now=now_text)
    runner = StripRunner(
        StripConfig.from_env(),
        now=now_text,
        telemetry_doc=_read(telemetry_file),
        forecast_doc=_read(forecast_file),
        telemetry_parser=parser,
    )
    out_path = output or get_output_dir() / STRIP_FILENAME
    try:
        telemetry, forecast = runner.fetch()
        timeline = runner.parse(telemetry, forecast)
        if dump:
            frame = timeline_frame(timeline)
            click.echo(json.dumps(json.loads(frame.to_json(orient="records", date_format="iso")), indent=2))
        result = runner.render()
    except (SourceError, DataAvailabilityError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    write_png(result.bitmap, out_path)
    click.echo(f"Wrote {runner.config.grid_width}-hour strip to {out_path}")


if __name__ == "__main__":
    main()
