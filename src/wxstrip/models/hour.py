"""The per-hour record that makes up a strip timeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

import pandas as pd

VALUE_FIELDS = (
    "predicted_snow",
    "predicted_snow_level",
    "predicted_temp",
    "actual_snow",
    "actual_temp",
    "actual_precip",
)


@dataclass(frozen=True)
class HourRecord:
    """
    Observed and predicted values for one local hour.

    Forecast fields carry the ``predicted_`` prefix (snow in inches, snow
    level in metres, temperature in °F); telemetry fields carry ``actual_``
    (absolute snow depth and one-hour precipitation in inches, temperature in
    °F). ``None`` means no source has supplied the value.
    """

    hour: pd.Timestamp
    predicted_snow: Optional[float] = None
    predicted_snow_level: Optional[float] = None
    predicted_temp: Optional[float] = None
    actual_snow: Optional[float] = None
    actual_temp: Optional[float] = None
    actual_precip: Optional[float] = None

    def values(self) -> dict[str, Optional[float]]:
        """Return the value fields, excluding the hour key."""

        return {name: getattr(self, name) for name in VALUE_FIELDS}

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["hour"] = self.hour.isoformat()
        return data
