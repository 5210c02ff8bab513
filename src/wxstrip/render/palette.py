"""Temperature colour lookup for the strip's top row."""

from __future__ import annotations

from typing import Mapping, TYPE_CHECKING

import numpy as np
from matplotlib import colormaps

if TYPE_CHECKING:
    from wxstrip.config import StripConfig

RGB = tuple[int, int, int]


def build_temp_colors(cold_temp: int, hot_temp: int, *, cmap_name: str = "cool") -> dict[int, RGB]:
    """
    Sample a matplotlib colormap once per whole degree between the thresholds.
    """

    if hot_temp < cold_temp:
        raise ValueError(f"hot_temp {hot_temp} is below cold_temp {cold_temp}")
    cmap = colormaps[cmap_name]
    temps = list(range(int(cold_temp), int(hot_temp) + 1))
    positions = np.linspace(0.0, 1.0, num=len(temps))
    rgba = cmap(positions)
    table: dict[int, RGB] = {}
    for temp, (r, g, b, _a) in zip(temps, rgba):
        table[temp] = (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))
    return table


def temperature_color(temp: float, config: "StripConfig") -> RGB:
    """Return the colour for a temperature in °F."""

    if temp < config.cold_temp:
        return config.cold_color
    if temp > config.hot_temp:
        return config.hot_color
    table: Mapping[int, RGB] = config.temp_colors or {}
    return table.get(int(temp), config.hot_color)
