"""Bitmap painting and palette helpers."""

from __future__ import annotations

from .bitmap import cell_origin, encode_png, new_bitmap, paint_cell, paint_column, paint_marker, write_png
from .palette import build_temp_colors, temperature_color

__all__ = [
    "build_temp_colors",
    "cell_origin",
    "encode_png",
    "new_bitmap",
    "paint_cell",
    "paint_column",
    "paint_marker",
    "temperature_color",
    "write_png",
]
