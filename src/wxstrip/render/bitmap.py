"""Pixel-surface primitives for the cell grid."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import numpy as np
from matplotlib import image as mpimg

if TYPE_CHECKING:
    from wxstrip.config import StripConfig


def new_bitmap(config: "StripConfig") -> np.ndarray:
    """Allocate a surface filled with the background colour."""

    bitmap = np.zeros((config.height_px, config.width_px, 3), dtype=np.uint8)
    bitmap[:, :] = config.background_color
    return bitmap


def cell_origin(col: int, row: int, config: "StripConfig") -> tuple[int, int]:
    """Return the (x, y) pixel of a cell's top-left corner."""

    stride = config.cell_size + config.cell_spacing
    return config.cell_spacing + col * stride, config.cell_spacing + row * stride


def paint_cell(bitmap: np.ndarray, col: int, row: int, color: Sequence[int], config: "StripConfig") -> None:
    x, y = cell_origin(col, row, config)
    bitmap[y : y + config.cell_size, x : x + config.cell_size] = color


def paint_column(
    bitmap: np.ndarray,
    col: int,
    from_row: int,
    color: Sequence[int],
    config: "StripConfig",
) -> None:
    """
    Fill every cell of a column from ``from_row`` down to the last row.
    """

    for row in range(max(from_row, 0), config.grid_height):
        paint_cell(bitmap, col, row, color, config)


def paint_marker(
    bitmap: np.ndarray,
    col: int,
    row: int,
    dots: int,
    color: Sequence[int],
    config: "StripConfig",
) -> None:
    """
    Paint ``dots`` small squares stacked inside one cell.

    Even columns put the dots on the left side of the cell and odd columns on
    the right, so markers in neighbouring hours do not merge into a line.
    """

    if dots <= 0:
        return
    dot = max(1, config.cell_size // 5)
    x, y = cell_origin(col, row, config)
    if col % 2 == 0:
        x += dot
    else:
        x += config.cell_size - 2 * dot
    for i in range(dots):
        top = y + dot + i * (dot + 1)
        if top + dot > y + config.cell_size:
            break
        bitmap[top : top + dot, x : x + dot] = color


def encode_png(bitmap: np.ndarray) -> bytes:
    buffer = BytesIO()
    mpimg.imsave(buffer, bitmap, format="png")
    return buffer.getvalue()


def write_png(bitmap: np.ndarray, path: Path) -> Path:
    """Encode a surface and write it to ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_png(bitmap))
    return path
