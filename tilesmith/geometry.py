"""Grid geometry: pixel/cell conversion and bounds handling.

All functions are pure. Invalid input is not an error; it simply produces an
out-of-range result (``cell_at``), ``False`` (``in_bounds``) or a clamped value
(``clamp``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from .config import Config


@dataclass(frozen=True)
class GridSpec:
    """Fixed dimensions shared by every layer of a level."""

    width: int = 20
    height: int = 12
    cell_size: int = 64

    @classmethod
    def from_config(cls) -> "GridSpec":
        return cls(
            width=Config.GRID_WIDTH,
            height=Config.GRID_HEIGHT,
            cell_size=Config.TILE_SIZE,
        )

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return (self.width * self.cell_size, self.height * self.cell_size)


DEFAULT_GRID = GridSpec()


def cell_at(pixel_x: float, pixel_y: float, grid: GridSpec = DEFAULT_GRID) -> Tuple[int, int]:
    """Return the (col, row) containing a pixel position.

    Uses floor division so fractional and negative pixels land in the same
    cell the renderer draws there (``-0.5`` is column ``-1``, not ``0``).
    """
    size = grid.cell_size
    return (math.floor(pixel_x / size), math.floor(pixel_y / size))


def in_bounds(col: int, row: int, grid: GridSpec = DEFAULT_GRID) -> bool:
    return 0 <= col < grid.width and 0 <= row < grid.height


def clamp(x: float, y: float, grid: GridSpec = DEFAULT_GRID) -> Tuple[float, float]:
    """Clamp fractional cell coordinates into ``[0, W-1] x [0, H-1]``."""
    return (
        max(0.0, min(float(grid.width - 1), x)),
        max(0.0, min(float(grid.height - 1), y)),
    )


def index_of(col: int, row: int, grid: GridSpec = DEFAULT_GRID) -> int:
    """Flat arena index of an in-bounds cell (``row * W + col``)."""
    return row * grid.width + col


def cell_rect(col: int, row: int, grid: GridSpec = DEFAULT_GRID) -> Tuple[int, int, int, int]:
    """Destination pixel rectangle (x, y, w, h) of a cell."""
    size = grid.cell_size
    return (col * size, row * size, size, size)


def to_pixels(x: float, y: float, grid: GridSpec = DEFAULT_GRID) -> Tuple[float, float]:
    """Translate fractional cell coordinates into pixel space."""
    return (x * grid.cell_size, y * grid.cell_size)
