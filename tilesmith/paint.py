"""Paint engine and palette selection."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .geometry import cell_at, in_bounds
from .level import Level
from .schemas import TileRef


class Mode(str, Enum):
    EDIT = "edit"
    PLAY = "play"


class Tool(str, Enum):
    DRAW = "draw"
    ERASE = "erase"


@dataclass(frozen=True)
class PaletteSelection:
    """The palette tile currently selected, by pixel offset into a sheet."""

    x: int = 0
    y: int = 0
    sheet: str = "background"


def pick_from_palette(local_x: float, local_y: float, sheet: str, cell_size: int = 64) -> PaletteSelection:
    """Snap a click inside a palette sheet to the top-left of its tile."""
    return PaletteSelection(
        x=math.floor(local_x / cell_size) * cell_size,
        y=math.floor(local_y / cell_size) * cell_size,
        sheet=sheet,
    )


class PaintEngine:
    """Applies draw/erase operations to a level, one cell at a time."""

    def __init__(self, level: Level):
        self.level = level

    def apply_tool(
        self,
        tool: Tool,
        layer_name: str,
        col: int,
        row: int,
        selected: PaletteSelection,
        *,
        mode: Mode = Mode.EDIT,
    ) -> bool:
        """Draw or erase one cell of ``layer_name``.

        Ignored while playtesting and for out-of-bounds cells. A drawn tile
        takes its coordinates from the palette selection but its sheet from
        the target layer.

        Returns:
            True if a cell was replaced.
        """
        if mode is Mode.PLAY:
            return False
        if not in_bounds(col, row, self.level.grid):
            return False

        if tool is Tool.DRAW:
            sheet_id = self.level.layer(layer_name).sheet_id
            tile = TileRef(source_x=selected.x, source_y=selected.y, sheet_id=sheet_id)
        else:
            tile = None
        return self.level.set_cell(layer_name, col, row, tile)

    def click(
        self,
        pixel_x: float,
        pixel_y: float,
        tool: Tool,
        selected: PaletteSelection,
        *,
        mode: Mode = Mode.EDIT,
    ) -> bool:
        """Apply ``tool`` to the active layer at a canvas-local pixel position."""
        col, row = cell_at(pixel_x, pixel_y, self.level.grid)
        return self.apply_tool(tool, self.level.active_layer, col, row, selected, mode=mode)
