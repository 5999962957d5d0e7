"""Tile and layer model.

A ``Level`` is an ordered stack of named ``Layer`` objects sharing one
``GridSpec``. Each layer stores its cells in a flat, immutable tuple indexed
``row * W + col``. Edits are copy-on-write at single-cell granularity: a
``set_cell`` builds a new tuple that differs in exactly one slot and swaps in a
new ``Layer`` object, so snapshots taken earlier (rendered frames, saved
blobs) never observe later edits and no two layers can share cell storage.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from pydantic import ValidationError

from .errors import LevelParseError, UnknownLayerError
from .geometry import DEFAULT_GRID, GridSpec, in_bounds, index_of
from .schemas import LayerState, LevelBlob, TileRef

Cells = Tuple[Optional[TileRef], ...]

DEFAULT_LAYERS: Tuple[str, ...] = ("background", "foreground", "enemies")
DEFAULT_ACTIVE_LAYER = "foreground"


@dataclass(frozen=True)
class Layer:
    """One independently visible plane of cell content."""

    name: str
    sheet_id: str
    cells: Cells
    visible: bool = True

    @classmethod
    def empty(cls, name: str, sheet_id: str, grid: GridSpec = DEFAULT_GRID) -> "Layer":
        return cls(name=name, sheet_id=sheet_id, cells=(None,) * grid.cell_count)

    def cell(self, col: int, row: int, grid: GridSpec = DEFAULT_GRID) -> Optional[TileRef]:
        if not in_bounds(col, row, grid):
            return None
        return self.cells[index_of(col, row, grid)]

    def with_cell(self, index: int, tile: Optional[TileRef]) -> "Layer":
        cells = self.cells[:index] + (tile,) + self.cells[index + 1:]
        return replace(self, cells=cells)

    def occupied(self, grid: GridSpec = DEFAULT_GRID) -> Iterator[Tuple[int, int, TileRef]]:
        """Yield ``(col, row, tile)`` for every non-empty cell in row-major order."""
        width = grid.width
        for index, tile in enumerate(self.cells):
            if tile is not None:
                yield index % width, index // width, tile


class Level:
    """Ordered stack of layers with exactly one active layer for editing."""

    def __init__(
        self,
        layers: Sequence[Layer],
        *,
        grid: GridSpec = DEFAULT_GRID,
        active_layer: Optional[str] = None,
    ) -> None:
        if not layers:
            raise ValueError("A level needs at least one layer")
        names = [layer.name for layer in layers]
        if len(set(names)) != len(names):
            raise ValueError(f"Layer names must be unique: {names}")
        for layer in layers:
            if len(layer.cells) != grid.cell_count:
                raise ValueError(
                    f"Layer '{layer.name}' has {len(layer.cells)} cells, "
                    f"expected {grid.cell_count}"
                )

        self.grid = grid
        self._layers: List[Layer] = list(layers)
        if active_layer is None or active_layer not in names:
            active_layer = DEFAULT_ACTIVE_LAYER if DEFAULT_ACTIVE_LAYER in names else names[0]
        self.active_layer: str = active_layer

    @classmethod
    def default(
        cls,
        grid: GridSpec = DEFAULT_GRID,
        sheets: Optional[Mapping[str, str]] = None,
    ) -> "Level":
        """Background, foreground and enemies layers, foreground active.

        ``sheets`` maps layer name to sheet id; by default each layer uses the
        sheet role of the same name.
        """
        sheets = sheets or {}
        layers = [Layer.empty(name, sheets.get(name, name), grid) for name in DEFAULT_LAYERS]
        return cls(layers, grid=grid, active_layer=DEFAULT_ACTIVE_LAYER)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def layers(self) -> Tuple[Layer, ...]:
        return tuple(self._layers)

    @property
    def layer_names(self) -> List[str]:
        return [layer.name for layer in self._layers]

    def snapshot(self) -> Tuple[Layer, ...]:
        """Immutable view of the current layers; unaffected by later edits."""
        return tuple(self._layers)

    def layer(self, name: str) -> Layer:
        return self._layers[self._index(name)]

    def find_layer(self, name: str) -> Optional[Layer]:
        for layer in self._layers:
            if layer.name == name:
                return layer
        return None

    def get_cell(self, layer_name: str, col: int, row: int) -> Optional[TileRef]:
        return self.layer(layer_name).cell(col, row, self.grid)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Level):
            return NotImplemented
        # The active layer is editing state, not level content.
        return self.grid == other.grid and self._layers == other._layers

    def __repr__(self) -> str:
        return f"Level(layers={self.layer_names}, active={self.active_layer!r}, grid={self.grid})"

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_active_layer(self, name: str) -> None:
        self._index(name)
        self.active_layer = name

    def set_cell(self, layer_name: str, col: int, row: int, tile: Optional[TileRef]) -> bool:
        """Replace one cell. Out-of-bounds coordinates are ignored.

        Returns:
            True if the cell was written, False for the out-of-bounds no-op.
        """
        position = self._index(layer_name)
        if not in_bounds(col, row, self.grid):
            return False
        layer = self._layers[position]
        self._layers[position] = layer.with_cell(index_of(col, row, self.grid), tile)
        return True

    def toggle_visible(self, layer_name: str) -> bool:
        """Flip a layer's visibility and return the new value."""
        position = self._index(layer_name)
        layer = self._layers[position]
        self._layers[position] = replace(layer, visible=not layer.visible)
        return not layer.visible

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_states(self) -> List[LayerState]:
        width = self.grid.width
        states = []
        for layer in self._layers:
            rows = [list(layer.cells[start:start + width]) for start in range(0, len(layer.cells), width)]
            states.append(
                LayerState(name=layer.name, visible=layer.visible, sheet_id=layer.sheet_id, data=rows)
            )
        return states

    def serialize(self) -> str:
        """Encode the whole level (order, visibility, sheets, cells) as JSON."""
        return LevelBlob.dump_json(self.to_states(), by_alias=True).decode("utf-8")

    @classmethod
    def deserialize(cls, blob: str, grid: GridSpec = DEFAULT_GRID) -> "Level":
        """Decode and validate a blob produced by ``serialize``.

        Parsing is strict: JSON types must match the schema exactly, so a
        ``"visible": "yes"`` or ``"spriteX": true`` is rejected rather than
        coerced.

        Raises:
            LevelParseError: If the blob is not JSON (including nesting too
                deep to decode), is not an array of layers, has duplicate or
                no layers, or any layer's grid is not exactly
                ``grid.height`` rows of ``grid.width`` cells.
        """
        try:
            states = LevelBlob.validate_json(blob, strict=True)
        except ValidationError as exc:
            if any(error["type"] == "json_invalid" for error in exc.errors()):
                raise LevelParseError("blob is not valid JSON", underlying=exc) from exc
            raise LevelParseError("blob does not match the layer schema", underlying=exc) from exc

        return cls.from_states(states, grid)

    @classmethod
    def from_states(cls, states: Sequence[LayerState], grid: GridSpec = DEFAULT_GRID) -> "Level":
        if not states:
            raise LevelParseError("blob contains no layers")

        seen: Set[str] = set()
        layers: List[Layer] = []
        for state in states:
            if state.name in seen:
                raise LevelParseError(f"duplicate layer name '{state.name}'")
            seen.add(state.name)

            # Validate every layer before building anything.
            if len(state.data) != grid.height:
                raise LevelParseError(
                    f"layer '{state.name}' has {len(state.data)} rows, expected {grid.height}"
                )
            for row_index, row in enumerate(state.data):
                if len(row) != grid.width:
                    raise LevelParseError(
                        f"layer '{state.name}' row {row_index} has {len(row)} cells, "
                        f"expected {grid.width}"
                    )

            cells: Cells = tuple(tile for row in state.data for tile in row)
            layers.append(
                Layer(name=state.name, sheet_id=state.sheet_id, cells=cells, visible=state.visible)
            )

        return cls(layers, grid=grid)

    # ------------------------------------------------------------------

    def _index(self, name: str) -> int:
        for position, layer in enumerate(self._layers):
            if layer.name == name:
                return position
        raise UnknownLayerError(name, self.layer_names)
