"""
Pydantic schemas for the Tilesmith level blob.

These models describe the wire format used by persistence. The runtime level
(``tilesmith.level``) keeps its cells in flat per-layer tuples and converts
to/from these models at the serialization boundary.

Wire format (compatible with levels saved by the browser editor):

```json
[
  {
    "name": "foreground",
    "visible": true,
    "spriteSheet": "foreground",
    "data": [[null, {"spriteX": 64, "spriteY": 0, "spriteSheet": "foreground"}, ...], ...]
  },
  ...
]
```
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class TileRef(BaseModel):
    """A pointer into a sprite sheet's pixel space.

    ``sheet_id`` records the sheet of the layer the tile was painted into, so
    the same source coordinates can mean different sprites on different layers.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_x: int = Field(..., alias="spriteX", description="Pixel x offset into the sheet")
    source_y: int = Field(..., alias="spriteY", description="Pixel y offset into the sheet")
    sheet_id: str = Field(..., alias="spriteSheet", description="Sheet/role the tile was painted from")


class LayerState(BaseModel):
    """Serialized form of one layer: a dense grid of rows."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    visible: bool = True
    sheet_id: str = Field(..., alias="spriteSheet")
    # Row-major: data[row][col]
    data: List[List[Optional[TileRef]]] = Field(default_factory=list)


# The blob's top level is a bare ordered array of layers.
LevelBlob = TypeAdapter(List[LayerState])
