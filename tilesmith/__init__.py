"""
Tilesmith - tile-map editor core with an embedded playtest mode.

Paint tiles from sprite-sheet palettes onto a multi-layer grid, then drop a
physics-driven character into the level to test it.

The core is headless: level model, paint engine, physics rules and session
state machine need no window. Rendering (pygame surfaces), storage and audio
are injected.
"""

__version__ = "0.1.0"

# Session and scheduling
from .session import EditorSession, InputState, TickScheduler, fire_and_forget

# Level model
from .geometry import GridSpec, DEFAULT_GRID, cell_at, in_bounds, clamp
from .level import Level, Layer
from .schemas import TileRef, LayerState

# Editing
from .paint import Mode, Tool, PaintEngine, PaletteSelection, pick_from_palette

# Playtest
from .physics import (
    Actor,
    InputSnapshot,
    PhysicsConstants,
    PlaytestRules,
    PlatformerRules,
    TickResult,
)

# Rendering, resources and storage
from .compositor import Compositor
from .sprites import SpriteCache
from .audio import JumpCue
from .persistence import PersistenceStrategy, InMemoryPersistence, JsonFilePersistence

# Errors
from .errors import TilesmithError, LevelParseError, UnknownLayerError

__all__ = [
    # Session
    "EditorSession",
    "InputState",
    "TickScheduler",
    "fire_and_forget",
    # Level model
    "GridSpec",
    "DEFAULT_GRID",
    "cell_at",
    "in_bounds",
    "clamp",
    "Level",
    "Layer",
    "TileRef",
    "LayerState",
    # Editing
    "Mode",
    "Tool",
    "PaintEngine",
    "PaletteSelection",
    "pick_from_palette",
    # Playtest
    "Actor",
    "InputSnapshot",
    "PhysicsConstants",
    "PlaytestRules",
    "PlatformerRules",
    "TickResult",
    # Rendering, resources and storage
    "Compositor",
    "SpriteCache",
    "JumpCue",
    "PersistenceStrategy",
    "InMemoryPersistence",
    "JsonFilePersistence",
    # Errors
    "TilesmithError",
    "LevelParseError",
    "UnknownLayerError",
]
