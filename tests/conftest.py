"""Shared fixtures. pygame runs headless with the SDL dummy drivers."""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("TILESMITH_NO_COLOR", "1")

import pytest

from tilesmith.level import Level
from tilesmith.schemas import TileRef


@pytest.fixture
def level() -> Level:
    return Level.default()


@pytest.fixture
def floor_level() -> Level:
    """Default level with one solid foreground cell at (2, 9)."""
    lvl = Level.default()
    lvl.set_cell("foreground", 2, 9, TileRef(source_x=0, source_y=0, sheet_id="foreground"))
    return lvl
