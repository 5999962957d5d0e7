"""Tests for configuration validation and derived values."""

from pathlib import Path

import pytest

from tilesmith.config import Config
from tilesmith.geometry import GridSpec
from tilesmith.physics import PhysicsConstants


def test_defaults_validate():
    Config.validate()


@pytest.mark.parametrize(
    "attr,value,fragment",
    [
        ("GRID_WIDTH", 0, "TILESMITH_GRID_WIDTH"),
        ("GRID_HEIGHT", -3, "TILESMITH_GRID_HEIGHT"),
        ("TILE_SIZE", 0, "TILESMITH_TILE_SIZE"),
        ("TICK_RATE", 0, "TILESMITH_TICK_RATE"),
        ("HORIZONTAL_PRIORITY", "both", "TILESMITH_HORIZONTAL_PRIORITY"),
        ("FEET_OFFSET", 1.0, "TILESMITH_FEET_OFFSET"),
    ],
)
def test_validate_rejects_bad_values(monkeypatch, attr, value, fragment):
    monkeypatch.setattr(Config, attr, value)

    with pytest.raises(ValueError) as excinfo:
        Config.validate()

    assert fragment in str(excinfo.value)


def test_sheet_uris_cover_every_role(monkeypatch):
    monkeypatch.setattr(Config, "ASSETS_DIR", Path("/assets"))

    uris = Config.sheet_uris()

    assert set(uris) == {"background", "foreground", "enemies", "character"}
    assert uris["foreground"] == str(Path("/assets") / Config.FOREGROUND_SHEET)
    assert Config.jump_sound_uri() == str(Path("/assets") / Config.JUMP_SOUND)


def test_grid_and_physics_follow_config(monkeypatch):
    monkeypatch.setattr(Config, "GRID_WIDTH", 32)
    monkeypatch.setattr(Config, "TILE_SIZE", 16)
    monkeypatch.setattr(Config, "HORIZONTAL_PRIORITY", "left")
    monkeypatch.setattr(Config, "TICK_RATE", 30)

    grid = GridSpec.from_config()
    constants = PhysicsConstants.from_config()

    assert (grid.width, grid.height, grid.cell_size) == (32, Config.GRID_HEIGHT, 16)
    assert constants.horizontal_priority == "left"
    assert constants.tick_rate == 30


def test_display_mentions_save_slot():
    text = Config.display()

    assert "Tilesmith Configuration:" in text
    assert Config.SAVE_SLOT + ".json" in text
