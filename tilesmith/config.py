"""
Tilesmith Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Grid
    GRID_WIDTH: int = int(os.getenv("TILESMITH_GRID_WIDTH", "20"))
    GRID_HEIGHT: int = int(os.getenv("TILESMITH_GRID_HEIGHT", "12"))
    TILE_SIZE: int = int(os.getenv("TILESMITH_TILE_SIZE", "64"))

    # Playtest
    TICK_RATE: int = int(os.getenv("TILESMITH_TICK_RATE", "60"))
    # "right" reproduces the editor's historical behaviour: left is checked,
    # then right overrides it.
    HORIZONTAL_PRIORITY: str = os.getenv("TILESMITH_HORIZONTAL_PRIORITY", "right")
    FEET_OFFSET: float = float(os.getenv("TILESMITH_FEET_OFFSET", "0.9"))
    SOLID_LAYER: str = os.getenv("TILESMITH_SOLID_LAYER", "foreground")

    # Persistence (single save slot, overwritten on every save)
    SAVE_DIR: Path = Path(os.getenv("TILESMITH_SAVE_DIR", "."))
    SAVE_SLOT: str = os.getenv("TILESMITH_SAVE_SLOT", "tilemap-level")

    # Project Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    ASSETS_DIR: Path = Path(os.getenv("TILESMITH_ASSETS_DIR", str(PROJECT_ROOT / "assets")))

    # Sprite sheets, one per role
    BACKGROUND_SHEET: str = os.getenv("TILESMITH_BACKGROUND_SHEET", "spritesheet-backgrounds.png")
    FOREGROUND_SHEET: str = os.getenv("TILESMITH_FOREGROUND_SHEET", "spritesheet-tiles.png")
    ENEMIES_SHEET: str = os.getenv("TILESMITH_ENEMIES_SHEET", "spritesheet-enemies.png")
    CHARACTER_SHEET: str = os.getenv("TILESMITH_CHARACTER_SHEET", "spritesheet-characters.png")
    JUMP_SOUND: str = os.getenv("TILESMITH_JUMP_SOUND", "sfx_jump.ogg")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def sheet_uris(cls) -> dict[str, str]:
        """Map each sprite role to the URI of its sheet."""
        return {
            "background": str(cls.ASSETS_DIR / cls.BACKGROUND_SHEET),
            "foreground": str(cls.ASSETS_DIR / cls.FOREGROUND_SHEET),
            "enemies": str(cls.ASSETS_DIR / cls.ENEMIES_SHEET),
            "character": str(cls.ASSETS_DIR / cls.CHARACTER_SHEET),
        }

    @classmethod
    def jump_sound_uri(cls) -> str:
        return str(cls.ASSETS_DIR / cls.JUMP_SOUND)

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors if values are unusable."""
        if cls.GRID_WIDTH <= 0 or cls.GRID_HEIGHT <= 0:
            raise ValueError(
                "TILESMITH_GRID_WIDTH and TILESMITH_GRID_HEIGHT must be positive "
                f"(got {cls.GRID_WIDTH}x{cls.GRID_HEIGHT})"
            )

        if cls.TILE_SIZE <= 0:
            raise ValueError(f"TILESMITH_TILE_SIZE must be positive (got {cls.TILE_SIZE})")

        if cls.TICK_RATE <= 0:
            raise ValueError(f"TILESMITH_TICK_RATE must be positive (got {cls.TICK_RATE})")

        if cls.HORIZONTAL_PRIORITY not in ("left", "right"):
            raise ValueError(
                "TILESMITH_HORIZONTAL_PRIORITY must be 'left' or 'right' "
                f"(got {cls.HORIZONTAL_PRIORITY!r})"
            )

        if not 0.0 <= cls.FEET_OFFSET < 1.0:
            raise ValueError(
                f"TILESMITH_FEET_OFFSET must be in [0, 1) (got {cls.FEET_OFFSET})"
            )

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "Tilesmith Configuration:",
            f"  Grid: {cls.GRID_WIDTH}x{cls.GRID_HEIGHT} cells @ {cls.TILE_SIZE}px",
            f"  Tick Rate: {cls.TICK_RATE} Hz",
            f"  Horizontal Priority: {cls.HORIZONTAL_PRIORITY}",
            f"  Save Slot: {cls.SAVE_DIR / (cls.SAVE_SLOT + '.json')}",
            f"  Assets: {cls.ASSETS_DIR}",
        ]
        return "\n".join(lines)
