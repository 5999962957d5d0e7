"""Layer compositor: draws the grid overlay, visible layers and the actor."""

from __future__ import annotations

from typing import Optional, Tuple

import pygame

from .geometry import cell_rect, to_pixels
from .level import Layer, Level
from .paint import Mode, PaletteSelection
from .physics import Actor
from .sprites import SpriteCache

Color = Tuple[int, int, int]

CLEAR_COLOR: Color = (24, 26, 33)
GRID_COLOR: Color = (58, 62, 74)
HIGHLIGHT_COLOR: Color = (90, 160, 255)

CHARACTER_ROLE = "character"
# Idle pose on the character sheet: x, y, w, h in sheet pixels.
ACTOR_IDLE_REGION = (0, 512, 128, 128)


class Compositor:
    """Renders a level onto a pygame surface.

    Sheets are looked up in the sprite cache by layer name each frame; a layer
    whose sheet is not ready yet is skipped, never waited on.
    """

    def __init__(
        self,
        sprites: SpriteCache,
        *,
        clear_color: Color = CLEAR_COLOR,
        grid_color: Color = GRID_COLOR,
        actor_region: Tuple[int, int, int, int] = ACTOR_IDLE_REGION,
    ):
        self.sprites = sprites
        self.clear_color = clear_color
        self.grid_color = grid_color
        self.actor_region = pygame.Rect(actor_region)
        self._actor_sprite: Optional[pygame.Surface] = None
        self._actor_sprite_size = 0

    def render(
        self,
        surface: pygame.Surface,
        level: Level,
        *,
        mode: Mode = Mode.EDIT,
        actor: Optional[Actor] = None,
    ) -> None:
        surface.fill(self.clear_color)

        if mode is Mode.EDIT:
            self.draw_grid(surface, level)

        for layer in level.snapshot():
            if not layer.visible:
                continue
            sheet = self.sprites.get(layer.name)
            if sheet is None:
                continue
            self.draw_layer(surface, level, layer, sheet)

        if mode is Mode.PLAY and actor is not None:
            self.draw_actor(surface, level, actor)

    def draw_grid(self, surface: pygame.Surface, level: Level) -> None:
        grid = level.grid
        size = grid.cell_size
        extent_x = grid.width * size
        extent_y = grid.height * size
        for col in range(grid.width + 1):
            x = col * size
            pygame.draw.line(surface, self.grid_color, (x, 0), (x, extent_y), 1)
        for row in range(grid.height + 1):
            y = row * size
            pygame.draw.line(surface, self.grid_color, (0, y), (extent_x, y), 1)

    def draw_layer(self, surface: pygame.Surface, level: Level, layer: Layer, sheet: pygame.Surface) -> None:
        size = level.grid.cell_size
        for col, row, tile in layer.occupied(level.grid):
            dest = cell_rect(col, row, level.grid)
            area = pygame.Rect(tile.source_x, tile.source_y, size, size)
            surface.blit(sheet, dest[:2], area)

    def draw_actor(self, surface: pygame.Surface, level: Level, actor: Actor) -> None:
        sprite = self._actor_surface(level.grid.cell_size)
        if sprite is None:
            return
        px, py = to_pixels(actor.x, actor.y, level.grid)
        surface.blit(sprite, (round(px), round(py)))

    def _actor_surface(self, size: int) -> Optional[pygame.Surface]:
        """Idle-pose region of the character sheet scaled to one cell, cached."""
        if self._actor_sprite is not None and self._actor_sprite_size == size:
            return self._actor_sprite
        sheet = self.sprites.get(CHARACTER_ROLE)
        if sheet is None or not sheet.get_rect().contains(self.actor_region):
            return None
        region = sheet.subsurface(self.actor_region)
        self._actor_sprite = pygame.transform.scale(region, (size, size))
        self._actor_sprite_size = size
        return self._actor_sprite

    def render_palette(
        self,
        surface: pygame.Surface,
        sheet: Optional[pygame.Surface],
        selection: PaletteSelection,
        cell_size: int = 64,
    ) -> None:
        """Draw a whole sheet with the selected tile outlined."""
        surface.fill(self.clear_color)
        if sheet is None:
            return
        surface.blit(sheet, (0, 0))
        pygame.draw.rect(
            surface,
            HIGHLIGHT_COLOR,
            pygame.Rect(selection.x, selection.y, cell_size, cell_size),
            3,
        )
