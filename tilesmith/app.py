"""
Keyboard-driven pygame runner for the editor.

Layout: the level canvas on the left, the active layer's palette sheet on the
right. Controls:

    Edit mode                       Play mode
    ---------                       ---------
    click canvas   paint            Left/Right  run
    click palette  select tile      Space       jump
    D / E          draw / erase     P / Esc     stop playtest
    1..9           active layer
    V              toggle visibility of the active layer
    Ctrl+S/Ctrl+O  save / load
    P              start playtest

Run: tilesmith [--save-dir DIR] [--assets DIR]
"""

import argparse
import asyncio
from pathlib import Path
from typing import Optional

import pygame

from .audio import JumpCue
from .compositor import Compositor
from .config import Config
from .geometry import GridSpec
from .level import Level
from .logging_utils import log_info
from .persistence import JsonFilePersistence
from .physics import PhysicsConstants, PlatformerRules
from .paint import Tool
from .session import KEY_JUMP, KEY_LEFT, KEY_RIGHT, EditorSession, TickScheduler, fire_and_forget
from .sprites import SpriteCache

PALETTE_WIDTH = 320
FRAME_INTERVAL = 1 / 60

PLAY_KEYS = {
    pygame.K_LEFT: KEY_LEFT,
    pygame.K_RIGHT: KEY_RIGHT,
    pygame.K_SPACE: KEY_JUMP,
}


def build_session(save_dir: Optional[Path] = None) -> EditorSession:
    """Wire a session with the configured grid, physics and file persistence."""
    grid = GridSpec.from_config()
    constants = PhysicsConstants.from_config()
    sprites = SpriteCache()
    session = EditorSession(
        Level.default(grid),
        rules=PlatformerRules(constants),
        persistence=JsonFilePersistence(save_dir, slot=Config.SAVE_SLOT),
        compositor=Compositor(sprites),
        scheduler=TickScheduler(constants.tick_rate),
        jump_cue=JumpCue(Config.jump_sound_uri()),
    )
    sprites.on_ready = session.mark_dirty
    return session


class EditorApp:
    """Translates pygame events into session calls and presents frames."""

    def __init__(self, session: EditorSession, screen: pygame.Surface):
        self.session = session
        self.screen = screen
        width, height = session.level.grid.pixel_size
        self.canvas_rect = pygame.Rect(0, 0, width, height)
        self.palette_rect = pygame.Rect(width, 0, PALETTE_WIDTH, height)
        self.canvas = pygame.Surface(self.canvas_rect.size)
        self.palette = pygame.Surface(self.palette_rect.size)
        self.running = True

    @property
    def sprites(self) -> SpriteCache:
        return self.session.compositor.sprites

    def handle(self, event: pygame.event.Event) -> None:
        session = self.session
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            self.on_key_down(event)
        elif event.type == pygame.KEYUP and event.key in PLAY_KEYS:
            session.key_up(PLAY_KEYS[event.key])
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and not session.playing:
            x, y = event.pos
            if self.canvas_rect.collidepoint(x, y):
                session.click(x - self.canvas_rect.x, y - self.canvas_rect.y)
            elif self.palette_rect.collidepoint(x, y):
                session.pick_palette(x - self.palette_rect.x, y - self.palette_rect.y)

    def on_key_down(self, event: pygame.event.Event) -> None:
        session = self.session
        ctrl = bool(event.mod & pygame.KMOD_CTRL)

        if session.playing:
            if event.key in (pygame.K_p, pygame.K_ESCAPE):
                session.exit_play()
            elif event.key in PLAY_KEYS:
                session.key_down(PLAY_KEYS[event.key])
            return

        if ctrl and event.key == pygame.K_s:
            fire_and_forget(session.save())
        elif ctrl and event.key == pygame.K_o:
            fire_and_forget(session.load())
        elif event.key == pygame.K_p:
            session.enter_play()
        elif event.key == pygame.K_d:
            session.select_tool(Tool.DRAW)
        elif event.key == pygame.K_e:
            session.select_tool(Tool.ERASE)
        elif event.key == pygame.K_v:
            session.toggle_visible(session.level.active_layer)
        elif pygame.K_1 <= event.key <= pygame.K_9:
            names = session.level.layer_names
            index = event.key - pygame.K_1
            if index < len(names):
                session.set_active_layer(names[index])
                session.mark_dirty()

    def draw(self) -> None:
        session = self.session
        rendered = session.render_if_dirty(self.canvas)
        if rendered and not session.playing:
            sheet = self.sprites.get(session.level.active_layer)
            session.compositor.render_palette(
                self.palette, sheet, session.selected, session.level.grid.cell_size
            )
        if rendered:
            self.screen.blit(self.canvas, self.canvas_rect)
            self.screen.blit(self.palette, self.palette_rect)
            caption = f"Tilesmith - {session.level.active_layer} / {session.tool.value}"
            if session.status:
                caption += f" - {session.status}"
            pygame.display.set_caption(caption)
            pygame.display.flip()


async def main(save_dir: Optional[Path] = None) -> None:
    Config.validate()
    log_info(Config.display())

    pygame.init()
    session = build_session(save_dir)
    width, height = session.level.grid.pixel_size
    screen = pygame.display.set_mode((width + PALETTE_WIDTH, height))
    app = EditorApp(session, screen)

    await session.persistence.initialize()
    for role, uri in Config.sheet_uris().items():
        app.sprites.request(role, uri)

    try:
        while app.running:
            for event in pygame.event.get():
                app.handle(event)
            app.draw()
            # Sleeping on the event loop lets the tick scheduler, sprite loads
            # and saves run between frames.
            await asyncio.sleep(FRAME_INTERVAL)
    finally:
        session.exit_play()
        await session.persistence.close()
        pygame.quit()


def run() -> None:
    parser = argparse.ArgumentParser(description="Tile-map editor with playtest mode")
    parser.add_argument("--save-dir", type=Path, default=None, help="Directory holding the save slot")
    parser.add_argument("--assets", type=Path, default=None, help="Directory holding the sprite sheets")
    args = parser.parse_args()
    if args.assets is not None:
        Config.ASSETS_DIR = args.assets
    asyncio.run(main(args.save_dir))


if __name__ == "__main__":
    run()
