"""
Scripted Playtest (headless)

Builds a small level, saves and reloads it through the JSON save slot, then
drives the playtest with a fixed input script and prints the level as ASCII
every few ticks. No window or sound is needed.

Run: python examples/scripted_playtest/run.py [--save-dir DIR]
"""

import argparse
import asyncio
import math
import tempfile
from pathlib import Path
from typing import List, Tuple

from tilesmith import (
    EditorSession,
    JsonFilePersistence,
    Level,
    PaletteSelection,
    Tool,
)
from tilesmith.session import KEY_JUMP, KEY_RIGHT

GROUND_ROW = 11
PLATFORM = [(6, 8), (7, 8), (8, 8)]

# (tick, action, key): actions are applied before that tick runs.
SCRIPT: List[Tuple[int, str, str]] = [
    (20, "down", KEY_RIGHT),
    (35, "down", KEY_JUMP),
    (36, "up", KEY_JUMP),
    (60, "up", KEY_RIGHT),
]
TOTAL_TICKS = 120
PRINT_EVERY = 20


def build_level(session: EditorSession) -> None:
    """Paint a ground strip and a floating platform on the foreground."""
    session.set_active_layer("foreground")
    session.select_tool(Tool.DRAW)
    session.select_tile(PaletteSelection(64, 0, sheet="foreground"))
    for col in range(session.level.grid.width):
        session.apply_tool(col, GROUND_ROW)
    for col, row in PLATFORM:
        session.apply_tool(col, row)

    session.set_active_layer("background")
    session.select_tile(PaletteSelection(0, 0, sheet="background"))
    for col in range(0, session.level.grid.width, 4):
        session.apply_tool(col, 2)
    session.set_active_layer("foreground")


def render_ascii(session: EditorSession) -> str:
    level = session.level
    grid = level.grid
    rows = []
    actor_cell = None
    if session.actor is not None:
        actor_cell = (math.floor(session.actor.x), math.floor(session.actor.y))
    for row in range(grid.height):
        line = []
        for col in range(grid.width):
            if actor_cell == (col, row):
                line.append("@")
            elif level.get_cell("foreground", col, row) is not None:
                line.append("#")
            elif level.get_cell("background", col, row) is not None:
                line.append("~")
            else:
                line.append(".")
        rows.append("".join(line))
    return "\n".join(rows)


async def main(save_dir: Path) -> None:
    persistence = JsonFilePersistence(save_dir)
    await persistence.initialize()

    editor = EditorSession(persistence=persistence)
    build_level(editor)
    await editor.save()
    print(f"Saved level to {persistence.path}")

    # A fresh session sees only what was written to the slot.
    session = EditorSession(Level.default(), persistence=persistence)
    if not await session.load():
        print("Reload failed; aborting")
        return

    print("SCRIPTED PLAYTEST")
    print(render_ascii(session))

    session.enter_play()
    script = {(tick, action): key for tick, action, key in SCRIPT}
    for tick in range(TOTAL_TICKS):
        if (tick, "down") in script:
            session.key_down(script[(tick, "down")])
        if (tick, "up") in script:
            session.key_up(script[(tick, "up")])
        session.tick()

        if (tick + 1) % PRINT_EVERY == 0:
            actor = session.actor
            print(f'\n{"="*40}')
            print(
                f"Tick {tick + 1} | x={actor.x:.2f} y={actor.y:.2f} "
                f"vy={actor.vy:+.1f} grounded={actor.grounded}"
            )
            print(render_ascii(session))

    session.exit_play()
    await persistence.close()


def run() -> None:
    parser = argparse.ArgumentParser(description="Headless scripted playtest")
    parser.add_argument("--save-dir", type=Path, default=None, help="Directory for the save slot")
    args = parser.parse_args()
    if args.save_dir is not None:
        asyncio.run(main(args.save_dir))
        return
    with tempfile.TemporaryDirectory() as tmp:
        asyncio.run(main(Path(tmp)))


if __name__ == "__main__":
    run()
