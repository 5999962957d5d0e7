"""
Editor session: edit/play state machine, input buffering and tick scheduling.

The session owns the level, the paint tool state and, while playtesting, the
actor. It is driven entirely from one asyncio event loop:

1. Pointer input -> ``click`` -> PaintEngine mutates the level (Edit mode)
2. Keyboard input -> ``key_down``/``key_up`` -> InputState (Play mode)
3. TickScheduler -> ``tick`` -> PlatformerRules advances the actor (Play mode)
4. Once per frame -> ``render_if_dirty`` -> Compositor draws when something changed

Nothing runs concurrently with anything else, so no locking is needed. The
only cross-callback state is the held-key set, which input handlers write and
the tick reads through an immutable snapshot.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Set

from .audio import JumpCue
from .compositor import Compositor
from .errors import LevelParseError
from .level import Level
from .logging_utils import log_edit, log_error, log_info, log_play, log_success
from .paint import Mode, PaintEngine, PaletteSelection, Tool, pick_from_palette
from .persistence import PersistenceStrategy, InMemoryPersistence
from .physics import Actor, InputSnapshot, PlaytestRules, PlatformerRules

KEY_LEFT = "left"
KEY_RIGHT = "right"
KEY_JUMP = "jump"

PLAY_HINT = "Use Arrow Keys to move, Space to jump!"


class InputState:
    """Set of currently held keys plus a pending jump edge.

    Input handlers add/remove keys as events arrive; the tick takes a
    ``snapshot()`` at its start, which also consumes the jump edge.
    """

    def __init__(self) -> None:
        self.held: Set[str] = set()
        self._jump_pressed = False

    def press(self, key: str) -> None:
        # Key repeat delivers extra key-downs; only a fresh press is an edge.
        if key == KEY_JUMP and key not in self.held:
            self._jump_pressed = True
        self.held.add(key)

    def release(self, key: str) -> None:
        self.held.discard(key)

    def clear(self) -> None:
        self.held.clear()
        self._jump_pressed = False

    def snapshot(self) -> InputSnapshot:
        snap = InputSnapshot(
            left=KEY_LEFT in self.held,
            right=KEY_RIGHT in self.held,
            jump=self._jump_pressed,
        )
        self._jump_pressed = False
        return snap


class TickScheduler:
    """Runs a callback at a fixed rate in an asyncio task until stopped."""

    def __init__(self, rate: int = 60):
        self.rate = rate
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, callback: Callable[[], None]) -> None:
        self.stop()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(callback))

    def stop(self) -> None:
        """Cancel the schedule. No callback runs after this returns."""
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self, callback: Callable[[], None]) -> None:
        loop = asyncio.get_running_loop()
        interval = 1.0 / self.rate
        next_tick = loop.time()
        while True:
            callback()
            next_tick += interval
            delay = next_tick - loop.time()
            if delay < -interval:
                # Fell far behind (e.g. window dragged); resync rather than burst.
                next_tick = loop.time()
                delay = 0.0
            await asyncio.sleep(max(delay, 0.0))


class EditorSession:
    """
    One editing session over a single level.

    Fully decoupled - the level, rules, persistence, compositor, scheduler and
    audio cue are injected; defaults give an in-memory, headless session.
    """

    def __init__(
        self,
        level: Optional[Level] = None,
        *,
        rules: Optional[PlaytestRules] = None,
        persistence: Optional[PersistenceStrategy] = None,
        compositor: Optional[Compositor] = None,
        scheduler: Optional[TickScheduler] = None,
        jump_cue: Optional[JumpCue] = None,
    ):
        self.level = level or Level.default()
        self.rules = rules or PlatformerRules()
        self.persistence = persistence or InMemoryPersistence()
        self.compositor = compositor
        self.scheduler = scheduler
        self.jump_cue = jump_cue
        self.painter = PaintEngine(self.level)

        self.mode = Mode.EDIT
        self.tool = Tool.DRAW
        self.selected = PaletteSelection()
        self.actor: Optional[Actor] = None
        self.input = InputState()
        self.ticks = 0
        self.status = ""
        self.dirty = True

    # ------------------------------------------------------------------
    # Edit-mode operations
    # ------------------------------------------------------------------

    def select_tool(self, tool: Tool) -> None:
        self.tool = tool
        log_edit(f"Tool: {tool.value}")

    def select_tile(self, selection: PaletteSelection) -> None:
        self.selected = selection

    def pick_palette(self, local_x: float, local_y: float) -> PaletteSelection:
        """Select the palette tile under a click on the active layer's sheet."""
        selection = pick_from_palette(
            local_x, local_y, self.level.active_layer, self.level.grid.cell_size
        )
        self.select_tile(selection)
        self.dirty = True
        return selection

    def set_active_layer(self, name: str) -> None:
        self.level.set_active_layer(name)
        log_edit(f"Active layer: {name}")

    def toggle_visible(self, name: str) -> bool:
        visible = self.level.toggle_visible(name)
        self.dirty = True
        log_edit(f"Layer '{name}' {'shown' if visible else 'hidden'}")
        return visible

    def click(self, pixel_x: float, pixel_y: float) -> bool:
        """Apply the current tool at a canvas-local pixel position."""
        changed = self.painter.click(pixel_x, pixel_y, self.tool, self.selected, mode=self.mode)
        if changed:
            self.dirty = True
        return changed

    def apply_tool(self, col: int, row: int, layer_name: Optional[str] = None) -> bool:
        changed = self.painter.apply_tool(
            self.tool,
            layer_name or self.level.active_layer,
            col,
            row,
            self.selected,
            mode=self.mode,
        )
        if changed:
            self.dirty = True
        return changed

    # ------------------------------------------------------------------
    # Mode transitions
    # ------------------------------------------------------------------

    @property
    def playing(self) -> bool:
        return self.mode is Mode.PLAY

    def enter_play(self) -> None:
        if self.playing:
            return
        # Actor and input are reset before the first tick can run.
        self.actor = self.rules.on_playtest_start(self.level)
        self.input.clear()
        self.ticks = 0
        self.mode = Mode.PLAY
        self.dirty = True
        if self.scheduler is not None:
            self.scheduler.start(self.tick)
        self.status = PLAY_HINT
        log_play(f"Playtest started at ({self.actor.x:g}, {self.actor.y:g}). {PLAY_HINT}")

    def exit_play(self) -> None:
        if not self.playing:
            return
        if self.scheduler is not None:
            self.scheduler.stop()
        self.mode = Mode.EDIT
        self.actor = None
        self.input.clear()
        self.dirty = True
        self.status = ""
        log_play(f"Playtest stopped after {self.ticks} ticks")

    def toggle_play(self) -> None:
        if self.playing:
            self.exit_play()
        else:
            self.enter_play()

    # ------------------------------------------------------------------
    # Play-mode input and simulation
    # ------------------------------------------------------------------

    def key_down(self, key: str) -> None:
        if self.playing:
            self.input.press(key)

    def key_up(self, key: str) -> None:
        self.input.release(key)

    def tick(self) -> None:
        """Advance the playtest by one fixed step. No-op in Edit mode."""
        if not self.playing or self.actor is None:
            return
        result = self.rules.apply_tick(self.actor, self.level, self.input.snapshot())
        self.actor = result.actor
        self.ticks += 1
        self.dirty = True
        if result.jumped and self.jump_cue is not None:
            self.jump_cue.play()

    def run_ticks(self, count: int) -> Optional[Actor]:
        """Run ``count`` ticks synchronously and return the resulting actor."""
        for _ in range(count):
            self.tick()
        return self.actor

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def mark_dirty(self, *_: object) -> None:
        self.dirty = True

    def render_if_dirty(self, surface) -> bool:
        """Render once if any state changed since the last frame."""
        if not self.dirty or self.compositor is None:
            return False
        self.compositor.render(surface, self.level, mode=self.mode, actor=self.actor)
        self.dirty = False
        return True

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def save(self) -> None:
        # Capture the blob before yielding so later edits cannot leak into it.
        blob = self.level.serialize()
        await self.persistence.save(blob)
        self.status = "Level saved!"
        log_success(self.status)

    async def load(self) -> bool:
        """Replace the level from the save slot.

        Returns:
            True if a level was loaded; False if the slot is empty or invalid,
            in which case the current level is left untouched.
        """
        try:
            blob = await self.persistence.load()
            if blob is None:
                self.status = "No saved level found"
                log_error(self.status)
                return False
            level = Level.deserialize(blob, self.level.grid)
        except LevelParseError as exc:
            self.status = "No level loaded"
            log_error(f"{self.status}: {exc.reason}")
            return False

        if self.level.active_layer in level.layer_names:
            level.set_active_layer(self.level.active_layer)
        self._replace_level(level)
        self.status = "Level loaded!"
        log_success(self.status)
        return True

    def _replace_level(self, level: Level) -> None:
        self.level = level
        self.painter.level = level
        self.dirty = True
        log_info(f"Level has layers {', '.join(level.layer_names)}")


def fire_and_forget(coro: Awaitable[None]) -> asyncio.Task:
    """Schedule a session coroutine (save/load) without awaiting it."""
    task = asyncio.ensure_future(coro)
    task.add_done_callback(_report_failure)
    return task


def _report_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        log_error(f"Background task failed: {exc}")
