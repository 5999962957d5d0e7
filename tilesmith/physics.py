"""
Playtest physics rules.

This module provides the tick rules that move the playtest actor through a
painted level. Rules are pure: each tick takes the previous actor, the level
and an immutable snapshot of the input held at tick start, and returns a new
actor. Nothing here schedules ticks or reads live input (see
``tilesmith.session`` for that), which keeps the physics testable without a
window, keyboard or clock.

Model:
- Single body, fractional cell coordinates, velocity in "velocity units"
  (cells per tick = velocity * step_scale)
- Instantaneous horizontal run, constant gravity with a terminal fall speed
- Single jump impulse, only from the ground
- One-sided vertical collision against a single solid layer
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .config import Config
from .geometry import clamp, in_bounds
from .level import Level


@dataclass(frozen=True)
class PhysicsConstants:
    """Tunable constants for the platformer rules."""

    gravity: float = 0.5
    max_fall_speed: float = 10.0
    run_speed: float = 3.0
    jump_impulse: float = -8.0
    step_scale: float = 0.1
    # Fraction of a cell below the actor's origin where its feet are sampled.
    feet_offset: float = 0.9
    tick_rate: int = 60
    spawn: Tuple[float, float] = (2.0, 8.0)
    solid_layer: str = "foreground"
    # Which direction wins when left and right are both held.
    horizontal_priority: str = "right"

    @classmethod
    def from_config(cls) -> "PhysicsConstants":
        return cls(
            feet_offset=Config.FEET_OFFSET,
            tick_rate=Config.TICK_RATE,
            solid_layer=Config.SOLID_LAYER,
            horizontal_priority=Config.HORIZONTAL_PRIORITY,
        )

    @property
    def tick_interval(self) -> float:
        """Seconds between ticks."""
        return 1.0 / self.tick_rate


@dataclass(frozen=True)
class Actor:
    """Playtest character state. Lives only while Play mode is active.

    ``x``/``y`` are fractional cells. ``vx``/``vy`` are velocity units, not
    cells per second: one tick moves ``v * step_scale`` cells, so at the
    default 0.1 step and 60 Hz, cells per second = ``6 * v``.
    """

    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    grounded: bool = False

    @classmethod
    def spawn_at(cls, position: Tuple[float, float]) -> "Actor":
        return cls(x=float(position[0]), y=float(position[1]))


@dataclass(frozen=True)
class InputSnapshot:
    """Input state read once at the start of a tick."""

    left: bool = False
    right: bool = False
    # True if jump was pressed since the previous tick (edge, not level).
    jump: bool = False


@dataclass(frozen=True)
class TickResult:
    actor: Actor
    jumped: bool = False
    landed: bool = False


class PlaytestRules(ABC):
    """Abstract base class for playtest physics.

    Subclasses define how the actor is created when Play mode starts and how
    it evolves each fixed tick. Implementations must be deterministic: the
    same actor, level and input always produce the same result.
    """

    def __init__(self, constants: Optional[PhysicsConstants] = None):
        self.constants = constants or PhysicsConstants()

    @abstractmethod
    def apply_tick(self, actor: Actor, level: Level, inputs: InputSnapshot) -> TickResult:
        """
        Advance the actor by one fixed tick.

        Args:
            actor: Actor state at the start of the tick
            level: Level to collide against (read only)
            inputs: Input held at tick start

        Returns:
            TickResult with the new actor and the events that happened
        """
        pass

    def on_playtest_start(self, level: Level) -> Actor:
        """
        Hook called when entering Play mode. Returns the freshly spawned actor.
        """
        return Actor.spawn_at(self.constants.spawn)


class PlatformerRules(PlaytestRules):
    """Gravity, horizontal run and a single jump against one solid layer."""

    def horizontal_velocity(self, inputs: InputSnapshot) -> float:
        speed = self.constants.run_speed
        if inputs.left and inputs.right:
            return speed if self.constants.horizontal_priority == "right" else -speed
        if inputs.left:
            return -speed
        if inputs.right:
            return speed
        return 0.0

    def is_solid(self, level: Level, col: int, row: int) -> bool:
        layer = level.find_layer(self.constants.solid_layer)
        if layer is None or not in_bounds(col, row, level.grid):
            return False
        return layer.cell(col, row, level.grid) is not None

    def apply_tick(self, actor: Actor, level: Level, inputs: InputSnapshot) -> TickResult:
        c = self.constants

        # 1. Instantaneous horizontal velocity
        vx = self.horizontal_velocity(inputs)

        # 2. Gravity with terminal fall speed
        vy = min(actor.vy + c.gravity, c.max_fall_speed)

        # 3. Jump, only from the ground
        grounded = actor.grounded
        jumped = False
        if inputs.jump and grounded:
            vy = c.jump_impulse
            grounded = False
            jumped = True

        # 4. Integrate
        x = actor.x + vx * c.step_scale
        y = actor.y + vy * c.step_scale

        # 5. One-sided vertical collision: platforms only stop a falling actor
        landed = False
        if vy >= 0:
            col = math.floor(x)
            feet_row = math.floor(y + c.feet_offset)
            if self.is_solid(level, col, feet_row):
                y = float(feet_row)
                vy = 0.0
                landed = True
        grounded = landed

        # 6. Keep the actor on the grid
        x, y = clamp(x, y, level.grid)

        new_actor = replace(actor, x=x, y=y, vx=vx, vy=vy, grounded=grounded)
        return TickResult(actor=new_actor, jumped=jumped, landed=landed)
