"""Tests for the platformer tick rules."""

import pytest

from tilesmith.geometry import GridSpec
from tilesmith.level import Layer, Level
from tilesmith.physics import Actor, InputSnapshot, PhysicsConstants, PlatformerRules
from tilesmith.schemas import TileRef

IDLE = InputSnapshot()
RIGHT = InputSnapshot(right=True)
JUMP = InputSnapshot(jump=True)


def solid(level: Level, col: int, row: int) -> None:
    level.set_cell("foreground", col, row, TileRef(source_x=0, source_y=0, sheet_id="foreground"))


def run(rules, actor, level, inputs, ticks):
    for _ in range(ticks):
        actor = rules.apply_tick(actor, level, inputs).actor
    return actor


def rest_on_floor(rules, level) -> Actor:
    actor = rules.on_playtest_start(level)
    actor = run(rules, actor, level, IDLE, 10)
    assert actor.grounded
    return actor


def test_spawn_state():
    actor = PlatformerRules().on_playtest_start(Level.default())
    assert actor == Actor(x=2.0, y=8.0, vx=0.0, vy=0.0, grounded=False)


def test_actor_settles_on_occupied_cell(floor_level):
    rules = PlatformerRules()
    actor = rules.on_playtest_start(floor_level)

    actor = run(rules, actor, floor_level, IDLE, 60)

    assert actor.y == 9.0
    assert actor.x == 2.0
    assert actor.grounded is True
    assert actor.vy == 0.0


def test_grounded_actor_stays_at_rest(floor_level):
    rules = PlatformerRules()
    actor = rest_on_floor(rules, floor_level)

    for _ in range(120):
        actor = rules.apply_tick(actor, floor_level, IDLE).actor
        assert actor.grounded
        assert actor.vy == 0.0
        assert actor.y == 9.0


@pytest.mark.parametrize("start_y,floor_row", [(0.0, 11), (3.5, 6), (8.0, 9), (0.0, 1)])
def test_grounding_within_bounded_ticks(start_y, floor_row):
    level = Level.default()
    solid(level, 7, floor_row)
    rules = PlatformerRules()
    actor = Actor(x=7.0, y=start_y)

    for _ in range(120):
        actor = rules.apply_tick(actor, level, IDLE).actor
        if actor.grounded:
            break
    assert actor.grounded, f"never landed (y={actor.y})"
    assert actor.y == float(floor_row)


def test_terminal_fall_speed_and_bottom_clamp():
    level = Level.default()
    rules = PlatformerRules()
    actor = run(rules, Actor(x=4.0, y=0.0), level, IDLE, 200)

    assert actor.vy == 10.0
    assert actor.y == 11.0
    assert actor.grounded is False


def test_jump_from_ground_applies_impulse(floor_level):
    rules = PlatformerRules()
    actor = rest_on_floor(rules, floor_level)

    result = rules.apply_tick(actor, floor_level, JUMP)

    assert result.jumped is True
    assert result.actor.vy == -8.0
    assert result.actor.grounded is False
    assert result.actor.y == pytest.approx(8.2)


def test_no_double_jump(floor_level):
    rules = PlatformerRules()
    airborne = rules.apply_tick(rest_on_floor(rules, floor_level), floor_level, JUMP).actor

    with_jump = rules.apply_tick(airborne, floor_level, JUMP)
    without_jump = rules.apply_tick(airborne, floor_level, IDLE)

    assert with_jump.jumped is False
    assert with_jump.actor == without_jump.actor
    assert with_jump.actor.vy == -7.5


def test_jump_lands_again(floor_level):
    rules = PlatformerRules()
    actor = rules.apply_tick(rest_on_floor(rules, floor_level), floor_level, JUMP).actor

    actor = run(rules, actor, floor_level, IDLE, 60)

    assert actor.grounded is True
    assert actor.y == 9.0
    # Grounded again, so a new jump works
    assert rules.apply_tick(actor, floor_level, JUMP).jumped is True


def test_jump_ignored_when_airborne_from_start():
    level = Level.default()
    rules = PlatformerRules()
    result = rules.apply_tick(rules.on_playtest_start(level), level, JUMP)
    assert result.jumped is False
    assert result.actor.vy == 0.5


def test_walking_off_a_ledge_loses_ground(floor_level):
    rules = PlatformerRules()
    actor = rest_on_floor(rules, floor_level)

    actor = run(rules, actor, floor_level, RIGHT, 5)

    assert actor.x > 3.0
    assert actor.grounded is False
    assert rules.apply_tick(actor, floor_level, JUMP).jumped is False


def test_right_run_for_one_second_is_clamped():
    level = Level.default()
    rules = PlatformerRules()
    c = rules.constants
    actor = rules.on_playtest_start(level)

    actor = run(rules, actor, level, RIGHT, c.tick_rate)

    per_second = c.run_speed * c.step_scale * c.tick_rate
    assert actor.x == min(2.0 + per_second, level.grid.width - 1)
    assert actor.x == 19.0
    assert actor.vx == c.run_speed


def test_right_run_displacement_before_clamp():
    level = Level.default()
    rules = PlatformerRules()
    actor = run(rules, rules.on_playtest_start(level), level, RIGHT, 20)
    # 20 ticks * 3.0 * 0.1 cells
    assert actor.x == pytest.approx(8.0)


def test_velocity_units_are_six_cells_per_second_each():
    level = Level.default()
    rules = PlatformerRules()
    actor = run(rules, Actor(x=0.0, y=11.0), level, RIGHT, rules.constants.tick_rate)

    assert actor.vx == 3.0
    assert actor.x == pytest.approx(6 * actor.vx)


def test_horizontal_velocity_and_tie_break():
    rules = PlatformerRules()
    assert rules.horizontal_velocity(InputSnapshot(left=True)) == -3.0
    assert rules.horizontal_velocity(InputSnapshot(right=True)) == 3.0
    assert rules.horizontal_velocity(InputSnapshot()) == 0.0
    assert rules.horizontal_velocity(InputSnapshot(left=True, right=True)) == 3.0

    left_wins = PlatformerRules(PhysicsConstants(horizontal_priority="left"))
    assert left_wins.horizontal_velocity(InputSnapshot(left=True, right=True)) == -3.0


def test_left_edge_clamp():
    level = Level.default()
    rules = PlatformerRules()
    actor = run(rules, Actor(x=0.5, y=0.0), level, InputSnapshot(left=True), 10)
    assert actor.x == 0.0


def test_no_horizontal_collision_with_walls():
    level = Level.default()
    for row in range(12):
        solid(level, 5, row)
    rules = PlatformerRules()
    actor = run(rules, Actor(x=3.0, y=11.0), level, RIGHT, 20)
    assert actor.x > 6.0


def test_missing_solid_layer_means_no_collision():
    grid = GridSpec()
    level = Level([Layer.empty("background", "background", grid)], grid=grid)
    rules = PlatformerRules()
    actor = run(rules, rules.on_playtest_start(level), level, IDLE, 100)
    assert actor.y == 11.0
    assert actor.grounded is False


def test_rules_do_not_mutate_level(floor_level):
    rules = PlatformerRules()
    before = floor_level.snapshot()
    run(rules, rules.on_playtest_start(floor_level), floor_level, RIGHT, 30)
    assert floor_level.snapshot() == before


def test_custom_feet_offset_and_solid_layer():
    grid = GridSpec()
    level = Level([Layer.empty("platforms", "tiles", grid)], grid=grid)
    level.set_cell("platforms", 2, 9, TileRef(source_x=0, source_y=0, sheet_id="tiles"))
    rules = PlatformerRules(PhysicsConstants(solid_layer="platforms", feet_offset=0.5))

    actor = run(rules, rules.on_playtest_start(level), level, IDLE, 60)

    assert actor.grounded is True
    assert actor.y == 9.0
