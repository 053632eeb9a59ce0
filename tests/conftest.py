"""Shared fixtures for the simulation tests."""

import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from shield_snake.config import SimulationConfig
from shield_snake.core import SimulationCore
from shield_snake.grid import Cell, Direction
from shield_snake.snake import Snake


@pytest.fixture
def make_core():
    """Build a playing core; obstacles and power-ups are off unless asked."""

    def _make(**overrides):
        options = dict(obstacles_enabled=False, powerups_enabled=False, seed=7)
        options.update(overrides)
        core = SimulationCore(SimulationConfig(**options))
        core.reset()
        core.drain_events()
        return core

    return _make


@pytest.fixture
def core(make_core):
    return make_core()


def _arrange(
    core,
    cells,
    direction=Direction.RIGHT,
    pending=None,
    target=None,
    obstacles=(),
    powerups=(),
    pending_growth=0,
):
    """Overwrite the board with a hand-built scenario."""
    state = core.state
    state.snake = Snake((Cell(*c) for c in cells), pending_growth=pending_growth)
    state.direction = direction
    state.pending_direction = pending or direction
    state.target = Cell(*target) if target is not None else None
    state.obstacles = {Cell(*c) for c in obstacles}
    state.powerups = list(powerups)
    return state


@pytest.fixture
def arrange():
    return _arrange

