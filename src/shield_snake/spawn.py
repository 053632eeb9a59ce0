"""Collision-free placement of targets, obstacles and power-ups."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from .config import (
    MAX_POWERUPS,
    OBSTACLE_COUNTS,
    OBSTACLE_SAFE_DISTANCE,
    POWERUP_BOARD_MS,
    POWERUP_CHANCES,
    SPAWN_ATTEMPTS,
    SPAWN_FALLBACK,
    THRESHOLD_OBSTACLES,
    Difficulty,
)
from .grid import Cell, GridWorld
from .powerups import EffectKind, PowerUp

if TYPE_CHECKING:
    from .core import SimulationState

logger = logging.getLogger(__name__)


class SpawnManager:
    """Samples free cells against the live occupancy of a simulation state.

    All randomness goes through the injected ``rng`` so a seeded core
    replays identically.
    """

    def __init__(
        self, world: GridWorld, state: SimulationState, rng: random.Random
    ) -> None:
        self.world = world
        self.state = state
        self.rng = rng

    def occupied(self) -> set[Cell]:
        """Snake, obstacle, power-up and target cells."""
        occ: set[Cell] = set(self.state.snake)
        occ.update(self.state.obstacles)
        occ.update(p.cell for p in self.state.powerups)
        if self.state.target is not None:
            occ.add(self.state.target)
        return occ

    def is_free(self, cell: Cell) -> bool:
        return self.world.in_bounds(cell) and cell not in self.occupied()

    def random_free_cell(self, tries: int = SPAWN_ATTEMPTS) -> Cell:
        occ = self.occupied()
        for _ in range(tries):
            cell = Cell(
                self.rng.randrange(self.world.cols), self.rng.randrange(self.world.rows)
            )
            if cell not in occ:
                return cell
        # Crowded board: fall back to a row-major scan.
        for cell in self.world.cells():
            if cell not in occ:
                return cell
        logger.warning("board is full, spawning at fallback cell %s", SPAWN_FALLBACK)
        return Cell(*SPAWN_FALLBACK)

    def spawn_target(self) -> Cell:
        # The old target must not block its own replacement.
        self.state.target = None
        self.state.target = self.random_free_cell()
        return self.state.target

    def spawn_obstacles(self, difficulty: Difficulty, enabled: bool = True) -> int:
        """Regenerate the obstacle set and return how many were placed."""
        self.state.obstacles = set()
        if not enabled:
            return 0

        head = self.state.snake.head
        requested = OBSTACLE_COUNTS[difficulty]
        for _ in range(requested):
            cell = self.random_free_cell()
            if cell.manhattan(head) < OBSTACLE_SAFE_DISTANCE:
                continue
            if not self.is_free(cell):
                continue
            self.state.obstacles.add(cell)
        placed = len(self.state.obstacles)
        logger.debug("spawned %d/%d obstacles (%s)", placed, requested, difficulty.value)
        return placed

    def add_threshold_obstacles(self, difficulty: Difficulty) -> list[Cell]:
        added: list[Cell] = []
        for _ in range(THRESHOLD_OBSTACLES[difficulty]):
            cell = self.random_free_cell()
            if self.is_free(cell):
                self.state.obstacles.add(cell)
                added.append(cell)
        return added

    def maybe_spawn_powerup(
        self, difficulty: Difficulty, enabled: bool = True
    ) -> PowerUp | None:
        if not enabled or len(self.state.powerups) >= MAX_POWERUPS:
            return None
        if self.rng.random() >= POWERUP_CHANCES[difficulty]:
            return None
        kind = self.rng.choice(list(EffectKind))
        cell = self.random_free_cell()
        if not self.is_free(cell):
            return None
        powerup = PowerUp(kind=kind, cell=cell, remaining_on_board_ms=POWERUP_BOARD_MS)
        self.state.powerups.append(powerup)
        return powerup
