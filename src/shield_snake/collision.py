"""Classification of a proposed head move and the shield override rules."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import AbstractSet

from .config import (
    AMPUTATE_MIN_LENGTH,
    SHIELD_HIT_PENALTY_MS,
    SHIELD_SELF_PENALTY_MS,
)
from .grid import Cell, Direction, GridWorld
from .powerups import EffectKind, EffectManager
from .snake import Snake


class CollisionKind(str, enum.Enum):
    FREE = "free"
    WALL = "wall"
    OBSTACLE = "obstacle"
    SELF = "self"


class Outcome(enum.Enum):
    MOVE = "move"  # push the head as usual
    BOUNCE = "bounce"  # shield: push a substitute head and reverse
    BLOCKED = "blocked"  # shield: stay in place this tick
    FATAL = "fatal"


class BounceSeverity(enum.IntEnum):
    LIGHT = 10
    STRONG = 12


@dataclass(frozen=True, slots=True)
class Resolution:
    collision: CollisionKind
    outcome: Outcome
    head: Cell | None = None
    amputate: bool = False
    shield_left: float = 0.0

    @property
    def shielded(self) -> bool:
        return self.collision is not CollisionKind.FREE and self.outcome is not Outcome.FATAL

    @property
    def severity(self) -> BounceSeverity:
        if self.collision is CollisionKind.SELF:
            return BounceSeverity.STRONG
        return BounceSeverity.LIGHT


class CollisionResolver:
    """Evaluates wall, obstacle and self hits in that fixed order."""

    def __init__(self, world: GridWorld) -> None:
        self.world = world

    def classify(
        self,
        next_head: Cell,
        snake: Snake,
        obstacles: AbstractSet[Cell],
        target: Cell | None,
    ) -> CollisionKind:
        if not self.world.in_bounds(next_head):
            return CollisionKind.WALL
        if next_head in obstacles:
            return CollisionKind.OBSTACLE
        would_grow = target is not None and next_head == target
        # The tail vacates its cell this tick unless the snake is growing.
        skip_tail = not would_grow and snake.pending_growth == 0
        if snake.occupies(next_head, skip_tail=skip_tail):
            return CollisionKind.SELF
        return CollisionKind.FREE

    def resolve(
        self,
        snake: Snake,
        direction: Direction,
        obstacles: AbstractSet[Cell],
        target: Cell | None,
        effects: EffectManager,
    ) -> Resolution:
        """Classify the move along ``direction`` and apply the shield rules.

        A shielded hit burns part of the shield's remaining time on
        ``effects``; everything else is left for the caller to apply.
        """

        next_head = snake.head.offset(direction)
        kind = self.classify(next_head, snake, obstacles, target)
        if kind is CollisionKind.FREE:
            return Resolution(kind, Outcome.MOVE, head=next_head)

        if not effects.active(EffectKind.SHIELD):
            return Resolution(kind, Outcome.FATAL)

        if kind is CollisionKind.WALL:
            left = effects.consume(EffectKind.SHIELD, SHIELD_HIT_PENALTY_MS)
            return Resolution(
                kind, Outcome.BOUNCE, head=self.world.clamp(next_head), shield_left=left
            )
        if kind is CollisionKind.OBSTACLE:
            left = effects.consume(EffectKind.SHIELD, SHIELD_HIT_PENALTY_MS)
            return Resolution(kind, Outcome.BLOCKED, shield_left=left)

        left = effects.consume(EffectKind.SHIELD, SHIELD_SELF_PENALTY_MS)
        return Resolution(
            kind,
            Outcome.MOVE,
            head=next_head,
            amputate=len(snake) > AMPUTATE_MIN_LENGTH,
            shield_left=left,
        )
