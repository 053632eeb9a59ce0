"""Timed power-up effects: shield, slow and magnet."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .config import EFFECT_DURATION_MS, SLOW_STEPS_FLOOR, SLOW_STEPS_PENALTY
from .grid import Cell


class EffectKind(str, enum.Enum):
    SHIELD = "shield"
    SLOW = "slow"
    MAGNET = "magnet"


EFFECT_DURATIONS: dict[EffectKind, float] = {
    EffectKind.SHIELD: EFFECT_DURATION_MS,
    EffectKind.SLOW: EFFECT_DURATION_MS,
    EffectKind.MAGNET: EFFECT_DURATION_MS,
}


@dataclass(slots=True)
class PowerUp:
    """A pickup lying on the board until it expires or is collected."""

    kind: EffectKind
    cell: Cell
    remaining_on_board_ms: float


class EffectManager:
    """Remaining duration per effect kind; 0 means inactive."""

    def __init__(self) -> None:
        self._remaining: dict[EffectKind, float] = {kind: 0.0 for kind in EffectKind}

    def start(self, kind: EffectKind) -> None:
        # Restarting overwrites the timer, it never stacks.
        self._remaining[kind] = EFFECT_DURATIONS[kind]

    def tick(self, dt_ms: float) -> None:
        if dt_ms <= 0:
            return
        for kind, left in self._remaining.items():
            self._remaining[kind] = max(0.0, left - dt_ms)

    def consume(self, kind: EffectKind, amount_ms: float) -> float:
        """Burn part of an effect's time budget and return what is left."""
        left = max(0.0, self._remaining[kind] - amount_ms)
        self._remaining[kind] = left
        return left

    def remaining(self, kind: EffectKind) -> float:
        return self._remaining[kind]

    def active(self, kind: EffectKind) -> bool:
        return self._remaining[kind] > 0

    def effective_steps_per_second(self, base_rate: float) -> float:
        if self.active(EffectKind.SLOW):
            return max(SLOW_STEPS_FLOOR, base_rate - SLOW_STEPS_PENALTY)
        return base_rate

    def as_dict(self) -> dict[EffectKind, float]:
        return dict(self._remaining)
