"""Signals emitted by the simulation for render/audio collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Union

from .collision import BounceSeverity, CollisionKind
from .grid import Cell
from .powerups import EffectKind

if TYPE_CHECKING:
    from .core import Phase


@dataclass(frozen=True, slots=True)
class TargetConsumed:
    cell: Cell


@dataclass(frozen=True, slots=True)
class PowerupStarted:
    kind: EffectKind


@dataclass(frozen=True, slots=True)
class PowerupSpawned:
    kind: EffectKind
    cell: Cell


@dataclass(frozen=True, slots=True)
class PowerupExpired:
    kind: EffectKind
    cell: Cell


@dataclass(frozen=True, slots=True)
class ShieldBounce:
    cause: CollisionKind
    severity: BounceSeverity
    at: Cell
    shield_left: float


@dataclass(frozen=True, slots=True)
class Amputated:
    removed: tuple[Cell, ...]


@dataclass(frozen=True, slots=True)
class GameOver:
    reason: CollisionKind
    score: int


@dataclass(frozen=True, slots=True)
class ScoreChanged:
    score: int
    delta: int


@dataclass(frozen=True, slots=True)
class PhaseChanged:
    phase: Phase


SimulationEvent = Union[
    TargetConsumed,
    PowerupStarted,
    PowerupSpawned,
    PowerupExpired,
    ShieldBounce,
    Amputated,
    GameOver,
    ScoreChanged,
    PhaseChanged,
]
Listener = Callable[[SimulationEvent], None]
