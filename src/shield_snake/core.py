"""Deterministic simulation core: one tick function plus the public surface
(state snapshots, queued input, lifecycle and emitted signals)."""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass, field
from typing import Callable

from .collision import CollisionKind, CollisionResolver, Outcome
from .config import (
    AMPUTATE_SEGMENTS,
    MAGNET_PULL_CHANCE,
    MAGNET_RANGE,
    OBSTACLE_SCORE_STEP,
    POWERUP_POINTS,
    START_LENGTH,
    TARGET_GROWTH,
    TARGET_POINTS,
    ConfigError,
    SimulationConfig,
)
from .events import (
    Amputated,
    GameOver,
    Listener,
    PhaseChanged,
    PowerupExpired,
    PowerupSpawned,
    PowerupStarted,
    ScoreChanged,
    ShieldBounce,
    SimulationEvent,
    TargetConsumed,
)
from .grid import Cell, Direction, GridWorld
from .powerups import EffectKind, EffectManager, PowerUp
from .snake import Snake
from .spawn import SpawnManager
from .stepper import Stepper

logger = logging.getLogger(__name__)


class Phase(str, enum.Enum):
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(slots=True)
class SimulationState:
    """Mutable game state, owned and mutated only by ``SimulationCore``."""

    snake: Snake
    direction: Direction = Direction.RIGHT
    pending_direction: Direction = Direction.RIGHT
    score: int = 0
    obstacles: set[Cell] = field(default_factory=set)
    target: Cell | None = None
    powerups: list[PowerUp] = field(default_factory=list)
    effects: EffectManager = field(default_factory=EffectManager)
    phase: Phase = Phase.MENU
    game_over_reason: CollisionKind | None = None
    ticks: int = 0


@dataclass(frozen=True, slots=True)
class PowerUpView:
    kind: EffectKind
    cell: Cell
    remaining_on_board_ms: float


@dataclass(frozen=True, slots=True)
class SimulationSnapshot:
    """Read-only copy of the discrete state handed to collaborators."""

    phase: Phase
    score: int
    snake: tuple[Cell, ...]
    pending_growth: int
    direction: Direction
    pending_direction: Direction
    obstacles: frozenset[Cell]
    target: Cell | None
    powerups: tuple[PowerUpView, ...]
    effects: tuple[tuple[EffectKind, float], ...]
    steps_per_second: float
    game_over_reason: CollisionKind | None
    ticks: int

    @property
    def head(self) -> Cell:
        return self.snake[0]

    def effect_remaining(self, kind: EffectKind) -> float:
        return dict(self.effects)[kind]


class SimulationCore:
    """Composes grid, spawner, snake, effects, resolver and stepper.

    Hosts drive it with ``advance(delta_ms)`` (or ``frame(timestamp_ms)``)
    once per rendered frame, feed input through ``queue_direction`` and
    react to signals from ``drain_events`` or ``subscribe``.
    """

    def __init__(
        self, config: SimulationConfig | None = None, queue_events: bool = True
    ) -> None:
        self.config = config or SimulationConfig()
        self.queue_events = queue_events
        self.world = GridWorld(self.config.cols, self.config.rows)
        self.rng = random.Random(self.config.seed)
        self.resolver = CollisionResolver(self.world)
        self.stepper = Stepper()
        self.steps_per_second: float = float(self.config.base_steps_per_second)
        self._events: list[SimulationEvent] = []
        self._listeners: list[Listener] = []
        self.state = self._build_state(Phase.MENU)
        self.spawner = SpawnManager(self.world, self.state, self.rng)
        self._populate_board()

    # --- Setup ---------------------------------------------------------

    def _build_state(self, phase: Phase) -> SimulationState:
        head = Cell(self.world.cols // 2, self.world.rows // 2)
        length = min(START_LENGTH, head.x + 1)
        return SimulationState(
            snake=Snake.spawn(head, length, Direction.RIGHT), phase=phase
        )

    def _populate_board(self) -> None:
        self.spawner.spawn_target()
        self.spawner.spawn_obstacles(
            self.config.difficulty, enabled=self.config.obstacles_enabled
        )

    def _check_grid(self, config: SimulationConfig) -> None:
        if (config.cols, config.rows) != (self.world.cols, self.world.rows):
            raise ConfigError(
                f"grid is fixed at {self.world.cols}x{self.world.rows} for this"
                f" simulation, got {config.cols}x{config.rows}"
            )

    def reset(
        self, config: SimulationConfig | None = None, phase: Phase = Phase.PLAYING
    ) -> SimulationSnapshot:
        """Re-initialise snake, score, effects and board from any phase."""
        if config is not None:
            self._check_grid(config)
            self.config = config
            if config.seed is not None:
                self.rng.seed(config.seed)
        self.state = self._build_state(phase)
        self.spawner = SpawnManager(self.world, self.state, self.rng)
        self.stepper.clear()
        self.steps_per_second = float(self.config.base_steps_per_second)
        self._populate_board()
        logger.info(
            "reset: %dx%d, difficulty=%s, phase=%s",
            self.world.cols,
            self.world.rows,
            self.config.difficulty.value,
            phase.value,
        )
        self._emit(PhaseChanged(phase))
        self._emit(ScoreChanged(score=0, delta=0))
        return self.snapshot()

    def update_settings(self, config: SimulationConfig) -> None:
        """Apply new options mid-run without restarting the round."""
        self._check_grid(config)
        previous = self.config
        self.config = config
        self.steps_per_second = self.state.effects.effective_steps_per_second(
            config.base_steps_per_second
        )
        if (
            config.difficulty is not previous.difficulty
            or config.obstacles_enabled != previous.obstacles_enabled
        ):
            self.spawner.spawn_obstacles(
                config.difficulty, enabled=config.obstacles_enabled
            )
        if not config.powerups_enabled:
            self.state.powerups.clear()

    # --- Signals -------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` for every signal; returns an unsubscribe hook.

        Listeners do not drain the queue. A host that only subscribes should
        build the core with ``queue_events=False`` or keep calling
        ``drain_events``.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def drain_events(self) -> list[SimulationEvent]:
        events, self._events = self._events, []
        return events

    def _emit(self, event: SimulationEvent) -> None:
        if self.queue_events:
            self._events.append(event)
        for listener in list(self._listeners):
            listener(event)

    # --- Lifecycle -----------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def _set_phase(self, phase: Phase) -> None:
        logger.info("phase %s -> %s", self.state.phase.value, phase.value)
        self.state.phase = phase
        self._emit(PhaseChanged(phase))

    def _ignored(self, action: str) -> bool:
        logger.debug("%s ignored in phase %s", action, self.state.phase.value)
        return False

    def start(self) -> bool:
        if self.state.phase is not Phase.MENU:
            return self._ignored("start")
        self.stepper.reset_clock()
        self._set_phase(Phase.PLAYING)
        return True

    def pause(self) -> bool:
        if self.state.phase is not Phase.PLAYING:
            return self._ignored("pause")
        self._set_phase(Phase.PAUSED)
        return True

    def resume(self) -> bool:
        if self.state.phase is not Phase.PAUSED:
            return self._ignored("resume")
        # Unspent time stays banked; only the timestamp reference restarts.
        self.stepper.reset_clock()
        self._set_phase(Phase.PLAYING)
        return True

    def toggle_pause(self) -> bool:
        if self.state.phase is Phase.PAUSED:
            return self.resume()
        return self.pause()

    def _playing(self) -> bool:
        return self.state.phase is Phase.PLAYING

    # --- Input ---------------------------------------------------------

    def queue_direction(self, dx: int, dy: int) -> bool:
        """Queue a turn for the next tick; instant reversals are dropped."""
        direction = Direction.from_vector(dx, dy)
        state = self.state
        if len(state.snake) > 1 and direction is state.direction.opposite:
            return False
        state.pending_direction = direction
        return True

    # --- Frame driving -------------------------------------------------

    def advance(self, delta_ms: float) -> SimulationSnapshot:
        """Credit one host frame and run every whole tick it pays for."""
        if self._playing():
            dt = self.stepper.clamp(delta_ms)
            self._update_timers(dt)
            self.stepper.credit(dt)
            self.stepper.drain(self.steps_per_second, self.step, self._playing)
        return self.snapshot()

    tick = advance

    def frame(self, timestamp_ms: float) -> SimulationSnapshot:
        """Like ``advance`` but derives the delta from a host timestamp."""
        return self.advance(self.stepper.delta_since(timestamp_ms))

    def _update_timers(self, dt_ms: float) -> None:
        state = self.state
        state.effects.tick(dt_ms)
        self.steps_per_second = state.effects.effective_steps_per_second(
            self.config.base_steps_per_second
        )
        if not state.powerups or dt_ms <= 0:
            return
        survivors: list[PowerUp] = []
        for powerup in state.powerups:
            powerup.remaining_on_board_ms -= dt_ms
            if powerup.remaining_on_board_ms <= 0:
                self._emit(PowerupExpired(powerup.kind, powerup.cell))
                continue
            survivors.append(powerup)
        state.powerups = survivors

    # --- Tick ----------------------------------------------------------

    def step(self) -> None:
        """Advance the snake by exactly one cell and resolve the outcome."""
        state = self.state
        if state.phase is not Phase.PLAYING:
            return
        state.ticks += 1
        state.direction = state.pending_direction
        snake = state.snake
        origin = snake.head

        resolution = self.resolver.resolve(
            snake, state.direction, state.obstacles, state.target, state.effects
        )
        if resolution.outcome is Outcome.FATAL:
            self._game_over(resolution.collision)
            return
        if resolution.shielded:
            self._emit(
                ShieldBounce(
                    resolution.collision,
                    resolution.severity,
                    origin,
                    resolution.shield_left,
                )
            )
        if resolution.outcome is Outcome.BLOCKED:
            return
        if resolution.outcome is Outcome.BOUNCE:
            state.direction = state.direction.opposite
            state.pending_direction = state.direction
        if resolution.amputate:
            removed = snake.amputate(AMPUTATE_SEGMENTS)
            self._emit(Amputated(tuple(removed)))

        snake.push_head(resolution.head)  # type: ignore[arg-type]

        self._consume_target()
        self._collect_powerups()
        snake.settle_tail()

        spawned = self.spawner.maybe_spawn_powerup(
            self.config.difficulty, enabled=self.config.powerups_enabled
        )
        if spawned is not None:
            self._emit(PowerupSpawned(spawned.kind, spawned.cell))
        self._magnet_drift()

    def _add_score(self, points: int) -> None:
        self.state.score += points
        self._emit(ScoreChanged(score=self.state.score, delta=points))

    def _consume_target(self) -> None:
        state = self.state
        eaten = state.target
        if eaten is None or state.snake.head != eaten:
            return
        state.snake.grow(TARGET_GROWTH)
        self._add_score(TARGET_POINTS)
        self._emit(TargetConsumed(eaten))
        self.spawner.spawn_target()
        if self.config.obstacles_enabled and state.score % OBSTACLE_SCORE_STEP == 0:
            added = self.spawner.add_threshold_obstacles(self.config.difficulty)
            logger.debug("score %d: added obstacles %s", state.score, added)

    def _collect_powerups(self) -> None:
        state = self.state
        head = state.snake.head
        for idx in range(len(state.powerups) - 1, -1, -1):
            powerup = state.powerups[idx]
            if powerup.cell != head:
                continue
            state.effects.start(powerup.kind)
            self._emit(PowerupStarted(powerup.kind))
            self._add_score(POWERUP_POINTS)
            del state.powerups[idx]

    def _magnet_drift(self) -> None:
        state = self.state
        target = state.target
        if not state.effects.active(EffectKind.MAGNET) or target is None:
            return
        head = state.snake.head
        dx = head.x - target.x
        dy = head.y - target.y
        if abs(dx) + abs(dy) > MAGNET_RANGE:
            return
        if self.rng.random() >= MAGNET_PULL_CHANCE:
            return
        if abs(dx) > abs(dy):
            step = Cell((dx > 0) - (dx < 0), 0)
        else:
            step = Cell(0, (dy > 0) - (dy < 0))
        moved = Cell(target.x + step.x, target.y + step.y)
        if (
            self.world.in_bounds(moved)
            and not state.snake.occupies(moved)
            and moved not in state.obstacles
        ):
            state.target = moved

    def _game_over(self, reason: CollisionKind) -> None:
        state = self.state
        state.game_over_reason = reason
        logger.info("game over (%s) at score %d", reason.value, state.score)
        self._set_phase(Phase.GAME_OVER)
        self._emit(GameOver(reason=reason, score=state.score))

    # --- Snapshot ------------------------------------------------------

    def snapshot(self) -> SimulationSnapshot:
        state = self.state
        return SimulationSnapshot(
            phase=state.phase,
            score=state.score,
            snake=state.snake.cells(),
            pending_growth=state.snake.pending_growth,
            direction=state.direction,
            pending_direction=state.pending_direction,
            obstacles=frozenset(state.obstacles),
            target=state.target,
            powerups=tuple(
                PowerUpView(p.kind, p.cell, p.remaining_on_board_ms)
                for p in state.powerups
            ),
            effects=tuple(state.effects.as_dict().items()),
            steps_per_second=self.steps_per_second,
            game_over_reason=state.game_over_reason,
            ticks=state.ticks,
        )
