"""Fixed-timestep accumulator decoupling simulation rate from frame rate."""

from __future__ import annotations

from typing import Callable

from .config import MAX_FRAME_MS


class Stepper:
    """Credits clamped frame deltas and drains them one fixed step at a time."""

    def __init__(self, max_frame_ms: float = MAX_FRAME_MS) -> None:
        self.max_frame_ms = max_frame_ms
        self.accumulator_ms: float = 0.0
        self.last_timestamp_ms: float | None = None

    def clamp(self, delta_ms: float) -> float:
        return max(0.0, min(float(delta_ms), self.max_frame_ms))

    def delta_since(self, timestamp_ms: float) -> float:
        """Turn an absolute host timestamp into a clamped frame delta."""
        if self.last_timestamp_ms is None:
            self.last_timestamp_ms = timestamp_ms
        delta = timestamp_ms - self.last_timestamp_ms
        self.last_timestamp_ms = timestamp_ms
        return self.clamp(delta)

    def reset_clock(self) -> None:
        """Forget the last timestamp so the next frame credits nothing."""
        self.last_timestamp_ms = None

    def clear(self) -> None:
        self.accumulator_ms = 0.0
        self.last_timestamp_ms = None

    def credit(self, delta_ms: float) -> float:
        self.accumulator_ms += delta_ms
        return self.accumulator_ms

    def drain(
        self,
        steps_per_second: float,
        tick: Callable[[], None],
        keep_going: Callable[[], bool] = lambda: True,
    ) -> int:
        """Run ``tick`` once per whole step held in the accumulator.

        Stops early when ``keep_going`` turns false (game over mid-frame).
        The step is paid for before ``tick`` runs, so a tick that calls
        ``clear`` leaves the accumulator empty. Returns the number of ticks
        run.
        """

        interval_ms = 1000.0 / max(1.0, steps_per_second)
        ticks = 0
        while self.accumulator_ms >= interval_ms and keep_going():
            self.accumulator_ms -= interval_ms
            tick()
            ticks += 1
        return ticks
