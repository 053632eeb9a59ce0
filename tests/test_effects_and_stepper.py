"""
Tests for timed effects and the fixed-timestep stepper.
"""

from shield_snake.powerups import EffectKind, EffectManager
from shield_snake.stepper import Stepper


class TestEffectManager:
    def test_starts_inactive(self):
        effects = EffectManager()
        assert all(not effects.active(kind) for kind in EffectKind)

    def test_tick_floors_at_zero(self):
        effects = EffectManager()
        effects.start(EffectKind.MAGNET)
        effects.tick(6000)
        assert effects.remaining(EffectKind.MAGNET) == 500
        effects.tick(10_000)
        assert effects.remaining(EffectKind.MAGNET) == 0
        assert not effects.active(EffectKind.MAGNET)

    def test_restart_overwrites_instead_of_stacking(self):
        effects = EffectManager()
        effects.start(EffectKind.SHIELD)
        effects.tick(1000)
        effects.start(EffectKind.SHIELD)
        assert effects.remaining(EffectKind.SHIELD) == 6500

    def test_kinds_are_independent(self):
        effects = EffectManager()
        effects.start(EffectKind.SLOW)
        effects.tick(100)
        effects.start(EffectKind.SHIELD)
        assert effects.remaining(EffectKind.SLOW) == 6400
        assert effects.remaining(EffectKind.SHIELD) == 6500
        assert effects.remaining(EffectKind.MAGNET) == 0

    def test_consume_floors_at_zero(self):
        effects = EffectManager()
        effects.start(EffectKind.SHIELD)
        assert effects.consume(EffectKind.SHIELD, 2200) == 4300
        assert effects.consume(EffectKind.SHIELD, 5000) == 0

    def test_slow_lowers_step_rate(self):
        effects = EffectManager()
        assert effects.effective_steps_per_second(10) == 10
        effects.start(EffectKind.SLOW)
        assert effects.effective_steps_per_second(10) == 6
        assert effects.effective_steps_per_second(8) == 5
        assert effects.effective_steps_per_second(4) == 5

    def test_shield_and_magnet_keep_step_rate(self):
        effects = EffectManager()
        effects.start(EffectKind.SHIELD)
        effects.start(EffectKind.MAGNET)
        assert effects.effective_steps_per_second(12) == 12


class TestStepper:
    def test_clamps_frame_delta(self):
        stepper = Stepper(max_frame_ms=50)
        assert stepper.clamp(1000) == 50
        assert stepper.clamp(-5) == 0
        assert stepper.clamp(16) == 16

    def test_drains_whole_steps_and_keeps_remainder(self):
        stepper = Stepper()
        calls = []
        stepper.credit(250)
        ticks = stepper.drain(10, lambda: calls.append(1))
        assert ticks == 2
        assert len(calls) == 2
        assert stepper.accumulator_ms == 50

    def test_drain_stops_when_told(self):
        stepper = Stepper()
        calls = []
        stepper.credit(500)
        ticks = stepper.drain(10, lambda: calls.append(1), lambda: len(calls) < 1)
        assert ticks == 1
        assert stepper.accumulator_ms == 400

    def test_tick_that_clears_leaves_nothing_banked(self):
        stepper = Stepper()
        stepper.credit(150)
        ticks = stepper.drain(10, stepper.clear)
        assert ticks == 1
        assert stepper.accumulator_ms == 0

    def test_timestamps_become_deltas(self):
        stepper = Stepper()
        assert stepper.delta_since(1000) == 0
        assert stepper.delta_since(1016) == 16
        assert stepper.delta_since(2000) == 50
        stepper.reset_clock()
        assert stepper.delta_since(9000) == 0
