"""
Tests for collision classification and shield overrides, driven through
single ticks of the core.
"""

from shield_snake.collision import BounceSeverity, CollisionKind
from shield_snake.core import Phase
from shield_snake.events import Amputated, GameOver, ShieldBounce
from shield_snake.grid import Cell, Direction
from shield_snake.powerups import EffectKind
from shield_snake.snake import Snake


class TestClassify:
    def test_order_is_wall_then_obstacle_then_self(self, core):
        resolver = core.resolver
        snake = Snake([(1, 1), (0, 1)])
        assert resolver.classify(Cell(-1, 1), snake, {Cell(-1, 1)}, None) is CollisionKind.WALL
        assert resolver.classify(Cell(0, 1), snake, {Cell(0, 1)}, None) is CollisionKind.OBSTACLE
        assert resolver.classify(Cell(2, 1), snake, set(), None) is CollisionKind.FREE

    def test_tail_counts_when_move_eats_target(self, core):
        snake = Snake([(4, 6), (5, 6), (5, 5), (4, 5)])
        assert core.resolver.classify(Cell(4, 5), snake, set(), None) is CollisionKind.FREE
        assert (
            core.resolver.classify(Cell(4, 5), snake, set(), Cell(4, 5))
            is CollisionKind.SELF
        )


class TestWall:
    def test_wall_without_shield_ends_game(self, core, arrange):
        arrange(core, [(33, 9), (32, 9), (31, 9), (30, 9)])
        core.step()
        assert core.phase is Phase.GAME_OVER
        assert core.state.game_over_reason is CollisionKind.WALL
        events = core.drain_events()
        assert GameOver(reason=CollisionKind.WALL, score=0) in events

    def test_shield_bounces_off_wall(self, core, arrange):
        """Shield at 6500ms loses 2200ms and the snake reverses."""
        arrange(core, [(33, 9), (32, 9), (31, 9), (30, 9)])
        core.state.effects.start(EffectKind.SHIELD)
        core.step()
        assert core.phase is Phase.PLAYING
        assert core.state.effects.remaining(EffectKind.SHIELD) == 4300
        assert core.state.direction is Direction.LEFT
        assert core.state.pending_direction is Direction.LEFT
        assert core.state.snake.head == Cell(33, 9)
        assert len(core.state.snake) == 4
        assert all(core.world.in_bounds(c) for c in core.state.snake)
        events = core.drain_events()
        assert ShieldBounce(CollisionKind.WALL, BounceSeverity.LIGHT, Cell(33, 9), 4300) in events

    def test_bounce_reports_exhausted_shield(self, core, arrange):
        arrange(core, [(33, 9), (32, 9), (31, 9)])
        core.state.effects.start(EffectKind.SHIELD)
        core.state.effects.consume(EffectKind.SHIELD, 5500)
        core.step()
        assert core.phase is Phase.PLAYING
        assert not core.state.effects.active(EffectKind.SHIELD)
        bounces = [e for e in core.drain_events() if isinstance(e, ShieldBounce)]
        assert [b.shield_left for b in bounces] == [0]


class TestObstacle:
    def test_obstacle_without_shield_ends_game(self, core, arrange):
        arrange(core, [(5, 5), (4, 5), (3, 5)], obstacles=[(6, 5)])
        core.step()
        assert core.phase is Phase.GAME_OVER
        assert core.state.game_over_reason is CollisionKind.OBSTACLE

    def test_shield_blocks_movement(self, core, arrange):
        arrange(core, [(5, 5), (4, 5), (3, 5)], obstacles=[(6, 5)])
        core.state.effects.start(EffectKind.SHIELD)
        core.step()
        assert core.phase is Phase.PLAYING
        assert core.state.snake.cells() == (Cell(5, 5), Cell(4, 5), Cell(3, 5))
        assert core.state.effects.remaining(EffectKind.SHIELD) == 4300
        assert Cell(6, 5) in core.state.obstacles
        bounces = [e for e in core.drain_events() if isinstance(e, ShieldBounce)]
        assert bounces == [
            ShieldBounce(CollisionKind.OBSTACLE, BounceSeverity.LIGHT, Cell(5, 5), 4300)
        ]


class TestSelf:
    def test_moving_into_vacating_tail_is_safe(self, core, arrange):
        arrange(core, [(4, 6), (5, 6), (5, 5), (4, 5)], direction=Direction.UP)
        core.step()
        assert core.phase is Phase.PLAYING
        assert core.state.snake.cells() == (Cell(4, 5), Cell(4, 6), Cell(5, 6), Cell(5, 5))

    def test_tail_is_solid_while_growing(self, core, arrange):
        arrange(
            core, [(4, 6), (5, 6), (5, 5), (4, 5)], direction=Direction.UP, pending_growth=1
        )
        core.step()
        assert core.phase is Phase.GAME_OVER
        assert core.state.game_over_reason is CollisionKind.SELF

    def test_biting_body_ends_game(self, core, arrange):
        arrange(core, [(5, 5), (6, 5), (6, 6), (5, 6), (4, 6)], direction=Direction.DOWN)
        core.step()
        assert core.phase is Phase.GAME_OVER
        assert core.state.game_over_reason is CollisionKind.SELF

    def test_shield_amputates_long_snake(self, core, arrange):
        body = [(2, 2), (3, 2), (3, 3), (2, 3), (1, 3), (0, 3), (0, 4), (0, 5)]
        arrange(core, body, direction=Direction.LEFT, pending=Direction.DOWN)
        core.state.effects.start(EffectKind.SHIELD)
        core.step()
        assert core.phase is Phase.PLAYING
        assert core.state.effects.remaining(EffectKind.SHIELD) == 4000
        assert core.state.snake.head == Cell(2, 3)
        assert len(core.state.snake) == 6
        events = core.drain_events()
        assert ShieldBounce(CollisionKind.SELF, BounceSeverity.STRONG, Cell(2, 2), 4000) in events
        assert Amputated((Cell(0, 4), Cell(0, 5))) in events

    def test_shield_keeps_short_snake_whole(self, core, arrange):
        arrange(core, [(5, 5), (6, 5), (6, 6), (5, 6), (4, 6)], direction=Direction.DOWN)
        core.state.effects.start(EffectKind.SHIELD)
        core.step()
        assert core.phase is Phase.PLAYING
        assert len(core.state.snake) == 5
        assert not any(isinstance(e, Amputated) for e in core.drain_events())

    def test_shield_amputates_at_seven_segments(self, core, arrange):
        body = [(2, 2), (3, 2), (3, 3), (2, 3), (1, 3), (0, 3), (0, 4)]
        arrange(core, body, direction=Direction.LEFT, pending=Direction.DOWN)
        core.state.effects.start(EffectKind.SHIELD)
        core.step()
        assert core.phase is Phase.PLAYING
        assert core.state.snake.head == Cell(2, 3)
        assert len(core.state.snake) == 5
        assert Amputated((Cell(0, 3), Cell(0, 4))) in core.drain_events()

    def test_shield_keeps_six_segments_whole(self, core, arrange):
        body = [(2, 2), (3, 2), (3, 3), (2, 3), (1, 3), (0, 3)]
        arrange(core, body, direction=Direction.LEFT, pending=Direction.DOWN)
        core.state.effects.start(EffectKind.SHIELD)
        core.step()
        assert core.phase is Phase.PLAYING
        assert core.state.effects.remaining(EffectKind.SHIELD) == 4000
        assert core.state.snake.head == Cell(2, 3)
        assert len(core.state.snake) == 6
        assert not any(isinstance(e, Amputated) for e in core.drain_events())
