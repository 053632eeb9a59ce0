"""
Tests for grid geometry and the snake body.
"""

import pytest

from shield_snake.config import ConfigError
from shield_snake.grid import Cell, Direction, GridWorld, board_for_aspect
from shield_snake.snake import Snake


class TestGridWorld:
    def test_bounds(self):
        world = GridWorld(34, 19)
        assert world.in_bounds(Cell(0, 0))
        assert world.in_bounds(Cell(33, 18))
        assert not world.in_bounds(Cell(34, 0))
        assert not world.in_bounds(Cell(0, 19))
        assert not world.in_bounds(Cell(-1, 5))

    def test_clamp_pulls_cells_back_inside(self):
        world = GridWorld(34, 19)
        assert world.clamp(Cell(34, 9)) == Cell(33, 9)
        assert world.clamp(Cell(-1, -1)) == Cell(0, 0)
        assert world.clamp(Cell(5, 5)) == Cell(5, 5)

    def test_cells_are_row_major(self):
        world = GridWorld(3, 2)
        assert list(world.cells())[:4] == [Cell(0, 0), Cell(1, 0), Cell(2, 0), Cell(0, 1)]
        assert world.size == 6

    def test_non_positive_dimensions_fail_fast(self):
        with pytest.raises(ConfigError):
            GridWorld(0, 10)

    def test_board_for_aspect(self):
        assert board_for_aspect(1920, 1080) == (34, 19)
        assert board_for_aspect(1080, 1920) == (19, 34)
        with pytest.raises(ConfigError):
            board_for_aspect(0, 100)


class TestDirection:
    def test_from_vector(self):
        assert Direction.from_vector(1, 0) is Direction.RIGHT
        assert Direction.from_vector(0, -1) is Direction.UP

    def test_rejects_non_unit_vectors(self):
        with pytest.raises(ValueError):
            Direction.from_vector(1, 1)
        with pytest.raises(ValueError):
            Direction.from_vector(0, 0)

    def test_opposite(self):
        assert Direction.LEFT.opposite is Direction.RIGHT
        assert Direction.DOWN.opposite is Direction.UP

    def test_cell_offset_and_distance(self):
        assert Cell(3, 4).offset(Direction.UP) == Cell(3, 3)
        assert Cell(0, 0).manhattan(Cell(3, 4)) == 7


class TestSnake:
    def test_spawn_trails_behind_head(self):
        snake = Snake.spawn(Cell(17, 9), 4, Direction.RIGHT)
        assert snake.cells() == (Cell(17, 9), Cell(16, 9), Cell(15, 9), Cell(14, 9))
        assert snake.head == Cell(17, 9)
        assert snake.tail == Cell(14, 9)

    def test_empty_body_rejected(self):
        with pytest.raises(ValueError):
            Snake([])

    def test_occupies_can_skip_tail(self):
        snake = Snake([(2, 2), (1, 2), (0, 2)])
        assert snake.occupies(Cell(0, 2))
        assert not snake.occupies(Cell(0, 2), skip_tail=True)
        assert snake.occupies(Cell(1, 2), skip_tail=True)

    def test_settle_tail_consumes_growth_first(self):
        snake = Snake([(2, 2), (1, 2)], pending_growth=1)
        snake.push_head(Cell(3, 2))
        assert snake.settle_tail() is True
        assert len(snake) == 3
        snake.push_head(Cell(4, 2))
        assert snake.settle_tail() is False
        assert len(snake) == 3
        assert snake.tail == Cell(2, 2)

    def test_amputate_never_removes_head(self):
        snake = Snake([(0, 0), (1, 0), (2, 0)])
        assert snake.amputate(2) == [Cell(1, 0), Cell(2, 0)]
        assert snake.amputate(2) == []
        assert len(snake) == 1
