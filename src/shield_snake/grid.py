"""Grid geometry: cells, directions and the bounded board."""

from __future__ import annotations

import enum
from typing import Iterator, NamedTuple

from .config import BOARD_COLS, MIN_BOARD_CELLS, ConfigError


class Cell(NamedTuple):
    x: int
    y: int

    def offset(self, direction: Direction) -> Cell:
        dx, dy = direction.value
        return Cell(self.x + dx, self.y + dy)

    def manhattan(self, other: Cell) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)


class Direction(enum.Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> Direction:
        return Direction((-self.dx, -self.dy))

    @classmethod
    def from_vector(cls, dx: int, dy: int) -> Direction:
        """Map a unit vector onto a direction; anything else is a caller bug."""
        try:
            return cls((dx, dy))
        except ValueError:
            raise ValueError(f"not a unit grid direction: ({dx}, {dy})") from None


class GridWorld:
    """Fixed cols x rows board answering bounds queries."""

    __slots__ = ("cols", "rows")

    def __init__(self, cols: int, rows: int) -> None:
        if cols <= 0 or rows <= 0:
            raise ConfigError(f"grid dimensions must be positive, got {cols}x{rows}")
        self.cols = cols
        self.rows = rows

    def in_bounds(self, cell: Cell) -> bool:
        return 0 <= cell.x < self.cols and 0 <= cell.y < self.rows

    def clamp(self, cell: Cell) -> Cell:
        return Cell(
            max(0, min(self.cols - 1, cell.x)),
            max(0, min(self.rows - 1, cell.y)),
        )

    def cells(self) -> Iterator[Cell]:
        """Yield every cell in row-major order."""
        for y in range(self.rows):
            for x in range(self.cols):
                yield Cell(x, y)

    @property
    def size(self) -> int:
        return self.cols * self.rows

    def __repr__(self) -> str:
        return f"GridWorld({self.cols}x{self.rows})"


def board_for_aspect(
    width: float, height: float, long_side: int = BOARD_COLS
) -> tuple[int, int]:
    """Derive (cols, rows) for a host surface, keeping ``long_side`` cells
    along its longer edge. Meant to be called once before building a core."""

    if width <= 0 or height <= 0:
        raise ConfigError(f"host surface must be positive, got {width}x{height}")
    if width >= height:
        cols = long_side
        rows = max(MIN_BOARD_CELLS, round(long_side * height / width))
    else:
        rows = long_side
        cols = max(MIN_BOARD_CELLS, round(long_side * width / height))
    return cols, rows
