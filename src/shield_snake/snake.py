"""Snake body: ordered cells (head first) plus deferred growth."""

from __future__ import annotations

from typing import Iterable, Iterator

from .grid import Cell, Direction


class Snake:
    """Ordered body of grid cells with a pending-growth counter.

    The head lives at index 0. ``pending_growth`` counts ticks during which
    the tail is kept instead of being dropped.
    """

    def __init__(self, cells: Iterable[Cell], pending_growth: int = 0) -> None:
        self.body: list[Cell] = [Cell(*cell) for cell in cells]
        if not self.body:
            raise ValueError("a snake needs at least one segment")
        self.pending_growth = max(0, pending_growth)

    @classmethod
    def spawn(cls, head: Cell, length: int, heading: Direction) -> Snake:
        """Lay out a straight snake trailing behind ``head``."""
        back = heading.opposite
        return cls(
            Cell(head.x + back.dx * i, head.y + back.dy * i) for i in range(length)
        )

    @property
    def head(self) -> Cell:
        return self.body[0]

    @property
    def tail(self) -> Cell:
        return self.body[-1]

    def __len__(self) -> int:
        return len(self.body)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.body)

    def occupies(self, cell: Cell, skip_tail: bool = False) -> bool:
        """True if any segment sits on ``cell``; optionally ignore the tail."""
        end = len(self.body) - 1 if skip_tail else len(self.body)
        for idx in range(end):
            if self.body[idx] == cell:
                return True
        return False

    def push_head(self, cell: Cell) -> None:
        self.body.insert(0, cell)

    def grow(self, amount: int) -> None:
        self.pending_growth += amount

    def settle_tail(self) -> bool:
        """Consume one unit of growth or drop the tail. Returns True on growth."""
        if self.pending_growth > 0:
            self.pending_growth -= 1
            return True
        if len(self.body) > 1:
            self.body.pop()
        return False

    def amputate(self, count: int) -> list[Cell]:
        """Cut ``count`` segments off the tail, never the head."""
        count = max(0, min(count, len(self.body) - 1))
        if not count:
            return []
        removed = self.body[-count:]
        del self.body[-count:]
        return removed

    def cells(self) -> tuple[Cell, ...]:
        return tuple(self.body)
