# pathviz/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional
import random

Cell = Tuple[int, int]  # (row, col)

EMPTY = 0
BLOCK = 1


# -------------------- errors --------------------

class SearchError(Exception):
    """Base class for everything the search core raises."""


class MissingEndpoints(SearchError):
    """Start or end is unset, identical, blocked or off the grid."""


class InvalidCoordinate(SearchError, IndexError):
    def __init__(self, cell, rows: int, cols: int):
        super().__init__(f"cell {cell} outside {rows}x{cols} grid")
        self.cell = cell


class SearchAlreadyRunning(SearchError):
    """A search is in flight; cancel it or let it finish first."""


# -------------------- grid --------------------

class Role(Enum):
    NONE = "none"
    START = "start"
    END = "end"


@dataclass
class Grid:
    rows: int
    cols: int
    cells: List[List[int]] = field(default_factory=list)   # [row][col], EMPTY | BLOCK
    start: Optional[Cell] = None
    end: Optional[Cell] = None

    def __post_init__(self):
        if self.rows < 1 or self.cols < 1:
            raise ValueError("grid needs at least one row and one column")
        if not self.cells:
            self.cells = [[EMPTY] * self.cols for _ in range(self.rows)]
        assert len(self.cells) == self.rows and all(len(r) == self.cols for r in self.cells), \
            "cells size mismatch"

    @classmethod
    def from_rows(cls, lines: List[str]) -> "Grid":
        """Build a grid from text rows: '#' obstacle, 'S' start, 'E' end, anything else empty."""
        if not lines or not lines[0]:
            raise ValueError("need at least one non-empty row")
        if any(len(line) != len(lines[0]) for line in lines):
            raise ValueError("rows must all have the same length")
        grid = cls(len(lines), len(lines[0]))
        for r, line in enumerate(lines):
            for c, ch in enumerate(line):
                if ch == "#":
                    grid.cells[r][c] = BLOCK
                elif ch == "S":
                    grid.start = (r, c)
                elif ch == "E":
                    grid.end = (r, c)
        return grid

    # -------------------- lookups --------------------

    def in_bounds(self, c: Cell) -> bool:
        r, col = c
        return 0 <= r < self.rows and 0 <= col < self.cols

    def check(self, c: Cell) -> Cell:
        if not self.in_bounds(c):
            raise InvalidCoordinate(c, self.rows, self.cols)
        return c

    def index(self, c: Cell) -> int:
        r, col = self.check(c)
        return r * self.cols + col

    def cell_at(self, i: int) -> Cell:
        return divmod(i, self.cols)

    def is_block(self, c: Cell) -> bool:
        r, col = self.check(c)
        return self.cells[r][col] == BLOCK

    def is_passable(self, c: Cell) -> bool:
        return not self.is_block(c)

    def role(self, c: Cell) -> Role:
        self.check(c)
        if c == self.start:
            return Role.START
        if c == self.end:
            return Role.END
        return Role.NONE

    def is_empty(self, c: Cell) -> bool:
        return not self.is_block(c) and self.role(c) is Role.NONE

    def neighbors4(self, c: Cell) -> List[Cell]:
        """Axis-aligned neighbours clipped to the grid: up, down, left, right."""
        r, col = c
        cand = [(r - 1, col), (r + 1, col), (r, col - 1), (r, col + 1)]
        return [n for n in cand if self.in_bounds(n)]

    # -------------------- editing --------------------

    def add_obstacle(self, c: Cell) -> bool:
        if not self.is_empty(c):
            return False
        r, col = c
        self.cells[r][col] = BLOCK
        return True

    def remove_obstacle(self, c: Cell) -> bool:
        if not self.is_block(c):
            return False
        r, col = c
        self.cells[r][col] = EMPTY
        return True

    def random_empty_cell(self, rng: Optional[random.Random] = None) -> Cell:
        rng = rng or random
        free = [(r, c) for r in range(self.rows) for c in range(self.cols) if self.is_empty((r, c))]
        if not free:
            raise ValueError("no empty cell left on the grid")
        return rng.choice(free)

    def _check_endpoint(self, c: Cell, other: Optional[Cell]) -> None:
        if self.is_block(c):
            raise ValueError(f"cell {c} is an obstacle")
        if c == other:
            raise ValueError(f"cell {c} is already the other endpoint")

    def set_start(self, c: Optional[Cell] = None, rng: Optional[random.Random] = None) -> Cell:
        """Place the start at c, or on a random empty cell (the old start spot counts as empty)."""
        if c is not None:
            self._check_endpoint(c, self.end)
        self.start = None
        self.start = c if c is not None else self.random_empty_cell(rng)
        return self.start

    def set_end(self, c: Optional[Cell] = None, rng: Optional[random.Random] = None) -> Cell:
        if c is not None:
            self._check_endpoint(c, self.start)
        self.end = None
        self.end = c if c is not None else self.random_empty_cell(rng)
        return self.end

    def randomize_obstacles(self, density: float = 0.3, rng: Optional[random.Random] = None) -> int:
        rng = rng or random
        added = 0
        for r in range(self.rows):
            for c in range(self.cols):
                if rng.random() < density and self.add_obstacle((r, c)):
                    added += 1
        return added

    def reset(self) -> None:
        for row in self.cells:
            row[:] = [EMPTY] * self.cols
        self.start = None
        self.end = None


# -------------------- search events --------------------

@dataclass(frozen=True)
class Visited:
    cell: Cell
    kind: str = "visited"


@dataclass(frozen=True)
class PathCell:
    cell: Cell
    kind: str = "path"


@dataclass(frozen=True)
class PathFound:
    path: Tuple[Cell, ...]
    kind: str = "found"

    def __len__(self) -> int:
        return len(self.path)


@dataclass(frozen=True)
class NoPathExists:
    kind: str = "no_path"


@dataclass
class SearchRun:
    """Everything one finished search produced, for callers that don't animate."""
    events: List[object] = field(default_factory=list)
    outcome: Optional[object] = None                 # PathFound | NoPathExists
    error: Optional[SearchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def visited(self) -> List[Cell]:
        return [e.cell for e in self.events if isinstance(e, Visited)]
