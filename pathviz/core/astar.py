# pathviz/core/astar.py
#!/usr/bin/env python3
"""
A* over a 4-connected grid, one event per step() for animation.

Lifecycle used by the viewer and by run():
- init(grid, start, end) - step() -> event | None - cancel() - reset()

Every step() returns exactly one event:
- Visited(cell) for each cell moved to the closed set,
- PathCell(cell) for each cell between end and start, walking back from end,
- then one terminal PathFound(path) or NoPathExists().

Open list ordering:
- the open list is re-sorted by f on every step with a stable sort, so cells
  with equal f keep their order in the list (first appended, first taken).
  A heap would break that order, which golden event sequences depend on.

Search state lives in flat arrays of R*C entries indexed by row*C + col.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterator, List, Optional
from math import inf
import logging

from pathviz.core.types import (
    Cell, Grid, MissingEndpoints, NoPathExists, PathCell, PathFound,
    SearchAlreadyRunning, SearchRun, Visited,
)

logger = logging.getLogger(__name__)

IDLE = "idle"
RUNNING = "running"
DONE = "done"
NO_PATH = "no_path"
CANCELLED = "cancelled"


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def check_endpoints(grid: Grid, start: Optional[Cell], end: Optional[Cell]) -> None:
    """Raise MissingEndpoints unless start/end are set, distinct, on the grid and passable."""
    if start is None or end is None:
        raise MissingEndpoints("Set both start and end points!")
    if start == end:
        raise MissingEndpoints(f"start and end are the same cell {start}")
    for label, c in (("start", start), ("end", end)):
        if not grid.in_bounds(c):
            raise MissingEndpoints(f"{label} {c} is off the {grid.rows}x{grid.cols} grid")
        if grid.is_block(c):
            raise MissingEndpoints(f"{label} {c} is an obstacle")


@dataclass
class AStarSearch:
    name: str = "A*"

    grid: Optional[Grid] = None
    start: Optional[Cell] = None
    end: Optional[Cell] = None
    status: str = IDLE

    # Search state, indexed by row*cols + col
    open_list: List[int] = field(default_factory=list)
    in_open: List[bool] = field(default_factory=list)
    closed: List[bool] = field(default_factory=list)
    g: List[float] = field(default_factory=list)
    f: List[float] = field(default_factory=list)
    came_from: List[int] = field(default_factory=list)

    pending: Deque[object] = field(default_factory=deque)  # path events still to hand out
    path: Optional[List[Cell]] = None
    popped_count: int = 0
    closed_count: int = 0

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid, start: Optional[Cell] = None, end: Optional[Cell] = None) -> None:
        """Validate endpoints and seed a fresh search. Endpoints default to the grid's own."""
        if self.status == RUNNING:
            raise SearchAlreadyRunning(f"{self.name} search already running")
        start = grid.start if start is None else start
        end = grid.end if end is None else end
        check_endpoints(grid, start, end)
        self.grid, self.start, self.end = grid, start, end
        self.reset()

    def reset(self) -> None:
        """Drop all progress and seed with the start cell."""
        if self.grid is None:
            return
        n = self.grid.rows * self.grid.cols
        self.open_list = []
        self.in_open = [False] * n
        self.closed = [False] * n
        self.g = [inf] * n
        self.f = [inf] * n
        self.came_from = [-1] * n
        self.pending.clear()
        self.path = None
        self.popped_count = 0
        self.closed_count = 0

        s = self.grid.index(self.start)
        self.g[s] = 0
        self.f[s] = manhattan(self.start, self.end)
        self.open_list.append(s)
        self.in_open[s] = True
        self.status = RUNNING
        logger.debug("%s search %s -> %s on %dx%d grid",
                     self.name, self.start, self.end, self.grid.rows, self.grid.cols)

    def cancel(self) -> bool:
        if self.status != RUNNING:
            return False
        self.status = CANCELLED
        self._release()
        self.path = None
        logger.info("%s search cancelled after %d visits", self.name, self.closed_count)
        return True

    def _release(self) -> None:
        self.open_list = []
        self.in_open = []
        self.closed = []
        self.g = []
        self.f = []
        self.came_from = []
        self.pending.clear()

    @property
    def active(self) -> bool:
        return self.status == RUNNING

    # -------------------- helpers --------------------

    def _neighbors4(self, u: int) -> List[int]:
        out: List[int] = []
        for n in self.grid.neighbors4(self.grid.cell_at(u)):
            v = self.grid.index(n)
            if not self.closed[v] and self.grid.is_passable(n):
                out.append(v)
        return out

    def _reconstruct_path(self, end: int) -> List[Cell]:
        path: List[Cell] = []
        cur = end
        while cur != -1:
            path.append(self.grid.cell_at(cur))
            cur = self.came_from[cur]
        path.reverse()
        return path

    def _next_pending(self):
        ev = self.pending.popleft()
        if isinstance(ev, PathFound):
            self.status = DONE
            self._release()
            logger.info("%s found a path of %d cells after %d visits",
                        self.name, len(ev.path), self.closed_count)
        return ev

    # -------------------- main stepping logic --------------------

    def step(self):
        """
        Run until the next event and return it, or None once finished/cancelled:
          - Take the lowest-f open cell (stable order on ties).
          - If it is the goal, queue the path events and hand out the first.
          - Else close it, relax its neighbours with unit cost, return Visited.
        """
        if self.status != RUNNING:
            return None
        if self.pending:
            return self._next_pending()

        if not self.open_list:
            self.status = NO_PATH
            self._release()
            logger.info("%s exhausted the open list after %d visits, no path",
                        self.name, self.closed_count)
            return NoPathExists()

        self.open_list.sort(key=self.f.__getitem__)
        u = self.open_list.pop(0)
        self.in_open[u] = False
        self.popped_count += 1

        if u == self.grid.index(self.end):
            self.path = self._reconstruct_path(u)
            # walk back from the cell before end, stopping short of start
            for c in reversed(self.path[1:-1]):
                self.pending.append(PathCell(c))
            self.pending.append(PathFound(tuple(self.path)))
            return self._next_pending()

        self.closed[u] = True
        self.closed_count += 1

        for v in self._neighbors4(u):
            alt = self.g[u] + 1
            if alt < self.g[v]:
                self.came_from[v] = u
                self.g[v] = alt
                self.f[v] = alt + manhattan(self.grid.cell_at(v), self.end)
                if not self.in_open[v]:
                    self.open_list.append(v)
                    self.in_open[v] = True

        return Visited(self.grid.cell_at(u))

    def events(self) -> Iterator[object]:
        while True:
            ev = self.step()
            if ev is None:
                return
            yield ev

    # -------------------- metrics --------------------

    def metrics(self) -> dict:
        return {
            "algo": self.name,
            "status": self.status,
            "popped": self.popped_count,
            "open_size": len(self.open_list),
            "closed_count": self.closed_count,
            "path_len": len(self.path) if self.path else 0,
        }


def run(grid: Grid, start: Optional[Cell] = None, end: Optional[Cell] = None) -> SearchRun:
    """Run a whole search without pacing. Bad endpoints come back as SearchRun.error."""
    search = AStarSearch()
    try:
        search.init(grid, start, end)
    except MissingEndpoints as ex:
        logger.debug("search rejected: %s", ex)
        return SearchRun(error=ex)
    events = list(search.events())
    return SearchRun(events=events, outcome=events[-1])
