# gridpath/core/astar.py
#!/usr/bin/env python3
"""
A*: one expansion per step().

Implements the stepping API used by the finders and the viewer:
- init(grid) - reset() - step() -> StepResult

Heuristic:
- Manhattan on 4-connected grids.
- Octile on 8-connected grids (diagonal step costs sqrt(2)).

Tie-breaking in the PQ:
- (f, h, -g, seq, cell): lower f, then lower h, then deeper g, then FIFO by seq.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple, List, Optional
import heapq
from math import inf

from gridpath.core.types import StepResult, Grid, Cell, SQRT2


@dataclass
class AStarAlgo:
    name: str = "A*"

    # Internal state
    grid: Optional[Grid] = None
    open_pq: List[Tuple[float, float, float, int, Cell]] = field(default_factory=list)  # (f, h, -g, seq, cell)
    open_set: set = field(default_factory=set)
    closed_set: set = field(default_factory=set)
    g: Dict[Cell, float] = field(default_factory=dict)
    parent: Dict[Cell, Cell] = field(default_factory=dict)
    popped_count: int = 0
    done: bool = False
    no_path: bool = False
    goal_cell: Optional[Cell] = None
    seq: int = 0  # monotonic counter for PQ stability

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid) -> None:
        """Initialize on a given grid."""
        self.grid = grid
        self.reset()

    def reset(self) -> None:
        """Clear all state and seed with the start node."""
        if self.grid is None:
            return
        self.open_pq.clear()
        self.open_set.clear()
        self.closed_set.clear()
        self.g.clear()
        self.parent.clear()
        self.popped_count = 0
        self.done = False
        self.no_path = False
        self.goal_cell = self.grid.goal
        self.seq = 0

        s = self.grid.start
        self.g[s] = 0
        h0 = self._h(s)
        heapq.heappush(self.open_pq, (h0, h0, -self.g[s], self._bump(), s))
        self.open_set.add(s)

    # -------------------- helpers --------------------

    def _bump(self) -> int:
        self.seq += 1
        return self.seq

    def _h(self, c: Cell) -> float:
        if self.grid is None:
            return 0
        (x, y) = c
        (gx, gy) = self.grid.goal
        dx = abs(gx - x)
        dy = abs(gy - y)
        if self.grid.move == 8:
            return (SQRT2 - 1) * min(dx, dy) + max(dx, dy)
        return dx + dy

    def _reconstruct_path(self, end: Cell) -> List[Cell]:
        path: List[Cell] = []
        cur = end
        while True:
            path.append(cur)
            if cur == self.grid.start:
                break
            cur = self.parent[cur]
        path.reverse()
        return path

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE A* expansion step:
          - Pop the lowest-f node.
          - If goal, reconstruct and finish.
          - Else relax neighbors with edge cost 1 (orthogonal) or sqrt(2) (diagonal).
        """
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            path = self._reconstruct_path(self.goal_cell) if self.goal_cell else None
            return StepResult(
                status="done",
                path=path,
                metrics=self._metrics(path_len=len(path) if path else 0),
            )

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        if not self.open_pq:
            self.no_path = True
            return StepResult(status="no_path", metrics=self._metrics())

        f_u, h_u, neg_g_u, _, u = heapq.heappop(self.open_pq)
        g_u = -neg_g_u

        # Ignore stale pops
        if g_u != self.g.get(u, inf) or u in self.closed_set:
            return StepResult(status="running", current=u, metrics=self._metrics())

        self.popped_count += 1
        self.open_set.discard(u)
        self.closed_set.add(u)

        # stop when the goal is popped, not when it is first pushed
        if u == self.goal_cell:
            self.done = True
            path = self._reconstruct_path(u)
            return StepResult(
                status="done",
                closed=[u],
                current=u,
                path=path,
                metrics=self._metrics(path_len=len(path)),
            )

        opened_now: List[Cell] = []
        for v in self.grid.neighbors(u):
            if v in self.closed_set:
                continue
            alt = self.g[u] + self.grid.step_cost(u, v)
            if alt < self.g.get(v, inf):
                self.g[v] = alt
                self.parent[v] = u
                h_v = self._h(v)
                heapq.heappush(self.open_pq, (alt + h_v, h_v, -alt, self._bump(), v))
                if v not in self.open_set:
                    self.open_set.add(v)
                    opened_now.append(v)

        return StepResult(
            status="running",
            opened=opened_now,
            closed=[u],
            current=u,
            metrics=self._metrics(),
        )

    # -------------------- metrics --------------------

    def _metrics(self, path_len: int = 0) -> dict:
        total = self.g.get(self.goal_cell) if self.done else None
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_set),
            "closed_count": len(self.closed_set),
            "path_len": path_len,
            "total_cost": round(total, 3) if total is not None else None,
        }
