# gridpath/core/bfs.py
#!/usr/bin/env python3
"""
Breadth-first search: unweighted shortest hops.

Same stepping API as the A* and Dijkstra algos. Diagonal moves, when the
grid allows them, count as one hop like any other.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional

from gridpath.core.types import StepResult, Grid, Cell


@dataclass
class BreadthFirstAlgo:
    name: str = "BFS"

    grid: Optional[Grid] = None
    queue: Deque[Cell] = field(default_factory=deque)
    open_set: set = field(default_factory=set)
    closed_set: set = field(default_factory=set)
    parent: Dict[Cell, Cell] = field(default_factory=dict)
    popped_count: int = 0
    done: bool = False
    no_path: bool = False
    goal_cell: Optional[Cell] = None

    def init(self, grid: Grid) -> None:
        self.grid = grid
        self.reset()

    def reset(self) -> None:
        if self.grid is None:
            return
        self.queue.clear()
        self.open_set.clear()
        self.closed_set.clear()
        self.parent.clear()
        self.popped_count = 0
        self.done = False
        self.no_path = False
        self.goal_cell = self.grid.goal

        self.queue.append(self.grid.start)
        self.open_set.add(self.grid.start)

    def _reconstruct_path(self, end: Cell) -> List[Cell]:
        path: List[Cell] = [end]
        cur = end
        while cur != self.grid.start:
            cur = self.parent[cur]
            path.append(cur)
        path.reverse()
        return path

    def step(self) -> StepResult:
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            path = self._reconstruct_path(self.goal_cell)
            return StepResult(status="done", path=path,
                              metrics=self._metrics(path_len=len(path)))

        if self.no_path or not self.queue:
            self.no_path = True
            return StepResult(status="no_path", metrics=self._metrics())

        u = self.queue.popleft()
        self.popped_count += 1
        self.open_set.discard(u)
        self.closed_set.add(u)

        if u == self.goal_cell:
            self.done = True
            path = self._reconstruct_path(u)
            return StepResult(status="done", closed=[u], current=u, path=path,
                              metrics=self._metrics(path_len=len(path)))

        opened_now: List[Cell] = []
        for v in self.grid.neighbors(u):
            # visited on push, so the first parent recorded is the shallowest one
            if v in self.closed_set or v in self.open_set:
                continue
            self.parent[v] = u
            self.open_set.add(v)
            self.queue.append(v)
            opened_now.append(v)

        return StepResult(status="running", opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())

    def _metrics(self, path_len: int = 0) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_set),
            "closed_count": len(self.closed_set),
            "path_len": path_len,
            "total_cost": path_len - 1 if self.done else None,
        }
