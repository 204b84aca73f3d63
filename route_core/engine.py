from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from .frontier import Frontier
from .interfaces import ISearchGrid
from .navigation import chebyshev, reconstruct_path
from .safety import SafetyConfig, SearchGuard
from .types import Coord, Outcome, PathResult, SearchState


@dataclass
class EngineConfig:
    max_expansions: int | None = None
    max_seconds: float | None = None
    log_path: Path | None = None


class SearchEngine:
    """A* over a static grid.

    Every call to `search` owns its frontier, score tables and predecessor
    map; nothing is kept on the engine between calls. The grid must not be
    modified while a search is running.
    """

    def __init__(self, grid: ISearchGrid, config: EngineConfig | None = None) -> None:
        self.grid = grid
        self.config = config or EngineConfig()

    def search(self, start: Coord, goal: Coord) -> PathResult:
        guard = SearchGuard(
            SafetyConfig(
                max_expansions=self.config.max_expansions,
                max_seconds=self.config.max_seconds,
            )
        )

        rejected = self._check_endpoints(start, goal)
        if rejected is not None:
            return rejected

        if self.config.log_path is None:
            return self._run(start, goal, guard, None)

        self.config.log_path.parent.mkdir(parents=True, exist_ok=True)
        with self.config.log_path.open("w", encoding="utf-8") as logfile:
            return self._run(start, goal, guard, logfile)

    def _check_endpoints(self, start: Coord, goal: Coord) -> PathResult | None:
        for name, pos in (("start", start), ("goal", goal)):
            if not self.grid.in_bounds(pos):
                return PathResult(
                    outcome=Outcome.OUT_OF_BOUNDS,
                    message=f"{name} {pos} is outside the grid",
                )
        for name, pos in (("start", start), ("goal", goal)):
            if self.grid.is_obstacle(pos):
                return PathResult(
                    outcome=Outcome.UNREACHABLE_ENDPOINT,
                    message=f"{name} {pos} is an obstacle",
                )
        return None

    def _run(
        self,
        start: Coord,
        goal: Coord,
        guard: SearchGuard,
        logfile: TextIO | None,
    ) -> PathResult:
        grid = self.grid
        start_key = grid.key(start)
        goal_key = grid.key(goal)

        if start_key == goal_key:
            result = PathResult(outcome=Outcome.FOUND, path=(start,), cost=0)
            self._log_final(logfile, SearchState.FOUND, result, None)
            return result

        g_score: dict[int, int] = {start_key: 0}
        came_from: dict[int, int] = {}
        frontier = Frontier()
        frontier.push(start_key, chebyshev(start, goal), 0)

        state = SearchState.RUNNING
        expansions = 0

        while state is SearchState.RUNNING:
            if not frontier:
                state = SearchState.EXHAUSTED
                break

            f_current, _, current = frontier.pop()
            if current == goal_key:
                state = SearchState.FOUND
                break

            if not guard.evaluate(expansions):
                state = SearchState.ABORTED
                break

            expansions += 1
            g_current = g_score[current]
            self._log_row(
                logfile,
                {
                    "expansion": expansions,
                    "state": state.value,
                    "current": list(grid.coord(current)),
                    "g": g_current,
                    "f": f_current,
                    "frontier_size": len(frontier),
                },
            )

            for nxt in grid.neighbor_keys(current):
                tentative = g_current + grid.cost_at(nxt)
                known = g_score.get(nxt)
                if known is not None and tentative >= known:
                    continue
                came_from[nxt] = current
                g_score[nxt] = tentative
                f_score = tentative + chebyshev(grid.coord(nxt), goal)
                frontier.push(nxt, f_score, tentative)

        if state is SearchState.FOUND:
            path = reconstruct_path(came_from, goal_key, grid.coord)
            result = PathResult(
                outcome=Outcome.FOUND,
                path=tuple(path),
                cost=g_score[goal_key],
                expansions=expansions,
            )
        elif state is SearchState.ABORTED:
            result = PathResult(
                outcome=Outcome.SEARCH_ABORTED,
                expansions=expansions,
                message=guard.stop_reason or "",
            )
        else:
            result = PathResult(
                outcome=Outcome.NO_PATH,
                expansions=expansions,
                message="frontier exhausted",
            )

        self._log_final(logfile, state, result, guard.stop_reason)
        return result

    @staticmethod
    def _log_row(logfile: TextIO | None, row: dict[str, object]) -> None:
        if logfile is None:
            return
        logfile.write(json.dumps(row) + "\n")

    def _log_final(
        self,
        logfile: TextIO | None,
        state: SearchState,
        result: PathResult,
        stop_reason: str | None,
    ) -> None:
        self._log_row(
            logfile,
            {
                "state": state.value,
                "outcome": result.outcome.value,
                "cost": result.cost,
                "steps": result.steps,
                "expansions": result.expansions,
                "stop_reason": stop_reason,
            },
        )
