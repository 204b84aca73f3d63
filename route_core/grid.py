from __future__ import annotations

from typing import Mapping

from .engine import EngineConfig, SearchEngine
from .navigation import COMPASS
from .types import Coord, Fault, MarkResult, Outcome, PathResult


DEFAULT_TERRAIN_COST = 1


class Grid:
    """Static site grid: dimensions, per-cell terrain cost and obstacles.

    Build through `Grid.create`, which validates its arguments and returns a
    `Fault` instead of a grid when they are unusable. Cells are stored under
    the canonical key `x * height + y`.
    """

    def __init__(self, width: int, height: int, costs: list[int]) -> None:
        self.width = width
        self.height = height
        self._costs = costs
        self._obstacles: set[int] = set()

    @classmethod
    def create(
        cls,
        width: int,
        height: int,
        terrain: Mapping[Coord, int] | None = None,
    ) -> Grid | Fault:
        if width <= 0 or height <= 0:
            return Fault(
                outcome=Outcome.INVALID_DIMENSIONS,
                message=f"grid must be at least 1x1, got {width}x{height}",
            )

        costs = [DEFAULT_TERRAIN_COST] * (width * height)
        for pos, cost in (terrain or {}).items():
            if not (0 <= pos[0] < width and 0 <= pos[1] < height):
                return Fault(outcome=Outcome.OUT_OF_BOUNDS, message=f"terrain cell {pos}")
            if cost < 1:
                return Fault(
                    outcome=Outcome.INVALID_TERRAIN_COST,
                    message=f"terrain cost at {pos} must be >= 1, got {cost}",
                )
            costs[pos[0] * height + pos[1]] = cost

        return cls(width=width, height=height, costs=costs)

    def in_bounds(self, pos: Coord) -> bool:
        return 0 <= pos[0] < self.width and 0 <= pos[1] < self.height

    def key(self, pos: Coord) -> int:
        return pos[0] * self.height + pos[1]

    def coord(self, key: int) -> Coord:
        return divmod(key, self.height)

    @property
    def obstacles(self) -> tuple[Coord, ...]:
        return tuple(self.coord(key) for key in sorted(self._obstacles))

    def mark_obstacle(self, pos: Coord) -> MarkResult:
        if not self.in_bounds(pos):
            return MarkResult(success=False, outcome=Outcome.OUT_OF_BOUNDS, message="out_of_bounds")

        key = self.key(pos)
        if key in self._obstacles:
            return MarkResult(success=True, outcome=Outcome.OK, message="already_marked")

        self._obstacles.add(key)
        return MarkResult(success=True, outcome=Outcome.OK, message="marked")

    def is_obstacle(self, pos: Coord) -> bool:
        return self.in_bounds(pos) and self.key(pos) in self._obstacles

    def terrain_cost(self, pos: Coord) -> int | Fault:
        if not self.in_bounds(pos):
            return Fault(outcome=Outcome.OUT_OF_BOUNDS, message=f"no cell at {pos}")
        return self._costs[self.key(pos)]

    def cost_at(self, key: int) -> int:
        return self._costs[key]

    def neighbor_keys(self, key: int) -> list[int]:
        x, y = self.coord(key)
        keys: list[int] = []
        for dx, dy in COMPASS:
            nx, ny = x + dx, y + dy
            if not (0 <= nx < self.width and 0 <= ny < self.height):
                continue
            nkey = nx * self.height + ny
            if nkey in self._obstacles:
                continue
            keys.append(nkey)
        return keys

    def neighbors(self, pos: Coord) -> list[Coord]:
        if not self.in_bounds(pos):
            return []
        return [self.coord(key) for key in self.neighbor_keys(self.key(pos))]

    def find_optimal_path(
        self,
        start: Coord,
        goal: Coord,
        config: EngineConfig | None = None,
    ) -> PathResult:
        return SearchEngine(self, config).search(start, goal)
