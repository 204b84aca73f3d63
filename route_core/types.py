from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

Coord = tuple[int, int]


class Outcome(Enum):
    OK = "ok"
    FOUND = "found"
    NO_PATH = "no_path"
    INVALID_DIMENSIONS = "invalid_dimensions"
    INVALID_TERRAIN_COST = "invalid_terrain_cost"
    OUT_OF_BOUNDS = "out_of_bounds"
    UNREACHABLE_ENDPOINT = "unreachable_endpoint"
    SEARCH_ABORTED = "search_aborted"


class SearchState(Enum):
    RUNNING = "running"
    FOUND = "found"
    EXHAUSTED = "exhausted"
    ABORTED = "aborted"


@dataclass(frozen=True)
class Fault:
    outcome: Outcome
    message: str = ""


@dataclass(frozen=True)
class MarkResult:
    success: bool
    outcome: Outcome
    message: str = ""


@dataclass(frozen=True)
class PathResult:
    """Outcome of one search call.

    `path` runs from start to goal inclusive and is empty unless the goal
    was reached. `cost` is the goal's g-score, or None without a path.
    """

    outcome: Outcome
    path: tuple[Coord, ...] = ()
    cost: int | None = None
    expansions: int = 0
    message: str = ""

    @property
    def found(self) -> bool:
        return self.outcome is Outcome.FOUND

    @property
    def steps(self) -> int:
        return max(len(self.path) - 1, 0)
