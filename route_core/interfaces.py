from __future__ import annotations

from typing import Protocol

from .types import Coord


class ISearchGrid(Protocol):
    width: int
    height: int

    def in_bounds(self, pos: Coord) -> bool:
        ...

    def is_obstacle(self, pos: Coord) -> bool:
        ...

    def key(self, pos: Coord) -> int:
        ...

    def coord(self, key: int) -> Coord:
        ...

    def neighbor_keys(self, key: int) -> list[int]:
        ...

    def cost_at(self, key: int) -> int:
        ...
