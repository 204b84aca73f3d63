from __future__ import annotations

from typing import Callable

from .types import Coord

# N, NE, E, SE, S, SW, W, NW in screen coordinates (y grows southwards).
COMPASS: tuple[Coord, ...] = (
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
)


def chebyshev(a: Coord, b: Coord) -> int:
    """Lower bound on the cost between two cells under 8-way unit-cost moves."""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def reconstruct_path(
    came_from: dict[int, int],
    goal_key: int,
    coord: Callable[[int], Coord],
) -> list[Coord]:
    path: list[Coord] = []
    cursor: int | None = goal_key
    while cursor is not None:
        path.append(coord(cursor))
        cursor = came_from.get(cursor)
    path.reverse()
    return path
