from __future__ import annotations

import heapq


class Frontier:
    """Open set of an A* search, ordered by (f, g, key).

    Keys are canonical cell keys (`x * height + y`), so ordering by key is
    the same as ordering by (x, y). Re-pushing a key with a better score
    supersedes its earlier entry; superseded entries are dropped on pop.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[int, int, int]] = []
        self._live: dict[int, tuple[int, int]] = {}

    def __len__(self) -> int:
        return len(self._live)

    def __contains__(self, key: int) -> bool:
        return key in self._live

    def push(self, key: int, f_score: int, g_score: int) -> None:
        self._live[key] = (f_score, g_score)
        heapq.heappush(self._heap, (f_score, g_score, key))

    def pop(self) -> tuple[int, int, int]:
        while self._heap:
            f_score, g_score, key = heapq.heappop(self._heap)
            if self._live.get(key) != (f_score, g_score):
                continue
            del self._live[key]
            return f_score, g_score, key
        raise IndexError("pop from empty frontier")
