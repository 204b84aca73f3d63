from __future__ import annotations

import json
from collections import deque
from pathlib import Path

import pytest

from route_core.engine import EngineConfig, SearchEngine
from route_core.grid import Grid
from route_core.types import Coord, Outcome


def make_grid(
    width: int,
    height: int,
    obstacles: set[Coord] | None = None,
    terrain: dict[Coord, int] | None = None,
) -> Grid:
    grid = Grid.create(width, height, terrain=terrain)
    assert isinstance(grid, Grid)
    for pos in sorted(obstacles or set()):
        assert grid.mark_obstacle(pos).success
    return grid


def bfs_steps(grid: Grid, start: Coord, goal: Coord) -> int | None:
    seen = {start: 0}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current == goal:
            return seen[current]
        for nxt in grid.neighbors(current):
            if nxt not in seen:
                seen[nxt] = seen[current] + 1
                queue.append(nxt)
    return None


def assert_valid_route(grid: Grid, path: tuple[Coord, ...], start: Coord, goal: Coord) -> None:
    assert path[0] == start
    assert path[-1] == goal
    assert len(set(path)) == len(path)
    for a, b in zip(path, path[1:]):
        assert max(abs(a[0] - b[0]), abs(a[1] - b[1])) == 1
    assert not any(grid.is_obstacle(pos) for pos in path)


def test_open_three_by_three_takes_the_diagonal() -> None:
    grid = make_grid(3, 3)

    result = grid.find_optimal_path((0, 0), (2, 2))

    assert result.outcome is Outcome.FOUND
    assert result.path == ((0, 0), (1, 1), (2, 2))
    assert result.cost == 2


def test_blocked_centre_routes_around_in_three_moves() -> None:
    grid = make_grid(3, 3, obstacles={(1, 1)})

    result = grid.find_optimal_path((0, 0), (2, 2))

    assert result.found is True
    assert result.steps == 3
    assert result.cost == 3
    assert result.path == ((0, 0), (0, 1), (1, 2), (2, 2))
    assert_valid_route(grid, result.path, (0, 0), (2, 2))


def test_obstacle_goal_is_unreachable_endpoint() -> None:
    grid = make_grid(6, 6, obstacles={(5, 5)})

    result = grid.find_optimal_path((0, 0), (5, 5))

    assert result.outcome is Outcome.UNREACHABLE_ENDPOINT
    assert result.path == ()
    assert result.expansions == 0


def test_obstacle_start_is_unreachable_endpoint() -> None:
    grid = make_grid(4, 4, obstacles={(0, 0)})

    result = grid.find_optimal_path((0, 0), (3, 3))

    assert result.outcome is Outcome.UNREACHABLE_ENDPOINT


@pytest.mark.parametrize("start,goal", [((-1, 0), (2, 2)), ((0, 0), (4, 1)), ((0, 9), (0, 0))])
def test_out_of_bounds_endpoints(start: Coord, goal: Coord) -> None:
    grid = make_grid(4, 4)

    result = grid.find_optimal_path(start, goal)

    assert result.outcome is Outcome.OUT_OF_BOUNDS
    assert result.path == ()


def test_same_start_and_goal_returns_single_cell_without_expanding() -> None:
    grid = make_grid(4, 4)

    result = grid.find_optimal_path((2, 1), (2, 1))

    assert result.outcome is Outcome.FOUND
    assert result.path == ((2, 1),)
    assert result.cost == 0
    assert result.expansions == 0


def test_open_grid_paths_are_chebyshev_long() -> None:
    grid = make_grid(6, 5)
    cells = [(x, y) for x in range(6) for y in range(5)]

    for start in cells[::4]:
        for goal in cells[::3]:
            result = grid.find_optimal_path(start, goal)
            expected = max(abs(start[0] - goal[0]), abs(start[1] - goal[1])) + 1
            assert result.found
            assert len(result.path) == expected
            assert_valid_route(grid, result.path, start, goal)


def test_enclosed_goal_has_no_path() -> None:
    ring = {(x, y) for x in range(1, 4) for y in range(1, 4)} - {(2, 2)}
    grid = make_grid(5, 5, obstacles=ring)

    result = grid.find_optimal_path((0, 0), (2, 2))

    assert result.outcome is Outcome.NO_PATH
    assert result.path == ()
    assert result.cost is None
    assert result.expansions > 0


def test_wall_detour_is_optimal_and_avoids_obstacles() -> None:
    wall = {(3, y) for y in range(0, 6)} | {(6, y) for y in range(2, 8)}
    grid = make_grid(9, 8, obstacles=wall)

    for start, goal in [((0, 0), (8, 7)), ((1, 6), (8, 0)), ((4, 4), (0, 7))]:
        result = grid.find_optimal_path(start, goal)
        assert result.found
        assert result.steps == bfs_steps(grid, start, goal)
        assert_valid_route(grid, result.path, start, goal)


def test_repeated_searches_are_identical() -> None:
    grid = make_grid(8, 8, obstacles={(2, 2), (2, 3), (2, 4), (3, 2), (4, 2)})

    first = grid.find_optimal_path((0, 0), (7, 7))
    second = grid.find_optimal_path((0, 0), (7, 7))

    assert first == second
    assert json.dumps(first.path) == json.dumps(second.path)


def test_engine_keeps_no_state_between_searches() -> None:
    grid = make_grid(5, 5, obstacles={(2, 1), (2, 2), (2, 3)})
    engine = SearchEngine(grid)

    engine.search((0, 2), (4, 2))
    after = engine.search((4, 4), (0, 0))
    fresh = SearchEngine(grid).search((4, 4), (0, 0))

    assert after == fresh


def test_terrain_cost_steers_route_and_sums_entered_cells() -> None:
    mud = {(1, 1): 9, (2, 1): 9, (3, 1): 9}
    grid = make_grid(5, 3, terrain=mud)

    result = grid.find_optimal_path((0, 1), (4, 1))

    assert result.found
    assert result.cost == 4
    assert not set(result.path) & set(mud)
    assert result.cost == sum(grid.terrain_cost(pos) for pos in result.path[1:])


def test_expensive_terrain_is_used_when_it_is_the_only_way() -> None:
    corridor = {(x, y) for x in range(5) for y in (0, 2)}
    grid = make_grid(5, 3, obstacles=corridor, terrain={(2, 1): 7})

    result = grid.find_optimal_path((0, 1), (4, 1))

    assert result.path == ((0, 1), (1, 1), (2, 1), (3, 1), (4, 1))
    assert result.cost == 1 + 7 + 1 + 1


def test_expansion_ceiling_aborts_search() -> None:
    ring = {(x, y) for x in range(4, 7) for y in range(4, 7)} - {(5, 5)}
    grid = make_grid(12, 12, obstacles=ring)

    result = grid.find_optimal_path((0, 0), (5, 5), EngineConfig(max_expansions=3))

    assert result.outcome is Outcome.SEARCH_ABORTED
    assert result.message == "max_expansions"
    assert result.expansions == 3
    assert result.path == ()


def test_non_positive_ceiling_is_rejected() -> None:
    grid = make_grid(3, 3)

    with pytest.raises(ValueError):
        grid.find_optimal_path((0, 0), (2, 2), EngineConfig(max_expansions=0))


def test_trace_log_has_one_row_per_expansion_and_a_final_row(tmp_path: Path) -> None:
    grid = make_grid(6, 6, obstacles={(2, 2), (3, 2), (2, 3)})
    log_path = tmp_path / "runs" / "trace.jsonl"

    result = grid.find_optimal_path((0, 0), (5, 5), EngineConfig(log_path=log_path))

    rows = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert len(rows) == result.expansions + 1
    assert rows[0]["current"] == [0, 0]
    assert rows[0]["g"] == 0
    assert rows[0]["f"] == 5
    assert [row["expansion"] for row in rows[:-1]] == list(range(1, result.expansions + 1))
    assert rows[-1]["state"] == "found"
    assert rows[-1]["outcome"] == "found"
    assert rows[-1]["cost"] == result.cost
    assert rows[-1]["steps"] == result.steps


def test_trace_log_records_exhaustion(tmp_path: Path) -> None:
    grid = make_grid(3, 3, obstacles={(1, 0), (1, 1), (1, 2)})
    log_path = tmp_path / "trace.jsonl"

    result = grid.find_optimal_path((0, 0), (2, 2), EngineConfig(log_path=log_path))

    rows = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert result.outcome is Outcome.NO_PATH
    assert result.expansions == 3
    assert rows[-1]["state"] == "exhausted"
    assert rows[-1]["outcome"] == "no_path"
    assert rows[-1]["cost"] is None
