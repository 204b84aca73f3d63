from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .engine import EngineConfig
from .grid import Grid
from .types import Coord, Fault


def _to_coord(value: list[int]) -> Coord:
    if not isinstance(value, list) or len(value) != 2:
        raise ValueError(f"Expected [x, y], got: {value}")
    return (int(value[0]), int(value[1]))


def _to_coord_set(values: list[list[int]]) -> set[Coord]:
    return {_to_coord(v) for v in values}


def _to_terrain(values: list[dict[str, object]]) -> dict[Coord, int]:
    terrain: dict[Coord, int] = {}
    for item in values:
        if not isinstance(item, dict) or "pos" not in item or "cost" not in item:
            raise ValueError(f"Expected {{'pos': [x, y], 'cost': n}}, got: {item}")
        terrain[_to_coord(item["pos"])] = int(item["cost"])
    return terrain


def _optional_int(value: object) -> int | None:
    return None if value is None else int(value)


def _optional_float(value: object) -> float | None:
    return None if value is None else float(value)


@dataclass(frozen=True)
class SiteConfig:
    width: int
    height: int
    obstacles: set[Coord] = field(default_factory=set)
    terrain: dict[Coord, int] = field(default_factory=dict)


@dataclass(frozen=True)
class RouteConfig:
    start: Coord
    goal: Coord


@dataclass(frozen=True)
class AppConfig:
    site: SiteConfig
    route: RouteConfig
    engine: EngineConfig


def load_app_config(path: Path) -> AppConfig:
    raw = json.loads(path.read_text(encoding="utf-8"))

    site_raw = raw.get("site", {})
    site = SiteConfig(
        width=int(site_raw.get("width", 10)),
        height=int(site_raw.get("height", 10)),
        obstacles=_to_coord_set(site_raw.get("obstacles", [])),
        terrain=_to_terrain(site_raw.get("terrain", [])),
    )

    route_raw = raw.get("route", {})
    route = RouteConfig(
        start=_to_coord(route_raw.get("start", [0, 0])),
        goal=_to_coord(route_raw.get("goal", [site.width - 1, site.height - 1])),
    )

    engine_raw = raw.get("engine", {})
    log_path = engine_raw.get("log_path")
    engine = EngineConfig(
        max_expansions=_optional_int(engine_raw.get("max_expansions")),
        max_seconds=_optional_float(engine_raw.get("max_seconds")),
        log_path=Path(log_path) if log_path else None,
    )

    return AppConfig(site=site, route=route, engine=engine)


def build_grid(site: SiteConfig) -> Grid:
    grid = Grid.create(site.width, site.height, terrain=site.terrain)
    if isinstance(grid, Fault):
        raise ValueError(f"Cannot build site grid ({grid.outcome.value}): {grid.message}")

    for pos in sorted(site.obstacles):
        marked = grid.mark_obstacle(pos)
        if not marked.success:
            raise ValueError(f"Cannot mark obstacle {pos}: {marked.message}")

    return grid


def render_ascii(grid: Grid, path: Iterable[Coord] = ()) -> str:
    """Draw the grid row by row: `#` obstacle, `*` path, `S`/`G` path ends."""
    route = list(path)
    on_path = set(route)
    rows: list[str] = []
    for y in range(grid.height):
        cells: list[str] = []
        for x in range(grid.width):
            pos = (x, y)
            if route and pos == route[0]:
                cells.append("S")
            elif route and pos == route[-1]:
                cells.append("G")
            elif pos in on_path:
                cells.append("*")
            elif grid.is_obstacle(pos):
                cells.append("#")
            else:
                cells.append(".")
        rows.append("".join(cells))
    return "\n".join(rows)
