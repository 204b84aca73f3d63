from __future__ import annotations

import argparse
from pathlib import Path

from route_core.runtime import build_grid, load_app_config, render_ascii


def main() -> None:
    parser = argparse.ArgumentParser(description="Find an equipment route across a site grid")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("configs/demo.json"),
        help="Path to JSON site config",
    )
    args = parser.parse_args()

    app_config = load_app_config(args.config)
    try:
        grid = build_grid(app_config.site)
    except ValueError as exc:
        print(f"config_error={exc}")
        return

    route = app_config.route
    result = grid.find_optimal_path(route.start, route.goal, app_config.engine)

    print("Search finished")
    print(f"site={grid.width}x{grid.height}")
    print(f"obstacles={len(grid.obstacles)}")
    print(f"start={route.start}")
    print(f"goal={route.goal}")
    print(f"outcome={result.outcome.value}")
    if result.message:
        print(f"message={result.message}")
    print(f"cost={result.cost}")
    print(f"steps={result.steps}")
    print(f"expansions={result.expansions}")
    print(f"log_path={app_config.engine.log_path}")
    print(render_ascii(grid, result.path))


if __name__ == "__main__":
    main()
