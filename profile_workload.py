#!/usr/bin/env python3
"""
Profile find_path and grid traversal on synthetic scenes.

Prints the hottest calls for each workload together with the search
counters summed over all path queries.
"""

from collections import Counter
import cProfile
from dataclasses import fields
import io
import pstats
import time
from typing import Callable, TypeVar

import numpy as np

from visipath.graph import Graph
from visipath.grid import collect_cells
from visipath.pathfinding import SearchStats, find_path

T = TypeVar("T")


def generate_box_field(
    n_boxes: int = 20,
    box_size: int = 30,
    extent: int = 1000,
    margin: int = 2
) -> tuple[Graph, Graph]:
    """
    Scatter square obstacles over the plane.

    Each box is wound clockwise so it blocks from outside, and gets a ring of
    waypoints just off its corners, linked to each other in both directions.
    """
    obstacles = Graph()
    waypoints = Graph()
    corners = []
    for _ in range(n_boxes):
        x, y = np.random.randint(0, extent - box_size, size=2)
        contour = np.array([
            [x, y],
            [x, y + box_size],
            [x + box_size, y + box_size],
            [x + box_size, y],
        ])
        obstacles.add_polygon(contour)
        corners.extend([
            (int(x) - margin, int(y) - margin),
            (int(x) - margin, int(y) + box_size + margin),
            (int(x) + box_size + margin, int(y) + box_size + margin),
            (int(x) + box_size + margin, int(y) - margin),
        ])
    for u in corners:
        for v in corners:
            if u != v and not obstacles.fully_blocks(u, v):
                waypoints.add_edge(u, v)
    return obstacles, waypoints


def run_path_workload(n_iterations: int = 50) -> SearchStats:
    """Run random path queries across a box field and sum their search counters."""
    np.random.seed(42)  # For reproducibility
    obstacles, waypoints = generate_box_field()

    totals = SearchStats()
    outcomes = Counter()
    for _ in range(n_iterations):
        start = tuple(int(c) for c in np.random.randint(0, 1000, size=2))
        end = tuple(int(c) for c in np.random.randint(0, 1000, size=2))
        result = find_path(obstacles, waypoints, start, end, (-50, -50), (1050, 1050))
        outcomes[type(result.error).__name__ if result.error else "found"] += 1
        for f in fields(SearchStats):
            setattr(totals, f.name, getattr(totals, f.name) + getattr(result.stats, f.name))

    print(f"Outcomes: {dict(outcomes)}")
    return totals


def run_grid_workload(n_iterations: int = 2000) -> int:
    """Run long grid traversals with random slopes; returns the number of cells visited."""
    np.random.seed(42)

    visited = 0
    for _ in range(n_iterations):
        x0, y0, x1, y1 = (int(c) for c in np.random.randint(-5000, 5000, size=4))
        visited += len(collect_cells((16, 16), (x0, y0), (x1, y1)))
    return visited


def profile(func: Callable[[], T], title: str, top: int = 20) -> T:
    """Run func under cProfile, print the hottest calls and return its result."""
    print(f"\n--- {title} ---")

    profiler = cProfile.Profile()
    started = time.perf_counter()
    result = profiler.runcall(func)
    elapsed = time.perf_counter() - started

    out = io.StringIO()
    pstats.Stats(profiler, stream=out).sort_stats('tottime').print_stats(top)
    print(out.getvalue())
    print(f"Wall time: {elapsed:.3f}s")
    return result


if __name__ == "__main__":
    totals = profile(
        lambda: run_path_workload(50),
        "find_path: 20 boxes, 80 corner waypoints, 50 queries"
    )
    print(
        f"Search totals: candidates={totals.candidates} seeded={totals.seeded} "
        f"end_neighbors={totals.end_neighbors} settled={totals.settled} "
        f"relaxations={totals.relaxations}"
    )

    cells = profile(
        lambda: run_grid_workload(2000),
        "collect_cells: 16x16 cells, 2000 segments"
    )
    print(f"Cells visited: {cells}")
