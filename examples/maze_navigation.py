#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Route a walker through a room with pillars and render the result.

The script builds:
1. An obstacle graph from a few rectangular pillars
2. A waypoint graph linking the pillar corners that can see each other
3. The shortest visible-edge route between two points
4. The grid cells each leg of the route crosses

Usage:
    python examples/maze_navigation.py
    python examples/maze_navigation.py --start 20 20 --end 600 440 --cell-size 32
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from visipath import Graph, NoPath, NoPathPossible, collect_cells, find_path
from visipath.debug import format_path, log_path_result, setup_debug_logging
from visipath.visualize import HAS_CV2, draw_cells, draw_graph, draw_path

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Paths
SCRIPT_DIR = Path(__file__).resolve().parent
OUTPUT_DIR = SCRIPT_DIR / "output"

ROOM_SIZE = (640, 480)

# (x, y, width, height) in room pixels
PILLARS = [
    (120, 60, 60, 200),
    (300, 200, 80, 220),
    (460, 40, 70, 180),
]

# Waypoints sit this far outside each pillar corner
CORNER_MARGIN = 6


def pillar_contour(x: int, y: int, width: int, height: int) -> NDArray[np.int32]:
    """
    Corners of a pillar, wound so its edges block from outside.

    Args:
        x, y: Lower corner of the pillar
        width, height: Pillar extent

    Returns:
        (4, 2) array of contour points
    """
    return np.array([
        [x, y],
        [x, y + height],
        [x + width, y + height],
        [x + width, y],
    ], dtype=np.int32)


def build_room(pillars: list[tuple[int, int, int, int]]) -> tuple[Graph, Graph]:
    """Obstacle and waypoint graphs for the given pillars."""
    obstacles = Graph()
    corners: list[tuple[int, int]] = []
    m = CORNER_MARGIN
    for x, y, width, height in pillars:
        obstacles.add_polygon(pillar_contour(x, y, width, height))
        corners.extend([
            (x - m, y - m),
            (x - m, y + height + m),
            (x + width + m, y + height + m),
            (x + width + m, y - m),
        ])

    waypoints = Graph()
    for u in corners:
        for v in corners:
            if u != v and not obstacles.fully_blocks(u, v):
                waypoints.add_edge(u, v)

    logger.info(
        f"Room has {obstacles.num_edges()} obstacle edges and "
        f"{waypoints.num_edges()} waypoint edges"
    )
    return obstacles, waypoints


def render(
    obstacles: Graph,
    waypoints: Graph,
    start: tuple[int, int],
    path: list[tuple[int, int]],
    cell_size: tuple[int, int],
) -> NDArray[np.uint8]:
    """Draw the room, the route and the cells it crosses."""
    width, height = ROOM_SIZE
    image = np.full((height, width, 3), 255, dtype=np.uint8)

    prev = start
    for point in path:
        cells = collect_cells(cell_size, prev, point)
        image = draw_cells(image, cells, cell_size, color=(200, 220, 255), fill_alpha=0.5)
        prev = point

    image = draw_graph(image, waypoints, color=(220, 220, 220), thickness=1)
    image = draw_graph(image, obstacles, color=(0, 0, 0), thickness=2, draw_direction=True)
    image = draw_path(image, start, path, color=(0, 160, 0), thickness=2)
    return image


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Find a route around pillars and render it"
    )
    parser.add_argument(
        "--start",
        type=int,
        nargs=2,
        default=(40, 300),
        help="Start point x y (default: 40 300)"
    )
    parser.add_argument(
        "--end",
        type=int,
        nargs=2,
        default=(600, 120),
        help="End point x y (default: 600 120)"
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=32,
        help="Grid cell size in pixels (default: 32)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging from the path search"
    )

    args = parser.parse_args()

    if args.debug:
        setup_debug_logging()

    start, end = tuple(args.start), tuple(args.end)
    obstacles, waypoints = build_room(PILLARS)

    width, height = ROOM_SIZE
    result = find_path(obstacles, waypoints, start, end, (0, 0), (width - 1, height - 1))
    log_path_result(start, end, result)

    if isinstance(result.error, NoPathPossible):
        logger.error(f"No route possible: {result.error}")
        return
    if isinstance(result.error, NoPath):
        logger.error(f"No route found: {result.error}")
        return

    logger.info(f"Route: {format_path(start, result.path)}")
    logger.info(f"Route length: {result.length(start):.1f}")

    if not HAS_CV2:
        logger.warning("OpenCV not installed, skipping rendering")
        return

    import cv2

    cell_size = (args.cell_size, args.cell_size)
    image = render(obstacles, waypoints, start, result.path, cell_size)

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    output_path = OUTPUT_DIR / "maze_navigation.png"
    cv2.imwrite(str(output_path), image)
    logger.info(f"Saved rendering to {output_path}")


if __name__ == "__main__":
    main()
