"""
Visualization utilities for debugging graphs, paths and grid traversals.

Images are (H, W, 3) BGR uint8 arrays and plane coordinates map directly to
pixel coordinates.
"""

from typing import Iterable, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from visipath.geometry import Point, as_point
from visipath.graph import Graph
from visipath.grid import cell_rect

# Try to import cv2, set flag if not available
try:
    import cv2

    HAS_CV2 = True
except ImportError:
    HAS_CV2 = False


def _ensure_cv2() -> None:
    """Raise an error if cv2 is not available."""
    if not HAS_CV2:
        raise ImportError(
            "OpenCV (cv2) is required for visualization functions. "
            "Install with: pip install opencv-python-headless"
        )


def draw_graph(
    image: NDArray[np.uint8],
    graph: Graph,
    color: Tuple[int, int, int] = (0, 0, 255),
    thickness: int = 2,
    draw_direction: bool = False
) -> NDArray[np.uint8]:
    """
    Draw every edge of a graph.

    Parameters:
        image: Input image (H, W, 3) BGR format
        graph: Obstacle or waypoint graph
        color: BGR color tuple
        thickness: Line thickness
        draw_direction: Draw arrows u->v, useful to inspect one-sided obstacles

    Returns:
        Copy of the image with the edges drawn
    """
    _ensure_cv2()
    output = image.copy()
    for u, v in graph.iter_edges():
        if draw_direction:
            cv2.arrowedLine(output, u, v, color, thickness, tipLength=0.1)
        else:
            cv2.line(output, u, v, color, thickness)
    return output


def draw_path(
    image: NDArray[np.uint8],
    start: Point,
    path: Sequence[Point],
    color: Tuple[int, int, int] = (0, 255, 0),
    thickness: int = 2,
    marker_radius: int = 3
) -> NDArray[np.uint8]:
    """
    Draw a path returned by find_path, starting from its implicit start.

    Returns:
        Copy of the image with the polyline and a marker at each waypoint
    """
    _ensure_cv2()
    output = image.copy()
    points = [as_point(p) for p in [start, *path]]
    polyline = np.array(points, dtype=np.int32).reshape(-1, 1, 2)
    cv2.polylines(output, [polyline], isClosed=False, color=color, thickness=thickness)
    for p in points:
        cv2.circle(output, p, marker_radius, color, -1)
    return output


def draw_cells(
    image: NDArray[np.uint8],
    cells: Iterable[Point],
    cell_size: Point,
    color: Tuple[int, int, int] = (255, 200, 0),
    fill_alpha: float = 0.4
) -> NDArray[np.uint8]:
    """
    Shade grid cells, e.g. the output of collect_cells.

    Parameters:
        image: Input image (H, W, 3) BGR format
        cells: Cell addresses
        cell_size: (width, height) of a cell
        color: BGR fill color
        fill_alpha: Opacity of the fill in [0, 1]

    Returns:
        Blended copy of the image
    """
    _ensure_cv2()
    if not 0.0 <= fill_alpha <= 1.0:
        raise ValueError(f"fill_alpha must be in [0, 1], got {fill_alpha}")
    overlay = image.copy()
    for cell in cells:
        rect = cell_rect(as_point(cell), cell_size)
        # rectangle() takes inclusive corners
        cv2.rectangle(overlay, rect.ul, (rect.dr[0] - 1, rect.dr[1] - 1), color, -1)
    return cv2.addWeighted(overlay, fill_alpha, image, 1.0 - fill_alpha, 0)
