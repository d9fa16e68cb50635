"""
Grid traversal: which cells of a uniform grid a line segment passes through.
"""

from typing import Callable, Iterator

import numpy as np
from numpy.typing import NDArray

from visipath.geometry import Point, Rect, as_point, sgn

CellVisitor = Callable[[Point], bool]


def _validate_cell_size(cell_size: Point) -> Point:
    cell_size = as_point(cell_size)
    if cell_size[0] <= 0 or cell_size[1] <= 0:
        raise ValueError(f"cell_size components must be positive, got {cell_size}")
    return cell_size


def cell_of(p: Point, cell_size: Point) -> Point:
    """
    Address of the cell containing p.

    Floor division, so points with negative coordinates land in negative
    cells: with cell width 16, x = -1 is in cell -1, not cell 0.
    """
    p, cell_size = as_point(p), _validate_cell_size(cell_size)
    return p[0] // cell_size[0], p[1] // cell_size[1]


def cell_rect(cell: Point, cell_size: Point) -> Rect:
    """The half-open rectangle covered by cell."""
    (x, y), (w, h) = as_point(cell), _validate_cell_size(cell_size)
    return Rect((x * w, y * h), ((x + 1) * w, (y + 1) * h))


def iter_cells_touching_segment(
    cell_size: Point,
    start: Point,
    end: Point
) -> Iterator[Point]:
    """
    Yield every cell the segment start-end overlaps, in travel order.

    Consecutive cells differ by one unit along exactly one axis. The first
    cell contains start and the last contains end. A zero-length segment
    yields its single cell once.

    The general case is a DDA walk. For each axis, the parameter at which the
    segment next crosses a cell boundary is t = n / v, where v is the
    segment's extent along that axis and n the distance from start to the
    boundary. n and v are integers, so the axes are compared by cross
    multiplication (n_x * v_y < n_y * v_x) and no rounding can skip a cell.

    When both axes cross at once (a lattice corner) the y step is taken first,
    except when x increases and y decreases. A segment ending exactly on a
    lattice corner then still finishes in the cell that contains its end
    point under the half-open cell convention.

    Parameters:
        cell_size: (width, height) of each cell, both positive
        start: Segment start point
        end: Segment end point

    Yields:
        Cell addresses (x, y)
    """
    cell_size = _validate_cell_size(cell_size)
    start, end = as_point(start), as_point(end)
    w, h = cell_size
    px, py = cell_of(start, cell_size)
    qx, qy = cell_of(end, cell_size)
    sx, sy = sgn(qx - px), sgn(qy - py)

    # Axis-aligned: unit steps along a row or column.
    if sx == 0 or sy == 0:
        while True:
            yield px, py
            if (px, py) == (qx, qy):
                return
            px += sx
            py += sy

    # Extents are strictly positive here because the cells differ on both axes.
    vx = (end[0] - start[0]) * sx
    vy = (end[1] - start[1]) * sy
    nx = (px + 1) * w - start[0] if sx > 0 else start[0] - px * w
    ny = (py + 1) * h - start[1] if sy > 0 else start[1] - py * h

    while True:
        yield px, py
        if (px, py) == (qx, qy):
            return
        if nx > vx and ny > vy:
            # Both next crossings lie beyond the end of the segment.
            return
        lhs, rhs = nx * vy, ny * vx
        if lhs < rhs or (lhs == rhs and sx > 0 and sy < 0):
            nx += w
            px += sx
        else:
            ny += h
            py += sy


def cells_touching_segment(
    cell_size: Point,
    start: Point,
    end: Point,
    visit: CellVisitor
) -> bool:
    """
    Call visit(cell) for every cell the segment start-end overlaps.

    Cells are visited in travel order, each exactly once. Returning False from
    visit stops the traversal.

    Returns:
        False if visit requested early termination, True otherwise
    """
    for cell in iter_cells_touching_segment(cell_size, start, end):
        if not visit(cell):
            return False
    return True


def collect_cells(cell_size: Point, start: Point, end: Point) -> NDArray[np.int64]:
    """Cells touched by the segment as an (N, 2) array, in travel order."""
    cells = list(iter_cells_touching_segment(cell_size, start, end))
    return np.array(cells, dtype=np.int64).reshape(-1, 2)
