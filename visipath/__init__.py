"""
Visibility Pathfinding
======================

Public API for shortest obstacle-avoiding paths among polygonal obstacles,
and for enumerating the grid cells a line segment passes through.
"""

from visipath.geometry import (
    EPSILON,
    Point,
    Rect,
    as_point,
    in_rect,
    length,
    line_intersect,
    line_intersect_int,
    line_nearest_point,
    segment_intersect,
    segment_intersect_int,
    segment_nearest_point,
    signed_area2,
    to_float_point,
    to_int_point,
)
from visipath.graph import Edge, Graph
from visipath.dataclasses import PathQuery, ValidationError
from visipath.pathfinding import (
    NoPath,
    NoPathPossible,
    PathError,
    PathResult,
    SearchStats,
    find_path,
    find_path_for_query,
)
from visipath.grid import (
    cell_of,
    cell_rect,
    cells_touching_segment,
    collect_cells,
    iter_cells_touching_segment,
)
from visipath.debug import (
    format_edge,
    format_path,
    format_point,
    log_path_result,
    setup_debug_logging,
    disable_debug_logging,
)

__all__ = [
    # Geometry
    'EPSILON',
    'Point',
    'Rect',
    'as_point',
    'in_rect',
    'length',
    'line_intersect',
    'line_intersect_int',
    'line_nearest_point',
    'segment_intersect',
    'segment_intersect_int',
    'segment_nearest_point',
    'signed_area2',
    'to_float_point',
    'to_int_point',
    # Graphs
    'Edge',
    'Graph',
    # Path search
    'PathQuery',
    'ValidationError',
    'PathError',
    'NoPathPossible',
    'NoPath',
    'PathResult',
    'SearchStats',
    'find_path',
    'find_path_for_query',
    # Grid traversal
    'cell_of',
    'cell_rect',
    'cells_touching_segment',
    'collect_cells',
    'iter_cells_touching_segment',
    # Debug utilities
    'format_edge',
    'format_path',
    'format_point',
    'log_path_result',
    'setup_debug_logging',
    'disable_debug_logging',
]
__version__ = '0.1.0'
