"""
Shortest paths around obstacles, seeded by visibility.

The search space is Euclidean: the shortest connector between two mutually
visible points is the straight segment between them. An optimal path around
polygonal obstacles therefore only turns at obstacle corners, so it is enough
to search over the vertices of a waypoint graph (corner links), plus the start
and end points, which are connected to whichever waypoints they can see.
"""

from dataclasses import dataclass, field
import heapq
import itertools
import logging
import math
from typing import Dict, List, Optional, Set, Tuple

import numpy as np
from numpy.typing import NDArray

from visipath.dataclasses import PathQuery
from visipath.geometry import Point, length
from visipath.graph import Graph

logger = logging.getLogger(__name__)


class PathError(Exception):
    """Base class for path search failures. Returned in PathResult.error."""

    pass


class NoPathPossible(PathError):
    """No waypoint is visible from start, or none can see end."""

    pass


class NoPath(PathError):
    """The search completed without reaching end within the bounds."""

    pass


@dataclass
class SearchStats:
    """
    Counters describing the work done by one find_path call.

    Attributes:
        candidates: Waypoint vertices inside the query bounds
        seeded: Candidates directly visible from start
        end_neighbors: Candidates that can see end
        settled: Vertices extracted from the priority queue
        relaxations: Successful distance improvements
    """
    candidates: int = 0
    seeded: int = 0
    end_neighbors: int = 0
    settled: int = 0
    relaxations: int = 0


@dataclass
class PathResult:
    """
    Result of a path query.

    Attributes:
        path: Waypoints to follow in order, ending with the query end point.
              The start point is implicit and never included. Empty on failure.
        error: NoPathPossible or NoPath when no path was found, else None
        stats: Search counters
    """
    path: List[Point]
    error: Optional[PathError] = None
    stats: SearchStats = field(default_factory=SearchStats)

    def __bool__(self) -> bool:
        """Returns True if a path was found."""
        return self.error is None

    def length(self, start: Point) -> float:
        """Total Euclidean length of the polyline start -> path[0] -> ... -> path[-1]."""
        if not self:
            return math.inf
        total = 0.0
        prev = tuple(start)
        for p in self.path:
            total += length(prev, p)
            prev = p
        return total

    def as_array(self) -> NDArray[np.int64]:
        """Path as an (N, 2) integer array."""
        return np.array(self.path, dtype=np.int64).reshape(-1, 2)


def find_path(
    obstacles: Graph,
    waypoints: Graph,
    start: Point,
    end: Point,
    bounds_ul: Point,
    bounds_dr: Point
) -> PathResult:
    """
    Find a shortest path from start to end that no obstacle edge blocks.

    start and end need not be graph vertices. Only waypoint vertices inside
    the rectangle bounds_ul-bounds_dr (boundary included) are used.

    Parameters:
        obstacles: Graph of one-sided blocking edges
        waypoints: Graph of permitted movement links between corners
        start: Start point
        end: End point
        bounds_ul: Lower corner of the waypoint bounds
        bounds_dr: Upper corner of the waypoint bounds

    Returns:
        PathResult; check it for truth (or its error) before using the path

    Raises:
        ValidationError: If the points are malformed or the bounds are inverted

    Example:
        >>> obstacles, waypoints = Graph(), Graph()
        >>> obstacles.add_edge((5, -5), (5, 20))
        >>> obstacles.add_edge((5, 20), (5, -5))
        >>> waypoints.add_edge((4, 21), (6, 21))
        >>> result = find_path(obstacles, waypoints, (0, 0), (10, 0), (-30, -30), (30, 30))
        >>> result.path
        [(4, 21), (6, 21), (10, 0)]
    """
    query = PathQuery(start=start, end=end, bounds_ul=bounds_ul, bounds_dr=bounds_dr)
    return find_path_for_query(obstacles, waypoints, query)


def find_path_for_query(obstacles: Graph, waypoints: Graph, query: PathQuery) -> PathResult:
    """find_path taking a prepared PathQuery."""
    start, end = query.start, query.end
    stats = SearchStats()

    # -------------------------------------------------------------------------
    # Step 1: Straight line
    # -------------------------------------------------------------------------
    if not obstacles.blocks(start, end):
        logger.debug(f"Direct path {start} -> {end}")
        return PathResult(path=[end], stats=stats)

    # -------------------------------------------------------------------------
    # Step 2: Seed from visibility
    # -------------------------------------------------------------------------
    # Distances to vertices visible from start are already optimal.
    dist: Dict[Point, float] = {start: 0.0}
    prev: Dict[Point, Point] = {}
    end_neighbors: Set[Point] = set()
    unsettled: Set[Point] = {end}
    heap: List[Tuple[float, int, Point]] = []
    counter = itertools.count()

    for v in waypoints.vertices:
        if not query.in_bounds(v):
            continue
        stats.candidates += 1
        unsettled.add(v)
        if not obstacles.blocks(start, v):
            d = length(start, v)
            if v == start or d < dist.get(v, math.inf):
                dist[v] = d
                prev[v] = start
                heapq.heappush(heap, (d, next(counter), v))
                stats.seeded += 1
        if not obstacles.blocks(v, end):
            end_neighbors.add(v)
    stats.end_neighbors = len(end_neighbors)

    logger.debug(
        f"Seeded {stats.seeded}/{stats.candidates} candidates, "
        f"{stats.end_neighbors} can see end"
    )

    if stats.seeded == 0 or not end_neighbors:
        return PathResult(
            path=[],
            error=NoPathPossible(
                f"no path possible from {start} to {end}: "
                f"{stats.seeded} waypoints visible from start, "
                f"{len(end_neighbors)} waypoints can see end"
            ),
            stats=stats,
        )

    # -------------------------------------------------------------------------
    # Step 3: Dijkstra over {end} + candidates
    # -------------------------------------------------------------------------
    def relax(u: Point, v: Point) -> None:
        if v not in unsettled:
            return
        t = dist[u] + length(u, v)
        if t < dist.get(v, math.inf):
            dist[v] = t
            prev[v] = u
            heapq.heappush(heap, (t, next(counter), v))
            stats.relaxations += 1

    # Entries are never removed from the heap; stale ones are skipped on pop.
    while heap:
        d, _, u = heapq.heappop(heap)
        if u not in unsettled or d > dist[u]:
            continue
        if u == end:
            break
        unsettled.discard(u)
        stats.settled += 1

        for v in waypoints.edges.get(u, ()):
            relax(u, v)
        if u in end_neighbors:
            relax(u, end)

    # -------------------------------------------------------------------------
    # Step 4: Walk predecessors back from end
    # -------------------------------------------------------------------------
    if end not in prev:
        logger.debug(f"Search settled {stats.settled} vertices without reaching {end}")
        return PathResult(
            path=[],
            error=NoPath(f"no path from {start} to {end} within the given bounds"),
            stats=stats,
        )

    path: List[Point] = []
    v = end
    while v != start:
        path.append(v)
        v = prev[v]
    path.reverse()

    logger.debug(f"Found path of {len(path)} points, length {dist[end]:.3f}")
    return PathResult(path=path, stats=stats)
