"""
Adjacency-set graphs of directed edges between integer points.

The same Graph type plays two roles: an obstacle graph, whose edges are
impassable boundaries, and a waypoint graph, whose edges are legal movement
links. Obstacle edges are one-sided: edge u->v blocks a query from point p
only when it faces p (signed_area2(p, u, v) > 0). Insert both u->v and v->u
to get a barrier that blocks from either side.
"""

from dataclasses import dataclass, field
from fractions import Fraction
import math
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from visipath.geometry import (
    Point,
    as_point,
    length,
    segment_intersect_int,
    segment_nearest_point,
    signed_area2,
)

EdgeVisitor = Callable[[Point, Point], bool]


@dataclass(frozen=True)
class Edge:
    """A directed edge u->v."""
    u: Point
    v: Point

    @property
    def length(self) -> float:
        return length(self.u, self.v)

    def reverse(self) -> "Edge":
        return Edge(self.v, self.u)


@dataclass
class Graph:
    """
    Directed graph stored as a vertex set plus successor sets.

    Attributes:
        vertices: Every point that is an endpoint of some edge
        edges: edges[u] is the set of v such that u->v is an edge

    Graphs are built with add_edge/add_polygon and then queried. Queries never
    mutate the graph, so a finished graph may be shared by concurrent readers.
    Iteration order over edges follows set ordering and is not stable across
    insertion order.
    """
    vertices: Set[Point] = field(default_factory=set)
    edges: Dict[Point, Set[Point]] = field(default_factory=dict)

    def add_edge(self, u: Point, v: Point) -> None:
        """Add the directed edge u->v. The reverse edge is not added."""
        u, v = as_point(u), as_point(v)
        self.vertices.add(u)
        self.vertices.add(v)
        self.edges.setdefault(u, set()).add(v)

    def add_polygon(self, contour: NDArray[np.integer], closed: bool = True) -> None:
        """
        Add the consecutive edges of a contour.

        Parameters:
            contour: Vertices (N, 2) with integral coordinates
            closed: Also add the edge from the last vertex back to the first
        """
        contour = np.asarray(contour)
        if contour.ndim != 2 or contour.shape[1] != 2:
            raise ValueError(f"contour must have shape (N, 2), got {contour.shape}")
        points = [as_point(row) for row in contour]
        n = len(points)
        if n < 2:
            return
        last = n if closed else n - 1
        for i in range(last):
            self.add_edge(points[i], points[(i + 1) % n])

    def iter_edges(self) -> Iterator[Tuple[Point, Point]]:
        for u, successors in self.edges.items():
            for v in successors:
                yield u, v

    def iter_edges_facing(self, point: Point) -> Iterator[Tuple[Point, Point]]:
        """Edges u->v with signed_area2(point, u, v) > 0."""
        for u, v in self.iter_edges():
            if signed_area2(point, u, v) > 0:
                yield u, v

    def all_edges(self, visit: EdgeVisitor) -> bool:
        """
        Call visit(u, v) for every edge.

        Returns:
            False if visit returned False (iteration stops there), else True
        """
        for u, v in self.iter_edges():
            if not visit(u, v):
                return False
        return True

    def edges_facing(self, point: Point, visit: EdgeVisitor) -> bool:
        """Like all_edges, restricted to edges facing point."""
        point = as_point(point)
        for u, v in self.iter_edges_facing(point):
            if not visit(u, v):
                return False
        return True

    def edge_list(self) -> List[Edge]:
        return [Edge(u, v) for u, v in self.iter_edges()]

    def num_edges(self) -> int:
        return sum(len(successors) for successors in self.edges.values())

    def blocks(self, start: Point, end: Point) -> bool:
        """
        Test if any edge facing start intersects the segment start->end.
        """
        start, end = as_point(start), as_point(end)
        return any(
            segment_intersect_int(u, v, start, end)[1]
            for u, v in self.iter_edges_facing(start)
        )

    def fully_blocks(self, start: Point, end: Point) -> bool:
        """Test if any edge, facing or not, intersects the segment start->end."""
        start, end = as_point(start), as_point(end)
        return any(
            segment_intersect_int(u, v, start, end)[1]
            for u, v in self.iter_edges()
        )

    def nearest_blocking_point(self, start: Point, end: Point) -> Tuple[Optional[Point], bool]:
        """
        First hit of a ray cast from start towards end.

        Only edges facing start are considered.

        Returns:
            (point, True) for the intersection nearest to start, or (None, False)
        """
        start, end = as_point(start), as_point(end)
        best: Optional[Point] = None
        best_distance = math.inf
        for u, v in self.iter_edges_facing(start):
            p, hit = segment_intersect_int(u, v, start, end)
            if not hit:
                continue
            d = length(start, p)
            if d < best_distance:
                best_distance = d
                best = p
        return best, best is not None

    def nearest_point_on_graph(self, query: Point) -> Optional[Tuple[Edge, Point]]:
        """
        Edge and point on that edge closest to query.

        Ties between equally distant edges are resolved by iteration order,
        which is unspecified.

        Returns:
            (edge, point), or None if the graph has no edges
        """
        query = as_point(query)
        best: Optional[Tuple[Edge, Point]] = None
        best_distance: Optional[Union[int, Fraction]] = None
        for u, v in self.iter_edges():
            p, d = segment_nearest_point(u, v, query)
            if best_distance is None or d < best_distance:
                best_distance = d
                best = (Edge(u, v), p)
        return best
