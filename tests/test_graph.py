"""
Tests for Graph: construction, edge iteration, facing and blocking queries.
"""

import pytest
import numpy as np

from visipath.graph import Edge, Graph


# =============================================================================
# Helper functions for creating test fixtures
# =============================================================================

def make_square_obstacle(ul: tuple, size: int) -> Graph:
    """Square wound clockwise (y up), so its edges face outwards."""
    x, y = ul
    g = Graph()
    g.add_polygon(np.array([
        [x, y],
        [x, y + size],
        [x + size, y + size],
        [x + size, y],
    ]))
    return g


# =============================================================================
# Construction
# =============================================================================

class TestAddEdge:
    """Tests for Graph.add_edge()."""

    def test_inserts_both_vertices(self):
        """Both endpoints become vertices."""
        g = Graph()
        g.add_edge((0, 0), (3, 4))
        assert g.vertices == {(0, 0), (3, 4)}

    def test_directed_only(self):
        """The reverse edge is not added."""
        g = Graph()
        g.add_edge((0, 0), (3, 4))
        assert g.edges == {(0, 0): {(3, 4)}}
        assert (3, 4) not in g.edges

    def test_duplicate_edge_counted_once(self):
        """Adding the same edge twice keeps one copy."""
        g = Graph()
        g.add_edge((0, 0), (1, 0))
        g.add_edge((0, 0), (1, 0))
        assert g.num_edges() == 1

    def test_accepts_numpy_points(self):
        """numpy points are normalized to tuples."""
        g = Graph()
        g.add_edge(np.array([1, 2]), np.array([3, 4]))
        assert g.edge_list() == [Edge((1, 2), (3, 4))]

    def test_self_loop_allowed(self):
        """A zero-length edge is stored but never blocks."""
        g = Graph()
        g.add_edge((2, 2), (2, 2))
        assert g.num_edges() == 1
        assert not g.fully_blocks((0, 0), (4, 4))


class TestAddPolygon:
    """Tests for Graph.add_polygon()."""

    def test_closed_square(self):
        """Closed contour adds one edge per side, including the closing edge."""
        g = make_square_obstacle((0, 0), 10)
        assert g.num_edges() == 4
        assert len(g.vertices) == 4
        assert (10, 0) in g.edges[(10, 10)]
        assert (0, 0) in g.edges[(10, 0)]

    def test_open_polyline(self):
        """Open contour omits the closing edge."""
        g = Graph()
        g.add_polygon(np.array([[0, 0], [5, 0], [5, 5]]), closed=False)
        assert set(g.edge_list()) == {Edge((0, 0), (5, 0)), Edge((5, 0), (5, 5))}

    def test_bad_shape(self):
        """Contours must be (N, 2)."""
        with pytest.raises(ValueError, match="shape"):
            Graph().add_polygon(np.array([1, 2, 3]))

    def test_single_vertex_adds_nothing(self):
        """A single point has no edges."""
        g = Graph()
        g.add_polygon(np.array([[1, 1]]))
        assert g.num_edges() == 0


class TestEdge:

    def test_length(self):
        """Edge length is Euclidean."""
        assert Edge((0, 0), (3, 4)).length == pytest.approx(5.0)

    def test_reverse(self):
        """reverse() swaps the endpoints."""
        assert Edge((0, 0), (3, 4)).reverse() == Edge((3, 4), (0, 0))


# =============================================================================
# Iteration
# =============================================================================

class TestIteration:
    """Tests for all_edges() and edges_facing()."""

    def test_all_edges_visits_every_edge(self):
        """Visitor sees every edge once."""
        g = make_square_obstacle((0, 0), 10)
        seen = []
        assert g.all_edges(lambda u, v: seen.append((u, v)) or True) is True
        assert len(seen) == 4
        assert set(seen) == set(g.iter_edges())

    def test_all_edges_early_exit(self):
        """Returning False stops after the first edge."""
        g = make_square_obstacle((0, 0), 10)
        seen = []

        def visit(u, v):
            seen.append((u, v))
            return False

        assert g.all_edges(visit) is False
        assert len(seen) == 1

    def test_facing_only_front_edge(self):
        """Only the side facing the point is reported."""
        g = make_square_obstacle((0, 0), 10)
        seen = []
        g.edges_facing((-5, 5), lambda u, v: seen.append((u, v)) or True)
        assert seen == [((0, 0), (0, 10))]

    def test_facing_depends_on_direction(self):
        """An edge faces one side only."""
        g = Graph()
        g.add_edge((0, 0), (0, 10))
        assert list(g.iter_edges_facing((-5, 5))) == [((0, 0), (0, 10))]
        assert list(g.iter_edges_facing((5, 5))) == []

    def test_collinear_point_faces_nothing(self):
        """A point on the edge's line is faced by nothing."""
        g = Graph()
        g.add_edge((0, 0), (0, 10))
        assert list(g.iter_edges_facing((0, 20))) == []

    def test_edges_facing_early_exit(self):
        """Returning False stops the facing iteration."""
        g = Graph()
        g.add_edge((0, 0), (0, 10))
        g.add_edge((1, 0), (1, 10))
        calls = []

        def visit(u, v):
            calls.append(u)
            return False

        assert g.edges_facing((-5, 5), visit) is False
        assert len(calls) == 1


# =============================================================================
# Blocking
# =============================================================================

class TestBlocks:
    """Tests for blocks() and fully_blocks()."""

    def test_square_blocks_from_both_sides(self):
        """A clockwise square blocks from outside in both directions."""
        g = make_square_obstacle((0, 0), 10)
        assert g.blocks((-5, 5), (15, 5))
        assert g.blocks((15, 5), (-5, 5))

    def test_segment_missing_obstacle(self):
        """A segment passing above the square is clear."""
        g = make_square_obstacle((0, 0), 10)
        assert not g.blocks((-5, 15), (15, 15))
        assert not g.fully_blocks((-5, 15), (15, 15))

    def test_one_sided_edge(self):
        """A single edge blocks only from its front."""
        g = Graph()
        g.add_edge((0, 0), (0, 10))
        assert g.blocks((-5, 5), (5, 5))
        # Seen from behind the edge does not face the viewer
        assert not g.blocks((5, 5), (-5, 5))
        assert g.fully_blocks((5, 5), (-5, 5))

    def test_two_sided_edge(self):
        """Both directions together block from either side."""
        g = Graph()
        g.add_edge((0, 0), (0, 10))
        g.add_edge((0, 10), (0, 0))
        assert g.blocks((-5, 5), (5, 5))
        assert g.blocks((5, 5), (-5, 5))

    def test_segment_ending_before_obstacle(self):
        """A segment that stops short is not blocked."""
        g = make_square_obstacle((0, 0), 10)
        assert not g.blocks((-10, 5), (-1, 5))

    def test_empty_graph_never_blocks(self):
        """Nothing blocks in an empty graph."""
        assert not Graph().blocks((0, 0), (100, 100))
        assert not Graph().fully_blocks((0, 0), (100, 100))


class TestNearestBlockingPoint:
    """Tests for nearest_blocking_point() (first raycast hit)."""

    def test_nearest_of_two_walls(self):
        """The first wall along the ray is returned."""
        g = Graph()
        g.add_edge((4, 0), (4, 10))
        g.add_edge((0, 0), (0, 10))
        assert g.nearest_blocking_point((-5, 5), (15, 5)) == ((0, 5), True)

    def test_no_hit(self):
        """A clear ray returns no point."""
        g = make_square_obstacle((0, 0), 10)
        assert g.nearest_blocking_point((-5, 20), (15, 20)) == (None, False)

    def test_back_facing_edges_ignored(self):
        """Back-facing edges do not stop the ray."""
        g = Graph()
        g.add_edge((0, 10), (0, 0))  # Faces +x only
        assert g.nearest_blocking_point((-5, 5), (5, 5)) == (None, False)
        assert g.nearest_blocking_point((5, 5), (-5, 5)) == ((0, 5), True)


class TestNearestPointOnGraph:
    """Tests for nearest_point_on_graph()."""

    def test_closest_edge(self):
        """The nearer of two parallel edges is chosen."""
        g = Graph()
        g.add_edge((0, 0), (10, 0))
        g.add_edge((0, 5), (10, 5))
        edge, point = g.nearest_point_on_graph((3, 1))
        assert edge == Edge((0, 0), (10, 0))
        assert point == (3, 0)

    def test_clamped_to_vertex(self):
        """Projections past an end clamp to the vertex."""
        g = Graph()
        g.add_edge((0, 0), (10, 0))
        edge, point = g.nearest_point_on_graph((-4, -3))
        assert point == (0, 0)

    def test_point_on_edge(self):
        """A point on an edge is its own nearest point."""
        g = make_square_obstacle((0, 0), 10)
        edge, point = g.nearest_point_on_graph((10, 4))
        assert point == (10, 4)
        assert edge in {Edge((10, 10), (10, 0))}

    def test_ranks_edges_by_exact_distance(self):
        """The nearer edge wins even when the farther one rounds closer."""
        g = Graph()
        # Squared distance 225/101 from the origin; nearest point rounds to (0, 1)
        g.add_edge((-5, 1), (5, 2))
        # Squared distance exactly 2; nearest point (-1, -1)
        g.add_edge((-5, 3), (3, -5))
        edge, point = g.nearest_point_on_graph((0, 0))
        assert edge == Edge((-5, 3), (3, -5))
        assert point == (-1, -1)

    def test_empty_graph(self):
        """An empty graph has no nearest point."""
        assert Graph().nearest_point_on_graph((0, 0)) is None
