"""
Geometric primitives on integer and floating-point points.

Integer points are plain ``(x, y)`` tuples of Python ints. They are hashable,
so they can be graph vertices, and all integer predicates below are exact at
any coordinate magnitude because Python ints never overflow. Float points are
numpy arrays of shape (2,) and are only used where integer arithmetic cannot
express the operation.
"""

from dataclasses import dataclass
from fractions import Fraction
import math
from numbers import Integral
from typing import Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

Point = Tuple[int, int]

# Tolerance for float determinant comparisons.
EPSILON = 1e-10


def as_point(obj) -> Point:
    """
    Normalize a 2-component integral value to a ``(x, y)`` tuple of ints.

    Accepts tuples, lists and numpy arrays. Floats are accepted only when
    they have no fractional part.

    Raises:
        ValueError: If obj does not have exactly 2 integral components
    """
    try:
        components = [obj[0], obj[1]]
        extra = len(obj) != 2
    except (TypeError, IndexError, KeyError):
        raise ValueError(f"point must have exactly 2 components, got {obj!r}") from None
    if extra:
        raise ValueError(f"point must have exactly 2 components, got {obj!r}")

    result = []
    for c in components:
        if isinstance(c, (bool, np.bool_)):
            raise ValueError(f"point components must be integers, got {obj!r}")
        if isinstance(c, (Integral, np.integer)):
            result.append(int(c))
        elif isinstance(c, (float, np.floating)) and math.isfinite(c) and float(c).is_integer():
            result.append(int(c))
        else:
            raise ValueError(f"point components must be integers, got {obj!r}")
    return result[0], result[1]


def sgn(x: Union[int, Fraction]) -> int:
    """Sign of x: -1, 0 or 1."""
    if x < 0:
        return -1
    if x > 0:
        return 1
    return 0


def add(u: Point, v: Point) -> Point:
    return u[0] + v[0], u[1] + v[1]


def sub(u: Point, v: Point) -> Point:
    return u[0] - v[0], u[1] - v[1]


def dot(u: Point, v: Point) -> int:
    return u[0] * v[0] + u[1] * v[1]


def length(u: Point, v: Point) -> float:
    """Euclidean length of the segment u-v."""
    return math.hypot(v[0] - u[0], v[1] - u[1])


def in_rect(p: Point, ul: Point, dr: Point) -> bool:
    """Test if p lies in the rectangle ul-dr, boundary included."""
    return ul[0] <= p[0] <= dr[0] and ul[1] <= p[1] <= dr[1]


def _round_half_up(x: Fraction) -> int:
    # floor(x + 1/2) without leaving exact arithmetic
    return (2 * x.numerator + x.denominator) // (2 * x.denominator)


def signed_area2(a: Point, b: Point, c: Point) -> int:
    """
    Twice the signed area of the triangle abc.

    Positive when a, b, c wind counter-clockwise (y up), negative when they
    wind clockwise, zero when collinear.
    """
    return a[1] * (c[0] - b[0]) + b[1] * (a[0] - c[0]) + c[1] * (b[0] - a[0])


def line_intersect_int(p: Point, q: Point, a: Point, b: Point) -> Tuple[Optional[Point], bool]:
    """
    Intersection of the infinite lines through p,q and a,b.

    Returns:
        (point, True) with the intersection rounded to the nearest integer
        point, or (None, False) when the lines are parallel
    """
    dx1, dy1 = p[0] - q[0], p[1] - q[1]
    dx2, dy2 = a[0] - b[0], a[1] - b[1]
    det = dx2 * dy1 - dx1 * dy2
    if det == 0:
        return None, False
    pq = q[0] * p[1] - p[0] * q[1]
    ab = b[0] * a[1] - a[0] * b[1]
    x = Fraction(pq * dx2 - ab * dx1, det)
    y = Fraction(pq * dy2 - ab * dy1, det)
    return (_round_half_up(x), _round_half_up(y)), True


def segment_intersect_int(p: Point, q: Point, a: Point, b: Point) -> Tuple[Optional[Point], bool]:
    """
    Test whether segment p->q crosses segment a->b.

    Both segments are taken as half-open: the parameter along each must lie
    in [0, 1), so a shared start point counts and a point touching only at
    either segment's end does not. The boolean result does not depend on the
    order of the two segments.

    Parameters are kept as exact rationals (numerator over the cross product
    determinant), so near-parallel segments with large coordinates behave
    exactly like their small-scale counterparts.

    Parameters:
        p, q: Endpoints of the first segment
        a, b: Endpoints of the second segment

    Returns:
        (point, True) where point is the intersection rounded to the nearest
        integer point, or (None, False). Parallel, collinear and zero-length
        segments never intersect.
    """
    rx, ry = q[0] - p[0], q[1] - p[1]
    dx, dy = b[0] - a[0], b[1] - a[1]
    det = rx * dy - ry * dx
    if det == 0:
        return None, False

    apx, apy = a[0] - p[0], a[1] - p[1]
    t_num = apx * dy - apy * dx  # along p->q
    s_num = apx * ry - apy * rx  # along a->b
    if det < 0:
        det, t_num, s_num = -det, -t_num, -s_num

    if not (0 <= t_num < det):
        return None, False
    if not (0 <= s_num < det):
        return None, False

    s = Fraction(s_num, det)
    return (_round_half_up(a[0] + dx * s), _round_half_up(a[1] + dy * s)), True


def line_nearest_point(u: Point, v: Point, p: Point) -> Tuple[Point, Union[int, Fraction]]:
    """
    Point on the infinite line through u,v closest to p, and the exact squared
    distance from p to the line.

    The point is rounded to the integer grid; the distance is not, so
    distances to different lines compare correctly.
    """
    if u == v:
        return u, dot(sub(p, u), sub(p, u))
    d = sub(v, u)
    n2 = dot(d, d)
    t = Fraction(dot(sub(p, u), d), n2)
    q = (_round_half_up(u[0] + d[0] * t), _round_half_up(u[1] + d[1] * t))
    return q, Fraction(signed_area2(u, v, p) ** 2, n2)


def segment_nearest_point(u: Point, v: Point, p: Point) -> Tuple[Point, Union[int, Fraction]]:
    """
    Closest point to p on the segment u-v.

    The orthogonal projection of p is clamped to the nearer endpoint when it
    falls outside the segment. A zero-length segment yields u.

    Returns:
        Tuple of (point, exact squared distance from p to the segment)
    """
    if u == v:
        return u, dot(sub(p, u), sub(p, u))
    d = sub(v, u)
    projection = dot(sub(p, u), d)
    if projection <= 0:
        return u, dot(sub(p, u), sub(p, u))
    if projection >= dot(d, d):
        return v, dot(sub(p, v), sub(p, v))
    return line_nearest_point(u, v, p)


# =============================================================================
# Floating-point counterparts
# =============================================================================

def to_float_point(p: Point) -> NDArray[np.float64]:
    return np.array(p, dtype=np.float64)


def to_int_point(f: NDArray[np.float64]) -> Point:
    """Round a float point to the nearest integer point (halves round up)."""
    f = np.asarray(f, dtype=np.float64)
    rounded = np.floor(f + 0.5)
    return int(rounded[0]), int(rounded[1])


def _normal(v: NDArray[np.float64]) -> NDArray[np.float64]:
    return np.array([-v[1], v[0]], dtype=np.float64)


def line_intersect(
    p: NDArray[np.float64],
    q: NDArray[np.float64],
    a: NDArray[np.float64],
    b: NDArray[np.float64]
) -> Tuple[Optional[NDArray[np.float64]], bool]:
    """
    Intersection of the infinite lines through p,q and a,b.

    Returns:
        (point, True), or (None, False) if the lines are parallel within EPSILON
    """
    p, q, a, b = (np.asarray(x, dtype=np.float64) for x in (p, q, a, b))
    dx1, dy1 = p - q
    dx2, dy2 = a - b
    det = dx2 * dy1 - dx1 * dy2
    if -EPSILON < det < EPSILON:
        return None, False
    pq = q[0] * p[1] - p[0] * q[1]
    ab = b[0] * a[1] - a[0] * b[1]
    return np.array([pq * dx2 - ab * dx1, pq * dy2 - ab * dy1], dtype=np.float64) / det, True


def segment_intersect(
    p: NDArray[np.float64],
    q: NDArray[np.float64],
    a: NDArray[np.float64],
    b: NDArray[np.float64]
) -> Tuple[float, bool]:
    """
    Float test for intersection of segments p->q and a->b.

    Uses the same half-open [0, 1) convention as segment_intersect_int, but
    with a tolerance on the determinant, so nearly parallel segments are
    reported as not intersecting.

    Parameters:
        p, q: Endpoints of the first segment, shape (2,)
        a, b: Endpoints of the second segment, shape (2,)

    Returns:
        (t, True) where t is how far along a->b the intersection occurs,
        or (0.0, False)
    """
    p, q, a, b = (np.asarray(x, dtype=np.float64) for x in (p, q, a, b))
    qmpn = _normal(q - p)
    bma = b - a
    det = float(np.dot(bma, qmpn))
    if -EPSILON < det < EPSILON:
        return 0.0, False

    pma = p - a
    t = float(np.dot(pma, _normal(bma))) / det
    if not (0.0 <= t < 1.0):
        return 0.0, False
    t = float(np.dot(pma, qmpn)) / det
    if not (0.0 <= t < 1.0):
        return 0.0, False
    return t, True


# =============================================================================
# Rectangles
# =============================================================================

@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned integer rectangle covering [ul.x, dr.x) x [ul.y, dr.y).

    Attributes:
        ul: Inclusive lower corner
        dr: Exclusive upper corner
    """
    ul: Point
    dr: Point

    def contains(self, p: Point) -> bool:
        return self.ul[0] <= p[0] < self.dr[0] and self.ul[1] <= p[1] < self.dr[1]

    def overlaps(self, other: "Rect") -> bool:
        return (
            other.dr[0] > self.ul[0] and other.ul[0] < self.dr[0]
            and other.dr[1] > self.ul[1] and other.ul[1] < self.dr[1]
        )

    def translate(self, p: Point) -> "Rect":
        return Rect(add(self.ul, p), add(self.dr, p))

    @property
    def size(self) -> Point:
        return sub(self.dr, self.ul)

    def reposition(self, ul: Point) -> "Rect":
        """Same size, moved so its lower corner is ul."""
        return Rect(ul, add(ul, self.size))

    def resize(self, size: Point) -> "Rect":
        return Rect(self.ul, add(self.ul, size))
