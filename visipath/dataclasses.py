"""
Query Data Structures
=====================

Validated, immutable inputs for path queries:
- ValidationError: Raised when query configuration is malformed
- PathQuery: Start, end and the bounding rectangle limiting usable waypoints
"""

from __future__ import annotations

from dataclasses import dataclass

from visipath.geometry import Point, as_point, in_rect


class ValidationError(ValueError):
    """Raised when input validation fails."""

    pass


def _validate_point(name: str, value: object) -> Point:
    try:
        return as_point(value)
    except ValueError as e:
        raise ValidationError(f"{name}: {e}") from e


@dataclass(frozen=True)
class PathQuery:
    """A single path query.

    start and end may be arbitrary points; they need not be vertices of any
    graph. Only waypoint vertices inside the bounds (boundary included) may be
    used by the search, so the bounds must contain every corner the optimal
    path could turn at.

    Attributes:
        start: Where the path begins (excluded from the returned path)
        end: Where the path must arrive
        bounds_ul: Lower corner of the waypoint bounds, inclusive
        bounds_dr: Upper corner of the waypoint bounds, inclusive

    Raises:
        ValidationError: If any point is not a 2-component integral value
        ValidationError: If bounds_ul is not component-wise <= bounds_dr
    """

    start: Point
    end: Point
    bounds_ul: Point
    bounds_dr: Point

    def __post_init__(self) -> None:
        """Normalize all points to int tuples and check the bounds."""
        # Use object.__setattr__ because the dataclass is frozen
        for name in ("start", "end", "bounds_ul", "bounds_dr"):
            object.__setattr__(self, name, _validate_point(name, getattr(self, name)))
        if self.bounds_ul[0] > self.bounds_dr[0] or self.bounds_ul[1] > self.bounds_dr[1]:
            raise ValidationError(
                f"bounds_ul {self.bounds_ul} must not exceed bounds_dr {self.bounds_dr}"
            )

    def in_bounds(self, p: Point) -> bool:
        """Check if p may be used as a waypoint for this query."""
        return in_rect(p, self.bounds_ul, self.bounds_dr)

    @classmethod
    def around(cls, start: Point, end: Point, margin: int = 0) -> PathQuery:
        """Query whose bounds are the box spanned by start and end, grown by margin."""
        start, end = _validate_point("start", start), _validate_point("end", end)
        if margin < 0:
            raise ValidationError(f"margin must be non-negative, got {margin}")
        ul = (min(start[0], end[0]) - margin, min(start[1], end[1]) - margin)
        dr = (max(start[0], end[0]) + margin, max(start[1], end[1]) + margin)
        return cls(start=start, end=end, bounds_ul=ul, bounds_dr=dr)
