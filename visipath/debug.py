"""
Debug logging helpers.

All visipath modules log through loggers under the "visipath" namespace and
only at DEBUG level. Nothing is emitted unless the application configures
logging, or calls setup_debug_logging().
"""

import logging
from typing import IO, Optional, Sequence

from visipath.geometry import Point
from visipath.graph import Edge
from visipath.pathfinding import PathResult

LOGGER_NAME = "visipath"
_HANDLER_ATTR = "_visipath_debug_handler"

logger = logging.getLogger(LOGGER_NAME)


def format_point(p: Point) -> str:
    return f"({p[0]}, {p[1]})"


def format_edge(edge: Edge) -> str:
    return f"{format_point(edge.u)} -> {format_point(edge.v)}"


def format_path(start: Point, path: Sequence[Point]) -> str:
    """Format a path with its implicit start, e.g. "(0, 0) -> (4, 6) -> (10, 0)"."""
    return " -> ".join(format_point(p) for p in [start, *path])


def setup_debug_logging(level: int = logging.DEBUG, stream: Optional[IO[str]] = None) -> logging.Handler:
    """
    Attach a stream handler to the visipath logger.

    Calling this again replaces the handler installed by the previous call
    instead of adding a second one.

    Returns:
        The installed handler
    """
    disable_debug_logging()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    setattr(handler, _HANDLER_ATTR, True)
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


def disable_debug_logging() -> None:
    """Remove the handler installed by setup_debug_logging, if any."""
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(logging.NOTSET)


def log_path_result(start: Point, end: Point, result: PathResult) -> None:
    """Log the outcome of a find_path call."""
    stats = result.stats
    if result:
        logger.debug(
            f"Path {format_point(start)} to {format_point(end)}: "
            f"{format_path(start, result.path)} (length {result.length(start):.3f})"
        )
    else:
        logger.debug(
            f"Path {format_point(start)} to {format_point(end)} failed: "
            f"{type(result.error).__name__}: {result.error}"
        )
    logger.debug(
        f"  candidates={stats.candidates} seeded={stats.seeded} "
        f"end_neighbors={stats.end_neighbors} settled={stats.settled} "
        f"relaxations={stats.relaxations}"
    )
