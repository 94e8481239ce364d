"""
Geometric utility functions for grid path planning.

This module provides the segment-versus-obstacle test used by the grid
planners. Every obstacle is a grid cell and occupies the unit square
centred on its integer coordinates.
"""

import math
from typing import Iterable

from ..core.node import Node

# Corner values at or below this magnitude count as lying on the line.
TOUCH_TOLERANCE = 1e-6


def euclidean_distance(a: Node, b: Node) -> float:
    """Straight-line distance between two grid nodes."""
    return math.hypot(a.x - b.x, a.y - b.y)


def _between(value: int, end_1: int, end_2: int) -> bool:
    return (end_1 >= value >= end_2) or (end_1 <= value <= end_2)


def check_obstacle(a: Node, b: Node, obstacles: Iterable[Node]) -> bool:
    """
    Test whether the segment from a to b passes through any obstacle square.

    The line through the nodes is written with y as the independent axis,
    ``x = slope * y + c``. Substituting the four corners of an obstacle
    square into ``x - slope * y - c`` gives four values of the same sign
    when the square lies entirely on one side of the line. Corner values
    within TOUCH_TOLERANCE of zero are treated as on the line and do not
    count, so:

    - 4 corners on one side: sign sum 4, clear
    - 3 on one side, 1 on the line (grazing): sign sum 3, clear
    - 1 on one side, 3 on the other: sign sum 2, blocked
    - 2 and 2: sign sum 0, blocked

    Hence a square blocks the segment when the absolute sign sum is below 3.

    When both nodes share the same y the slope is undefined; an obstacle
    then blocks if it sits on that y inside the x-span of the segment.

    Obstacles located exactly at a or b are skipped: an endpoint never
    blocks its own segment.

    Args:
        a: First endpoint
        b: Second endpoint
        obstacles: Static obstacle nodes

    Returns:
        True if an obstacle lies on the segment, False otherwise

    Examples:
        >>> check_obstacle(Node(0, 3), Node(10, 3), [Node(5, 3)])
        True
        >>> check_obstacle(Node(0, 0), Node(0, 4), [Node(2, 2)])
        False
    """
    if b.y - a.y == 0:
        c = b.y
        for obstacle in obstacles:
            if obstacle == a or obstacle == b:
                continue
            if not _between(obstacle.x, a.x, b.x):
                continue
            if obstacle.y == c:
                return True
        return False

    slope = (b.x - a.x) / (b.y - a.y)
    c = b.x - slope * b.y
    for obstacle in obstacles:
        if obstacle == a or obstacle == b:
            continue
        if not _between(obstacle.y, a.y, b.y):
            continue
        if not _between(obstacle.x, a.x, b.x):
            continue
        corners = (
            obstacle.x + 0.5 - slope * (obstacle.y + 0.5) - c,
            obstacle.x + 0.5 - slope * (obstacle.y - 0.5) - c,
            obstacle.x - 0.5 - slope * (obstacle.y + 0.5) - c,
            obstacle.x - 0.5 - slope * (obstacle.y - 0.5) - c,
        )
        count = 0
        for value in corners:
            if abs(value) <= TOUCH_TOLERANCE:
                continue
            count += 1 if value > 0 else -1
        if abs(count) < 3:
            return True
    return False


def segment_clear(a: Node, b: Node, obstacles: Iterable[Node]) -> bool:
    """Negation of :func:`check_obstacle`, reads better in validation code."""
    return not check_obstacle(a, b, obstacles)
