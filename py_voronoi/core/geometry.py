"""
Planar geometry primitives for the sweep.

All approximate comparisons go through ``approx_equal`` with the single
configured ``EPSILON`` so that event ordering, arc splitting and polygon
clipping agree on what "equal" means.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

from ..config import settings

EPSILON = settings.epsilon


def approx_equal(a: float, b: float, eps: float = EPSILON) -> bool:
    """True when ``a`` and ``b`` differ by at most ``eps``."""
    return abs(a - b) <= eps


@dataclass(frozen=True)
class Point:
    """A 2D point, also used as a free vector."""

    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Point":
        return Point(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Point":
        return Point(self.x / scalar, self.y / scalar)

    def dot(self, other: "Point") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Point") -> float:
        """z component of the 3D cross product."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def unit(self) -> "Point":
        """Same direction with length 1; the zero vector stays zero."""
        length = self.length()
        if length == 0:
            return Point(0.0, 0.0)
        return Point(self.x / length, self.y / length)

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def angle_to(self, other: "Point") -> float:
        """Angle in radians of the vector from this point to ``other``."""
        return math.atan2(other.y - self.y, other.x - self.x)

    def approx_equal(self, other: "Point", eps: float = EPSILON) -> bool:
        return approx_equal(self.x, other.x, eps) and approx_equal(self.y, other.y, eps)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


class Size(NamedTuple):
    """Width and height of the clipping rectangle anchored at the origin."""

    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.width / 2.0, self.height / 2.0)

    @property
    def diagonal(self) -> float:
        return math.hypot(self.width, self.height)

    def corners(self) -> List[Point]:
        """Bottom-left, bottom-right, top-left, top-right."""
        return [
            Point(0.0, 0.0),
            Point(self.width, 0.0),
            Point(0.0, self.height),
            Point(self.width, self.height),
        ]

    def contains(self, point: Point, eps: float = 0.0) -> bool:
        """Inclusive containment, widened by ``eps`` on every side."""
        return (
            -eps <= point.x <= self.width + eps
            and -eps <= point.y <= self.height + eps
        )

    def strictly_contains(self, point: Point, eps: float = EPSILON) -> bool:
        """Containment at least ``eps`` away from every side."""
        return (
            eps < point.x < self.width - eps
            and eps < point.y < self.height - eps
        )


def as_size(boundary) -> Size:
    """Coerce a ``Size`` or ``(width, height)`` pair, rejecting empty rectangles."""
    width, height = boundary
    size = Size(float(width), float(height))
    if size.width <= 0 or size.height <= 0:
        raise ValueError(f"Boundary must have positive width and height, got {boundary}")
    return size


class Direction(Enum):
    """A side of the clipping rectangle. ``DOWN`` is y = 0."""

    LEFT = "left"
    RIGHT = "right"
    DOWN = "down"
    UP = "up"


class Circle(NamedTuple):
    center: Point
    radius: float


def circle_from_points(a: Point, b: Point, c: Point) -> Optional[Circle]:
    """
    Circumscribed circle of three points.

    Returns:
        The circle, or None when the points are collinear
    """
    d = 2.0 * (a.x * (b.y - c.y) + b.x * (c.y - a.y) + c.x * (a.y - b.y))
    if approx_equal(d, 0.0, EPSILON * EPSILON):
        return None

    a_sq = a.x * a.x + a.y * a.y
    b_sq = b.x * b.x + b.y * b.y
    c_sq = c.x * c.x + c.y * c.y
    x = (a_sq * (b.y - c.y) + b_sq * (c.y - a.y) + c_sq * (a.y - b.y)) / d
    y = (a_sq * (c.x - b.x) + b_sq * (a.x - c.x) + c_sq * (b.x - a.x)) / d
    center = Point(x, y)
    return Circle(center, center.distance_to(a))


class Line:
    """
    An infinite line with one side designated as the inside.

    The inside is whichever side ``reference`` lies on, so the same object
    answers both "which side" and "same side as the site" questions.
    """

    def __init__(self, start: Point, direction: Point, reference: Point):
        self.start = start
        self.direction = direction.unit()
        self._inside = 1.0 if self.signed_distance(reference) >= 0 else -1.0

    @classmethod
    def through(cls, start: Point, end: Point, reference: Point) -> "Line":
        return cls(start, end - start, reference)

    def signed_distance(self, point: Point) -> float:
        """Positive to the left of the direction of travel."""
        return self.direction.cross(point - self.start)

    def is_inside(self, point: Point, eps: float = EPSILON) -> bool:
        """True if ``point`` is on the reference side or within ``eps`` of the line."""
        return self.signed_distance(point) * self._inside >= -eps


def segment_rect_intersections(start: Point, end: Point, size: Size) -> List[Point]:
    """
    Points where the segment ``start``-``end`` crosses the rectangle sides.

    Segments running along a side do not count as crossing it.
    """
    vector = end - start
    points: List[Point] = []

    for side_x in (0.0, size.width):
        if abs(vector.x) > EPSILON and (start.x <= side_x) == (side_x <= end.x):
            y = start.y + vector.y * (side_x - start.x) / vector.x
            if -EPSILON <= y <= size.height + EPSILON:
                points.append(Point(side_x, min(max(y, 0.0), size.height)))

    for side_y in (0.0, size.height):
        if abs(vector.y) > EPSILON and (start.y <= side_y) == (side_y <= end.y):
            x = start.x + vector.x * (side_y - start.y) / vector.y
            if -EPSILON <= x <= size.width + EPSILON:
                points.append(Point(min(max(x, 0.0), size.width), side_y))

    return points


def touched_directions(point: Point, size: Size, eps: float = EPSILON) -> List[Direction]:
    """Rectangle sides that ``point`` lies on."""
    directions = []
    if approx_equal(point.x, 0.0, eps):
        directions.append(Direction.LEFT)
    if approx_equal(point.x, size.width, eps):
        directions.append(Direction.RIGHT)
    if approx_equal(point.y, 0.0, eps):
        directions.append(Direction.DOWN)
    if approx_equal(point.y, size.height, eps):
        directions.append(Direction.UP)
    return directions
