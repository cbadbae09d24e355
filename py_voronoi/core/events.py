"""
Sweep events.

A site event activates a site when the sweep reaches it. A circle event
removes an arc when the sweep becomes tangent to the circle through the arc's
focus and its two neighbours' foci.
"""

from typing import TYPE_CHECKING, Optional

from .geometry import Circle, Point, approx_equal

if TYPE_CHECKING:
    from .beach_line import Parabola
    from .cell import VoronoiCell


class Event:
    """Base event: something that happens when the sweep reaches ``point.y``."""

    is_site = False

    def __init__(self, point: Point):
        self.point = point


class SiteEvent(Event):
    is_site = True

    def __init__(self, cell: "VoronoiCell"):
        super().__init__(cell.site)
        self.cell = cell

    def __repr__(self) -> str:
        return f"SiteEvent({self.point.x:.4f}, {self.point.y:.4f})"


class CircleEvent(Event):
    """
    Removal of ``parabola`` at the top of ``circle``.

    The event stays queued after invalidation; the sweep discards dead events
    when it pops them.
    """

    def __init__(self, circle: Circle, parabola: "Parabola"):
        center, radius = circle
        super().__init__(Point(center.x, center.y + radius))
        self.center = center
        self.radius = radius
        self.parabola: Optional["Parabola"] = parabola
        self.alive = True

    def invalidate(self) -> None:
        self.alive = False
        self.parabola = None

    def matches(self, other: "CircleEvent") -> bool:
        """Same circle, within epsilon."""
        return self.center.approx_equal(other.center) and approx_equal(
            self.radius, other.radius
        )

    def __repr__(self) -> str:
        state = "alive" if self.alive else "dead"
        return (
            f"CircleEvent(center=({self.center.x:.4f}, {self.center.y:.4f}), "
            f"radius={self.radius:.4f}, {state})"
        )


def compare_events(a: Event, b: Event) -> int:
    """
    Sweep order: ascending y, then sites before circles, then ascending x.

    y values within epsilon of each other count as the same sweep height.
    """
    if not approx_equal(a.point.y, b.point.y):
        return -1 if a.point.y < b.point.y else 1
    if a.is_site != b.is_site:
        return -1 if a.is_site else 1
    if a.point.x < b.point.x:
        return -1
    if a.point.x > b.point.x:
        return 1
    return 0
