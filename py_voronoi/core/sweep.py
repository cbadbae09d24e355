"""
Fortune's sweep over a set of sites.

The sweep line moves upwards (ascending y). Each site event splits the arc
above the new site; each circle event removes an arc whose neighbours have
closed over it, fixing a Voronoi vertex. When the queue runs dry the edges
still growing are extended past the rectangle so that cells can clip them.
"""

from typing import Iterable, List, Optional, Sequence

import numpy as np
import structlog

from .beach_line import BeachLine, Breakpoint, Parabola
from .cell import VoronoiCell
from .edges import Edge, link_at_vertex
from .events import CircleEvent, Event, SiteEvent, compare_events
from .geometry import EPSILON, Point, Size, approx_equal, as_size, circle_from_points
from .priority_queue import PriorityQueue
from .result import VoronoiResult

logger = structlog.get_logger()


def as_points(sites) -> List[Point]:
    """Coerce Points, ``(x, y)`` pairs or an ``(n, 2)`` array into Points."""
    if isinstance(sites, np.ndarray):
        if sites.size == 0:
            return []
        if sites.ndim != 2 or sites.shape[1] != 2:
            raise ValueError(f"Site array must have shape (n, 2), got {sites.shape}")
        return [Point(float(x), float(y)) for x, y in sites]
    return [
        site if isinstance(site, Point) else Point(float(site[0]), float(site[1]))
        for site in sites
    ]


def _unique_cells(cells: Iterable[VoronoiCell]) -> List[VoronoiCell]:
    """Drop cells whose site repeats an earlier one to 6 decimal places."""
    seen = set()
    unique = []
    for cell in cells:
        key = (round(cell.site.x, 6), round(cell.site.y, 6))
        if key not in seen:
            seen.add(key)
            unique.append(cell)
    return unique


class VoronoiDiagram:
    """
    A Voronoi diagram waiting to be swept.

    Construction only queues the site events; ``sweep()`` does the work once
    and caches the result.

    Args:
        sites: Points, ``(x, y)`` pairs or an ``(n, 2)`` array
        boundary: ``Size`` or ``(width, height)`` of the clipping rectangle
    """

    def __init__(self, sites, boundary):
        size = as_size(boundary)
        cells = [VoronoiCell(site, size) for site in as_points(sites)]
        self._setup(cells, size)

    @classmethod
    def from_cells(cls, cells: Sequence[VoronoiCell], boundary) -> "VoronoiDiagram":
        """Sweep prepared cells, ghosts included. Real cells should come first."""
        diagram = cls.__new__(cls)
        diagram._setup(list(cells), as_size(boundary))
        return diagram

    def _setup(self, cells: List[VoronoiCell], size: Size) -> None:
        self.size = size
        self.cells = _unique_cells(cells)
        self.beach_line = BeachLine()
        self.edges: List[Edge] = []
        self.events: PriorityQueue[Event] = PriorityQueue(compare_events)
        self.sweep_line = float("-inf")
        self.events_processed = 0
        self.stale_events = 0
        self._finished = False
        self._result: Optional[VoronoiResult] = None

        for cell in self.cells:
            self.events.push(SiteEvent(cell))

        lowest = min((cell.site.y for cell in self.cells), default=0.0)
        self._far_below = min(lowest, 0.0) - self._reach(size.center) - self._spread()

        if len(cells) != len(self.cells):
            logger.info("Dropped duplicate sites", duplicates=len(cells) - len(self.cells))

    def _spread(self) -> float:
        if not self.cells:
            return 0.0
        xs = [cell.site.x for cell in self.cells]
        ys = [cell.site.y for cell in self.cells]
        return (max(xs) - min(xs)) + (max(ys) - min(ys))

    def _reach(self, origin: Point) -> float:
        """A distance from ``origin`` that is safely outside the rectangle."""
        return self.size.diagonal + origin.distance_to(self.size.center) + 1.0

    # Driving the sweep

    def sweep(self) -> VoronoiResult:
        """Run the sweep to completion; later calls return the same result."""
        if self._result is not None:
            return self._result

        logger.info(
            "Sweeping Voronoi diagram",
            sites=len(self.cells),
            width=self.size.width,
            height=self.size.height,
        )

        while self.events:
            self.sweep_once()
        if not self._finished:
            self._finish_edges()

        edges = self._merge_twins()
        real_cells = [cell for cell in self.cells if not cell.is_symmetric]
        ghosts = [cell for cell in self.cells if cell.is_symmetric]
        real_edges = [
            edge for edge in edges
            if not edge.is_degenerate
            and not (edge.left_cell.is_symmetric and edge.right_cell.is_symmetric)
        ]
        self._result = VoronoiResult(real_cells, real_edges, self.size, ghosts)

        logger.info(
            "Sweep complete",
            cells=len(real_cells),
            edges=len(real_edges),
            events_processed=self.events_processed,
            stale_events=self.stale_events,
        )
        return self._result

    def sweep_once(self) -> None:
        """Process the next live event; stale circle events are skipped."""
        event = self.events.pop()
        while isinstance(event, CircleEvent) and not event.alive:
            self.stale_events += 1
            event = self.events.pop()

        if event is not None:
            self.sweep_line = event.point.y
            self.events_processed += 1
            if isinstance(event, SiteEvent):
                self._add_site(event.cell)
            else:
                self._remove_arc(event)

        if not self.events and not self._finished:
            self._finish_edges()

    # Site events

    def _add_site(self, cell: VoronoiCell) -> None:
        if self.beach_line.is_empty:
            self.beach_line.insert_first(Parabola(cell))
            return

        arc = self.beach_line.find_arc_above(cell.site.x, self.sweep_line)
        arc.directrix = self.sweep_line
        if approx_equal(arc.focus.y, cell.site.y):
            self._split_level(arc, cell)
        else:
            self._split_arc(arc, cell)

    def _split_level(self, arc: Parabola, cell: VoronoiCell) -> None:
        """
        Split beside an arc whose focus is level with the new site.

        Such an arc is still a vertical ray, so there is no middle piece to
        keep: the new arc goes beside it and one vertical edge, rising from far
        below, separates the two.
        """
        site = cell.site
        new = Parabola(cell)
        copy = Parabola(arc.cell)
        left, right = (new, copy) if site.x < arc.focus.x else (copy, new)

        self._drop_circle_event(arc)
        left.left_edge = arc.left_edge
        right.right_edge = arc.right_edge

        # Near-level foci have a slightly tilted bisector; follow it down.
        mid = (arc.focus + site) / 2.0
        direction = Point(left.cell.site.y - right.cell.site.y, right.cell.site.x - left.cell.site.x)
        if approx_equal(direction.y, 0.0):
            start = Point(mid.x, self._far_below)
        else:
            start = mid + direction * ((self._far_below - mid.y) / direction.y)
        edge = self._create_edge(start, left.cell, right.cell)
        left.right_edge = edge
        right.left_edge = edge

        self.beach_line.replace(arc, Breakpoint(left, right), added_arcs=1)
        self._check_circle_event(left)
        self._check_circle_event(right)

    def _split_arc(self, arc: Parabola, cell: VoronoiCell) -> None:
        """Replace ``arc`` by left copy, new arc, right copy."""
        site = cell.site
        start = Point(site.x, arc.y_for_x(site.x))

        left = Parabola(arc.cell)
        middle = Parabola(cell)
        right = Parabola(arc.cell)
        left.left_edge = arc.left_edge
        right.right_edge = arc.right_edge

        # The pending removal belongs to whichever copy sits on its side.
        event = arc.circle_event
        if event is not None and event.alive:
            target = right if event.center.x > arc.focus.x else left
            event.parabola = target
            target.circle_event = event
        arc.circle_event = None

        left_edge = self._create_edge(start, arc.cell, cell)
        right_edge = self._create_edge(start, cell, arc.cell)
        left_edge.twin = right_edge
        right_edge.twin = left_edge
        link_at_vertex((left_edge, right_edge))

        left.right_edge = left_edge
        middle.left_edge = left_edge
        middle.right_edge = right_edge
        right.left_edge = right_edge

        subtree = Breakpoint(left, Breakpoint(middle, right))
        self.beach_line.replace(arc, subtree, added_arcs=2)
        self._check_circle_event(left)
        self._check_circle_event(right)

    # Circle events

    def _remove_arc(self, event: CircleEvent) -> None:
        arc = event.parabola
        if arc is None:
            return

        left = arc.parabola_to_left()
        right = arc.parabola_to_right()
        center = event.center
        event.invalidate()
        arc.circle_event = None

        closed = []
        if left is not None and left.right_edge is not None:
            left.right_edge.end = center
            closed.append(left.right_edge)
        if right is not None and right.left_edge is not None:
            right.left_edge.end = center
            closed.append(right.left_edge)

        if left is not None and right is not None and closed:
            edge = self._create_edge(center, left.cell, right.cell)
            left.right_edge = edge
            right.left_edge = edge
            link_at_vertex(closed + [edge])

        self.beach_line.remove(arc)
        if left is not None:
            self._check_circle_event(left)
        if right is not None:
            self._check_circle_event(right)

    def _check_circle_event(self, arc: Parabola) -> None:
        """Queue the removal of ``arc`` if its breakpoints are converging."""
        candidate = self._circle_event_for(arc)
        existing = arc.circle_event
        if existing is not None and existing.alive:
            if candidate is not None and existing.matches(candidate):
                return
            existing.invalidate()
        arc.circle_event = None

        if candidate is not None:
            arc.circle_event = candidate
            self.events.push(candidate)

    def _circle_event_for(self, arc: Parabola) -> Optional[CircleEvent]:
        left = arc.parabola_to_left()
        right = arc.parabola_to_right()
        if left is None or right is None or left.cell is right.cell:
            return None

        a, b, c = left.focus, arc.focus, right.focus
        # Only a left turn closes the arc; a right turn means it is widening.
        if (b - a).cross(c - b) <= 0:
            return None

        circle = circle_from_points(a, b, c)
        if circle is None:
            return None
        if circle.center.y + circle.radius < self.sweep_line - EPSILON:
            return None

        left_edge, right_edge = left.right_edge, right.left_edge
        if left_edge is None or right_edge is None:
            return None
        if left_edge.ray_intersection(right_edge) is None:
            return None
        return CircleEvent(circle, arc)

    def _drop_circle_event(self, arc: Parabola) -> None:
        if arc.circle_event is not None:
            arc.circle_event.invalidate()
            arc.circle_event = None

    # Edges

    def _create_edge(self, start: Point, left_cell: VoronoiCell, right_cell: VoronoiCell) -> Edge:
        edge = Edge(start, left_cell, right_cell)
        self.edges.append(edge)

        if not (left_cell.is_symmetric and right_cell.is_symmetric):
            first, second = left_cell.real_cell, right_cell.real_cell
            first.add_neighbor(second)
            second.add_neighbor(first)
        return edge

    def _finish_edges(self) -> None:
        """Extend every open edge beyond the rectangle."""
        for edge in self.edges:
            if edge.end is not None:
                continue
            direction = edge.direction
            if edge.is_vertical:
                if direction.y > 0:
                    y = max(self.size.height, edge.start.y)
                else:
                    y = min(0.0, edge.start.y)
                edge.end = Point(edge.start.x, y)
            else:
                edge.end = edge.start + direction.unit() * self._reach(edge.start)
        self._finished = True

    def _merge_twins(self) -> List[Edge]:
        merged = []
        absorbed = set()
        for edge in self.edges:
            if id(edge) in absorbed:
                continue
            if edge.twin is not None:
                absorbed.add(id(edge.twin))
                edge.absorb(edge.twin)
            merged.append(edge)
        self.edges = merged
        return merged


def build_diagram(sites, boundary) -> VoronoiDiagram:
    """Prepare a diagram for ``sites`` clipped to ``boundary`` without sweeping."""
    return VoronoiDiagram(sites, boundary)
