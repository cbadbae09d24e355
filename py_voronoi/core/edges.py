"""
Voronoi edges and the per-cell half-edges that share their endpoints.

An ``Edge`` is the geometric segment traced by one breakpoint. It separates
``left_cell`` from ``right_cell`` (left and right as seen along the beach line
when the edge was born) and grows from ``start`` along ``direction`` until a
circle event or the end of the sweep fixes ``end``.

Each edge carries two ``HalfEdge`` records, one owned by each adjacent cell.
Half-edges of the same cell that meet at a vertex are linked, so a cell's
half-edges form a closed cycle exactly when the cell is bounded.
"""

from typing import TYPE_CHECKING, Iterable, List, Optional

from .geometry import EPSILON, Point, Size, approx_equal, segment_rect_intersections

if TYPE_CHECKING:
    from .cell import VoronoiCell


class HalfEdge:
    """One cell's side of an edge."""

    def __init__(self, edge: "Edge", owner: "VoronoiCell"):
        self.edge = edge
        self.owner = owner
        self.links: List["HalfEdge"] = []

    @property
    def start(self) -> Point:
        return self.edge.start

    @property
    def end(self) -> Optional[Point]:
        return self.edge.end

    def link(self, other: "HalfEdge") -> None:
        if other is self or any(link is other for link in self.links):
            return
        self.links.append(other)
        other.links.append(self)

    def unlink(self, other: "HalfEdge") -> None:
        self.links = [link for link in self.links if link is not other]
        other.links = [link for link in other.links if link is not self]


class Edge:
    def __init__(self, start: Point, left_cell: "VoronoiCell", right_cell: "VoronoiCell"):
        self.start = start
        self.end: Optional[Point] = None
        self.left_cell = left_cell
        self.right_cell = right_cell
        self.left_half = HalfEdge(self, left_cell)
        self.right_half = HalfEdge(self, right_cell)
        self.twin: Optional["Edge"] = None

        left_cell.edges.append(self)
        right_cell.edges.append(self)

    @property
    def has_end(self) -> bool:
        return self.end is not None

    @property
    def direction(self) -> Point:
        """Travel direction of the breakpoint as the sweep ascends."""
        left, right = self.left_cell.site, self.right_cell.site
        return Point(left.y - right.y, right.x - left.x)

    @property
    def is_vertical(self) -> bool:
        return approx_equal(self.direction.x, 0.0)

    @property
    def is_degenerate(self) -> bool:
        """A closed edge of zero length, left behind by co-circular sites."""
        return self.end is not None and self.start.approx_equal(self.end)

    def half_for(self, cell: "VoronoiCell") -> Optional[HalfEdge]:
        if self.left_half.owner is cell:
            return self.left_half
        if self.right_half.owner is cell:
            return self.right_half
        return None

    def ray_intersection(self, other: "Edge") -> Optional[Point]:
        """
        Where this edge's forward ray meets ``other``'s forward ray.

        Returns:
            The meeting point, or None for parallel rays or rays that only
            cross behind one of the starts
        """
        d1 = self.direction.unit()
        d2 = other.direction.unit()
        denominator = d1.cross(d2)
        if abs(denominator) < EPSILON:
            return None

        delta = other.start - self.start
        t1 = delta.cross(d2) / denominator
        t2 = delta.cross(d1) / denominator
        if t1 < -EPSILON or t2 < -EPSILON:
            return None
        return self.start + d1 * t1

    def rect_intersections(self, size: Size) -> List[Point]:
        if self.end is None:
            return []
        return segment_rect_intersections(self.start, self.end, size)

    def absorb(self, twin: "Edge") -> None:
        """
        Merge the opposite half-line ``twin`` into this edge.

        Both were born at the same point heading in opposite directions, so
        the merged segment runs from the twin's end to this edge's end. The
        twin's half-edge links are handed over and the twin is detached from
        its cells.
        """
        self.start = twin.end
        for mine in (self.left_half, self.right_half):
            theirs = twin.half_for(mine.owner)
            if theirs is None:
                continue
            mine.unlink(theirs)
            for other in list(theirs.links):
                theirs.unlink(other)
                mine.link(other)

        for cell in (twin.left_cell, twin.right_cell):
            cell.edges = [edge for edge in cell.edges if edge is not twin]
        self.twin = None
        twin.twin = None

    def __repr__(self) -> str:
        end = f"({self.end.x:.4f}, {self.end.y:.4f})" if self.end else "open"
        return f"Edge(({self.start.x:.4f}, {self.start.y:.4f}) -> {end})"


def link_at_vertex(edges: Iterable[Edge]) -> None:
    """Link every pair of same-owner half-edges among ``edges``."""
    halves = [half for edge in edges for half in (edge.left_half, edge.right_half)]
    for i, first in enumerate(halves):
        for second in halves[i + 1:]:
            if first.owner is second.owner and first.edge is not second.edge:
                first.link(second)
