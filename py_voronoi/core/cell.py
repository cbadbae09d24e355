"""
Voronoi cells and polygon reconstruction.

A cell's polygon is rebuilt from its edges by half-plane clipping rather than
by walking edge connectivity. The four rectangle corners are kept only when
they lie on the site's side of every edge. Boundary crossings and in-bounds
edge endpoints are then added, and the vertices are sorted by angle around an
interior reference point.
"""

import weakref
from typing import TYPE_CHECKING, List, Optional, Set

import numpy as np

from .geometry import EPSILON, Direction, Line, Point, Size, touched_directions

if TYPE_CHECKING:
    from .edges import Edge, HalfEdge


def compute_polygon_centroid(vertices: np.ndarray) -> np.ndarray:
    """Compute the area-weighted centroid of a polygon.

    Args:
        vertices: Array of [x, y] vertex coordinates in winding order

    Returns:
        [x, y] centroid coordinates
    """
    if len(vertices) < 3:
        return np.mean(vertices, axis=0)

    x = vertices[:, 0]
    y = vertices[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)
    cross = x * y_next - x_next * y
    area = cross.sum() / 2.0

    if abs(area) < 1e-10:
        return np.mean(vertices, axis=0)

    cx = ((x + x_next) * cross).sum() / (6.0 * area)
    cy = ((y + y_next) * cross).sum() / (6.0 * area)
    return np.array([cx, cy])


def compute_polygon_area(vertices: np.ndarray) -> float:
    """Unsigned shoelace area."""
    if len(vertices) < 3:
        return 0.0
    x = vertices[:, 0]
    y = vertices[:, 1]
    return float(abs(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)) / 2.0)


class VoronoiCell:
    """
    The region of the plane closer to ``site`` than to any other site.

    Neighbours and symmetric relatives are held weakly; the diagram and its
    result own the cells. A cell with a symmetric parent is a ghost placed
    outside the rectangle during tiling and never appears in a result.
    """

    def __init__(self, site: Point, boundary: Size, symmetric_parent: Optional["VoronoiCell"] = None):
        self.site = site
        self.boundary = boundary
        self.edges: List["Edge"] = []
        self._vertices: Optional[List[Point]] = None
        self._directions: Set[Direction] = set()
        self._neighbors: List[weakref.ref] = []
        self._symmetric_parent = weakref.ref(symmetric_parent) if symmetric_parent else None
        self._symmetric_children: List[weakref.ref] = []

    def __repr__(self) -> str:
        return f"VoronoiCell(site=({self.site.x:.4f}, {self.site.y:.4f}))"

    # Relationships

    @property
    def neighbors(self) -> List["VoronoiCell"]:
        return [cell for cell in (ref() for ref in self._neighbors) if cell is not None]

    def add_neighbor(self, cell: "VoronoiCell") -> None:
        if cell is self or any(ref() is cell for ref in self._neighbors):
            return
        self._neighbors.append(weakref.ref(cell))

    @property
    def symmetric_parent(self) -> Optional["VoronoiCell"]:
        return self._symmetric_parent() if self._symmetric_parent else None

    @property
    def is_symmetric(self) -> bool:
        return self._symmetric_parent is not None

    @property
    def real_cell(self) -> "VoronoiCell":
        """The cell this one stands in for: its parent for ghosts, else itself."""
        return self.symmetric_parent or self

    @property
    def symmetric_children(self) -> List["VoronoiCell"]:
        return [cell for cell in (ref() for ref in self._symmetric_children) if cell is not None]

    def make_symmetric_child(self, offset: Point) -> "VoronoiCell":
        """A ghost of this cell shifted by ``offset``; the caller must keep it alive."""
        child = VoronoiCell(self.site + offset, self.boundary, symmetric_parent=self)
        self._symmetric_children.append(weakref.ref(child))
        return child

    @property
    def half_edges(self) -> List["HalfEdge"]:
        return [edge.half_for(self) for edge in self.edges]

    @property
    def is_bounded(self) -> bool:
        """True if the cell is finite in the unclipped plane."""
        halves = self.half_edges
        return len(halves) >= 3 and all(len(half.links) >= 2 for half in halves)

    # Polygon

    def make_vertex_loop(self) -> List[Point]:
        """
        Polygon vertices clipped to the boundary, in counter-clockwise order.

        Computed on first call and cached.
        """
        if self._vertices is not None:
            return self._vertices

        size = self.boundary
        if not self.edges:
            vertices = size.corners() if size.contains(self.site) else []
        else:
            vertices = self._clip_to_boundary()

        if vertices:
            reference = self._reference_point(vertices)
            vertices.sort(key=reference.angle_to)
            vertices = _remove_adjacent_duplicates(vertices)

        directions: Set[Direction] = set()
        for vertex in vertices:
            directions.update(touched_directions(vertex, size))

        self._vertices = vertices
        self._directions = directions
        return vertices

    def _clip_to_boundary(self) -> List[Point]:
        size = self.boundary
        lines = [
            Line(edge.start, edge.direction, self.site)
            if edge.is_degenerate
            else Line.through(edge.start, edge.end, self.site)
            for edge in self.edges
            if edge.end is not None
        ]
        vertices = [
            corner for corner in size.corners()
            if all(line.is_inside(corner) for line in lines)
        ]

        for edge in self.edges:
            if edge.end is None:
                continue
            candidates = edge.rect_intersections(size)
            candidates.extend(
                point for point in (edge.start, edge.end) if size.contains(point, EPSILON)
            )
            # An endpoint on this edge can still be cut off by another edge
            # when the site lies outside the rectangle.
            vertices.extend(
                point for point in candidates
                if all(line.is_inside(point) for line in lines)
            )
        return vertices

    def _reference_point(self, vertices: List[Point]) -> Point:
        if self.boundary.strictly_contains(self.site):
            return self.site
        count = len(vertices)
        return Point(
            sum(vertex.x for vertex in vertices) / count,
            sum(vertex.y for vertex in vertices) / count,
        )

    @property
    def boundary_directions(self) -> Set[Direction]:
        """Rectangle sides the polygon touches."""
        self.make_vertex_loop()
        return set(self._directions)

    def contains(self, point: Point) -> bool:
        """Point-in-polygon by the same half-plane test used for clipping."""
        vertices = self.make_vertex_loop()
        if len(vertices) < 3:
            return False
        reference = self._reference_point(vertices)
        for current, following in zip(vertices, vertices[1:] + vertices[:1]):
            if not Line.through(current, following, reference).is_inside(point):
                return False
        return True

    def vertex_array(self) -> np.ndarray:
        vertices = self.make_vertex_loop()
        return np.array([vertex.as_tuple() for vertex in vertices], dtype=float).reshape(-1, 2)

    @property
    def area(self) -> float:
        return compute_polygon_area(self.vertex_array())

    @property
    def centroid(self) -> Optional[Point]:
        vertices = self.vertex_array()
        if len(vertices) == 0:
            return None
        cx, cy = compute_polygon_centroid(vertices)
        return Point(float(cx), float(cy))


def _remove_adjacent_duplicates(vertices: List[Point]) -> List[Point]:
    unique: List[Point] = []
    for vertex in vertices:
        if not unique or not vertex.approx_equal(unique[-1]):
            unique.append(vertex)
    while len(unique) > 1 and unique[-1].approx_equal(unique[0]):
        unique.pop()
    return unique
