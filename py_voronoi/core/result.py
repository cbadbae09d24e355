"""Swept diagram output and toroidal tiling."""

from typing import TYPE_CHECKING, Dict, List, Sequence, Set, Tuple

import numpy as np
import structlog

from .cell import VoronoiCell
from .geometry import Direction, Point, Size

if TYPE_CHECKING:
    from .edges import Edge

logger = structlog.get_logger()

Segment = Tuple[Point, Point]


def symmetric_offsets(directions: Set[Direction], size: Size) -> List[Point]:
    """
    Offsets of the ghost copies a cell needs for wraparound.

    A cell touching the right side is copied one width to the left so that
    it borders the cells on the left side, and so on. Touching two adjacent
    sides adds the diagonal copy too.
    """
    dx = []
    if Direction.RIGHT in directions:
        dx.append(-size.width)
    if Direction.LEFT in directions:
        dx.append(size.width)
    dy = []
    if Direction.UP in directions:
        dy.append(-size.height)
    if Direction.DOWN in directions:
        dy.append(size.height)

    offsets = [Point(x, 0.0) for x in dx] + [Point(0.0, y) for y in dy]
    offsets.extend(Point(x, y) for x in dx for y in dy)
    return offsets


class VoronoiResult:
    """
    Cells and edges of a finished sweep.

    Attributes:
        cells: Real cells, in input order with duplicate sites removed
        edges: (start, end) pairs, not clipped to the boundary
        vertices: Distinct edge endpoints
        boundary: The clipping rectangle
    """

    def __init__(
        self,
        cells: List[VoronoiCell],
        edges: List["Edge"],
        boundary: Size,
        symmetric_cells: Sequence[VoronoiCell] = (),
    ):
        self.cells = cells
        # Held only so that symmetric_children stay resolvable.
        self._symmetric_cells = list(symmetric_cells)
        self.edges: List[Segment] = [(edge.start, edge.end) for edge in edges]
        self.boundary = boundary
        self.vertices = _unique_vertices(self.edges)

    def __repr__(self) -> str:
        return f"VoronoiResult(cells={len(self.cells)}, edges={len(self.edges)})"

    @property
    def site_array(self) -> np.ndarray:
        return np.array([cell.site.as_tuple() for cell in self.cells], dtype=float).reshape(-1, 2)

    @property
    def cell_neighbors(self) -> List[List[int]]:
        """Neighbour indices for each cell, in ascending order."""
        index = {id(cell): i for i, cell in enumerate(self.cells)}
        return [
            sorted(index[id(neighbor)] for neighbor in cell.neighbors if id(neighbor) in index)
            for cell in self.cells
        ]

    @property
    def border_flags(self) -> np.ndarray:
        """1 for cells whose polygon touches the boundary, else 0."""
        return np.array(
            [1 if cell.boundary_directions else 0 for cell in self.cells], dtype=np.uint8
        )

    def polygons(self) -> List[List[Point]]:
        return [cell.make_vertex_loop() for cell in self.cells]

    def to_dict(self) -> Dict:
        """JSON-ready snapshot of the diagram."""
        neighbors = self.cell_neighbors
        return {
            "boundary": {"width": self.boundary.width, "height": self.boundary.height},
            "cells": [
                {
                    "site": list(cell.site.as_tuple()),
                    "polygon": [list(vertex.as_tuple()) for vertex in cell.make_vertex_loop()],
                    "neighbors": neighbors[i],
                    "border": bool(cell.boundary_directions),
                }
                for i, cell in enumerate(self.cells)
            ],
            "edges": [[list(start.as_tuple()), list(end.as_tuple())] for start, end in self.edges],
            "vertices": [list(vertex.as_tuple()) for vertex in self.vertices],
        }

    def tile(self) -> "VoronoiResult":
        """
        Recompute with ghost copies of boundary cells around the rectangle.

        Neighbours found through a ghost are credited to its real cell, so
        cells on opposite sides become neighbours as if the rectangle wrapped
        around. The returned result holds fresh real cells only.

        Only cells touching the boundary get ghosts, and they are swept with the
        real cells inside one rectangle-sized frame. Near the corners this can
        credit a pair that a true torus separates, but every torus neighbour
        is found.
        """
        from .sweep import VoronoiDiagram

        real_cells = []
        ghosts = []
        for cell in self.cells:
            real = VoronoiCell(cell.site, self.boundary)
            real_cells.append(real)
            for offset in symmetric_offsets(cell.boundary_directions, self.boundary):
                ghosts.append(real.make_symmetric_child(offset))

        logger.info("Tiling diagram", cells=len(real_cells), ghosts=len(ghosts))
        return VoronoiDiagram.from_cells(real_cells + ghosts, self.boundary).sweep()


def _unique_vertices(segments: Sequence[Segment]) -> List[Point]:
    seen = set()
    vertices = []
    for segment in segments:
        for point in segment:
            key = (round(point.x, 5), round(point.y, 5))
            if key not in seen:
                seen.add(key)
                vertices.append(point)
    return vertices
