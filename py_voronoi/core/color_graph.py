"""
Graph colouring for cell maps.

A greedy heuristic: repeatedly remove a node of minimum degree, then colour
the nodes in reverse removal order, each with a random colour its already
coloured neighbours do not use. It does not guarantee the fewest colours, but
planar adjacency graphs such as Voronoi neighbourhoods rarely need more
than four or five.
"""

from typing import Dict, Generic, Hashable, Iterable, List, Optional, Sequence, Set, TypeVar

import structlog

from ..utils import random as prng_utils
from .alea_prng import AleaPRNG
from .cell import VoronoiCell

logger = structlog.get_logger()

T = TypeVar("T", bound=Hashable)


class ColorGraph(Generic[T]):
    """Undirected adjacency over hashable nodes."""

    def __init__(self, nodes: Iterable[T] = ()):
        self._adjacency: Dict[T, Set[T]] = {}
        for node in nodes:
            self.add_node(node)

    def __len__(self) -> int:
        return len(self._adjacency)

    def __contains__(self, node) -> bool:
        return node in self._adjacency

    @property
    def nodes(self) -> List[T]:
        return list(self._adjacency)

    def add_node(self, node: T) -> None:
        self._adjacency.setdefault(node, set())

    def add_edge(self, first: T, second: T) -> None:
        """
        Connect two existing nodes.

        Raises:
            ValueError: If either node has not been added
        """
        for node in (first, second):
            if node not in self._adjacency:
                raise ValueError(f"Cannot add edge: node {node!r} is not in the graph")
        if first == second:
            return
        self._adjacency[first].add(second)
        self._adjacency[second].add(first)

    def neighbors(self, node: T) -> Set[T]:
        if node not in self._adjacency:
            raise ValueError(f"Node {node!r} is not in the graph")
        return set(self._adjacency[node])

    def degree(self, node: T) -> int:
        return len(self.neighbors(node))

    def without(self, node: T) -> "ColorGraph[T]":
        """Copy of the graph with ``node`` and its edges removed."""
        if node not in self._adjacency:
            raise ValueError(f"Cannot remove node {node!r}: it is not in the graph")
        graph: ColorGraph[T] = ColorGraph()
        graph._adjacency = {
            other: neighbors - {node}
            for other, neighbors in self._adjacency.items()
            if other != node
        }
        return graph

    def elimination_order(self, prng: AleaPRNG) -> List[T]:
        """Nodes in minimum-degree removal order, ties broken at random."""
        remaining = {node: set(neighbors) for node, neighbors in self._adjacency.items()}
        order = []
        while remaining:
            lowest = min(len(neighbors) for neighbors in remaining.values())
            candidates = [node for node, neighbors in remaining.items() if len(neighbors) == lowest]
            node = prng.choice(candidates)
            for neighbor in remaining.pop(node):
                remaining[neighbor].discard(node)
            order.append(node)
        return order

    def color_graph(self, count: int, prng: Optional[AleaPRNG] = None) -> Dict[T, int]:
        """
        Assign each node a colour in ``range(count)``.

        Adjacent nodes get different colours whenever the heuristic finds room;
        if every colour is taken around a node it gets a random one.

        Raises:
            ValueError: If ``count`` is less than 1
        """
        if count < 1:
            raise ValueError(f"count must be at least 1, got {count}")
        prng = prng or prng_utils.get_prng()

        colors: Dict[T, int] = {}
        clashes = 0
        for node in reversed(self.elimination_order(prng)):
            used = {colors[neighbor] for neighbor in self._adjacency[node] if neighbor in colors}
            available = [color for color in range(count) if color not in used]
            if available:
                colors[node] = prng.choice(available)
            else:
                colors[node] = prng.randint(count)
                clashes += 1

        if clashes:
            logger.warning("Graph coloring produced clashes", clashes=clashes, colors=count)
        return colors


def color_cells(
    cells: Sequence[VoronoiCell], count: int, prng: Optional[AleaPRNG] = None
) -> List[int]:
    """
    Colour cells so that neighbours differ.

    Returns:
        One colour per cell, aligned with ``cells``
    """
    graph: ColorGraph[VoronoiCell] = ColorGraph(cells)
    for cell in cells:
        for neighbor in cell.neighbors:
            if neighbor in graph:
                graph.add_edge(cell, neighbor)
    colors = graph.color_graph(count, prng)
    return [colors[cell] for cell in cells]
