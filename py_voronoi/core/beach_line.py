"""
Beach line: the front of parabolic arcs ahead of the sweep.

The tree is not a general BST. Leaves are ``Parabola`` arcs, internal nodes are
``Breakpoint`` nodes with exactly two children, and an in-order walk of the
leaves gives the arcs from left to right. Arcs have no static sort key (their
extent depends on the sweep position), so the tree is rearranged by explicit
child assignment rather than keyed insertion.
"""

import math
from typing import TYPE_CHECKING, Iterator, List, Optional

from .geometry import Point, approx_equal

if TYPE_CHECKING:
    from .cell import VoronoiCell
    from .edges import Edge
    from .events import CircleEvent


class BeachNode:
    """Shared tree plumbing for arcs and breakpoints."""

    is_leaf = False

    def __init__(self):
        self.parent: Optional["Breakpoint"] = None
        self.left: Optional["BeachNode"] = None
        self.right: Optional["BeachNode"] = None

    def nearest_left_child(self) -> Optional["Parabola"]:
        """Rightmost leaf of the left subtree."""
        node = self.left
        while node is not None and not node.is_leaf:
            node = node.right
        return node

    def nearest_right_child(self) -> Optional["Parabola"]:
        """Leftmost leaf of the right subtree."""
        node = self.right
        while node is not None and not node.is_leaf:
            node = node.left
        return node

    def leftmost_parent(self) -> Optional["Breakpoint"]:
        """First ancestor reached from its right subtree."""
        current, parent = self, self.parent
        while parent is not None and parent.left is current:
            current, parent = parent, parent.parent
        return parent

    def rightmost_parent(self) -> Optional["Breakpoint"]:
        """First ancestor reached from its left subtree."""
        current, parent = self, self.parent
        while parent is not None and parent.right is current:
            current, parent = parent, parent.parent
        return parent


class Breakpoint(BeachNode):
    """Internal node separating its left subtree's arcs from its right's."""

    def __init__(self, left: BeachNode, right: BeachNode):
        super().__init__()
        self.set_left(left)
        self.set_right(right)

    def set_left(self, child: BeachNode) -> None:
        self.left = child
        child.parent = self

    def set_right(self, child: BeachNode) -> None:
        self.right = child
        child.parent = self

    def replace_child(self, old: BeachNode, new: BeachNode) -> None:
        if self.left is old:
            self.set_left(new)
        else:
            self.set_right(new)


class Parabola(BeachNode):
    """
    An arc of the beach line, focused on one cell's site.

    ``left_edge`` and ``right_edge`` are the edges traced by the breakpoints
    on either side of the arc.
    """

    is_leaf = True

    def __init__(self, cell: "VoronoiCell"):
        super().__init__()
        self.cell = cell
        self.directrix = 0.0
        self.left_edge: Optional["Edge"] = None
        self.right_edge: Optional["Edge"] = None
        self.circle_event: Optional["CircleEvent"] = None

    @property
    def focus(self) -> Point:
        return self.cell.site

    def y_for_x(self, x: float) -> float:
        """Height of the arc at ``x`` for the current directrix."""
        p = (self.focus.y - self.directrix) / 2.0
        if approx_equal(p, 0.0):
            return self.focus.y
        k = (self.focus.y + self.directrix) / 2.0
        return (x - self.focus.x) ** 2 / (4.0 * p) + k

    def parabola_to_left(self) -> Optional["Parabola"]:
        parent = self.leftmost_parent()
        return parent.nearest_left_child() if parent is not None else None

    def parabola_to_right(self) -> Optional["Parabola"]:
        parent = self.rightmost_parent()
        return parent.nearest_right_child() if parent is not None else None

    def __repr__(self) -> str:
        return f"Parabola(focus=({self.focus.x:.4f}, {self.focus.y:.4f}))"


def parabola_collisions(left: Point, right: Point, directrix: float) -> List[Point]:
    """
    Intersections of the parabolas focused on ``left`` and ``right``.

    Each parabola is ``y = (x - h)^2 / (4p) + k`` with ``p`` half the signed
    distance from directrix to focus and ``k`` the vertex height.

    Returns:
        Zero, one or two points. A focus lying on the directrix is a vertical
        ray, which meets the other parabola exactly once.
    """
    h1, h2 = left.x, right.x
    p1 = (left.y - directrix) / 2.0
    p2 = (right.y - directrix) / 2.0
    k1 = (left.y + directrix) / 2.0
    k2 = (right.y + directrix) / 2.0

    if approx_equal(p1, p2):
        if approx_equal(h1, h2):
            return []
        x = (h1 * h1 - h2 * h2 + 4.0 * p1 * (k1 - k2)) / (2.0 * (h1 - h2))
        y = k1 if approx_equal(p1, 0.0) else (x - h1) ** 2 / (4.0 * p1) + k1
        return [Point(x, y)]

    if approx_equal(p1, 0.0):
        return [Point(h1, (h1 - h2) ** 2 / (4.0 * p2) + k2)]
    if approx_equal(p2, 0.0):
        return [Point(h2, (h2 - h1) ** 2 / (4.0 * p1) + k1)]

    a = 1.0 / p1 - 1.0 / p2
    b = 2.0 * (h2 / p2 - h1 / p1)
    c = 4.0 * (k1 - k2) + h1 * h1 / p1 - h2 * h2 / p2
    discriminant = b * b - 4.0 * a * c
    if discriminant < 0:
        return []

    root = math.sqrt(discriminant)
    points = []
    for x in ((-b - root) / (2.0 * a), (-b + root) / (2.0 * a)):
        points.append(Point(x, (x - h1) ** 2 / (4.0 * p1) + k1))
    return points


def breakpoint_x(left: Point, right: Point, directrix: float) -> float:
    """
    x of the breakpoint with the ``left`` arc on its left.

    Two parabolas cross twice; the lower focus has the narrower arc, so the
    breakpoint with the lower focus on the left is the left-hand crossing.
    """
    points = parabola_collisions(left, right, directrix)
    if not points:
        return (left.x + right.x) / 2.0
    if left.y < right.y:
        return min(point.x for point in points)
    return max(point.x for point in points)


class BeachLine:
    """Owns the root of the arc tree and the structural edits on it."""

    def __init__(self):
        self.root: Optional[BeachNode] = None
        self.arc_count = 0

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def insert_first(self, arc: Parabola) -> None:
        self.root = arc
        arc.parent = None
        self.arc_count = 1

    def find_arc_above(self, x: float, directrix: float) -> Optional[Parabola]:
        """Arc directly above ``x`` when the sweep is at ``directrix``."""
        node = self.root
        while node is not None and not node.is_leaf:
            left = node.nearest_left_child()
            right = node.nearest_right_child()
            if x < breakpoint_x(left.focus, right.focus, directrix):
                node = node.left
            else:
                node = node.right
        return node

    def replace(self, old: BeachNode, new: BeachNode, added_arcs: int) -> None:
        """Put subtree ``new`` where ``old`` was."""
        parent = old.parent
        if parent is None:
            self.root = new
            new.parent = None
        else:
            parent.replace_child(old, new)
        old.parent = None
        self.arc_count += added_arcs

    def remove(self, arc: Parabola) -> None:
        """Squeeze ``arc`` out, promoting its sibling to the parent's place."""
        parent = arc.parent
        if parent is None:
            self.root = None
            self.arc_count = 0
            return

        sibling = parent.right if parent.left is arc else parent.left
        grandparent = parent.parent
        if grandparent is None:
            self.root = sibling
            sibling.parent = None
        else:
            grandparent.replace_child(parent, sibling)
        arc.parent = None
        parent.parent = None
        self.arc_count -= 1

    def arcs(self) -> Iterator[Parabola]:
        """Arcs from left to right."""
        stack: List[BeachNode] = []
        node = self.root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            if node.is_leaf:
                yield node
            node = node.right
