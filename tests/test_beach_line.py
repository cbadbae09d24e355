"""Tests for the beach line tree and parabola intersections."""

import pytest

from py_voronoi.core.beach_line import (
    BeachLine,
    Breakpoint,
    Parabola,
    breakpoint_x,
    parabola_collisions,
)
from py_voronoi.core.cell import VoronoiCell
from py_voronoi.core.geometry import Point, Size
from py_voronoi.core.sweep import VoronoiDiagram

SIZE = Size(100, 100)


def arc(x, y):
    return Parabola(VoronoiCell(Point(x, y), SIZE))


def equidistant(point, focus, directrix):
    return point.distance_to(focus) == pytest.approx(directrix - point.y)


class TestParabolaCollisions:
    """Test two-parabola intersection."""

    def test_general_case(self):
        """Test that both crossings are equidistant to foci and directrix."""
        left, right = Point(20, 10), Point(60, 30)
        points = parabola_collisions(left, right, 50.0)

        assert len(points) == 2
        for point in points:
            assert equidistant(point, left, 50.0)
            assert equidistant(point, right, 50.0)

    def test_same_height(self):
        """Test that level foci meet once, on their bisector."""
        points = parabola_collisions(Point(25, 25), Point(75, 25), 75.0)

        assert len(points) == 1
        assert points[0].x == pytest.approx(50.0)
        assert points[0].y == pytest.approx(43.75)

    def test_focus_on_directrix(self):
        """Test that a focus on the directrix meets the other arc at its x."""
        points = parabola_collisions(Point(50, 20), Point(30, 40), 40.0)

        assert len(points) == 1
        assert points[0].x == pytest.approx(30.0)
        assert equidistant(points[0], Point(50, 20), 40.0)

    def test_no_intersection(self):
        """Test that nested parabolas do not meet."""
        assert parabola_collisions(Point(0, 10), Point(0, -10), 0.0) == []

    def test_breakpoint_root_choice(self):
        """Test that the lower focus on the left takes the left crossing."""
        low, high = Point(50, 0), Point(50, 40)
        points = parabola_collisions(low, high, 50.0)
        xs = sorted(p.x for p in points)

        assert breakpoint_x(low, high, 50.0) == pytest.approx(xs[0])
        assert breakpoint_x(high, low, 50.0) == pytest.approx(xs[1])

    def test_arc_height(self):
        """Test y_for_x against the focus-directrix definition."""
        parabola = arc(50, 20)
        parabola.directrix = 60.0
        point = Point(70.0, parabola.y_for_x(70.0))

        assert equidistant(point, parabola.focus, 60.0)


class TestBeachLineTree:
    """Test tree navigation and structural edits."""

    def build(self):
        """Arcs a, b, c, d in a lopsided tree."""
        a, b, c, d = arc(10, 0), arc(20, 0), arc(30, 0), arc(40, 0)
        beach_line = BeachLine()
        beach_line.insert_first(a)
        placeholder = arc(0, 0)
        beach_line.replace(a, placeholder, added_arcs=0)
        beach_line.replace(
            placeholder, Breakpoint(a, Breakpoint(b, Breakpoint(c, d))), added_arcs=3
        )
        return beach_line, (a, b, c, d)

    def test_in_order_arcs(self):
        """Test left to right traversal."""
        beach_line, arcs = self.build()

        assert list(beach_line.arcs()) == list(arcs)
        assert beach_line.arc_count == 4

    def test_neighbors(self):
        """Test finding neighbouring arcs across subtrees."""
        _, (a, b, c, d) = self.build()

        assert a.parabola_to_left() is None
        assert a.parabola_to_right() is b
        assert c.parabola_to_left() is b
        assert c.parabola_to_right() is d
        assert d.parabola_to_right() is None

    def test_nearest_children(self):
        """Test descending to the leaves next to a breakpoint."""
        beach_line, (a, b, _, _) = self.build()

        assert beach_line.root.nearest_left_child() is a
        assert beach_line.root.nearest_right_child() is b

    def test_remove_squeezes_out_leaf(self):
        """Test that removal promotes the sibling."""
        beach_line, (a, b, c, d) = self.build()
        beach_line.remove(c)

        assert list(beach_line.arcs()) == [a, b, d]
        assert b.parabola_to_right() is d
        assert d.parabola_to_left() is b
        assert c.parabola_to_left() is None
        assert beach_line.arc_count == 3

    def test_remove_from_root(self):
        """Test removal where the parent is the root."""
        beach_line, (a, b, c, d) = self.build()
        beach_line.remove(a)

        assert list(beach_line.arcs()) == [b, c, d]
        assert beach_line.root.parent is None

    def test_internal_nodes_have_two_children(self):
        """Test the structural invariant after edits."""
        beach_line, (_, b, _, _) = self.build()
        beach_line.remove(b)

        stack = [beach_line.root]
        while stack:
            node = stack.pop()
            if not node.is_leaf:
                assert node.left is not None and node.right is not None
                assert node.left.parent is node and node.right.parent is node
                stack.extend([node.left, node.right])


class TestArcSplitting:
    """Test beach line contents during a sweep."""

    def test_split_creates_three_arcs(self):
        """Test that a site under an arc splits it around the new arc."""
        diagram = VoronoiDiagram([(50, 10), (30, 40)], SIZE)
        diagram.sweep_once()
        diagram.sweep_once()

        foci = [a.focus for a in diagram.beach_line.arcs()]

        assert foci == [Point(50, 10), Point(30, 40), Point(50, 10)]
        assert diagram.beach_line.arc_count == 3

    def test_level_sites_split_in_two(self):
        """Test that sites on the same line sit side by side."""
        diagram = VoronoiDiagram([(70, 10), (30, 10)], SIZE)
        diagram.sweep_once()
        diagram.sweep_once()

        foci = [a.focus for a in diagram.beach_line.arcs()]

        assert foci == [Point(30, 10), Point(70, 10)]
        assert len(diagram.edges) == 1
        assert diagram.edges[0].start.x == pytest.approx(50.0)

    def test_find_arc_above(self):
        """Test locating the arc over an x position."""
        diagram = VoronoiDiagram([(50, 10), (30, 40), (90, 60)], SIZE)
        diagram.sweep_once()
        diagram.sweep_once()

        found = diagram.beach_line.find_arc_above(30.0, 60.0)
        assert found.focus == Point(30, 40)
        found = diagram.beach_line.find_arc_above(90.0, 60.0)
        assert found.focus == Point(50, 10)
