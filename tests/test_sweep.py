"""Tests for the sweep and the diagrams it produces."""

import numpy as np
import pytest
from scipy.spatial import Voronoi

from py_voronoi.core.factory import jittered_sites, random_sites
from py_voronoi.core.geometry import Point, Size
from py_voronoi.core.sweep import VoronoiDiagram, build_diagram
from py_voronoi.core.alea_prng import AleaPRNG


def nearest_site_index(sites, point):
    distances = [site.distance_to(point) for site in sites]
    return int(np.argmin(distances))


def sample_points(width, height, count, seed):
    prng = AleaPRNG(seed)
    return [Point(prng.random() * width, prng.random() * height) for _ in range(count)]


def neighbor_pairs(result):
    pairs = set()
    for i, neighbors in enumerate(result.cell_neighbors):
        for j in neighbors:
            pairs.add(frozenset((i, j)))
    return pairs


class TestThreeSiteScenario:
    """Test the triangle of three sites in a 100x100 square."""

    @pytest.fixture
    def result(self):
        return build_diagram([(25, 25), (75, 25), (50, 75)], (100, 100)).sweep()

    def test_counts(self, result):
        """Test one cell per site and three edges."""
        assert len(result.cells) == 3
        assert len(result.edges) == 3

    def test_edges_meet_at_circumcenter(self, result):
        """Test that every edge ends at the triangle's circumcentre."""
        center = Point(50.0, 43.75)
        for start, end in result.edges:
            assert min(start.distance_to(center), end.distance_to(center)) < 1e-4

    def test_shared_vertex(self, result):
        """Test that the circumcentre is a diagram vertex."""
        assert any(v.approx_equal(Point(50.0, 43.75), 1e-4) for v in result.vertices)

    def test_all_cells_are_neighbors(self, result):
        """Test full adjacency between the three cells."""
        assert result.cell_neighbors == [[1, 2], [0, 2], [0, 1]]

    def test_polygons(self, result):
        """Test the clipped polygon of the lower left cell."""
        loop = result.cells[0].make_vertex_loop()
        expected = [Point(0, 0), Point(50, 0), Point(50, 43.75), Point(0, 68.75)]

        assert len(loop) == len(expected)
        for vertex, target in zip(loop, expected):
            assert vertex.approx_equal(target, 1e-6)

    def test_areas_cover_boundary(self, result):
        """Test that the cells tile the rectangle."""
        assert sum(cell.area for cell in result.cells) == pytest.approx(10000.0)


class TestDegenerateInputs:
    """Test small and degenerate site sets."""

    def test_single_site(self):
        """Test that a lone site owns the whole rectangle."""
        result = build_diagram([(30, 40)], (100, 80)).sweep()

        assert len(result.cells) == 1
        assert result.edges == []
        loop = result.cells[0].make_vertex_loop()
        assert {v.as_tuple() for v in loop} == {(0, 0), (100, 0), (0, 80), (100, 80)}

    def test_no_sites(self):
        """Test an empty diagram."""
        result = build_diagram([], (100, 100)).sweep()

        assert result.cells == []
        assert result.edges == []

    def test_two_sites(self):
        """Test that two sites split the rectangle along their bisector."""
        result = build_diagram([(50, 25), (50, 75)], (100, 100)).sweep()

        assert len(result.edges) == 1
        bottom = result.cells[0].make_vertex_loop()
        assert max(v.y for v in bottom) == pytest.approx(50.0)
        assert result.cells[0].area == pytest.approx(5000.0)

    def test_collinear_horizontal(self):
        """Test three level sites: two vertical edges and no vertex."""
        diagram = build_diagram([(25, 50), (50, 50), (75, 50)], (100, 100))
        result = diagram.sweep()

        assert len(result.cells) == 3
        assert len(result.edges) == 2
        assert diagram.events_processed == 3
        xs = sorted(start.x for start, _ in result.edges)
        assert xs == pytest.approx([37.5, 62.5])
        for start, end in result.edges:
            assert start.x == pytest.approx(end.x)

    def test_collinear_vertical(self):
        """Test three sites in a column: two horizontal edges."""
        result = build_diagram([(50, 25), (50, 50), (50, 75)], (100, 100)).sweep()

        assert len(result.edges) == 2
        ys = sorted(start.y for start, _ in result.edges)
        assert ys == pytest.approx([37.5, 62.5])
        assert result.cells[1].area == pytest.approx(2500.0)

    def test_duplicate_sites_are_dropped(self):
        """Test that repeated sites produce a single cell."""
        result = build_diagram([(10, 10), (60, 60), (10, 10)], (100, 100)).sweep()

        assert len(result.cells) == 2

    def test_cocircular_sites(self):
        """Test four sites on one circle, the top one at the circle event."""
        sites = [Point(45, 50), Point(55, 50), Point(50, 45), Point(50, 55)]
        result = build_diagram(sites, (100, 100)).sweep()

        assert len(result.cells) == 4
        for cell in result.cells:
            assert cell.contains(cell.site)
            for neighbor in cell.neighbors:
                assert cell in neighbor.neighbors
        assert sum(cell.area for cell in result.cells) == pytest.approx(10000.0)
        for cell in result.cells:
            assert cell.area == pytest.approx(2500.0)

    @pytest.mark.parametrize("third", [(80, 10), (80, 9.999998)])
    def test_nearly_level_lowest_row(self, third):
        """Test that a lowest row off level by less than epsilon still tiles the rectangle."""
        sites = [Point(20, 10), Point(50, 10.000003), Point(*third), Point(50, 60)]
        result = build_diagram(sites, (100, 100)).sweep()

        assert len(result.cells) == 4
        for cell in result.cells:
            assert len(cell.make_vertex_loop()) >= 3
            assert cell.contains(cell.site)
        assert sum(cell.area for cell in result.cells) == pytest.approx(10000.0, abs=0.01)
        assert result.cells[0].area == pytest.approx(1592.5, rel=1e-3)

    def test_square_grid(self):
        """Test a perfectly regular grid, full of co-circular quadruples."""
        sites = [(12.5 + 25 * i, 12.5 + 25 * j) for j in range(4) for i in range(4)]
        result = build_diagram(sites, (100, 100)).sweep()

        assert len(result.cells) == 16
        for cell in result.cells:
            assert cell.area == pytest.approx(625.0)
            assert len(cell.make_vertex_loop()) == 4

    def test_numpy_input(self):
        """Test that an (n, 2) array is accepted."""
        result = build_diagram(np.array([[10.0, 10.0], [90.0, 90.0]]), (100, 100)).sweep()

        assert len(result.cells) == 2

    def test_bad_array_shape(self):
        """Test that malformed site arrays are refused."""
        with pytest.raises(ValueError):
            build_diagram(np.zeros((3, 3)), (100, 100))


class TestSweepProperties:
    """Test invariants of swept diagrams on generated sites."""

    @pytest.fixture(params=["alpha", "beta", "gamma"])
    def sites(self, request):
        return random_sites(200, 150, 60, seed=request.param)

    def test_cell_count(self, sites):
        """Test one cell per site."""
        result = VoronoiDiagram(sites, (200, 150)).sweep()

        assert len(result.cells) == len(sites)

    def test_edge_count_bound(self, sites):
        """Test the planar graph bound on edges."""
        result = VoronoiDiagram(sites, (200, 150)).sweep()

        assert len(result.edges) <= 3 * len(sites) - 6

    def test_containment(self, sites):
        """Test that every cell contains its own site."""
        result = VoronoiDiagram(sites, (200, 150)).sweep()

        for cell in result.cells:
            assert cell.contains(cell.site)

    def test_sampled_points_belong_to_nearest_site(self, sites):
        """Test that each sample lies in exactly one cell, the nearest site's."""
        result = VoronoiDiagram(sites, (200, 150)).sweep()
        cell_sites = [cell.site for cell in result.cells]

        for point in sample_points(200, 150, 300, "samples"):
            owners = [i for i, cell in enumerate(result.cells) if cell.contains(point)]
            assert owners == [nearest_site_index(cell_sites, point)]

    def test_areas_cover_boundary(self, sites):
        """Test that cell areas sum to the rectangle's area."""
        result = VoronoiDiagram(sites, (200, 150)).sweep()

        assert sum(cell.area for cell in result.cells) == pytest.approx(200 * 150, rel=1e-6)

    def test_neighbor_symmetry(self, sites):
        """Test that neighbour lists are mutual."""
        result = VoronoiDiagram(sites, (200, 150)).sweep()

        for cell in result.cells:
            for neighbor in cell.neighbors:
                assert any(other is cell for other in neighbor.neighbors)

    def test_neighbors_match_qhull(self, sites):
        """Test adjacency against scipy's Voronoi ridges."""
        result = VoronoiDiagram(sites, (200, 150)).sweep()
        expected = {frozenset(map(int, pair)) for pair in Voronoi(sites).ridge_points}

        assert neighbor_pairs(result) == expected
        assert len(result.edges) == len(expected)

    def test_edges_are_closed(self, sites):
        """Test that every edge has both endpoints after the sweep."""
        diagram = VoronoiDiagram(sites, (200, 150))
        diagram.sweep()

        assert all(edge.has_end for edge in diagram.edges)

    def test_interior_cells_are_bounded(self, sites):
        """Test that cells away from the hull close up through their half-edges."""
        result = VoronoiDiagram(sites, (200, 150)).sweep()
        bounded = [cell.is_bounded for cell in result.cells]

        assert any(bounded)
        assert not all(bounded)


class TestJitteredGridDiagram:
    """Test diagrams over jittered grids."""

    def test_grid_topology(self):
        """Test boundary flags and boundedness on a 5x5 grid."""
        sites = jittered_sites(100, 100, 5, 5, jitter=0.4, seed="grid")
        result = VoronoiDiagram(sites, (100, 100)).sweep()
        flags = result.border_flags.reshape(5, 5)

        assert flags[1:-1, 1:-1].sum() == 0
        assert flags[0].all() and flags[-1].all()
        assert flags[:, 0].all() and flags[:, -1].all()
        assert result.cells[12].is_bounded
        assert not result.cells[0].is_bounded


class TestIdempotence:
    """Test that sweeping twice does nothing new."""

    def test_sweep_is_cached(self):
        """Test that the same result object is returned."""
        diagram = build_diagram(random_sites(100, 100, 20, seed="idem"), (100, 100))
        first = diagram.sweep()
        edges = list(first.edges)
        second = diagram.sweep()

        assert second is first
        assert second.edges == edges

    def test_construction_does_not_sweep(self):
        """Test that building only queues site events."""
        diagram = build_diagram([(10, 10), (20, 30)], (100, 100))

        assert len(diagram.events) == 2
        assert diagram.edges == []

    def test_vertex_loop_is_cached(self):
        """Test that polygons are computed once."""
        result = build_diagram([(10, 10), (20, 30)], (100, 100)).sweep()
        cell = result.cells[0]

        assert cell.make_vertex_loop() is cell.make_vertex_loop()
