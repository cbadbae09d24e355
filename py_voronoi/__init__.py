"""
py_voronoi: Voronoi diagrams by Fortune's sweep, clipped to a rectangle.
"""

from .core import (
    AleaPRNG,
    ColorGraph,
    Direction,
    Point,
    Size,
    VoronoiCell,
    VoronoiDiagram,
    VoronoiResult,
    build_diagram,
    color_cells,
    create_jittered_diagram,
    create_random_diagram,
    jittered_sites,
    random_sites,
    relax_sites,
)

__version__ = "0.1.0"

__all__ = ['AleaPRNG', 'ColorGraph', 'Direction', 'Point', 'Size', 'VoronoiCell',
           'VoronoiDiagram', 'VoronoiResult', 'build_diagram', 'color_cells',
           'create_jittered_diagram', 'create_random_diagram', 'jittered_sites',
           'random_sites', 'relax_sites']
