"""
Core Voronoi sweep functionality.
"""

from .geometry import Point, Size, Direction, approx_equal
from .cell import VoronoiCell
from .sweep import VoronoiDiagram, build_diagram
from .result import VoronoiResult
from .factory import random_sites, jittered_sites, create_random_diagram, create_jittered_diagram
from .relaxation import relax_sites
from .color_graph import ColorGraph, color_cells
from .alea_prng import AleaPRNG

__all__ = ['Point', 'Size', 'Direction', 'approx_equal', 'VoronoiCell',
           'VoronoiDiagram', 'build_diagram', 'VoronoiResult',
           'random_sites', 'jittered_sites', 'create_random_diagram', 'create_jittered_diagram',
           'relax_sites', 'ColorGraph', 'color_cells', 'AleaPRNG']
