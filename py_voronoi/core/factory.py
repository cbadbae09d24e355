"""
Site generators.

Both generators draw from the Alea PRNG, so a seed string reproduces the same
sites exactly.
"""

from typing import Optional

import numpy as np
import structlog

from ..utils import random as prng_utils
from .geometry import as_size
from .sweep import VoronoiDiagram

logger = structlog.get_logger()


def random_sites(
    width: float, height: float, count: int, inset: float = 0.0, seed: Optional[str] = None
) -> np.ndarray:
    """
    Generate uniformly distributed sites.

    Args:
        width: Boundary width
        height: Boundary height
        count: Number of sites
        inset: Margin kept clear on every side
        seed: Random seed for reproducibility; the shared PRNG when omitted

    Returns:
        Array of [x, y] site coordinates
    """
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")
    if inset < 0 or 2 * inset >= min(width, height):
        raise ValueError(f"inset {inset} leaves no room inside {width}x{height}")

    prng = prng_utils.make_prng(seed)
    inner_width = width - 2 * inset
    inner_height = height - 2 * inset

    points = []
    for _ in range(count):
        x = inset + prng.random() * inner_width
        y = inset + prng.random() * inner_height
        points.append([x, y])

    logger.info("Generated random sites", count=count, width=width, height=height)
    return np.array(points)


def jittered_sites(
    width: float,
    height: float,
    rows: int,
    columns: int,
    jitter: float = 0.5,
    seed: Optional[str] = None,
) -> np.ndarray:
    """
    Generate one site per grid cell, displaced from the cell centre.

    Args:
        width: Boundary width
        height: Boundary height
        rows: Grid rows
        columns: Grid columns
        jitter: Maximum displacement as a fraction of the cell size; 0 gives
            a regular grid and 1 lets a site reach its cell's edge
        seed: Random seed for reproducibility

    Returns:
        Array of [x, y] site coordinates, row by row from the bottom
    """
    if rows < 1 or columns < 1:
        raise ValueError(f"Grid must have at least one row and column, got {rows}x{columns}")
    if not 0.0 <= jitter <= 1.0:
        raise ValueError(f"jitter must be within [0, 1], got {jitter}")

    prng = prng_utils.make_prng(seed)
    cell_width = width / columns
    cell_height = height / rows

    def offset(extent: float) -> float:
        return (prng.random() - 0.5) * jitter * extent

    points = []
    for row in range(rows):
        for column in range(columns):
            x = (column + 0.5) * cell_width + offset(cell_width)
            y = (row + 0.5) * cell_height + offset(cell_height)
            points.append([x, y])

    logger.info("Generated jittered grid", rows=rows, columns=columns, jitter=jitter)
    return np.array(points)


def create_random_diagram(
    width: float, height: float, count: int, inset: float = 0.0, seed: Optional[str] = None
) -> VoronoiDiagram:
    """Unswept diagram over ``random_sites``."""
    size = as_size((width, height))
    return VoronoiDiagram(random_sites(size.width, size.height, count, inset, seed), size)


def create_jittered_diagram(
    width: float,
    height: float,
    rows: int,
    columns: int,
    jitter: float = 0.5,
    seed: Optional[str] = None,
) -> VoronoiDiagram:
    """Unswept diagram over ``jittered_sites``."""
    size = as_size((width, height))
    return VoronoiDiagram(
        jittered_sites(size.width, size.height, rows, columns, jitter, seed), size
    )
