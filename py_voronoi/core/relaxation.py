"""Lloyd relaxation of site sets."""

import numpy as np
import structlog

from .geometry import as_size
from .sweep import VoronoiDiagram, as_points

logger = structlog.get_logger()


def relax_sites(sites, boundary, n_iterations: int = 3) -> np.ndarray:
    """Apply Lloyd's relaxation to even out a site distribution.

    Each pass moves every site to the centroid of its clipped cell.

    Args:
        sites: Points, ``(x, y)`` pairs or an ``(n, 2)`` array
        boundary: ``Size`` or ``(width, height)``
        n_iterations: Number of relaxation passes

    Returns:
        Relaxed site coordinates; duplicate input sites collapse into one
    """
    if n_iterations < 0:
        raise ValueError(f"n_iterations must be non-negative, got {n_iterations}")

    size = as_size(boundary)
    points = np.array([point.as_tuple() for point in as_points(sites)], dtype=float).reshape(-1, 2)
    logger.info("Starting Lloyd's relaxation", sites=len(points), iterations=n_iterations)

    for iteration in range(n_iterations):
        result = VoronoiDiagram(points, size).sweep()
        relaxed = []
        for cell in result.cells:
            centroid = cell.centroid
            if centroid is None:
                relaxed.append(cell.site.as_tuple())
                continue
            relaxed.append(
                (np.clip(centroid.x, 0, size.width), np.clip(centroid.y, 0, size.height))
            )
        points = np.array(relaxed, dtype=float).reshape(-1, 2)
        logger.debug("Relaxation iteration complete", iteration=iteration + 1)

    return points
