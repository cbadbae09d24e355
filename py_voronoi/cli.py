"""
Command line entry point.

Builds a diagram from random or jittered-grid sites and prints it as JSON.

Usage:
    py-voronoi --sites 200 --seed demo --relax 2 --colors 5
    py-voronoi --grid 8x12 --jitter 0.6 --tile --output diagram.json
"""

import argparse
import json
import sys
from typing import List, Optional

import structlog

from .config import settings
from .core.color_graph import color_cells
from .core.factory import jittered_sites, random_sites
from .core.relaxation import relax_sites
from .core.sweep import VoronoiDiagram
from .utils.log_config import configure_logging
from .utils.random import make_prng

logger = structlog.get_logger()


def _grid(value: str):
    try:
        rows, columns = (int(part) for part in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"grid must look like ROWSxCOLUMNS, got {value!r}")
    return rows, columns


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a clipped Voronoi diagram as JSON")
    sites = parser.add_mutually_exclusive_group(required=True)
    sites.add_argument("--sites", type=int, help="Number of uniformly random sites")
    sites.add_argument("--grid", type=_grid, help="Jittered grid as ROWSxCOLUMNS")
    parser.add_argument("--width", type=float, default=1000.0, help="Boundary width")
    parser.add_argument("--height", type=float, default=1000.0, help="Boundary height")
    parser.add_argument("--inset", type=float, default=0.0, help="Margin for random sites")
    parser.add_argument("--jitter", type=float, default=0.5, help="Grid jitter fraction")
    parser.add_argument("--seed", default=settings.default_seed, help="PRNG seed")
    parser.add_argument(
        "--relax",
        type=int,
        default=settings.relaxation_iterations,
        help="Lloyd relaxation passes",
    )
    parser.add_argument("--tile", action="store_true", help="Wrap neighbours around the edges")
    parser.add_argument(
        "--colors", type=int, nargs="?", const=settings.color_count, help="Colour the cells"
    )
    parser.add_argument("--output", help="Write JSON here instead of stdout")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings.log_level, settings.log_format)

    if args.sites is not None:
        sites = random_sites(args.width, args.height, args.sites, args.inset, args.seed)
    else:
        rows, columns = args.grid
        sites = jittered_sites(args.width, args.height, rows, columns, args.jitter, args.seed)

    if args.relax:
        sites = relax_sites(sites, (args.width, args.height), args.relax)

    result = VoronoiDiagram(sites, (args.width, args.height)).sweep()
    if args.tile:
        result = result.tile()

    payload = result.to_dict()
    if args.colors:
        colors = color_cells(result.cells, args.colors, make_prng(args.seed))
        for cell, color in zip(payload["cells"], colors):
            cell["color"] = color

    text = json.dumps(payload)
    if args.output:
        with open(args.output, "w") as handle:
            handle.write(text)
        logger.info("Wrote diagram", path=args.output, cells=len(result.cells))
    else:
        sys.stdout.write(text + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
