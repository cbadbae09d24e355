#!/usr/bin/env python3
"""
Demonstration of the Voronoi sweep.

Builds a relaxed jittered grid, tiles it so that opposite edges wrap around,
colours the cells and draws them with matplotlib.
"""

import matplotlib.pyplot as plt
from matplotlib.patches import Polygon

from py_voronoi import color_cells, jittered_sites, relax_sites, build_diagram
from py_voronoi.core.alea_prng import AleaPRNG

PALETTE = ["#e07a5f", "#3d405b", "#81b29a", "#f2cc8f", "#8ecae6", "#b5838d"]


def main():
    width, height = 400, 300
    seed = "demo_seed"

    print("=== Voronoi Sweep Demo ===\n")

    # 1. Sites
    sites = jittered_sites(width, height, rows=12, columns=16, jitter=0.8, seed=seed)
    print(f"1. Generated {len(sites)} jittered sites")
    sites = relax_sites(sites, (width, height), n_iterations=2)
    print("   - Applied 2 passes of Lloyd's relaxation")

    # 2. Sweep
    result = build_diagram(sites, (width, height)).sweep()
    print(f"\n2. Swept diagram: {len(result.cells)} cells, {len(result.edges)} edges")
    print(f"   - Border cells: {int(result.border_flags.sum())}")

    # 3. Tiling
    tiled = result.tile()
    before = sum(len(n) for n in result.cell_neighbors)
    after = sum(len(n) for n in tiled.cell_neighbors)
    print(f"\n3. Tiled: neighbour links {before} -> {after}")

    # 4. Colouring
    colors = color_cells(tiled.cells, len(PALETTE), AleaPRNG(seed))
    print(f"\n4. Coloured with {len(set(colors))} colours")

    fig, ax = plt.subplots(figsize=(8, 6))
    for cell, color in zip(tiled.cells, colors):
        ax.add_patch(Polygon(cell.vertex_array(), facecolor=PALETTE[color], edgecolor="white"))
    ax.scatter(tiled.site_array[:, 0], tiled.site_array[:, 1], s=4, c="black")
    ax.set_xlim(0, width)
    ax.set_ylim(0, height)
    ax.set_aspect("equal")
    ax.set_title("Tiled Voronoi diagram")
    plt.savefig("voronoi_demo.png", dpi=120)
    print("\nSaved voronoi_demo.png")


if __name__ == "__main__":
    main()
