"""
Grid adjacency for flat, row-major cell indices.
"""

from __future__ import annotations

from grid_types import CellIndex, Grid


def neighbors(index: CellIndex, columns: int, total_cells: int) -> list[CellIndex]:
    """
    Return the up/down/left/right neighbors of a cell.

    Order is left, right, top, bottom (only those that exist). The order
    determines the stagger order of a cascade.

    A grid with columns <= 0 has no adjacency.
    """
    if columns <= 0:
        return []

    row, col = divmod(index, columns)
    result: list[CellIndex] = []

    # Left
    if col > 0:
        result.append(index - 1)
    # Right (past the end of a partial last row this is not a real cell)
    if col < columns - 1:
        result.append(index + 1)
    # Top
    if row > 0:
        result.append(index - columns)
    # Bottom
    if index + columns < total_cells:
        result.append(index + columns)

    return result


def grid_neighbors(grid: Grid, index: CellIndex) -> list[CellIndex]:
    """Neighbors of index within grid."""
    return neighbors(index, grid.columns, grid.total_cells)


def wave_rings(grid: Grid, origin: CellIndex) -> list[list[CellIndex]]:
    """
    Breadth-first rings of cells around origin.

    Ring 0 is [origin]; ring d holds every cell whose shortest path from
    origin is d steps, each ring in discovery order. Returns [] when origin
    is outside the grid.
    """
    if not grid.contains(origin):
        return []

    visited: set[CellIndex] = {origin}
    rings: list[list[CellIndex]] = [[origin]]

    while True:
        next_ring: list[CellIndex] = []
        for cell in rings[-1]:
            for neighbor in grid_neighbors(grid, cell):
                if neighbor not in visited and grid.contains(neighbor):
                    visited.add(neighbor)
                    next_ring.append(neighbor)
        if not next_ring:
            return rings
        rings.append(next_ring)


def eccentricity(grid: Grid, origin: CellIndex) -> int:
    """Largest shortest-path distance from origin to any reachable cell."""
    return max(len(wave_rings(grid, origin)) - 1, 0)
