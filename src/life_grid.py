#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Life Grid Engine

Implements Conway's Game of Life on a fixed 50x50 grid with hard
(non-wrapping) boundaries. Cells on the edge simply have fewer neighbors.

Provides:
- Grid: immutable, bounds-checked wrapper around a numpy cell array
- spawn: random seeding of a new grid
- transition: one generation of the Game of Life rule
- render: HTML fragment used by the htmx client (out-of-band full swap)

Usage:
    python life_grid.py
"""

from typing import Iterator, List, Optional, Tuple

import numpy as np


GRID_SIZE = 50

DEAD = 0
ALIVE = 1

# Percentage of cells born alive when seeding
ALIVE_SPAWN_CHANCE = 10

NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
)


class Grid:
    """
    Fixed-size matrix of binary cell states.

    The underlying array is copied on construction and marked read-only,
    so a Grid never changes once built. Advancing the simulation always
    produces a new Grid.

    Attributes:
        cells: Read-only (GRID_SIZE, GRID_SIZE) uint8 array of 0/1 values
    """

    def __init__(self, cells: Optional[np.ndarray] = None):
        """
        Build a grid.

        Args:
            cells: Array-like of shape (GRID_SIZE, GRID_SIZE) with values
                   DEAD or ALIVE. None creates an all-dead grid.

        Raises:
            ValueError: If the shape is wrong or a value is not 0/1
        """
        if cells is None:
            array = np.zeros((GRID_SIZE, GRID_SIZE), dtype=np.uint8)
        else:
            raw = np.asarray(cells)
            if raw.shape != (GRID_SIZE, GRID_SIZE):
                raise ValueError(f"Grid must be {GRID_SIZE}x{GRID_SIZE}, got {raw.shape}")
            if not np.isin(raw, (DEAD, ALIVE)).all():
                raise ValueError("Grid cells must be 0 (dead) or 1 (alive)")
            array = np.ascontiguousarray(raw, dtype=np.uint8).copy()

        array.flags.writeable = False
        self.cells = array

    @property
    def shape(self) -> Tuple[int, int]:
        return self.cells.shape

    @staticmethod
    def _check_bounds(row: int, col: int) -> None:
        if not (0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE):
            raise IndexError(f"Cell ({row}, {col}) outside {GRID_SIZE}x{GRID_SIZE} grid")

    def __getitem__(self, pos: Tuple[int, int]) -> int:
        row, col = pos
        self._check_bounds(row, col)
        return int(self.cells[row, col])

    def __eq__(self, other) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return bool(np.array_equal(self.cells, other.cells))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Grid(alive={self.alive_count()})"

    def rows(self) -> Iterator[np.ndarray]:
        """Iterate over rows in top-to-bottom order."""
        return iter(self.cells)

    def alive_count(self) -> int:
        """Number of alive cells."""
        return int(self.cells.sum())

    def with_cells(self, alive: List[Tuple[int, int]]) -> 'Grid':
        """
        Return a copy of this grid with the given cells set alive.

        Args:
            alive: List of (row, col) positions to switch on

        Returns:
            New Grid
        """
        array = self.cells.copy()
        for row, col in alive:
            self._check_bounds(row, col)
            array[row, col] = ALIVE
        return Grid(array)


def spawn(rng: Optional[np.random.Generator] = None) -> Grid:
    """
    Seed a new random grid.

    Every cell gets its own uniform draw in [0, 100) and is alive when the
    draw exceeds 100 - ALIVE_SPAWN_CHANCE.

    Args:
        rng: Random generator to draw from (default: fresh unseeded one)

    Returns:
        Newly seeded Grid
    """
    if rng is None:
        rng = np.random.default_rng()
    draws = rng.integers(0, 100, size=(GRID_SIZE, GRID_SIZE))
    return Grid((draws > 100 - ALIVE_SPAWN_CHANCE).astype(np.uint8))


def alive_neighbors(grid: Grid, row: int, col: int) -> int:
    """
    Count alive neighbors of a single cell.

    Neighbors that would fall outside the grid are skipped; there is no
    wraparound.

    Args:
        grid: Grid to inspect
        row: Row index of the cell
        col: Column index of the cell

    Returns:
        Number of alive neighbors (0-8)
    """
    margin = GRID_SIZE - 1
    alive = 0

    for dr, dc in NEIGHBOR_OFFSETS:
        if (dr == -1 and row == 0 or dr == 1 and row == margin or
                dc == -1 and col == 0 or dc == 1 and col == margin):
            continue
        if grid[row + dr, col + dc] == ALIVE:
            alive += 1

    return alive


def neighbor_counts(grid: Grid) -> np.ndarray:
    """
    Alive-neighbor count for every cell at once.

    The grid is padded with a border of dead cells so edge cells only see
    their in-grid neighbors.
    """
    padded = np.pad(grid.cells, 1, mode='constant', constant_values=DEAD)
    counts = np.zeros((GRID_SIZE, GRID_SIZE), dtype=np.uint8)
    for dr, dc in NEIGHBOR_OFFSETS:
        counts += padded[1 + dr:1 + dr + GRID_SIZE, 1 + dc:1 + dc + GRID_SIZE]
    return counts


def transition(grid: Grid) -> Grid:
    """
    Advance the grid by one generation.

    Rule:
        - alive with fewer than 2 or more than 3 neighbors dies
        - alive with 2 or 3 neighbors survives
        - dead with exactly 3 neighbors becomes alive

    All counts are taken from the input grid, which is left untouched.

    Args:
        grid: Current generation

    Returns:
        Next generation as a new Grid
    """
    counts = neighbor_counts(grid)
    alive = grid.cells == ALIVE

    survives = alive & ((counts == 2) | (counts == 3))
    born = ~alive & (counts == 3)

    return Grid((survives | born).astype(np.uint8))


def render(grid: Grid) -> str:
    """
    Render the grid as an HTML fragment.

    The outer container carries hx-swap-oob so the client replaces its
    whole grid with each frame.

    Args:
        grid: Grid to render

    Returns:
        HTML string
    """
    parts = ['<div id="container" class="container" hx-swap-oob="true">\n']

    for row in grid.rows():
        parts.append('<div class="row">\n')
        for cell in row:
            if cell == ALIVE:
                parts.append('\t<span class="alive"></span>\n')
            else:
                parts.append('\t<span></span>\n')
        parts.append('</div>\n')

    parts.append('</div>')
    return ''.join(parts)


if __name__ == "__main__":
    grid = spawn()
    print(f"Seeded {grid.alive_count()} alive cells")
    for _ in range(10):
        grid = transition(grid)
    print(f"After 10 generations: {grid.alive_count()} alive cells")
