#!/usr/bin/env python3
"""
Population Density Service

Deterministic population density over world coordinates, built from three
layered simplex-noise samples. The seed shifts the sampling window so that
different seeds see different terrain.
"""

import logging
import random

import numpy as np
from noise import snoise2

logger = logging.getLogger(__name__)

# half-width of the window seed offsets are drawn from, in world units
SEED_OFFSET_RANGE = 1_000_000.0


class PopulationService:
    """Population density in [0, 1] as a function of position and seed."""

    def __init__(self, seed: int):
        self.seed = seed
        rng = random.Random(seed)
        self.offset = (
            rng.uniform(-SEED_OFFSET_RANGE, SEED_OFFSET_RANGE),
            rng.uniform(-SEED_OFFSET_RANGE, SEED_OFFSET_RANGE)
        )

    def population_at(self, x: float, y: float) -> float:
        x += self.offset[0]
        y += self.offset[1]

        value1 = (snoise2(x / 10000, y / 10000) + 1) / 2
        value2 = (snoise2((x / 20000) + 500, (y / 20000) + 500) + 1) / 2
        value3 = (snoise2((x / 20000) + 1000, (y / 20000) + 1000) + 1) / 2
        value = (((value1 * value2) + value3) / 2) ** 2
        return min(1.0, max(0.0, value))

    def pop_on_road(self, segment) -> float:
        """Average density of a segment's two endpoints."""
        return (self.population_at(*segment.start) + self.population_at(*segment.end)) / 2

    def sample_grid(self, x: float, y: float, width: float, height: float, cell_size: float) -> np.ndarray:
        """
        Sample density at cell centres over a rectangle, e.g. for a heat map.

        Args:
            x: Left edge of the area
            y: Bottom edge of the area
            width: Area width
            height: Area height
            cell_size: Edge length of one cell

        Returns:
            Array of shape (rows, cols), row 0 at the bottom edge
        """
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")

        cols = max(1, int(np.ceil(width / cell_size)))
        rows = max(1, int(np.ceil(height / cell_size)))
        xs = x + (np.arange(cols) + 0.5) * cell_size
        ys = y + (np.arange(rows) + 0.5) * cell_size

        grid = np.empty((rows, cols), dtype=float)
        for row, cell_y in enumerate(ys):
            for col, cell_x in enumerate(xs):
                grid[row, col] = self.population_at(float(cell_x), float(cell_y))

        logger.debug(f"Sampled population grid {rows}x{cols} at cell size {cell_size}")
        return grid
