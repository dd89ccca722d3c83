"""
Intensity Grid - the fire simulation state

A fixed W x H field of heat levels stored as one flat row-major array,
so cell (column, row) lives at index column + width * row. The bottom
row is the heat source and is seeded to the maximum level on creation.
"""

import numpy as np

from .errors import InternalConsistencyError
from .palette import MAX_LEVEL


class IntensityGrid:
    """Flat array of intensity levels with a persistent bottom-row source."""

    def __init__(self, width, height):
        if int(width) != width or int(height) != height or width < 1 or height < 1:
            raise ValueError(
                f"Grid size must be positive integers, got {width!r}x{height!r}")
        self.width = int(width)
        self.height = int(height)
        self.cells = np.zeros(self.width * self.height, dtype=np.int16)
        self.seed_source()

    @property
    def size(self):
        return self.cells.size

    @property
    def rows(self):
        """(height, width) view onto the cells."""
        return self.cells.reshape(self.height, self.width)

    def seed_source(self, level=MAX_LEVEL):
        """Set every bottom-row cell to `level` (exactly `width` cells)."""
        if not 0 <= level <= MAX_LEVEL:
            raise ValueError(f"Source level must be in 0..{MAX_LEVEL}, got {level!r}")
        start = self.size - self.width
        self.cells[start:] = level

    def clear_source(self):
        """Extinguish the heat source; the flame dies out over time."""
        self.seed_source(0)

    def check(self):
        """Raise InternalConsistencyError if any cell is outside [0, 36]."""
        lo = int(self.cells.min())
        hi = int(self.cells.max())
        if lo < 0 or hi > MAX_LEVEL:
            raise InternalConsistencyError(
                f"Grid levels span {lo}..{hi}, expected 0..{MAX_LEVEL}")
