"""
Fire Propagation Engine

One generation of the Doom fire cellular automaton:
- Every cell takes the heat of the cell directly below it
- A random decay of 0, 1 or 2 cools the heat as it rises
- The same decay shifts the destination that many cells to the left,
  which gives the flame its flicker and sideways drift

Columns go left to right and rows top to bottom, so a cell always reads
the row below before that row is updated this generation. The bottom
row has nothing below it and is never written: it stays the heat source.
"""

import numpy as np

from .errors import InternalConsistencyError


MAX_DECAY = 2

# Row-boundary handling for drift that runs past column 0
DRIFT_MODES = ("wrap", "clamp")


class PropagationEngine:

    engine_name = "doom_fire"
    engine_label = "Doom Fire"

    def __init__(self, drift="wrap"):
        """
        Args:
            drift: "wrap" lets drift past column 0 bleed into the tail of
                the row above (writes before the first cell are dropped);
                "clamp" stops drift at column 0 of the same row
        """
        if drift not in DRIFT_MODES:
            raise ValueError(f"Unknown drift mode: {drift!r}. "
                             f"Expected one of {DRIFT_MODES}")
        self.drift = drift
        self.generation = 0

    def draw_decays(self, grid, rng):
        """Draw one decay per non-bottom cell, in processing order."""
        count = grid.width * (grid.height - 1)
        decays = np.asarray(rng.integers(0, MAX_DECAY + 1, size=count))
        if decays.size != count:
            raise InternalConsistencyError(
                f"Decay source returned {decays.size} draws, expected {count}")
        if count and (decays.min() < 0 or decays.max() > MAX_DECAY):
            raise InternalConsistencyError(
                f"Decay draws span {decays.min()}..{decays.max()}, "
                f"expected 0..{MAX_DECAY}")
        return decays.tolist()

    def advance(self, grid, rng):
        """Advance the grid one generation in place. Returns the grid."""
        width = grid.width
        decays = self.draw_decays(grid, rng)
        clamp = self.drift == "clamp"

        # Plain lists: the update is sequential, each write can feed a later read
        cells = grid.cells.tolist()
        k = 0
        for column in range(width):
            for row in range(grid.height - 1):
                i = column + width * row
                decay = decays[k]
                k += 1

                level = cells[i + width] - decay
                if level < 0:
                    level = 0

                if clamp and decay > column:
                    dest = i - column
                else:
                    dest = i - decay
                # Drift off the front of the buffer lands nowhere
                if dest < 0:
                    continue
                cells[dest] = level

        grid.cells[:] = cells
        self.generation += 1
        return grid

    def advance_n(self, grid, rng, n):
        """Advance n generations. Returns the grid."""
        for _ in range(n):
            self.advance(grid, rng)
        return grid
