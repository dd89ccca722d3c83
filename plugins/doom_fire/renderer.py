"""
Renderer - intensity grid to RGBA pixels

Pixel i of the buffer is palette[grid.cells[i]], row-major, 4 bytes per
pixel. One buffer is reused across frames and handed to the surface.
"""

import numpy as np

from .palette import as_lut, apply_palette


class Renderer:

    def __init__(self, surface, width, height, lut=None):
        self.surface = surface
        self.width = width
        self.height = height
        self.lut = as_lut() if lut is None else lut
        self._rgba = np.zeros((width * height, 4), dtype=np.uint8)
        self.buffer = self._rgba.reshape(-1)
        self.frames = 0

    def render(self, grid):
        """Colorize the grid, present it, and return the flat RGBA buffer."""
        grid.check()
        apply_palette(grid.cells, self.lut, out=self._rgba)
        self.surface.present(self.buffer, self.width, self.height)
        self.frames += 1
        return self.buffer
