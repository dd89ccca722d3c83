"""
Display Surfaces

A surface receives fully computed RGBA frames from the renderer and makes
them visible. The fire only needs two things from it: open at a given
pixel size, and present a flat RGBA buffer.

ArraySurface is headless (keeps the latest frame as a numpy array and
can save it as PNG). The pygame window surface lives in viewer.py so the
core never imports pygame.
"""

import os
from abc import ABC, abstractmethod

import numpy as np


class DisplaySurface(ABC):
    """Base class for fire display surfaces."""

    @abstractmethod
    def open(self, width, height):
        """Prepare a width x height drawing context.

        Returns True on success. False (or raising) means the surface has
        no usable context and the fire refuses to start.
        """

    @abstractmethod
    def present(self, buffer, width, height):
        """Show a flat uint8 RGBA buffer of length 4 * width * height."""

    def close(self):
        """Release the surface. Default: nothing to release."""


class ArraySurface(DisplaySurface):
    """In-memory surface. Holds the latest frame as an (H, W, 4) array."""

    def __init__(self):
        self.width = 0
        self.height = 0
        self.image = None
        self.frames_presented = 0

    def open(self, width, height):
        self.width = width
        self.height = height
        self.image = np.zeros((height, width, 4), dtype=np.uint8)
        return True

    def present(self, buffer, width, height):
        self.image[:] = np.asarray(buffer, dtype=np.uint8).reshape(height, width, 4)
        self.frames_presented += 1

    def save(self, path):
        """Write the latest frame as a PNG. Returns the path."""
        from PIL import Image

        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        Image.fromarray(self.image).save(path)
        return path
