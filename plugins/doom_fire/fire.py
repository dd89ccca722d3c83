"""
Doom Fire - one animated flame instance

Owns the intensity grid, the propagation engine, the renderer and the
frame scheduler for a single flame. Nothing is shared between instances.

Usage:
    from doom_fire import DoomFire, ArraySurface, ThreadedFrameClock

    fire = DoomFire(ArraySurface(), fps=30, width=80, height=50)
    fire.start(ThreadedFrameClock())
    ...
    fire.destroy()
"""

import numpy as np

from .errors import InvalidSurface
from .grid import IntensityGrid
from .palette import MAX_LEVEL
from .propagation import PropagationEngine
from .renderer import Renderer
from .scheduler import FrameScheduler


DEFAULT_FPS = 30
DEFAULT_WIDTH = 80
DEFAULT_HEIGHT = 50


def _open_surface(surface, width, height):
    """Acquire the surface's drawing context or raise InvalidSurface."""
    if surface is None:
        raise InvalidSurface("No display surface given")
    if not (callable(getattr(surface, "open", None))
            and callable(getattr(surface, "present", None))):
        raise InvalidSurface(
            f"{type(surface).__name__} is not a display surface "
            f"(needs open() and present())")
    try:
        ok = surface.open(width, height)
    except InvalidSurface:
        raise
    except Exception as e:
        raise InvalidSurface(f"Could not open display surface: {e}") from e
    if not ok:
        raise InvalidSurface("Display surface has no drawing context")


class DoomFire:
    """A self-contained flame: grid + engine + renderer + scheduler."""

    def __init__(self, surface, fps=DEFAULT_FPS, width=DEFAULT_WIDTH,
                 height=DEFAULT_HEIGHT, rng=None, seed=None, drift="wrap"):
        """
        Args:
            surface: DisplaySurface the frames are presented on
            fps: Target generations per second
            width, height: Grid size, also the surface's pixel size
            rng: Decay source with integers(low, high, size); defaults to
                numpy.random.default_rng(seed)
            seed: Seed for the default generator
            drift: "wrap" (reference look) or "clamp" at the row start
        """
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps!r}")
        self.grid = IntensityGrid(width, height)
        self.engine = PropagationEngine(drift=drift)
        _open_surface(surface, self.grid.width, self.grid.height)

        self.surface = surface
        self.width = self.grid.width
        self.height = self.grid.height
        self.rng = np.random.default_rng(seed) if rng is None else rng
        self.renderer = Renderer(surface, self.width, self.height)
        self.scheduler = FrameScheduler(fps, self.step)

    @property
    def fps(self):
        return self.scheduler.fps

    @property
    def running(self):
        return self.scheduler.running

    @property
    def frame(self):
        """Flat RGBA buffer of the last rendered frame."""
        return self.renderer.buffer

    def start(self, clock):
        """Start animating on a frame clock."""
        self.scheduler.start(clock)

    def stop(self):
        self.scheduler.stop()

    def destroy(self):
        """Stop animating. Idempotent."""
        self.scheduler.stop()

    def step(self):
        """Advance one generation and render it. Returns the RGBA buffer."""
        self.engine.advance(self.grid, self.rng)
        return self.renderer.render(self.grid)

    def render(self):
        """Render the current grid without advancing. Returns the RGBA buffer."""
        return self.renderer.render(self.grid)

    def ignite(self):
        """Reseed the heat source at full intensity."""
        self.grid.seed_source()

    def extinguish(self):
        """Put the heat source out; the flame dies down over time."""
        self.grid.clear_source()

    @property
    def stats(self):
        """Return current fire statistics."""
        cells = self.grid.cells
        return {
            "generation": self.engine.generation,
            "steps": self.scheduler.steps,
            "frames": self.renderer.frames,
            "mean": float(cells.mean()) / MAX_LEVEL,
            "max": int(cells.max()),
            "burning_pct": float((cells > 0).sum()) / cells.size * 100,
        }
