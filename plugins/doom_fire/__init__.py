"""
Doom Fire - procedurally animated flame

Heat rises through a grid of intensity levels 0..36 with random decay
and sideways drift, is colorized through the classic fire palette, and
is presented on a display surface at a bounded frame rate.
"""

from .clock import FrameClock, ManualFrameClock, ThreadedFrameClock
from .errors import FireError, InternalConsistencyError, InvalidSurface
from .fire import DoomFire
from .grid import IntensityGrid
from .palette import MAX_LEVEL, PALETTE, color_of
from .propagation import PropagationEngine
from .renderer import Renderer
from .scheduler import FrameScheduler
from .surface import ArraySurface, DisplaySurface
