"""
Fire Palette

Maps intensity levels [0, 36] to RGBA colors. The table is the classic
PSX Doom fire ramp, tweaked so the coolest levels fade to transparent:
black smoke -> deep red -> orange -> yellow -> white.

Level 0 is fully transparent, level 36 is pure opaque white.
"""

import numpy as np

from .errors import InternalConsistencyError


MAX_LEVEL = 36

# --- Palette Definition ---
# (r, g, b, a), one entry per intensity level. Level 35 steps straight
# from pale yellow to white at 36.

PALETTE = (
    (7, 7, 7, 0),
    (24, 11, 7, 38),
    (35, 13, 7, 64),
    (52, 17, 7, 102),
    (69, 20, 7, 140),
    (85, 24, 7, 179),
    (97, 26, 7, 204),
    (113, 30, 7, 242),
    (126, 34, 7, 255),
    (133, 37, 7, 255),
    (143, 42, 7, 255),
    (154, 47, 7, 255),
    (161, 50, 7, 255),
    (171, 55, 7, 255),
    (181, 60, 7, 255),
    (192, 65, 7, 255),
    (199, 68, 7, 255),
    (209, 73, 7, 255),
    (220, 77, 7, 255),
    (224, 83, 9, 255),
    (226, 97, 14, 255),
    (228, 110, 18, 255),
    (229, 119, 22, 255),
    (231, 132, 27, 255),
    (233, 146, 31, 255),
    (235, 159, 36, 255),
    (237, 168, 40, 255),
    (239, 182, 44, 255),
    (241, 195, 49, 255),
    (242, 204, 53, 255),
    (244, 217, 57, 255),
    (246, 231, 62, 255),
    (248, 236, 77, 255),
    (249, 240, 115, 255),
    (251, 244, 153, 255),
    (252, 248, 191, 255),
    (255, 255, 255, 255),
)


def _build_lut():
    lut = np.array(PALETTE, dtype=np.uint8)
    lut.setflags(write=False)
    return lut


_LUT = _build_lut()


def as_lut():
    """Return the read-only (37, 4) uint8 lookup table."""
    return _LUT


def color_of(level):
    """Return the (r, g, b, a) tuple for an intensity level.

    Raises InternalConsistencyError for levels outside [0, 36]; the grid
    never holds such a value unless the engine is broken.
    """
    if not 0 <= level <= MAX_LEVEL:
        raise InternalConsistencyError(
            f"Intensity level {level!r} outside palette range 0..{MAX_LEVEL}")
    return PALETTE[int(level)]


def apply_palette(cells, lut=None, out=None):
    """
    Map an intensity array to RGBA through the palette LUT.

    Args:
        cells: integer array of levels in [0, 36], any shape
        lut: (37, 4) uint8 lookup table (defaults to the fire palette)
        out: optional preallocated uint8 array of shape cells.shape + (4,)

    Returns:
        uint8 array of shape cells.shape + (4,)
    """
    if lut is None:
        lut = _LUT
    if out is None:
        return lut[cells]
    np.take(lut, cells, axis=0, out=out)
    return out
