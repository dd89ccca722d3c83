"""
Exceptions raised by the Doom fire engine.
"""


class FireError(Exception):
    """Base class for fire engine errors."""


class InvalidSurface(FireError):
    """The display surface could not be acquired or has no drawing context."""


class InternalConsistencyError(FireError):
    """An internal invariant was violated (out-of-range level, bad decay draw).

    Never expected at runtime: seeing one means there is a bug in the engine.
    """
