"""
binarization/errors.py
----------------------
Exceptions raised by the binarization core. All derive from ValueError so a
caller that only knows the OpenCV-style ``ValueError`` contract still catches
them.
"""

from __future__ import annotations


class BinarizationError(ValueError):
    """Base class for every failure reported by the core."""


class InvalidDimensions(BinarizationError):
    """Image is zero-sized, not RGB, or smaller than the minimum layer size."""


class LevelOutOfRange(BinarizationError):
    """Requested threshold level was not built for this image."""

    def __init__(self, level: int, depth: int):
        super().__init__(
            f"level {level} out of range: pyramid has {depth} layer(s) "
            f"(valid levels 0..{depth - 1})"
        )
        self.level = level
        self.depth = depth


class EmptyReduction(BinarizationError, RuntimeError):
    """A 2x2 reducer was handed no samples – an internal invariant broke."""
