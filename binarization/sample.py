"""
binarization/sample.py
----------------------
RGB samples and the fixed luminance weighting every stage compares against.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .config import LUMA_B, LUMA_G, LUMA_R


@dataclass(frozen=True)
class Sample:
    """One RGB cell of a layer. Channels are floats so averaged layers keep
    their exact per-channel mean."""

    r: float
    g: float
    b: float

    @property
    def luminance(self) -> float:
        return LUMA_R * self.r + LUMA_G * self.g + LUMA_B * self.b

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)


def luminance(pixels: np.ndarray) -> np.ndarray:
    """
    Luminance of every sample in *pixels*.

    Parameters
    ----------
    pixels : np.ndarray
        Array whose last axis holds (r, g, b).

    Returns
    -------
    np.ndarray
        float64 array with the last axis reduced away.
    """
    px = np.asarray(pixels, dtype=np.float64)
    return LUMA_R * px[..., 0] + LUMA_G * px[..., 1] + LUMA_B * px[..., 2]
