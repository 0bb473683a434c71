"""
binarization/binarizer.py
-------------------------
Contrast stretch around a threshold grid, then hard cutoff.
"""
from __future__ import annotations

import logging

import numpy as np

from .config import BLACK, LUMA_CLAMP_HIGH, LUMA_CLAMP_LOW, WHITE
from .errors import InvalidDimensions, LevelOutOfRange
from .grid_utils import halved
from .sample import luminance

log = logging.getLogger(__name__)


def _expected_shape(height: int, width: int, level: int) -> tuple[int, int]:
    for _ in range(level):
        height, width = halved(height), halved(width)
    return height, width


def apply_threshold(
    image: np.ndarray,
    threshold_grid: np.ndarray,
    level: int,
    gain: float,
    cutoff: int,
) -> np.ndarray:
    """
    Binarize *image* in place against the threshold grid of *level*.

    Every pixel (x, y) is compared with ``threshold_grid[y >> level, x >> level]``:
    its luminance is stretched by *gain* around that threshold, clamped to
    [0, 255], truncated to a byte and turned white when above *cutoff*.

    Parameters
    ----------
    image : np.ndarray
        (H, W, 3) uint8 RGB image; overwritten.
    threshold_grid : np.ndarray
        Threshold map shaped like pyramid layer *level*.
    level : int
        Pyramid level the grid belongs to.
    gain : float
        Contrast-stretch factor.
    cutoff : int
        Byte value; stretched luminance must exceed it to become white.

    Returns
    -------
    np.ndarray
        The same *image* object, now holding only 0 and 255 with r == g == b.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise InvalidDimensions(f"expected (H, W, 3) RGB image, got shape {image.shape}")
    if not 0 <= cutoff <= 255:
        raise ValueError(f"cutoff must be a byte value, got {cutoff}")
    if level < 0:
        raise LevelOutOfRange(level, 0)

    height, width = image.shape[:2]
    if threshold_grid.shape != _expected_shape(height, width, level):
        raise ValueError(
            f"threshold grid {threshold_grid.shape} does not match level {level} "
            f"of a {width}x{height} image"
        )

    ys = np.arange(height) >> level
    xs = np.arange(width) >> level
    t = threshold_grid[np.ix_(ys, xs)]

    stretched = gain * (luminance(image) - t) + t
    stretched = np.clip(stretched, LUMA_CLAMP_LOW, LUMA_CLAMP_HIGH).astype(np.uint8)
    binary = np.where(stretched > cutoff, WHITE, BLACK).astype(np.uint8)

    image[...] = binary[..., None]
    log.debug(
        "binarized %dx%d at level %d: %.1f%% white",
        width,
        height,
        level,
        100.0 * (binary == WHITE).mean(),
    )
    return image
