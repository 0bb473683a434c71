"""
binarization/pyramid.py
-----------------------
Min / max / average reduction pyramids.

Every layer halves the previous one (rounding up) by reducing 2x2 blocks of
samples. Odd-sized layers are never padded: the source indices of the last
row/column are clamped instead, so the edge sample is reused.

All arrays are (height, width, 3) float64, indexed ``[y, x]``.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, List

import numpy as np

from .config import MIN_LAYER_SIZE
from .errors import EmptyReduction, InvalidDimensions
from .grid_utils import block_rows, halved
from .sample import Sample, luminance

log = logging.getLogger(__name__)

Reducer = Callable[[np.ndarray], np.ndarray]


# --------------------------------------------------------------------------- #
# 2x2 reducers – *block* is (n_samples, ..., 3), result is (..., 3)
# --------------------------------------------------------------------------- #
def _check_block(block: np.ndarray) -> None:
    if block.shape[0] == 0:
        raise EmptyReduction("2x2 reduction invoked on zero samples")


def reduce_min(block: np.ndarray) -> np.ndarray:
    """The sample with the lowest luminance (first one wins ties)."""
    _check_block(block)
    idx = np.argmin(luminance(block), axis=0)
    return np.take_along_axis(block, np.expand_dims(idx, (0, -1)), axis=0)[0]


def reduce_max(block: np.ndarray) -> np.ndarray:
    """The sample with the highest luminance (first one wins ties)."""
    _check_block(block)
    idx = np.argmax(luminance(block), axis=0)
    return np.take_along_axis(block, np.expand_dims(idx, (0, -1)), axis=0)[0]


def reduce_average(block: np.ndarray) -> np.ndarray:
    # per-channel mean, not the mean of the luminances
    _check_block(block)
    return block.mean(axis=0)


class PyramidType(enum.Enum):
    MIN = "min"
    MAX = "max"
    AVERAGE = "average"

    @property
    def reducer(self) -> Reducer:
        return _REDUCERS[self]


_REDUCERS = {
    PyramidType.MIN: reduce_min,
    PyramidType.MAX: reduce_max,
    PyramidType.AVERAGE: reduce_average,
}


# --------------------------------------------------------------------------- #
# Layer
# --------------------------------------------------------------------------- #
@dataclass
class Layer:
    """One resolution level of a pyramid."""

    index: int
    pixels: np.ndarray
    lum: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.lum = luminance(self.pixels)

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self.pixels.shape[:2]

    def sample(self, x: int, y: int) -> Sample:
        r, g, b = self.pixels[y, x]
        return Sample(float(r), float(g), float(b))


def as_rgb_grid(image: np.ndarray) -> np.ndarray:
    """
    Validate *image* and return it as a fresh (H, W, 3) float64 grid.

    Grayscale (H, W) input is replicated into three channels.
    """
    img = np.asarray(image)
    if img.ndim == 2:
        img = np.repeat(img[..., None], 3, axis=2)
    if img.ndim != 3 or img.shape[2] != 3:
        raise InvalidDimensions(f"expected (H, W, 3) RGB image, got shape {img.shape}")

    height, width = img.shape[:2]
    if height == 0 or width == 0:
        raise InvalidDimensions("image is zero-sized")
    if height < MIN_LAYER_SIZE or width < MIN_LAYER_SIZE:
        raise InvalidDimensions(
            f"image {width}x{height} is smaller than the minimum "
            f"{MIN_LAYER_SIZE}x{MIN_LAYER_SIZE}"
        )
    return img.astype(np.float64, copy=True)


def reduce_layer(layer: Layer, reducer: Reducer) -> Layer:
    """Build layer ``k+1`` from layer ``k`` by clamped 2x2 reduction."""
    rows0, rows1 = block_rows(halved(layer.height), layer.height)
    cols0, cols1 = block_rows(halved(layer.width), layer.width)
    px = layer.pixels

    block = np.stack(
        [
            px[np.ix_(rows0, cols0)],
            px[np.ix_(rows0, cols1)],
            px[np.ix_(rows1, cols0)],
            px[np.ix_(rows1, cols1)],
        ]
    )
    return Layer(index=layer.index + 1, pixels=reducer(block))


def build_layers(base: np.ndarray, reducer: Reducer) -> List[Layer]:
    """
    Reduce *base* repeatedly until the next layer would drop below
    MIN_LAYER_SIZE in either dimension.
    """
    layers = [Layer(index=0, pixels=as_rgb_grid(base))]
    while True:
        last = layers[-1]
        if halved(last.height) < MIN_LAYER_SIZE or halved(last.width) < MIN_LAYER_SIZE:
            break
        layers.append(reduce_layer(last, reducer))
    return layers


# --------------------------------------------------------------------------- #
# Pyramid
# --------------------------------------------------------------------------- #
@dataclass
class Pyramid:
    type: PyramidType
    layers: List[Layer]

    @classmethod
    def from_image(cls, image: np.ndarray, kind: PyramidType | str) -> "Pyramid":
        kind = PyramidType(kind)
        layers = build_layers(image, kind.reducer)
        log.debug(
            "%s pyramid: %d layers %s",
            kind.value,
            len(layers),
            [f"{l.width}x{l.height}" for l in layers],
        )
        return cls(type=kind, layers=layers)

    @property
    def depth(self) -> int:
        return len(self.layers)

    def __getitem__(self, index: int) -> Layer:
        return self.layers[index]
