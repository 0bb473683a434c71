"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from binarization.pipeline import build_pyramids
from binarization.pyramid import PyramidType


def make_image(height: int, width: int, rgb) -> np.ndarray:
    return np.full((height, width, 3), rgb, dtype=np.uint8)


def split_image() -> np.ndarray:
    """16x16, columns 0-4 luminance 10, columns 5-15 luminance 250 (red only)."""
    img = make_image(16, 16, (250, 0, 0))
    img[:, :5] = (10, 0, 0)
    return img


def pyramid_triple(image: np.ndarray):
    pyramids = build_pyramids(image)
    return (
        pyramids[PyramidType.MIN],
        pyramids[PyramidType.MAX],
        pyramids[PyramidType.AVERAGE],
    )


@pytest.fixture
def uniform_gray() -> np.ndarray:
    return make_image(8, 8, (128, 128, 128))


@pytest.fixture
def split() -> np.ndarray:
    return split_image()


@pytest.fixture
def random_image() -> np.ndarray:
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(29, 17, 3), dtype=np.uint8)
