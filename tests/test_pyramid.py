"""Tests for min / max / average pyramid construction."""

from __future__ import annotations

import math

import numpy as np
import pytest

from binarization.errors import EmptyReduction, InvalidDimensions
from binarization.pyramid import (
    Pyramid,
    PyramidType,
    reduce_average,
    reduce_max,
    reduce_min,
)
from binarization.sample import Sample, luminance
from conftest import make_image, pyramid_triple


BLOCK = np.array(
    [(10, 0, 0), (0, 10, 0), (0, 0, 10), (5, 5, 5)],
    dtype=np.float64,
)


def test_sample_luminance_uses_fixed_weights():
    assert Sample(1, 1, 1).luminance == pytest.approx(5.6508)
    assert Sample(0, 10, 0).luminance == pytest.approx(45.907)
    assert luminance(np.array([0.0, 0.0, 100.0])) == pytest.approx(6.01)


def test_reduce_min_picks_darkest_sample():
    assert reduce_min(BLOCK).tolist() == [0, 0, 10]


def test_reduce_max_picks_brightest_sample():
    assert reduce_max(BLOCK).tolist() == [0, 10, 0]


def test_reduce_average_is_per_channel_mean():
    assert reduce_average(BLOCK).tolist() == [3.75, 3.75, 3.75]


@pytest.mark.parametrize("reducer", [reduce_min, reduce_max, reduce_average])
def test_reducers_reject_empty_block(reducer):
    with pytest.raises(EmptyReduction):
        reducer(np.empty((0, 2, 2, 3)))


def test_layer_shapes_halve_rounding_up(random_image):
    pyr = Pyramid.from_image(random_image, PyramidType.MIN)

    assert pyr.layers[0].shape == random_image.shape[:2]
    for prev, nxt in zip(pyr.layers, pyr.layers[1:]):
        assert nxt.width == math.ceil(prev.width / 2)
        assert nxt.height == math.ceil(prev.height / 2)
        assert nxt.index == prev.index + 1


def test_construction_stops_before_layers_get_too_small(random_image):
    pyr = Pyramid.from_image(random_image, "max")
    last = pyr.layers[-1]

    assert all(l.width >= 4 and l.height >= 4 for l in pyr.layers)
    assert math.ceil(last.width / 2) < 4 or math.ceil(last.height / 2) < 4
    assert pyr.depth <= int(math.log2(min(random_image.shape[:2]))) + 1
    assert [l.shape for l in pyr.layers] == [(29, 17), (15, 9), (8, 5)]


def test_min_average_max_ordering_holds_everywhere(random_image):
    lo, hi, avg = pyramid_triple(random_image)

    for k in range(lo.depth):
        assert np.all(lo[k].lum <= avg[k].lum + 1e-9)
        assert np.all(avg[k].lum <= hi[k].lum + 1e-9)


def test_odd_edge_replicates_last_row_and_column():
    img = make_image(7, 7, (0, 0, 0))
    img[6, 6] = (200, 0, 0)

    avg = Pyramid.from_image(img, PyramidType.AVERAGE)
    hi = Pyramid.from_image(img, PyramidType.MAX)

    assert avg[1].shape == (4, 4)
    # the corner cell only ever sees the corner pixel
    assert avg[1].sample(3, 3) == Sample(200.0, 0.0, 0.0)
    assert hi[1].sample(3, 3).luminance == pytest.approx(200.0)
    assert hi[1].sample(2, 3).luminance == 0.0


def test_layer_zero_is_a_private_copy(random_image):
    img = random_image.copy()
    lo, hi, avg = pyramid_triple(img)

    img[...] = 0
    assert np.array_equal(lo[0].pixels, random_image.astype(np.float64))
    assert lo[0].pixels is not hi[0].pixels
    assert not np.shares_memory(lo[0].pixels, avg[0].pixels)


def test_grayscale_input_is_replicated_to_rgb():
    gray = np.full((8, 8), 40, dtype=np.uint8)
    pyr = Pyramid.from_image(gray, PyramidType.AVERAGE)
    assert pyr[0].sample(0, 0) == Sample(40.0, 40.0, 40.0)


@pytest.mark.parametrize(
    "shape",
    [(0, 0, 3), (3, 10, 3), (10, 3, 3), (8, 8, 4), (8,)],
)
def test_invalid_dimensions_fail_fast(shape):
    with pytest.raises(InvalidDimensions):
        Pyramid.from_image(np.zeros(shape, dtype=np.uint8), PyramidType.MIN)
