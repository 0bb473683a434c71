# binarization/grid_utils.py
#
# Index helpers shared by the pyramid reduction and the threshold refinement.
# Pure-NumPy (no cv2 dependency); both stages must map a coarse cell onto the
# same 2x2 block of finer cells, so the clamping rule lives only here.

from __future__ import annotations

from typing import List, Tuple

import numpy as np


# --------------------------------------------------------------------------- #
# 1. Edge-replicating successor index
# --------------------------------------------------------------------------- #
def clamped_successor(index, size: int):
    """
    ``index + 1`` unless that falls outside ``[0, size)``, else ``index``.

    Works element-wise on integer arrays as well as on plain ints.
    """
    if isinstance(index, np.ndarray):
        return np.where(index + 1 < size, index + 1, index)
    return index + 1 if index + 1 < size else index


def block_rows(out_size: int, in_size: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    First and second source index for every output index along one axis.

    ``out_size`` cells of a coarse axis map onto ``2k`` and its clamped
    successor in an axis of ``in_size`` cells.
    """
    first = 2 * np.arange(out_size)
    return first, clamped_successor(first, in_size)


def child_positions(w: int, h: int, width: int, height: int) -> List[Tuple[int, int]]:
    """
    The 2x2 block under coarse cell (w, h) inside a finer grid of
    ``width`` x ``height`` cells, in (top-left, top-right, bottom-left,
    bottom-right) order.

    On a 1-wide edge the clamped successor equals the base index, so the same
    position can appear twice; callers de-duplicate.
    """
    x0, y0 = 2 * w, 2 * h
    x1 = clamped_successor(x0, width)
    y1 = clamped_successor(y0, height)
    return [(x0, y0), (x1, y0), (x0, y1), (x1, y1)]


# --------------------------------------------------------------------------- #
# 2. Pyramid geometry
# --------------------------------------------------------------------------- #
def halved(size: int) -> int:
    """Ceiling half: ``size // 2 + size % 2``."""
    return size // 2 + size % 2


def layer_shapes(height: int, width: int, min_size: int) -> List[Tuple[int, int]]:
    """
    (height, width) of every pyramid layer, finest first.

    Returns an empty list when the base itself is smaller than *min_size*;
    otherwise halving continues while the next layer stays >= *min_size*.
    """
    if height < min_size or width < min_size:
        return []

    shapes = [(height, width)]
    while True:
        h, w = shapes[-1]
        nh, nw = halved(h), halved(w)
        if nh < min_size or nw < min_size:
            break
        shapes.append((nh, nw))
    return shapes
