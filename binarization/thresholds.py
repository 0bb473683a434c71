"""
binarization/thresholds.py
--------------------------
Coarse-to-fine adaptive threshold surface.

The coarsest pyramid level is seeded directly from the chosen hypothesis.
Each finer level is then estimated from its parent level with a smooth 2x
upsample (every parent cell blended 3:1 towards its lateral and vertical
neighbours) and, wherever the min/max spread of the finer level exceeds the
noise threshold, the estimate is replaced by the hypothesis value computed
at that finer cell. High spread means a real intensity transition, so the
threshold follows the local structure there instead of the interpolation.

A whole level is finished before any of its cells is used as a parent, so
every neighbour read during blending holds its final value.
"""

from __future__ import annotations

import collections
import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np

from .config import BLEND_MAIN, BLEND_SIDE, REFINE_STRATEGIES
from .grid_utils import block_rows, child_positions
from .pyramid import Layer, Pyramid

log = logging.getLogger(__name__)


class Hypothesis(enum.Enum):
    LOCAL_AVERAGE = "local_average"
    AVERAGE_MIN_MAX = "average_min_max"


@dataclass
class ThresholdSurface:
    """Per-level threshold grids, ``maps[k]`` shaped like pyramid layer ``k``."""

    hypothesis: Hypothesis
    noise_threshold: float
    maps: List[np.ndarray] = field(default_factory=list)

    @property
    def depth(self) -> int:
        return len(self.maps)

    @property
    def coarsest(self) -> int:
        return len(self.maps) - 1

    def __getitem__(self, level: int) -> np.ndarray:
        return self.maps[level]


@dataclass
class _Detector:
    """Read-only view of the three pyramids used while refining."""

    min_pyramid: Pyramid
    max_pyramid: Pyramid
    avg_pyramid: Pyramid
    hypothesis: Hypothesis
    noise_threshold: float

    def layers(self, level: int) -> Tuple[Layer, Layer, Layer]:
        return (
            self.min_pyramid.layers[level],
            self.max_pyramid.layers[level],
            self.avg_pyramid.layers[level],
        )

    def sharp(self, level: int, where=Ellipsis):
        """Hypothesis threshold at *where* (a cell, a mask, or everything)."""
        lo, hi, avg = self.layers(level)
        if self.hypothesis is Hypothesis.LOCAL_AVERAGE:
            return avg.lum[where]
        return (lo.lum[where] + hi.lum[where]) / 2.0

    def is_edge(self, level: int, where=Ellipsis):
        lo, hi, _ = self.layers(level)
        return np.abs(hi.lum[where] - lo.lum[where]) > self.noise_threshold


# --------------------------------------------------------------------------- #
# 1. Seeding
# --------------------------------------------------------------------------- #
def seed_coarsest(
    min_pyramid: Pyramid,
    max_pyramid: Pyramid,
    avg_pyramid: Pyramid,
    hypothesis: Hypothesis | str,
) -> np.ndarray:
    """Threshold grid of the coarsest level, computed purely from the pyramids."""
    det = _Detector(min_pyramid, max_pyramid, avg_pyramid, Hypothesis(hypothesis), 0.0)
    return np.array(det.sharp(min_pyramid.depth - 1), dtype=np.float64, copy=True)


# --------------------------------------------------------------------------- #
# 2. Refinement – single cell
# --------------------------------------------------------------------------- #
def _blend(v: float, grid: np.ndarray, w: int, h: int) -> Tuple[float, float, float, float]:
    """(left, right, top, bottom) estimates for coarse cell (w, h)."""
    height, width = grid.shape
    left = BLEND_MAIN * v + BLEND_SIDE * grid[h, w - 1] if w - 1 >= 0 else v
    right = BLEND_MAIN * v + BLEND_SIDE * grid[h, w + 1] if w + 1 < width else v
    top = BLEND_MAIN * v + BLEND_SIDE * grid[h - 1, w] if h - 1 >= 0 else v
    bottom = BLEND_MAIN * v + BLEND_SIDE * grid[h + 1, w] if h + 1 < height else v
    return left, right, top, bottom


def refine_cell(
    surface: ThresholdSurface, det: _Detector, level: int, w: int, h: int
) -> List[Tuple[int, int]]:
    """
    Write the 2x2 children of cell (w, h) of *level* into ``level - 1``.

    Returns the distinct child positions written, ready to be refined in turn.
    Level 0 has no children.
    """
    if level <= 0:
        return []

    grid = surface.maps[level]
    child = surface.maps[level - 1]
    v = float(grid[h, w])
    left, right, top, bottom = _blend(v, grid, w, h)
    estimates = ((left + top) / 2.0, (right + top) / 2.0,
                 (left + bottom) / 2.0, (right + bottom) / 2.0)

    # a 1-wide edge collapses positions; the later estimate wins
    written: Dict[Tuple[int, int], float] = {}
    for pos, value in zip(child_positions(w, h, child.shape[1], child.shape[0]), estimates):
        written[pos] = value

    for (cw, ch), value in written.items():
        if det.is_edge(level - 1, (ch, cw)):
            value = det.sharp(level - 1, (ch, cw))
        child[ch, cw] = value

    return list(written)


def _refine_queue(surface: ThresholdSurface, det: _Detector) -> None:
    top = surface.coarsest
    height, width = surface.maps[top].shape
    queue = collections.deque(
        (top, w, h) for h in range(height) for w in range(width)
    )
    # FIFO order finishes every cell of a level before its children are popped
    while queue:
        level, w, h = queue.popleft()
        for cw, ch in refine_cell(surface, det, level, w, h):
            queue.append((level - 1, cw, ch))


# --------------------------------------------------------------------------- #
# 3. Refinement – whole level at once
# --------------------------------------------------------------------------- #
def refine_level(surface: ThresholdSurface, det: _Detector, level: int) -> None:
    """Vectorised equivalent of calling `refine_cell` on every cell of *level*."""
    if level <= 0:
        return

    parent = surface.maps[level]
    child = surface.maps[level - 1]

    left = parent.copy()
    right = parent.copy()
    top = parent.copy()
    bottom = parent.copy()
    left[:, 1:] = BLEND_MAIN * parent[:, 1:] + BLEND_SIDE * parent[:, :-1]
    right[:, :-1] = BLEND_MAIN * parent[:, :-1] + BLEND_SIDE * parent[:, 1:]
    top[1:, :] = BLEND_MAIN * parent[1:, :] + BLEND_SIDE * parent[:-1, :]
    bottom[:-1, :] = BLEND_MAIN * parent[:-1, :] + BLEND_SIDE * parent[1:, :]

    rows0, rows1 = block_rows(parent.shape[0], child.shape[0])
    cols0, cols1 = block_rows(parent.shape[1], child.shape[1])

    # same write order as refine_cell, so collapsed edge positions agree
    child[np.ix_(rows0, cols0)] = (left + top) / 2.0
    child[np.ix_(rows0, cols1)] = (right + top) / 2.0
    child[np.ix_(rows1, cols0)] = (left + bottom) / 2.0
    child[np.ix_(rows1, cols1)] = (right + bottom) / 2.0

    edges = det.is_edge(level - 1)
    child[edges] = det.sharp(level - 1, edges)
    log.debug(
        "level %d: %d of %d cells gated by contrast", level - 1, int(edges.sum()), edges.size
    )


# --------------------------------------------------------------------------- #
# 4. Builder
# --------------------------------------------------------------------------- #
def build_threshold_surface(
    min_pyramid: Pyramid,
    max_pyramid: Pyramid,
    avg_pyramid: Pyramid,
    hypothesis: Hypothesis | str,
    noise_threshold: float,
    strategy: str = "vectorized",
) -> ThresholdSurface:
    """
    Seed the coarsest level and refine every finer level top-down.

    Parameters
    ----------
    min_pyramid, max_pyramid, avg_pyramid : Pyramid
        Pyramids of the same image; only read.
    hypothesis : Hypothesis | str
        'local_average' or 'average_min_max'.
    noise_threshold : float
        Min/max luminance spread above which a cell counts as an edge.
    strategy : str
        'vectorized' (whole level per step) or 'queue' (cell work queue).
        Both produce the same maps.

    Returns
    -------
    ThresholdSurface
    """
    hypothesis = Hypothesis(hypothesis)
    if strategy not in REFINE_STRATEGIES:
        raise ValueError(f"Unknown strategy: {strategy}")
    if not noise_threshold > 0:
        raise ValueError(f"noise_threshold must be > 0, got {noise_threshold}")

    shapes = [l.shape for l in min_pyramid.layers]
    for other in (max_pyramid, avg_pyramid):
        if [l.shape for l in other.layers] != shapes:
            raise ValueError("pyramids were not built from the same image")

    surface = ThresholdSurface(
        hypothesis=hypothesis,
        noise_threshold=float(noise_threshold),
        maps=[np.zeros(s, dtype=np.float64) for s in shapes],
    )
    det = _Detector(min_pyramid, max_pyramid, avg_pyramid, hypothesis, float(noise_threshold))

    surface.maps[-1] = seed_coarsest(min_pyramid, max_pyramid, avg_pyramid, hypothesis)

    if strategy == "queue":
        _refine_queue(surface, det)
    else:
        for level in range(surface.coarsest, 0, -1):
            refine_level(surface, det, level)

    log.debug(
        "threshold surface (%s, noise=%.2f): %d levels",
        hypothesis.value,
        noise_threshold,
        surface.depth,
    )
    return surface
