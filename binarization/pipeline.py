"""
binarization/pipeline.py
========================

Coordinator for a *single* image:  pyramids  →  threshold surface  →
binarization, plus the file-level wrapper used by the CLI.

The in-memory entry point `binarize` never touches its input; it works on a
private copy and returns it. `process_image` adds OpenCV decoding/encoding
around it and returns **None** when the file cannot be read so the CLI
summary doesn't count it.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Dict, Optional

import cv2
import numpy as np

from .binarizer import apply_threshold
from .config import (
    DEFAULT_CUTOFF,
    DEFAULT_GAIN,
    DEFAULT_HYPOTHESIS,
    DEFAULT_NOISE_THRESHOLD,
    DEFAULT_STRATEGY,
    MIN_LAYER_SIZE,
    OUTPUT_SUFFIX,
    ensure_output_dirs,
    get_binarization_parameters,
)
from .errors import LevelOutOfRange
from .grid_utils import layer_shapes
from .pyramid import Pyramid, PyramidType, as_rgb_grid
from .thresholds import Hypothesis, ThresholdSurface, build_threshold_surface

log = logging.getLogger(__name__)


def build_pyramids(image: np.ndarray) -> Dict[PyramidType, Pyramid]:
    """Min, max and average pyramids of *image*, keyed by type."""
    return {kind: Pyramid.from_image(image, kind) for kind in PyramidType}


def build_surface(
    pyramids: Dict[PyramidType, Pyramid],
    hypothesis: Hypothesis | str = DEFAULT_HYPOTHESIS,
    noise_threshold: float = DEFAULT_NOISE_THRESHOLD,
    strategy: str = DEFAULT_STRATEGY,
) -> ThresholdSurface:
    return build_threshold_surface(
        pyramids[PyramidType.MIN],
        pyramids[PyramidType.MAX],
        pyramids[PyramidType.AVERAGE],
        hypothesis,
        noise_threshold,
        strategy=strategy,
    )


def binarize(
    image: np.ndarray,
    noise_threshold: float = DEFAULT_NOISE_THRESHOLD,
    hypothesis: Hypothesis | str = DEFAULT_HYPOTHESIS,
    gain: float = DEFAULT_GAIN,
    cutoff: int = DEFAULT_CUTOFF,
    level: Optional[int] = None,
    strategy: str = DEFAULT_STRATEGY,
) -> np.ndarray:
    """
    Full pyramid binarization of one RGB image.

    Args:
        image: (H, W, 3) RGB or (H, W) grayscale array, at least 4x4.
        noise_threshold: min/max luminance spread that marks a real edge.
        hypothesis: 'local_average' or 'average_min_max'.
        gain: contrast stretch around the local threshold.
        cutoff: byte value the stretched luminance must exceed to be white.
        level: threshold level to apply; None picks the configured default,
            lowered to the deepest level this image has.
        strategy: refinement strategy, see `build_threshold_surface`.

    Returns:
        A new (H, W, 3) uint8 image holding only 0 and 255.

    Raises:
        InvalidDimensions: image is too small or not RGB/grayscale.
        LevelOutOfRange: *level* is not a built pyramid level.
    """
    rgb = as_rgb_grid(image)
    if level is None:
        level = get_binarization_parameters(rgb.shape)["level"]

    depth = len(layer_shapes(rgb.shape[0], rgb.shape[1], MIN_LAYER_SIZE))
    if not 0 <= level < depth:
        raise LevelOutOfRange(level, depth)

    pyramids = build_pyramids(rgb)

    log.info(
        "Binarizing %dx%d image: %d pyramid levels, applying level %d",
        rgb.shape[1],
        rgb.shape[0],
        depth,
        level,
    )
    surface = build_surface(pyramids, hypothesis, noise_threshold, strategy)

    out = np.clip(rgb, 0, 255).astype(np.uint8)
    return apply_threshold(out, surface.maps[level], level, gain, cutoff)


def process_image(
    image_path: str | pathlib.Path,
    out_dir: str | pathlib.Path | None = None,
    **params,
) -> Optional[pathlib.Path]:
    """
    Read, binarize and write one image file.

    Returns:
        • Path – where the binary PNG was written
        • None – if OpenCV could not decode the file
    """
    path = pathlib.Path(image_path)
    log.info("Processing image: %s", path.name)

    bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if bgr is None:
        log.error("OpenCV failed to read image: %s", path)
        return None

    # luminance weights are per channel, so hand the core RGB order
    rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
    binary = binarize(rgb, **params)

    target_dir = ensure_output_dirs(pathlib.Path(out_dir) if out_dir else None)
    out_file = target_dir / f"{path.stem}{OUTPUT_SUFFIX}"
    cv2.imwrite(str(out_file), cv2.cvtColor(binary, cv2.COLOR_RGB2BGR))

    log.debug("Binary image saved for %s", path.stem)
    return out_file
