"""
binarization/config.py  –  central configuration & logging

1.  Luminance weights and pyramid geometry shared by every stage
2.  Default tuning knobs (noise floor, gain, cutoff, operative level)
3.  Returns the knobs for a given image through `get_binarization_parameters`
4.  Output tree is created lazily by `ensure_output_dirs`
"""

from __future__ import annotations

import logging
import os
import pathlib as _pl
from typing import Dict, Any

from .grid_utils import layer_shapes

# --------------------------------------------------------------------------- #
# I/O paths – project root is the parent of the package directory
# --------------------------------------------------------------------------- #
ROOT = _pl.Path(__file__).resolve().parents[1]
OUT_DIR = ROOT / "outputs"
LOG_DIR = OUT_DIR / "logs"

IMAGE_GLOB_PATTERNS = ("*.png", "*.jpg", "*.jpeg", "*.bmp", "*.tif", "*.tiff")
OUTPUT_SUFFIX = "_bin.png"
SUMMARY_FILENAME_PREFIX = "summary_"


def ensure_output_dirs(out_dir: _pl.Path | None = None) -> _pl.Path:
    """Create *out_dir* (default OUT_DIR) on first use and return it."""
    target = _pl.Path(out_dir) if out_dir is not None else OUT_DIR
    target.mkdir(parents=True, exist_ok=True)
    return target


# --------------------------------------------------------------------------- #
# Luminance
# --------------------------------------------------------------------------- #
# Not a perceptual luma: downstream thresholds are tuned against these weights.
LUMA_R: float = 1.0
LUMA_G: float = 4.5907
LUMA_B: float = 0.0601

# output clamp applied after the contrast stretch
LUMA_CLAMP_LOW : float = 0.0
LUMA_CLAMP_HIGH: float = 255.0

# ---- Pyramid geometry ---------------------------------------------------- #
MIN_LAYER_SIZE: int = 4      # no layer narrower/shorter than this is built

# ---- Threshold refinement ------------------------------------------------ #
BLEND_MAIN: float = 0.75     # weight of the parent cell in a child estimate
BLEND_SIDE: float = 0.25     # weight of the neighbouring parent cell

HYPOTHESES = ("local_average", "average_min_max")
REFINE_STRATEGIES = ("vectorized", "queue")

# ---- Defaults (values the binarizer was tuned with) ---------------------- #
DEFAULT_NOISE_THRESHOLD: float = 5.0
DEFAULT_HYPOTHESIS     : str   = "local_average"
DEFAULT_GAIN           : float = 9.0
DEFAULT_CUTOFF         : int   = 240
DEFAULT_LEVEL          : int   = 3
DEFAULT_STRATEGY       : str   = "vectorized"

# binary output values
BLACK: int = 0
WHITE: int = 255


# --------------------------------------------------------------------------- #
# Logging
# --------------------------------------------------------------------------- #
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )


setup_logging()

# --------------------------------------------------------------------------- #
# Parameter provider
# --------------------------------------------------------------------------- #
def get_binarization_parameters(img_shape: tuple[int, ...]) -> Dict[str, Any]:
    """
    Return every numeric knob the pipeline needs for an image of *img_shape*.

    Returns a dict that *always* contains:
        • noise_threshold   (float)
        • hypothesis        (str)
        • gain / cutoff     (float / int)
        • level             (int, never deeper than the image's pyramid)
        • strategy          (str)

    Small images build fewer pyramid layers, so the default level is lowered
    to the coarsest level that actually exists.
    """
    height, width = img_shape[:2]
    depth = len(layer_shapes(height, width, MIN_LAYER_SIZE))

    return {
        "noise_threshold": DEFAULT_NOISE_THRESHOLD,
        "hypothesis": DEFAULT_HYPOTHESIS,
        "gain": DEFAULT_GAIN,
        "cutoff": DEFAULT_CUTOFF,
        "level": max(0, min(DEFAULT_LEVEL, depth - 1)),
        "strategy": DEFAULT_STRATEGY,
    }
