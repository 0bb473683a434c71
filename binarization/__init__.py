# binarization/__init__.py
"""
Adaptive binarization of unevenly lit images from min/max/average pyramids.
"""

from . import config
from .errors import EmptyReduction, InvalidDimensions, LevelOutOfRange
from .pipeline import binarize, process_image
from .cli import main as run_cli

__all__ = [
    "config",
    "binarize",
    "process_image",
    "run_cli",
    "InvalidDimensions",
    "LevelOutOfRange",
    "EmptyReduction",
]

import logging
log = logging.getLogger(__name__)
log.debug("Pyramid binarization package loaded")
