# binarization/cli.py
import argparse
import pathlib
import time
import json
import logging
from .pipeline import process_image
from .config import (
    DEFAULT_CUTOFF,
    DEFAULT_GAIN,
    DEFAULT_HYPOTHESIS,
    DEFAULT_NOISE_THRESHOLD,
    HYPOTHESES,
    IMAGE_GLOB_PATTERNS,
    LOG_DIR,
    REFINE_STRATEGIES,
    DEFAULT_STRATEGY,
    SUMMARY_FILENAME_PREFIX,
)

log = logging.getLogger(__name__)


def _collect_images(input_path: pathlib.Path) -> list:
    found = set()
    for pattern in IMAGE_GLOB_PATTERNS:
        found.update(input_path.glob(pattern))
    return sorted(found)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Binarize images with a pyramid-derived adaptive threshold"
    )
    parser.add_argument("--path", required=True, help="Image file or directory")
    parser.add_argument("--out", help="Output directory (defaults to outputs/)")
    parser.add_argument("--noise-threshold", type=float, default=DEFAULT_NOISE_THRESHOLD,
                        help="Min/max luminance spread treated as a real edge")
    parser.add_argument("--hypothesis", choices=HYPOTHESES, default=DEFAULT_HYPOTHESIS)
    parser.add_argument("--gain", type=float, default=DEFAULT_GAIN,
                        help="Contrast stretch around the local threshold")
    parser.add_argument("--cutoff", type=int, default=DEFAULT_CUTOFF,
                        help="Byte value a stretched pixel must exceed to be white")
    parser.add_argument("--level", type=int, default=None,
                        help="Threshold level to apply (default: adaptive)")
    parser.add_argument("--strategy", choices=REFINE_STRATEGIES, default=DEFAULT_STRATEGY)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    input_path = pathlib.Path(args.path)

    # Collect image paths
    if input_path.is_dir():
        image_paths = _collect_images(input_path)
        log.info("Processing %d images from directory: %s", len(image_paths), input_path)
    elif input_path.is_file():
        image_paths = [input_path]
        log.info("Processing single image: %s", input_path)
    else:
        log.error("Path not found: %s", input_path)
        return None

    if not image_paths:
        log.warning("No images matching %s found at: %s", IMAGE_GLOB_PATTERNS, input_path)
        return None

    params = {
        "noise_threshold": args.noise_threshold,
        "hypothesis": args.hypothesis,
        "gain": args.gain,
        "cutoff": args.cutoff,
        "level": args.level,
        "strategy": args.strategy,
    }

    # Process images
    results = {}
    start_time = time.time()

    for img_path in image_paths:
        try:
            out_file = process_image(img_path, args.out, **params)
            if out_file is not None:
                results[img_path.name] = str(out_file)
        except Exception as e:
            log.error("Error processing %s: %s", img_path.name, e, exc_info=True)

    # Save summary
    if not results:
        return None

    LOG_DIR.mkdir(parents=True, exist_ok=True)
    timestamp = time.strftime("%Y%m%d_%H%M%S")
    summary_path = LOG_DIR / f"{SUMMARY_FILENAME_PREFIX}{timestamp}.json"
    elapsed = time.time() - start_time
    summary = {"params": params, "elapsed_s": round(elapsed, 3), "outputs": results}
    summary_path.write_text(json.dumps(summary, indent=2))

    log.info("Summary: %d of %d images binarized, %.1fs elapsed",
             len(results), len(image_paths), elapsed)
    log.info("Summary saved to: %s", summary_path)
    return summary_path


if __name__ == "__main__":
    main()
