"""Detect command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from pydantic import ValidationError
from tqdm import tqdm

from detection import detector_from_settings
from utils import load_image, save_annotated

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff", ".webp"}


def add_detect_subparser(subparsers: argparse._SubParsersAction) -> None:
    detect_parser = subparsers.add_parser(
        "detect",
        help="Run a detector on images",
    )
    detect_parser.add_argument(
        "settings",
        help="Detector settings file (JSON)",
    )
    detect_parser.add_argument(
        "images",
        nargs="+",
        help="Image files or directories of images",
    )
    detect_parser.add_argument(
        "--annotate",
        metavar="DIR",
        help="Write annotated copies of the images to DIR",
    )
    detect_parser.add_argument(
        "--output", "-o",
        metavar="FILE",
        help="Write results as JSON to FILE",
    )
    detect_parser.set_defaults(_cmd=cmd_detect)


def collect_images(sources: list[str]) -> list[Path]:
    """Expand files and directories into a sorted list of image paths."""
    images: list[Path] = []
    for source in sources:
        path = Path(source)
        if path.is_dir():
            images.extend(
                sorted(p for p in path.iterdir() if p.suffix.lower() in IMAGE_EXTENSIONS)
            )
        elif path.is_file():
            images.append(path)
        else:
            logger.warning("Skipping missing path: %s", path)
    return images


def cmd_detect(args: argparse.Namespace) -> int:
    try:
        detector = detector_from_settings(args.settings)
    except (OSError, ValueError, ValidationError, RuntimeError) as exc:
        logger.error("%s", exc)
        return 1

    images = collect_images(args.images)
    if not images:
        logger.error("No images found")
        return 1

    annotate_dir = Path(args.annotate) if args.annotate else None
    report: dict[str, list[dict]] = {}
    total = 0

    for image_path in tqdm(images, desc="Detecting"):
        try:
            image = load_image(image_path)
        except OSError as exc:
            logger.warning("Cannot read %s: %s", image_path, exc)
            continue

        detector.detect(image)
        results = detector.get_results()
        total += len(results)
        report[str(image_path)] = [r.to_dict() for r in results]
        logger.debug(
            "%s: %d results (%s)",
            image_path.name,
            len(results),
            ", ".join(f"{k}={v * 1000:.1f}ms" for k, v in detector.last_timings.items()),
        )

        if annotate_dir is not None:
            save_annotated(image, results, annotate_dir / image_path.name)

    if args.output:
        with open(args.output, "w") as f:
            json.dump(report, f, indent=2)
        logger.info("Results written to %s", args.output)

    logger.info("Images processed: %s", len(report))
    logger.info("Results found:    %s", total)
    return 0
