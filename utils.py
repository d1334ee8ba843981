"""Shared utility functions for loading images and rendering detection results."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import cv2
import numpy as np
from PIL import Image, ImageOps

from config import (
    ANNOTATION_COLOR,
    ANNOTATION_FONT_SCALE,
    ANNOTATION_THICKNESS,
    ROI_PADDING_RATIO,
)

if TYPE_CHECKING:
    from detection.types import Result

logger = logging.getLogger(__name__)


def load_image(path: Path | str) -> np.ndarray:
    """Load an image file as a BGR uint8 array.

    EXIF orientation is applied so the array matches what viewers show.
    Channel order follows OpenCV's convention; the detectors' swap-RB flag
    assumes BGR input.
    """
    with Image.open(path) as img:
        img = ImageOps.exif_transpose(img)
        if img.mode != "RGB":
            img = img.convert("RGB")
        rgb = np.array(img)
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)


def result_label(result: Result) -> str:
    """Short text label for a result: text and/or confidence."""
    if result.text:
        if result.confidence > 0:
            return f"{result.text} ({result.confidence:.0%})"
        return result.text
    return f"{result.confidence:.0%}"


def draw_results(
    image: np.ndarray,
    results: list[Result],
    color: tuple[int, int, int] = ANNOTATION_COLOR,
    thickness: int = ANNOTATION_THICKNESS,
    draw_labels: bool = True,
) -> np.ndarray:
    """Draw rotated result boxes (and labels) onto a copy of image.

    Args:
        image: BGR or grayscale image the results refer to.
        results: Results in image pixel coordinates.
        color: Line color (BGR).
        thickness: Line thickness in pixels.
        draw_labels: Also draw text/confidence above each box.

    Returns:
        Annotated BGR image.
    """
    if image.ndim == 2:
        canvas = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    else:
        canvas = image.copy()

    for result in results:
        pts = np.array(result.rotated.points(), dtype=np.float32)
        pts = np.round(pts).astype(np.int32).reshape((-1, 1, 2))
        cv2.polylines(canvas, [pts], isClosed=True, color=color, thickness=thickness)

        if not draw_labels:
            continue

        label = result_label(result)
        font = cv2.FONT_HERSHEY_SIMPLEX
        (text_width, text_height), _ = cv2.getTextSize(
            label, font, ANNOTATION_FONT_SCALE, thickness
        )
        x_min = int(pts[:, 0, 0].min())
        y_min = int(pts[:, 0, 1].min())
        label_y = max(y_min - 5, text_height + 5)
        cv2.rectangle(
            canvas,
            (x_min, label_y - text_height - 5),
            (x_min + text_width + 6, label_y + 3),
            color,
            -1,
        )
        cv2.putText(
            canvas, label,
            (x_min + 3, label_y),
            font, ANNOTATION_FONT_SCALE, (0, 0, 0), thickness,
        )

    return canvas


def crop_rotated_roi(
    image: np.ndarray,
    result: Result,
    padding_ratio: float | None = None,
) -> np.ndarray:
    """Extract the upright crop of a (possibly rotated) result box.

    The image is rotated around the box center by the result angle, with the
    box moved to the image center, then the unrotated box (plus padding) is
    cut out and snapped to the image bounds.

    Args:
        image: Source image the result refers to.
        result: Result in image pixel coordinates.
        padding_ratio: Extra margin per side as a fraction of box size
            (defaults to ROI_PADDING_RATIO).

    Returns:
        The cropped region (may be empty if the box lies outside the image).
    """
    if padding_ratio is None:
        padding_ratio = ROI_PADDING_RATIO

    img_h, img_w = image.shape[:2]
    box = result.rotated
    box_w = box.width * (1 + 2 * padding_ratio)
    box_h = box.height * (1 + 2 * padding_ratio)

    if result.angle == 0:
        rotated = image
        cx, cy = box.cx, box.cy
    else:
        center = (0.5 * (img_w - 1), 0.5 * (img_h - 1))
        rot = cv2.getRotationMatrix2D((box.cx, box.cy), result.angle, 1.0)
        rot[0, 2] += center[0] - box.cx
        rot[1, 2] += center[1] - box.cy
        rotated = cv2.warpAffine(
            image, rot, (img_w, img_h),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_REPLICATE,
        )
        cx, cy = center

    x1 = max(0, int(np.floor(cx - box_w / 2)))
    y1 = max(0, int(np.floor(cy - box_h / 2)))
    x2 = min(img_w, int(np.ceil(cx + box_w / 2)))
    y2 = min(img_h, int(np.ceil(cy + box_h / 2)))
    return rotated[y1:max(y1, y2), x1:max(x1, x2)]


def save_annotated(
    image: np.ndarray,
    results: list[Result],
    output_path: Path,
) -> bool:
    """Draw results onto image and write it to output_path.

    Returns:
        True on success.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    annotated = draw_results(image, results)
    if not cv2.imwrite(str(output_path), annotated):
        logger.error("Failed to write annotated image: %s", output_path)
        return False
    return True
