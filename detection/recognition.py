"""
Two-stage text reading: detect word boxes, then recognize each crop.
"""

from __future__ import annotations

import logging

import numpy as np

from utils import crop_rotated_roi

from .detector import Detector
from .sequence import SequenceRecognizer
from .types import Result

logger = logging.getLogger(__name__)


def read_text(
    detector: Detector,
    recognizer: SequenceRecognizer,
    image: np.ndarray,
    padding_ratio: float | None = None,
) -> list[Result]:
    """Detect text boxes in image and attach recognized text to each.

    Boxes whose crop is empty or unreadable are dropped. The detector's
    confidence is replaced by the recognizer's.

    Args:
        detector: Initialized box detector (EAST, CRAFT, YOLOv8).
        recognizer: Initialized sequence recognizer.
        image: Image to read.
        padding_ratio: Margin added around each box before recognition.

    Returns:
        Results in detection order with their text set.
    """
    if not detector.detect(image):
        return []

    read: list[Result] = []
    for box in detector.get_results():
        crop = crop_rotated_roi(image, box, padding_ratio=padding_ratio)
        if crop.size == 0:
            continue
        if not recognizer.detect(crop):
            continue
        recognized = recognizer.get_results()[0]
        read.append(
            Result(
                rect=box.rect,
                angle=box.angle,
                confidence=recognized.confidence,
                text=recognized.text,
            )
        )

    logger.debug("Read %d of %d detected boxes", len(read), len(detector.get_results()))
    return read
