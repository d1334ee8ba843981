"""
Geometry correction: map candidates from network-input space onto the image.
"""

from __future__ import annotations

import dataclasses

from geometry import clamp_rect
from preprocessing.transform import BlobTransform

from .types import DetectionCandidate


def correct_candidate(
    candidate: DetectionCandidate,
    transform: BlobTransform,
) -> DetectionCandidate | None:
    """Map one candidate onto the image and clamp it to the image bounds.

    Returns:
        The corrected candidate, or None if nothing of it lies inside the image.
    """
    width, height = transform.image_size
    rect = clamp_rect(transform.map_rect(candidate.rect), width, height)
    if rect.width <= 0 or rect.height <= 0:
        return None
    return dataclasses.replace(candidate, rect=rect)


def correct_candidates(
    candidates: list[DetectionCandidate],
    transform: BlobTransform,
) -> None:
    """Correct a candidate list in place, dropping degenerate boxes.

    Angle, confidence and class id travel with each candidate, so a dropped
    box takes its parallel attributes with it.
    """
    corrected = []
    for candidate in candidates:
        fixed = correct_candidate(candidate, transform)
        if fixed is not None:
            corrected.append(fixed)
    candidates[:] = corrected
