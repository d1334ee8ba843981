"""
Detection filtering and result assembly.

Non-maximum suppression shared by the box regressors (delegated to
``cv2.dnn.NMSBoxes``), and the conversion of surviving candidates into
Results.
"""

from __future__ import annotations

from collections.abc import Sequence

import cv2
import numpy as np

from geometry import Rect

from .types import DetectionCandidate, Result


def nms_indices(
    rects: Sequence[Rect],
    confidences: Sequence[float],
    nms_threshold: float,
) -> list[int]:
    """Greedy non-maximum suppression via ``cv2.dnn.NMSBoxes``.

    Candidates are visited in order of decreasing confidence (ties keep
    their input order). A candidate is kept unless its IoU with an already
    kept candidate exceeds nms_threshold. No score filtering happens here;
    candidates arrive already thresholded.

    Args:
        rects: Candidate boxes.
        confidences: Score per box, parallel to rects.
        nms_threshold: IoU above which the lower-scored box is suppressed.

    Returns:
        Indices of kept boxes, highest confidence first.
    """
    if len(rects) != len(confidences):
        raise ValueError(
            f"rects and confidences differ in length: {len(rects)} != {len(confidences)}"
        )
    if not rects:
        return []

    boxes = [tuple(float(v) for v in rect.to_xywh()) for rect in rects]
    scores = [float(c) for c in confidences]
    indices = cv2.dnn.NMSBoxes(
        boxes,
        scores,
        score_threshold=min(scores) - 1.0,
        nms_threshold=float(nms_threshold),
    )
    kept: list[int] = []
    for idx in indices:
        i = int(idx[0]) if isinstance(idx, (list, tuple, np.ndarray)) else int(idx)
        kept.append(i)
    return kept


def suppress_candidates(
    candidates: list[DetectionCandidate],
    nms_threshold: float,
) -> list[int]:
    """Run class-agnostic NMS over candidates and return the kept indices."""
    return nms_indices(
        [c.rect for c in candidates],
        [c.confidence for c in candidates],
        nms_threshold,
    )


def build_result(candidate: DetectionCandidate, text: str | None = None) -> Result:
    """Assemble a Result from a corrected candidate.

    Confidence is clipped to [0, 1].
    """
    confidence = min(max(float(candidate.confidence), 0.0), 1.0)
    return Result(
        rect=candidate.rect,
        angle=float(candidate.angle),
        confidence=confidence,
        text=text if text is not None else candidate.text,
    )


def resolve_label(class_id: int | None, classes: Sequence[str]) -> str | None:
    """Map a class id to its label, falling back to the id itself."""
    if class_id is None:
        return None
    if 0 <= class_id < len(classes):
        return classes[class_id]
    return str(class_id)
