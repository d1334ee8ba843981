"""
YOLOv8 object detector (anchor-free box regression).
"""

from __future__ import annotations

import logging
import math

import numpy as np

from config import YOLOV8_BOX_COLUMNS
from geometry import Rect

from .detector import Detector
from .filtering import build_result, resolve_label, suppress_candidates
from .model_config import DetectorType
from .types import DetectionCandidate

logger = logging.getLogger(__name__)


def _prediction_rows(outs: list[np.ndarray]) -> np.ndarray | None:
    """Return the (N, 4 + C) prediction matrix, or None on a bad shape."""
    if not outs:
        logger.debug("YOLOv8 produced no outputs")
        return None
    out = outs[0]
    if out.ndim != 3 or out.shape[0] != 1:
        logger.debug("YOLOv8 expects a (1, 4 + C, N) output, got %s", out.shape)
        return None
    rows = out[0].T
    if rows.shape[1] <= YOLOV8_BOX_COLUMNS:
        logger.debug("YOLOv8 output has no class columns: %s", out.shape)
        return None
    return rows


def decode_yolov8(rows: np.ndarray, confidence_threshold: float) -> list[DetectionCandidate]:
    """Decode YOLOv8 prediction rows into candidates.

    Args:
        rows: (N, 4 + C) matrix of (cx, cy, w, h, class scores...).
        confidence_threshold: Rows whose best class score is below this are skipped.

    Returns:
        Candidates in network-input coordinates with their best class id.
    """
    class_scores = rows[:, YOLOV8_BOX_COLUMNS:]
    class_ids = np.argmax(class_scores, axis=1)
    confidences = class_scores[np.arange(len(rows)), class_ids]

    candidates = []
    for idx in np.nonzero(confidences >= confidence_threshold)[0].tolist():
        cx, cy, w, h = (float(v) for v in rows[idx, :YOLOV8_BOX_COLUMNS])
        rect = Rect.from_xywh(
            float(math.floor(cx - w / 2)),
            float(math.floor(cy - h / 2)),
            float(math.floor(w)),
            float(math.floor(h)),
        )
        candidates.append(
            DetectionCandidate(
                rect=rect,
                confidence=float(confidences[idx]),
                class_id=int(class_ids[idx]),
            )
        )
    return candidates


class YOLOv8Detector(Detector):
    """YOLOv8 object detector."""

    detector_type = DetectorType.YOLOV8

    def extract(self) -> None:
        rows = _prediction_rows(self._buffers.outputs)
        if rows is None:
            return
        self._buffers.candidates.extend(
            decode_yolov8(rows, self._config.confidence_threshold)
        )

    def store(self) -> None:
        candidates = self._buffers.candidates
        self._buffers.kept.extend(
            suppress_candidates(candidates, self._config.nms_threshold)
        )
        for idx in self._buffers.kept:
            candidate = candidates[idx]
            label = resolve_label(candidate.class_id, self._config.classes)
            self._results.append(build_result(candidate, text=label))
