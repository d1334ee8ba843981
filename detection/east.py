"""
EAST text detector (per-cell rotated box regression).

The network predicts, for every cell of a stride-4 grid, a text score and a
geometry vector: distances from the cell anchor to the top, right, bottom and
left edges of a rotated box plus its rotation angle in radians.
"""

from __future__ import annotations

import logging

import numpy as np

from config import EAST_STRIDE
from geometry import RotatedRect

from .detector import Detector
from .filtering import build_result, suppress_candidates
from .model_config import DetectorType
from .types import DetectionCandidate

logger = logging.getLogger(__name__)


def _split_outputs(outs: list[np.ndarray]) -> tuple[np.ndarray, np.ndarray] | None:
    """Return (geometry, scores), or None if the outputs have an unexpected shape.

    The network may report its two outputs in either order; they are told
    apart by channel count (5 for geometry, 1 for scores).
    """
    if len(outs) != 2:
        logger.debug("EAST expects 2 outputs, got %d", len(outs))
        return None
    geometry, scores = outs
    if geometry.ndim != 4 or scores.ndim != 4:
        logger.debug("EAST outputs must be 4-D, got %s and %s", geometry.shape, scores.shape)
        return None
    if geometry.shape[1] == 1 and scores.shape[1] == 5:
        geometry, scores = scores, geometry
    if geometry.shape[0] != 1 or scores.shape[0] != 1:
        logger.debug("EAST outputs must have batch 1")
        return None
    if geometry.shape[1] != 5 or scores.shape[1] != 1:
        logger.debug(
            "EAST expects 5 geometry and 1 score channels, got %d and %d",
            geometry.shape[1],
            scores.shape[1],
        )
        return None
    if geometry.shape[2:] != scores.shape[2:]:
        logger.debug("EAST grid mismatch: %s vs %s", geometry.shape[2:], scores.shape[2:])
        return None
    if geometry.dtype != np.float32 or scores.dtype != np.float32:
        logger.debug("EAST outputs must be float32, got %s and %s", geometry.dtype, scores.dtype)
        return None
    return geometry, scores


def decode_east(
    geometry: np.ndarray,
    scores: np.ndarray,
    confidence_threshold: float,
    stride: float = EAST_STRIDE,
) -> list[DetectionCandidate]:
    """Decode EAST geometry and score maps into candidates.

    Args:
        geometry: (1, 5, H, W) distances to top/right/bottom/left and angle.
        scores: (1, 1, H, W) text scores.
        confidence_threshold: Cells scoring below this are skipped.
        stride: Network-input pixels per grid cell.

    Returns:
        Candidates in network-input coordinates, in row-major cell order.
    """
    score_map = scores[0, 0]
    ys, xs = np.nonzero(score_map >= confidence_threshold)

    candidates = []
    for y, x in zip(ys.tolist(), xs.tolist()):
        top, right, bottom, left, angle = (float(v) for v in geometry[0, :, y, x])
        cos_a = np.cos(angle)
        sin_a = np.sin(angle)
        h = top + bottom
        w = right + left

        offset_x = x * stride + cos_a * right + sin_a * bottom
        offset_y = y * stride - sin_a * right + cos_a * bottom
        p1 = (offset_x - sin_a * h, offset_y - cos_a * h)
        p3 = (offset_x - cos_a * w, offset_y + sin_a * w)
        center = ((p1[0] + p3[0]) / 2, (p1[1] + p3[1]) / 2)

        rect = RotatedRect(center[0], center[1], w, h, 0.0).bounding_rect()
        candidates.append(
            DetectionCandidate(
                rect=rect,
                confidence=float(score_map[y, x]),
                angle=-angle * 180.0 / np.pi,
            )
        )
    return candidates


class EASTDetector(Detector):
    """EAST scene text detector."""

    detector_type = DetectorType.EAST

    def extract(self) -> None:
        maps = _split_outputs(self._buffers.outputs)
        if maps is None:
            return
        geometry, scores = maps
        self._buffers.candidates.extend(
            decode_east(geometry, scores, self._config.confidence_threshold)
        )

    def store(self) -> None:
        candidates = self._buffers.candidates
        self._buffers.kept.extend(
            suppress_candidates(candidates, self._config.nms_threshold)
        )
        for idx in self._buffers.kept:
            self._results.append(build_result(candidates[idx]))
