"""
CRAFT text detector (character region and affinity heatmaps).

The network outputs two half-resolution heatmaps: a region score (how
likely a pixel is the center of a character) and an affinity ("link")
score between neighbouring characters. Words are recovered as connected
components of the combined masks.
"""

from __future__ import annotations

import logging
import math

import cv2
import numpy as np

from config import CRAFT_DILATION_FACTOR, CRAFT_MIN_COMPONENT_AREA, CRAFT_OUTPUT_SCALE
from geometry import RotatedRect

from .detector import Detector
from .filtering import build_result
from .model_config import DetectorType
from .types import DetectionCandidate

logger = logging.getLogger(__name__)


def _score_maps(outs: list[np.ndarray]) -> tuple[np.ndarray, np.ndarray] | None:
    """Return (text, link) maps from the first output, or None on a bad shape.

    Any further output (the backbone feature map) is ignored.
    """
    if not outs:
        logger.debug("CRAFT produced no outputs")
        return None
    scores = outs[0]
    if scores.ndim != 4 or scores.shape[0] != 1 or scores.shape[3] != 2:
        logger.debug("CRAFT expects a (1, H, W, 2) output, got %s", scores.shape)
        return None
    if scores.dtype != np.float32:
        logger.debug("CRAFT output must be float32, got %s", scores.dtype)
        return None
    return scores[0, :, :, 0], scores[0, :, :, 1]


def _dilation_iterations(area: int, w: int, h: int) -> int:
    return int(math.floor(CRAFT_DILATION_FACTOR * math.sqrt(area * min(w, h) / (w * h))))


def decode_craft(
    text_map: np.ndarray,
    link_map: np.ndarray,
    text_threshold: float,
    link_threshold: float,
    low_text: float,
    output_scale: float = CRAFT_OUTPUT_SCALE,
) -> list[DetectionCandidate]:
    """Decode CRAFT heatmaps into word boxes.

    Args:
        text_map: (H, W) character region scores.
        link_map: (H, W) affinity scores.
        text_threshold: Minimum peak region score for a component.
        link_threshold: Affinity mask threshold.
        low_text: Region mask threshold.
        output_scale: Network-input pixels per heatmap pixel.

    Returns:
        Candidates in network-input coordinates with confidence 0.0.
    """
    text_mask = text_map > low_text
    link_mask = link_map > link_threshold
    link_only = link_mask & ~text_mask

    combined = np.clip(text_mask.astype(np.uint8) + link_mask.astype(np.uint8), 0, 1)
    n_labels, labels, stats, _ = cv2.connectedComponentsWithStats(
        combined, connectivity=4, ltype=cv2.CV_32S
    )

    rows, cols = text_map.shape
    candidates = []
    # label 0 is the background
    for label in range(1, n_labels):
        area = int(stats[label, cv2.CC_STAT_AREA])
        if area < CRAFT_MIN_COMPONENT_AREA:
            continue

        component = labels == label
        if float(text_map[component].max()) < text_threshold:
            continue

        segmap = np.zeros(text_map.shape, dtype=np.uint8)
        segmap[component] = 255
        segmap[link_only] = 0

        x = int(stats[label, cv2.CC_STAT_LEFT])
        y = int(stats[label, cv2.CC_STAT_TOP])
        w = int(stats[label, cv2.CC_STAT_WIDTH])
        h = int(stats[label, cv2.CC_STAT_HEIGHT])
        niter = _dilation_iterations(area, w, h)
        sx = max(x - niter, 0)
        sy = max(y - niter, 0)
        ex = min(x + w + niter + 1, cols)
        ey = min(y + h + niter + 1, rows)
        kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (1 + niter, 1 + niter))
        segmap[sy:ey, sx:ex] = cv2.dilate(segmap[sy:ey, sx:ex], kernel)

        contours, _ = cv2.findContours(segmap, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        for contour in contours:
            (cx, cy), (bw, bh), angle = cv2.minAreaRect(contour)
            cx, cy = cx * output_scale, cy * output_scale
            bw, bh = bw * output_scale, bh * output_scale
            if bw < bh:
                bw, bh = bh, bw
                angle -= 90.0
            rect = RotatedRect(cx, cy, bw, bh, 0.0).bounding_rect()
            candidates.append(DetectionCandidate(rect=rect, confidence=0.0, angle=float(angle)))
    return candidates


class CRAFTDetector(Detector):
    """CRAFT scene text detector."""

    detector_type = DetectorType.CRAFT

    def extract(self) -> None:
        maps = _score_maps(self._buffers.outputs)
        if maps is None:
            return
        text_map, link_map = maps
        self._buffers.candidates.extend(
            decode_craft(
                text_map,
                link_map,
                self._config.text_threshold,
                self._config.link_threshold,
                self._config.low_text,
            )
        )

    def store(self) -> None:
        for candidate in self._buffers.candidates:
            self._results.append(build_result(candidate))
