"""
Sequence recognizer (PARSeq-style greedy decoding).

The network reads a cropped word image and outputs, for each of a fixed
number of character positions, logits over the character set plus an
end-of-sequence class at index 0.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from config import PARSEQ_POSITIONS
from geometry import Rect

from .detector import Detector
from .filtering import build_result
from .model_config import DetectorType
from .types import DetectionCandidate

logger = logging.getLogger(__name__)

# Output class index of the end-of-sequence token
EOS_INDEX = 0


def _logits(
    outs: list[np.ndarray],
    charset: Sequence[str],
    positions: int = PARSEQ_POSITIONS,
) -> np.ndarray | None:
    """Return the (P, C + 1) logits matrix, or None on a bad shape."""
    if not outs:
        logger.debug("Sequence recognizer produced no outputs")
        return None
    out = outs[0]
    if out.ndim != 3 or out.shape[0] != 1:
        logger.debug("Sequence recognizer expects a (1, P, C + 1) output, got %s", out.shape)
        return None
    if out.shape[1] != positions:
        logger.debug("Output has %d positions, expected %d", out.shape[1], positions)
        return None
    if out.shape[2] != len(charset) + 1:
        logger.debug(
            "Output has %d classes but the character set has %d (+1 end token)",
            out.shape[2],
            len(charset),
        )
        return None
    if out.dtype != np.float32:
        logger.debug("Sequence output must be float32, got %s", out.dtype)
        return None
    return out[0]


def greedy_decode(logits: np.ndarray, charset: Sequence[str]) -> tuple[str, float]:
    """Greedy position-by-position decoding.

    At each position the arg-max class is taken and the running confidence
    is multiplied by its softmax probability. Decoding stops at the first
    end-of-sequence token.

    Args:
        logits: (P, C + 1) matrix; column 0 is the end-of-sequence class.
        charset: Characters for columns 1..C.

    Returns:
        Decoded text and its confidence.
    """
    chars: list[str] = []
    confidence = 1.0
    for row in logits.astype(np.float64):
        idx = int(np.argmax(row))
        # softmax over all classes, end token included
        prob = 1.0 / float(np.sum(np.exp(row - row[idx])))
        confidence *= prob
        if idx == EOS_INDEX:
            break
        chars.append(charset[idx - 1])
    return "".join(chars), confidence


class SequenceRecognizer(Detector):
    """Text recognizer for a single cropped word image.

    Produces at most one Result whose box covers the whole image.
    """

    detector_type = DetectorType.PARSEQ
    # Fixed number of character positions the network decodes
    positions: int = PARSEQ_POSITIONS

    def extract(self) -> None:
        charset = self._config.charset
        logits = _logits(self._buffers.outputs, charset, self.positions)
        if logits is None:
            return
        text, confidence = greedy_decode(logits, charset)
        if not text:
            return
        width, height = self._config.input_size
        self._buffers.candidates.append(
            DetectionCandidate(
                rect=Rect(0.0, 0.0, float(width), float(height)),
                confidence=confidence,
                text=text,
            )
        )

    def store(self) -> None:
        for candidate in self._buffers.candidates:
            self._results.append(build_result(candidate))

    def recognize(self, image: np.ndarray) -> str | None:
        """Convenience wrapper: detect() and return the text, if any."""
        if not self.detect(image):
            return None
        return self._results[0].text
