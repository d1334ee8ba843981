"""
Type definitions for the detection module.

This module defines the core data structures used throughout the detection pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from geometry import Rect, RotatedRect


@dataclass
class DetectionCandidate:
    """A detection produced by a decoder, before NMS and result assembly.

    Coordinates are in network-input space until geometry correction maps
    them onto the original image.

    Attributes:
        rect: Axis-aligned box of the unrotated detection (center and size
            of the rotated box, angle ignored).
        confidence: Decoder score; fixed at 0.0 for CRAFT.
        angle: Rotation of the box around its center in degrees.
        class_id: Class index for classifying models, None otherwise.
        text: Decoded text for recognition models, None otherwise.
    """

    rect: Rect
    confidence: float
    angle: float = 0.0
    class_id: int | None = None
    text: str | None = None


@dataclass(frozen=True)
class Result:
    """A final detection in original-image pixel coordinates.

    The box is the unrotated extent of the detection; ``angle`` rotates it
    around its center (see ``rotated``). Invariants: right >= left,
    bottom >= top and 0 <= confidence <= 1.

    Attributes:
        rect: Box edges in image pixels.
        angle: Rotation in degrees, 0 for axis-aligned detectors.
        confidence: Score in [0, 1].
        text: Class label or decoded text, None when not applicable.
    """

    rect: Rect
    angle: float = 0.0
    confidence: float = 0.0
    text: str | None = None

    @property
    def rotated(self) -> RotatedRect:
        return RotatedRect(
            (self.rect.left + self.rect.right) / 2,
            (self.rect.top + self.rect.bottom) / 2,
            self.rect.width,
            self.rect.height,
            self.angle,
        )

    def with_text(self, text: str | None) -> Result:
        return Result(rect=self.rect, angle=self.angle, confidence=self.confidence, text=text)

    def to_dict(self) -> dict:
        return {
            "rect": self.rect.to_dict(),
            "angle": self.angle,
            "confidence": self.confidence,
            "text": self.text,
        }


@dataclass
class DetectionBuffers:
    """Per-detector scratch space reused across detect() calls.

    ``reset()`` truncates the lists in place so their storage is reused.
    """

    outputs: list[np.ndarray] = field(default_factory=list)
    candidates: list[DetectionCandidate] = field(default_factory=list)
    kept: list[int] = field(default_factory=list)

    def reset(self) -> None:
        self.outputs.clear()
        self.candidates.clear()
        self.kept.clear()
