"""Shared geometry utilities for axis-aligned and rotated rectangles."""

from __future__ import annotations

import math
from dataclasses import dataclass

import cv2

# Axis-aligned rectangle as (left, top, width, height)
XYWH = tuple[float, float, float, float]


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its edges (left, top, right, bottom)."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    def to_xywh(self) -> XYWH:
        return (self.left, self.top, self.width, self.height)

    @classmethod
    def from_xywh(cls, x: float, y: float, w: float, h: float) -> Rect:
        return cls(x, y, x + w, y + h)

    def to_dict(self) -> dict:
        return {
            "left": self.left,
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
        }


@dataclass(frozen=True)
class RotatedRect:
    """Rectangle defined by center, size and rotation angle in degrees.

    Follows OpenCV's convention: the angle rotates the box clockwise in
    image coordinates (y pointing down).
    """

    cx: float
    cy: float
    width: float
    height: float
    angle: float = 0.0

    def points(self) -> list[tuple[float, float]]:
        """Return the four corners (bottom-left, top-left, top-right, bottom-right)."""
        box = (
            (float(self.cx), float(self.cy)),
            (float(self.width), float(self.height)),
            float(self.angle),
        )
        return [(float(x), float(y)) for x, y in cv2.boxPoints(box)]

    def bounding_rect(self) -> Rect:
        """Smallest integer-aligned rectangle enclosing all four corners."""
        pts = self.points()
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        return Rect(
            float(math.floor(min(xs))),
            float(math.floor(min(ys))),
            float(math.ceil(max(xs))),
            float(math.ceil(max(ys))),
        )


def clamp_rect(rect: Rect, width: int, height: int) -> Rect:
    """Clamp a rectangle to the image area [0, width) x [0, height).

    The result may be degenerate (zero or negative size) when the input lies
    entirely outside the image; callers decide whether to drop it.
    """
    left = min(max(rect.left, 0.0), float(width))
    top = min(max(rect.top, 0.0), float(height))
    right = min(max(rect.right, 0.0), float(width))
    bottom = min(max(rect.bottom, 0.0), float(height))
    return Rect(left, top, right, bottom)
