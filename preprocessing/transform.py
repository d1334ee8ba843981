"""
Blob resize policies and their inverse coordinate mapping.

A blob is built from an image by one of three resize policies. Every policy
is an axis-separable affine map, so mapping geometry from network-input
space back to image space needs only a per-axis scale and offset:

    x_image = x_blob * scale_x + offset_x
    y_image = y_blob * scale_y + offset_y

The inverse matches OpenCV's own ``Image2BlobParams.blobRectsToImageRects``:
letterbox uses the integer resized size and padding the blob was built with,
center crop uses the continuous scaled size.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import cv2

from geometry import Rect


class ResizeMode(enum.IntEnum):
    """Image-to-blob resize policy."""

    # Resize directly to the input size (aspect ratio not preserved).
    RAW = 0
    # Scale by the larger factor, then crop the center to the input size.
    CROP = 1
    # Scale by the smaller factor, then pad the borders to the input size.
    LETTERBOX = 2

    @property
    def keyword(self) -> str:
        return _RESIZE_MODE_KEYWORDS[self]

    @classmethod
    def from_keyword(cls, keyword: str) -> ResizeMode:
        for mode, name in _RESIZE_MODE_KEYWORDS.items():
            if name == keyword.strip().lower():
                return mode
        raise ValueError(f"Unknown resize mode: {keyword!r}")


_RESIZE_MODE_KEYWORDS: dict[ResizeMode, str] = {
    ResizeMode.RAW: "raw",
    ResizeMode.CROP: "crop",
    ResizeMode.LETTERBOX: "letterbox",
}

# Explicit mapping to OpenCV's padding-mode constants (by attribute name).
RESIZE_MODE_CV_NAMES: dict[ResizeMode, str] = {
    ResizeMode.RAW: "DNN_PMODE_NULL",
    ResizeMode.CROP: "DNN_PMODE_CROP_CENTER",
    ResizeMode.LETTERBOX: "DNN_PMODE_LETTERBOX",
}


def resize_mode_to_cv(mode: ResizeMode) -> int:
    """Return the ``cv2.dnn`` padding-mode constant for a resize mode."""
    return int(getattr(cv2.dnn, RESIZE_MODE_CV_NAMES[mode]))


def resize_mode_from_cv(value: int) -> ResizeMode:
    """Return the resize mode for a ``cv2.dnn`` padding-mode constant."""
    for mode, name in RESIZE_MODE_CV_NAMES.items():
        if int(getattr(cv2.dnn, name)) == int(value):
            return mode
    raise ValueError(f"Unsupported OpenCV padding mode: {value}")


@dataclass(frozen=True)
class BlobTransform:
    """Inverse of a blob transform: maps network-input coordinates to image pixels.

    Attributes:
        scale_x: Image pixels per network-input pixel along x.
        scale_y: Image pixels per network-input pixel along y.
        offset_x: Image x coordinate of network-input x = 0.
        offset_y: Image y coordinate of network-input y = 0.
        image_size: (width, height) of the original image, used for clamping.
    """

    scale_x: float
    scale_y: float
    offset_x: float = 0.0
    offset_y: float = 0.0
    image_size: tuple[int, int] = (0, 0)

    @classmethod
    def for_mode(
        cls,
        mode: ResizeMode,
        image_size: tuple[int, int],
        input_size: tuple[int, int],
    ) -> BlobTransform:
        """Build the inverse mapping for a resize mode.

        Args:
            mode: Resize policy used to build the blob.
            image_size: (width, height) of the original image.
            input_size: (width, height) of the network input.

        Raises:
            ValueError: If either size is not positive.
        """
        img_w, img_h = image_size
        in_w, in_h = input_size
        if img_w <= 0 or img_h <= 0:
            raise ValueError(f"image_size must be positive, got {image_size}")
        if in_w <= 0 or in_h <= 0:
            raise ValueError(f"input_size must be positive, got {input_size}")

        if mode == ResizeMode.RAW:
            return cls(img_w / in_w, img_h / in_h, 0.0, 0.0, (img_w, img_h))

        if mode == ResizeMode.CROP:
            # continuous center offset, as in Image2BlobParams.blobRectsToImageRects
            factor = max(in_w / img_w, in_h / img_h)
            left = (img_w * factor - in_w) / 2
            top = (img_h * factor - in_h) / 2
            return cls(1.0 / factor, 1.0 / factor, left / factor, top / factor, (img_w, img_h))

        if mode == ResizeMode.LETTERBOX:
            factor = min(in_w / img_w, in_h / img_h)
            resized_w = int(img_w * factor)
            resized_h = int(img_h * factor)
            left = (in_w - resized_w) // 2
            top = (in_h - resized_h) // 2
            return cls(1.0 / factor, 1.0 / factor, -left / factor, -top / factor, (img_w, img_h))

        raise ValueError(f"Unsupported resize mode: {mode!r}")

    def map_point(self, x: float, y: float) -> tuple[float, float]:
        """Map a point from network-input space to image space."""
        return (x * self.scale_x + self.offset_x, y * self.scale_y + self.offset_y)

    def map_rect(self, rect: Rect) -> Rect:
        """Map an axis-aligned rectangle from network-input space to image space."""
        left, top = self.map_point(rect.left, rect.top)
        right, bottom = self.map_point(rect.right, rect.bottom)
        return Rect(left, top, right, bottom)
