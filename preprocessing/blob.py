"""
Image-to-blob conversion.

The blob transform itself is delegated to OpenCV's DNN module; this module
only normalizes the input image layout, assembles the conversion parameters
from a ModelConfig and pairs the blob with the inverse BlobTransform needed
to map network outputs back onto the image.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

import cv2
import numpy as np

from .transform import BlobTransform, resize_mode_to_cv

if TYPE_CHECKING:
    from detection.model_config import ModelConfig

logger = logging.getLogger(__name__)


class BlobPreprocessor(Protocol):
    """Interface for converting an image into a network input tensor."""

    def blobify(self, image: np.ndarray, config: ModelConfig) -> tuple[np.ndarray, BlobTransform]:
        """Return the NCHW float32 blob and the inverse transform for image."""


def validate_image(img: np.ndarray) -> None:
    """Validate an input image array.

    Raises:
        TypeError: If img is not a numpy array.
        ValueError: If img has invalid dimensions or is empty.
    """
    if not isinstance(img, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray, got {type(img).__name__}")

    if img.ndim < 2 or img.ndim > 3:
        raise ValueError(
            f"Image must be 2D or 3D array, got {img.ndim}D array with shape {img.shape}"
        )

    if img.size == 0:
        raise ValueError("Image array is empty")


def to_three_channels(img: np.ndarray) -> np.ndarray:
    """Return a 3-channel view/copy of a grayscale, 3- or 4-channel image.

    Channel order is left untouched; the blob's swap-RB flag decides it.
    """
    validate_image(img)
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    channels = img.shape[2]
    if channels == 1:
        return cv2.cvtColor(img[:, :, 0], cv2.COLOR_GRAY2BGR)
    if channels == 3:
        return img
    if channels == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    raise ValueError(
        f"Unsupported number of channels: {channels}. Expected 1, 3, or 4."
    )


class OpenCVBlobPreprocessor:
    """Blob preprocessor backed by ``cv2.dnn.blobFromImageWithParams``."""

    def __init__(self) -> None:
        self._config: ModelConfig | None = None
        self._params = None

    def _params_for(self, config: ModelConfig):
        # ModelConfig is frozen, so the params only change with the config object.
        if self._params is None or config is not self._config:
            self._params = cv2.dnn.Image2BlobParams(
                tuple(config.scale),
                tuple(config.input_size),
                tuple(config.mean),
                config.swap_rb,
                cv2.CV_32F,
                cv2.dnn.DNN_LAYOUT_NCHW,
                resize_mode_to_cv(config.resize_mode),
                tuple(config.pad_value),
            )
            self._config = config
        return self._params

    def blobify(self, image: np.ndarray, config: ModelConfig) -> tuple[np.ndarray, BlobTransform]:
        img = to_three_channels(image)
        height, width = img.shape[:2]
        blob = cv2.dnn.blobFromImageWithParams(img, self._params_for(config))
        transform = BlobTransform.for_mode(
            config.resize_mode,
            (width, height),
            tuple(config.input_size),
        )
        logger.debug(
            "Blob %s from %dx%d image (%s)",
            blob.shape,
            width,
            height,
            config.resize_mode.keyword,
        )
        return blob, transform
