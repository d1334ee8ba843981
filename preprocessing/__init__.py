"""
Network input preprocessing.

This module turns decoded images into network input tensors ("blobs") and
records how to map geometry from the blob back onto the image.

Key components:
- transform: ResizeMode policies and the BlobTransform inverse mapping
- blob: BlobPreprocessor interface and the OpenCV-backed implementation
"""

from .transform import (
    BlobTransform,
    ResizeMode,
    RESIZE_MODE_CV_NAMES,
    resize_mode_from_cv,
    resize_mode_to_cv,
)
from .blob import BlobPreprocessor, OpenCVBlobPreprocessor, to_three_channels, validate_image

__all__ = [
    "BlobTransform",
    "ResizeMode",
    "RESIZE_MODE_CV_NAMES",
    "resize_mode_from_cv",
    "resize_mode_to_cv",
    "BlobPreprocessor",
    "OpenCVBlobPreprocessor",
    "to_three_channels",
    "validate_image",
]
