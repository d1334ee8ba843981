"""
Detector registry: maps model families to their Detector classes.
"""

from __future__ import annotations

import logging

from preprocessing.blob import BlobPreprocessor

from .craft import CRAFTDetector
from .detector import Detector
from .east import EASTDetector
from .model_config import DetectorType, ModelConfig
from .runner import InferenceRunner
from .sequence import SequenceRecognizer
from .yolov8 import YOLOv8Detector

logger = logging.getLogger(__name__)

_DETECTORS: dict[DetectorType, type[Detector]] = {
    DetectorType.EAST: EASTDetector,
    DetectorType.CRAFT: CRAFTDetector,
    DetectorType.YOLOV8: YOLOv8Detector,
    DetectorType.PARSEQ: SequenceRecognizer,
}


def available_detectors() -> list[str]:
    """Keywords of all registered detector types."""
    return [t.value for t in _DETECTORS]


def get_detector_class(detector_type: DetectorType | str) -> type[Detector]:
    """Resolve a detector class by type or keyword."""
    if not isinstance(detector_type, DetectorType):
        detector_type = DetectorType.from_keyword(detector_type)
    detector_cls = _DETECTORS.get(detector_type)
    if detector_cls is None:
        raise ValueError(f"Unknown detector type: {detector_type!r}")
    return detector_cls


def create_detector(
    detector_type: DetectorType | str,
    config: ModelConfig | None = None,
    blobber: BlobPreprocessor | None = None,
    runner: InferenceRunner | None = None,
) -> Detector:
    """Instantiate a detector and, if config is given, initialize it.

    Raises:
        ValueError: If detector_type is unknown.
        RuntimeError: If init() fails for the given config.
    """
    detector = get_detector_class(detector_type)(blobber=blobber, runner=runner)
    if config is not None and not detector.init(config):
        raise RuntimeError(
            f"Failed to initialize {detector.detector_type.value} detector "
            f"with model {config.model_path!r}"
        )
    return detector
