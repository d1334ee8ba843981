"""
Neural detection module.

This module runs neural text/object detectors and decodes their raw outputs
into oriented boxes in original-image coordinates. Every detector follows the
same pipeline (blob -> forward -> extract -> geometry correction -> store);
model families differ only in how they decode outputs.

Key components:
- types: Core data structures (DetectionCandidate, Result, DetectionBuffers)
- backends: Backend/Target selectors and their OpenCV mapping
- model_config: ModelConfig and per-family defaults
- runner: Network loading and forward passes
- detector: Detector base class and the shared pipeline
- correction: Mapping candidates back onto the image
- filtering: Non-maximum suppression and result assembly
- east, craft, yolov8, sequence: Model families
- registry: Detector lookup by type
- settings: JSON detector settings files
- recognition: Two-stage detect-then-recognize text reading

The main entry points are `create_detector()` and `detector_from_settings()`.
"""

from .types import DetectionBuffers, DetectionCandidate, Result
from .backends import Backend, Target, backend_from_cv, backend_to_cv, target_from_cv, target_to_cv
from .model_config import DetectorType, ModelConfig, default_model_config
from .runner import InferenceRunner, OpenCVRunner
from .detector import Detector
from .correction import correct_candidate, correct_candidates
from .filtering import build_result, nms_indices, resolve_label, suppress_candidates
from .east import EASTDetector, decode_east
from .craft import CRAFTDetector, decode_craft
from .yolov8 import YOLOv8Detector, decode_yolov8
from .sequence import SequenceRecognizer, greedy_decode
from .registry import available_detectors, create_detector, get_detector_class
from .settings import DetectorSettings, detector_from_settings, load_detector_settings
from .recognition import read_text

__all__ = [
    "DetectionBuffers",
    "DetectionCandidate",
    "Result",
    "Backend",
    "Target",
    "backend_from_cv",
    "backend_to_cv",
    "target_from_cv",
    "target_to_cv",
    "DetectorType",
    "ModelConfig",
    "default_model_config",
    "InferenceRunner",
    "OpenCVRunner",
    "Detector",
    "correct_candidate",
    "correct_candidates",
    "build_result",
    "nms_indices",
    "resolve_label",
    "suppress_candidates",
    "EASTDetector",
    "decode_east",
    "CRAFTDetector",
    "decode_craft",
    "YOLOv8Detector",
    "decode_yolov8",
    "SequenceRecognizer",
    "greedy_decode",
    "available_detectors",
    "create_detector",
    "get_detector_class",
    "DetectorSettings",
    "detector_from_settings",
    "load_detector_settings",
    "read_text",
]
