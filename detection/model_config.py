"""
Per-detector model configuration.

ModelConfig parameterizes every stage of a detector: which network to load
and where to run it, how to turn an image into a blob, and the thresholds
used to decode the network outputs. It is immutable; to change a value,
build a new config (``dataclasses.replace``) and call ``init()`` again.
"""

from __future__ import annotations

import dataclasses
import enum
import math
from dataclasses import dataclass, field
from typing import Any

from config import (
    CONFIG_FLOAT_TOLERANCE,
    CRAFT_LINK_THRESHOLD,
    CRAFT_LOW_TEXT,
    CRAFT_MEAN,
    CRAFT_SCALE,
    CRAFT_TEXT_THRESHOLD,
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_INPUT_SIZE,
    DEFAULT_MEAN,
    DEFAULT_NMS_THRESHOLD,
    DEFAULT_PAD_VALUE,
    DEFAULT_RESIZE_MODE,
    DEFAULT_SCALE,
    DEFAULT_SWAP_RB,
    EAST_MEAN,
    PARSEQ_CHARSET,
    PARSEQ_INPUT_SIZE,
    PARSEQ_MEAN,
    PARSEQ_SCALE,
    YOLOV8_SCALE,
)
from preprocessing.transform import ResizeMode

from .backends import Backend, Target


class DetectorType(str, enum.Enum):
    """Supported model families."""

    EAST = "east"
    CRAFT = "craft"
    YOLOV8 = "yolov8"
    PARSEQ = "parseq"

    @classmethod
    def from_keyword(cls, keyword: str) -> DetectorType:
        try:
            return cls(keyword.strip().lower())
        except ValueError:
            names = ", ".join(t.value for t in cls)
            raise ValueError(
                f"Unknown detector type: {keyword!r}. Expected one of: {names}"
            ) from None


Vec3 = tuple[float, float, float]


@dataclass(frozen=True)
class ModelConfig:
    """Configuration for a single detector instance.

    Attributes:
        model_path: Path to the network file (ONNX, TensorFlow, ...).
        backend: Computation backend used to run the network.
        target: Device the backend runs on.
        input_size: Network input (width, height) in pixels.
        scale: Per-channel multiplier applied after mean subtraction.
        mean: Per-channel value subtracted from each pixel.
        pad_value: Border fill value when letterboxing.
        swap_rb: Swap the first and last channel while building the blob.
        resize_mode: How the image is fitted to input_size.
        confidence_threshold: Minimum confidence for a candidate (EAST, YOLOv8).
        nms_threshold: IoU above which lower-confidence candidates are dropped.
        classes: Labels for YOLOv8 class ids; missing ids render as str(id).
        charset: Characters for sequence decoding; output index i maps to charset[i - 1].
        text_threshold: CRAFT minimum peak text score per component.
        link_threshold: CRAFT link (affinity) mask threshold.
        low_text: CRAFT text mask threshold.
    """

    model_path: str = ""
    backend: Backend = Backend.DEFAULT
    target: Target = Target.CPU

    # Blob settings
    input_size: tuple[int, int] = DEFAULT_INPUT_SIZE
    scale: Vec3 = DEFAULT_SCALE
    mean: Vec3 = DEFAULT_MEAN
    pad_value: Vec3 = DEFAULT_PAD_VALUE
    swap_rb: bool = DEFAULT_SWAP_RB
    resize_mode: ResizeMode = field(
        default_factory=lambda: ResizeMode.from_keyword(DEFAULT_RESIZE_MODE)
    )

    # Decode settings
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    nms_threshold: float = DEFAULT_NMS_THRESHOLD
    classes: tuple[str, ...] = ()
    charset: tuple[str, ...] = ()

    # CRAFT settings
    text_threshold: float = CRAFT_TEXT_THRESHOLD
    link_threshold: float = CRAFT_LINK_THRESHOLD
    low_text: float = CRAFT_LOW_TEXT

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if not self.model_path:
            raise ValueError("model_path must be set")

        if not isinstance(self.backend, Backend):
            raise ValueError(f"backend must be a Backend, got {self.backend!r}")
        if not isinstance(self.target, Target):
            raise ValueError(f"target must be a Target, got {self.target!r}")
        if not isinstance(self.resize_mode, ResizeMode):
            raise ValueError(f"resize_mode must be a ResizeMode, got {self.resize_mode!r}")

        if (
            len(self.input_size) != 2
            or any(int(v) != v or v <= 0 for v in self.input_size)
        ):
            raise ValueError(
                f"input_size must be two positive integers, got {self.input_size}"
            )

        for name in ("scale", "mean", "pad_value"):
            value = getattr(self, name)
            if len(value) != 3:
                raise ValueError(f"{name} must have 3 channels, got {value}")

        for name in (
            "confidence_threshold",
            "nms_threshold",
            "text_threshold",
            "link_threshold",
            "low_text",
        ):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be within [0, 1], got {value}")

    def is_close(self, other: ModelConfig, abs_tol: float = CONFIG_FLOAT_TOLERANCE) -> bool:
        """Compare two configs, allowing a small tolerance on float values."""
        if not isinstance(other, ModelConfig):
            return False
        for f in dataclasses.fields(self):
            mine = getattr(self, f.name)
            theirs = getattr(other, f.name)
            if not _values_close(mine, theirs, abs_tol):
                return False
        return True

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dict (enums as keywords)."""
        return {
            "model_path": self.model_path,
            "backend": self.backend.keyword,
            "target": self.target.keyword,
            "input_size": list(self.input_size),
            "scale": list(self.scale),
            "mean": list(self.mean),
            "pad_value": list(self.pad_value),
            "swap_rb": self.swap_rb,
            "resize_mode": self.resize_mode.keyword,
            "confidence_threshold": self.confidence_threshold,
            "nms_threshold": self.nms_threshold,
            "classes": list(self.classes),
            "charset": "".join(self.charset),
            "text_threshold": self.text_threshold,
            "link_threshold": self.link_threshold,
            "low_text": self.low_text,
        }

    @classmethod
    def from_dict(cls, data: dict, base: ModelConfig | None = None) -> ModelConfig:
        """Build a config from a dict, filling unspecified fields from base.

        Accepts the keyword form produced by ``to_dict``.

        Raises:
            ValueError: If data contains an unknown key or an invalid keyword.
        """
        if base is None:
            base = cls()
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown model config keys: {sorted(unknown)}")
        overrides = {key: _coerce(key, value) for key, value in data.items()}
        return dataclasses.replace(base, **overrides)


def _coerce(key: str, value: Any) -> Any:
    if key == "backend":
        return value if isinstance(value, Backend) else Backend.from_keyword(value)
    if key == "target":
        return value if isinstance(value, Target) else Target.from_keyword(value)
    if key == "resize_mode":
        return value if isinstance(value, ResizeMode) else ResizeMode.from_keyword(value)
    if key == "input_size":
        return tuple(int(v) for v in value)
    if key in ("scale", "mean", "pad_value"):
        if isinstance(value, (int, float)):
            return (float(value),) * 3
        return tuple(float(v) for v in value)
    if key in ("classes", "charset"):
        return tuple(value)
    if key == "swap_rb":
        return bool(value)
    if key == "model_path":
        return str(value)
    return float(value)


def _values_close(a: Any, b: Any, abs_tol: float) -> bool:
    if isinstance(a, float) or isinstance(b, float):
        return math.isclose(float(a), float(b), rel_tol=0.0, abs_tol=abs_tol)
    if isinstance(a, tuple) and isinstance(b, tuple):
        return len(a) == len(b) and all(_values_close(x, y, abs_tol) for x, y in zip(a, b))
    return a == b


def default_model_config(detector_type: DetectorType, model_path: str = "") -> ModelConfig:
    """Return the default config for a model family."""
    detector_type = DetectorType(detector_type)
    if detector_type == DetectorType.EAST:
        return ModelConfig(model_path=model_path, mean=EAST_MEAN)
    if detector_type == DetectorType.CRAFT:
        return ModelConfig(model_path=model_path, scale=CRAFT_SCALE, mean=CRAFT_MEAN)
    if detector_type == DetectorType.YOLOV8:
        return ModelConfig(model_path=model_path, scale=YOLOV8_SCALE)
    if detector_type == DetectorType.PARSEQ:
        return ModelConfig(
            model_path=model_path,
            input_size=PARSEQ_INPUT_SIZE,
            scale=PARSEQ_SCALE,
            mean=PARSEQ_MEAN,
            resize_mode=ResizeMode.RAW,
            charset=tuple(PARSEQ_CHARSET),
        )
    raise ValueError(f"Unsupported detector type: {detector_type!r}")
