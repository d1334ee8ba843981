"""
Detector settings files.

A settings file describes one detector as JSON:

    {
        "type": "east",
        "model": "models/east.pb",
        "backend": "cuda",
        "target": "cuda-fp16",
        "config": {"confidence_threshold": 0.6, "input_size": [320, 320]}
    }

``config`` overrides the model family's defaults; its keys are ModelConfig
field names in the form produced by ``ModelConfig.to_dict``.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .backends import Backend, Target
from .detector import Detector
from .model_config import DetectorType, ModelConfig, default_model_config
from .registry import create_detector

logger = logging.getLogger(__name__)

# ModelConfig fields set by top-level settings keys rather than "config"
_TOP_LEVEL_FIELDS = frozenset({"model_path", "backend", "target"})


class DetectorSettings(BaseModel):
    """Schema of a detector settings file."""

    type: DetectorType
    model: str
    backend: str = Backend.DEFAULT.keyword
    target: str = Target.CPU.keyword
    config: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("config")
    @classmethod
    def _validate_config_keys(cls, v: dict[str, Any]) -> dict[str, Any]:
        allowed = {f.name for f in dataclasses.fields(ModelConfig)} - _TOP_LEVEL_FIELDS
        unknown = set(v) - allowed
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return v

    @field_validator("backend")
    @classmethod
    def _validate_backend(cls, v: str) -> str:
        return Backend.from_keyword(v).keyword

    @field_validator("target")
    @classmethod
    def _validate_target(cls, v: str) -> str:
        return Target.from_keyword(v).keyword

    def to_model_config(self, base_dir: Path | None = None) -> ModelConfig:
        """Build the ModelConfig: family defaults, then file overrides.

        A relative model path is resolved against base_dir when given.
        """
        model_path = Path(self.model)
        if base_dir is not None and not model_path.is_absolute():
            model_path = base_dir / model_path
        base = default_model_config(self.type, str(model_path))
        overrides = {
            **self.config,
            "backend": self.backend,
            "target": self.target,
        }
        return ModelConfig.from_dict(overrides, base=base)


def load_detector_settings(path: Path | str) -> DetectorSettings:
    """Load and validate a settings file.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the file does not match the schema.
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)
    settings = DetectorSettings.model_validate(data)
    logger.debug("Loaded %s settings from %s", settings.type.value, path)
    return settings


def detector_from_settings(path: Path | str, **kwargs) -> Detector:
    """Create and initialize a detector from a settings file.

    Relative model paths are resolved against the settings file's directory.
    Extra keyword arguments are passed to ``create_detector``.
    """
    path = Path(path)
    settings = load_detector_settings(path)
    config = settings.to_model_config(base_dir=path.parent)
    return create_detector(settings.type, config, **kwargs)
