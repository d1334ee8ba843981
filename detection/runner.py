"""
Network loading and forward passes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import cv2
import numpy as np

from .backends import backend_to_cv, target_to_cv
from .model_config import ModelConfig

logger = logging.getLogger(__name__)


class InferenceRunner(Protocol):
    """Interface for running a network on a prepared blob."""

    def load(self, config: ModelConfig) -> bool:
        """Load the network described by config; False if it cannot be loaded."""

    def forward(self, blob: np.ndarray) -> list[np.ndarray]:
        """Run the network and return every unconnected output, in network order."""


class OpenCVRunner:
    """Inference runner backed by ``cv2.dnn.Net``."""

    def __init__(self) -> None:
        self._net = None
        self._output_names: list[str] = []

    @property
    def loaded(self) -> bool:
        return self._net is not None

    def load(self, config: ModelConfig) -> bool:
        self._net = None
        self._output_names = []

        model_path = Path(config.model_path)
        if not model_path.is_file():
            logger.error("Model file not found: %s", model_path)
            return False

        try:
            net = cv2.dnn.readNet(str(model_path))
            net.setPreferableBackend(backend_to_cv(config.backend))
            net.setPreferableTarget(target_to_cv(config.target))
        except (cv2.error, ValueError) as e:
            logger.error("Failed to load model %s: %s", model_path, e)
            return False

        if net.empty():
            logger.error("Model %s loaded as an empty network", model_path)
            return False

        self._net = net
        self._output_names = list(net.getUnconnectedOutLayersNames())
        logger.info(
            "Loaded %s (backend=%s, target=%s, outputs=%s)",
            model_path.name,
            config.backend.keyword,
            config.target.keyword,
            self._output_names,
        )
        return True

    def forward(self, blob: np.ndarray) -> list[np.ndarray]:
        if self._net is None:
            raise RuntimeError("forward() called before a model was loaded")
        try:
            self._net.setInput(blob)
            outs = self._net.forward(self._output_names)
        except cv2.error as e:
            logger.error("Forward pass failed for blob %s: %s", blob.shape, e)
            return []
        return [np.asarray(out) for out in outs]
