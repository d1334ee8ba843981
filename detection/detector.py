"""
Detector base class and the shared detection pipeline.

Every model family runs the same pipeline:

    clear -> blobify -> forward -> extract -> geometry correction -> store

Subclasses implement only the two family-specific stages:
- extract(): decode raw network outputs into candidates (network-input space)
- store(): turn corrected candidates into Results (NMS, labels, text)

The blob conversion and the forward pass are delegated to a BlobPreprocessor
and an InferenceRunner so they can be swapped out (e.g. in tests).
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import ClassVar

import cv2
import numpy as np

from preprocessing.blob import BlobPreprocessor, OpenCVBlobPreprocessor

from .correction import correct_candidates
from .model_config import DetectorType, ModelConfig
from .runner import InferenceRunner, OpenCVRunner
from .types import DetectionBuffers, Result

logger = logging.getLogger(__name__)


class Detector(ABC):
    """Base class for neural detectors.

    A detector is unusable until ``init()`` succeeds. Instances share no
    state and are not thread-safe; use one detector per thread.

    Attributes:
        last_timings: Seconds spent per stage ("blob", "forward", "extract",
            "store") during the most recent detect() call.
    """

    detector_type: ClassVar[DetectorType]

    def __init__(
        self,
        blobber: BlobPreprocessor | None = None,
        runner: InferenceRunner | None = None,
    ) -> None:
        self._blobber = blobber if blobber is not None else OpenCVBlobPreprocessor()
        self._runner = runner if runner is not None else OpenCVRunner()
        self._config: ModelConfig | None = None
        self._buffers = DetectionBuffers()
        self._results: list[Result] = []
        self.last_timings: dict[str, float] = {}

    @property
    def config(self) -> ModelConfig | None:
        return self._config

    @property
    def initialized(self) -> bool:
        return self._config is not None

    def init(self, config: ModelConfig) -> bool:
        """Validate config and load the model.

        Returns:
            True if the detector is ready; False if the config is invalid or
            the model cannot be loaded. On failure the detector stays unusable
            until init() succeeds.
        """
        self._config = None
        self.clear()

        try:
            config.validate()
        except ValueError as e:
            logger.error("Invalid %s config: %s", self.detector_type.value, e)
            return False

        if not self._runner.load(config):
            return False

        self._config = config
        logger.debug("Initialized %s detector with %s", self.detector_type.value, config.model_path)
        return True

    def clear(self) -> None:
        """Reset scratch buffers and results, keeping their storage."""
        self._buffers.reset()
        self._results.clear()

    def get_results(self) -> list[Result]:
        """Return the Results of the last detect() call."""
        return list(self._results)

    def detect(self, image: np.ndarray) -> bool:
        """Run the full pipeline on an image.

        Returns:
            True if at least one Result was produced. False when nothing was
            found, when the image is empty or has an unusable layout, or when
            the detector was never initialized.
        """
        self.clear()
        self.last_timings = {}

        if self._config is None:
            logger.warning("%s detector used before init()", self.detector_type.value)
            return False
        if image is None or getattr(image, "size", 0) == 0:
            logger.debug("Empty image passed to %s detector", self.detector_type.value)
            return False

        t0 = time.perf_counter()
        try:
            blob, transform = self._blobber.blobify(image, self._config)
        except (TypeError, ValueError, cv2.error) as e:
            logger.warning("Cannot build %s input blob: %s", self.detector_type.value, e)
            return False
        self.last_timings["blob"] = time.perf_counter() - t0

        t0 = time.perf_counter()
        self._buffers.outputs.extend(self._runner.forward(blob))
        self.last_timings["forward"] = time.perf_counter() - t0

        t0 = time.perf_counter()
        self.extract()
        correct_candidates(self._buffers.candidates, transform)
        self.last_timings["extract"] = time.perf_counter() - t0

        t0 = time.perf_counter()
        self.store()
        self.last_timings["store"] = time.perf_counter() - t0

        logger.debug(
            "%s: %d candidates, %d results",
            self.detector_type.value,
            len(self._buffers.candidates),
            len(self._results),
        )
        return len(self._results) > 0

    @abstractmethod
    def extract(self) -> None:
        """Decode ``self._buffers.outputs`` into ``self._buffers.candidates``.

        Candidates are in network-input coordinates. Outputs with an
        unexpected shape yield no candidates.
        """
        pass

    @abstractmethod
    def store(self) -> None:
        """Append Results for the corrected candidates to ``self._results``."""
        pass
