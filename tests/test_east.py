"""Tests for EAST output decoding and the EAST detector."""

import math

import numpy as np
import pytest

from detection import EASTDetector, decode_east
from geometry import Rect


def east_outputs(grid=(2, 2), cells=None):
    """Build (geometry, scores) for a grid; cells maps (x, y) -> (score, t, r, b, l, angle)."""
    h, w = grid
    geometry = np.zeros((1, 5, h, w), dtype=np.float32)
    scores = np.zeros((1, 1, h, w), dtype=np.float32)
    for (x, y), (score, *geo) in (cells or {}).items():
        scores[0, 0, y, x] = score
        geometry[0, :, y, x] = geo
    return [geometry, scores]


class TestDecodeEast:
    def test_single_axis_aligned_box(self):
        geometry, scores = east_outputs(cells={(1, 1): (0.9, 0, 20, 10, 0, 0.0)})
        candidates = decode_east(geometry, scores, 0.5)
        assert len(candidates) == 1
        candidate = candidates[0]
        # anchor (4, 4); box spans 20 px right and 10 px down
        assert candidate.rect == Rect(4, 4, 24, 14)
        assert candidate.confidence == pytest.approx(0.9)
        assert candidate.angle == pytest.approx(0.0)

    def test_angle_converted_to_degrees(self):
        geometry, scores = east_outputs(cells={(0, 0): (0.8, 5, 5, 5, 5, math.pi / 6)})
        candidates = decode_east(geometry, scores, 0.5)
        assert candidates[0].angle == pytest.approx(-30.0, abs=1e-4)

    def test_threshold_property(self):
        rng = np.random.default_rng(7)
        geometry = rng.uniform(1, 10, size=(1, 5, 8, 8)).astype(np.float32)
        geometry[0, 4] = 0.0
        scores = rng.uniform(0, 1, size=(1, 1, 8, 8)).astype(np.float32)
        candidates = decode_east(geometry, scores, 0.6)
        assert len(candidates) == int(np.count_nonzero(scores >= 0.6))
        assert all(c.confidence >= 0.6 for c in candidates)

    def test_all_zero_scores(self):
        geometry, scores = east_outputs(grid=(4, 4))
        assert decode_east(geometry, scores, 0.5) == []


class TestEASTDetector:
    def _detector(self, runner, blobber, config):
        detector = EASTDetector(blobber=blobber, runner=runner)
        assert detector.init(config)
        return detector

    def test_end_to_end_single_box(self, fake_runner, blobber, identity_config, image64):
        fake_runner.outputs = east_outputs(cells={(1, 1): (0.9, 0, 20, 10, 0, 0.0)})
        detector = self._detector(fake_runner, blobber, identity_config)

        assert detector.detect(image64)
        results = detector.get_results()
        assert len(results) == 1
        result = results[0]
        assert result.confidence == pytest.approx(0.9)
        assert result.rect.width == pytest.approx(20)
        assert result.rect.height == pytest.approx(10)
        assert result.angle == pytest.approx(0.0)

    def test_nms_merges_neighbouring_cells(self, fake_runner, blobber, identity_config, image64):
        fake_runner.outputs = east_outputs(
            grid=(4, 4),
            cells={
                (1, 1): (0.9, 0, 20, 10, 0, 0.0),
                (2, 1): (0.7, 0, 16, 10, 4, 0.0),
            },
        )
        detector = self._detector(fake_runner, blobber, identity_config)
        assert detector.detect(image64)
        results = detector.get_results()
        assert len(results) == 1
        assert results[0].confidence == pytest.approx(0.9)

    def test_outputs_in_reverse_order(self, fake_runner, blobber, identity_config, image64):
        geometry, scores = east_outputs(cells={(1, 1): (0.9, 0, 20, 10, 0, 0.0)})
        fake_runner.outputs = [scores, geometry]
        detector = self._detector(fake_runner, blobber, identity_config)
        assert detector.detect(image64)
        assert len(detector.get_results()) == 1

    def test_all_zero_input_yields_nothing(self, fake_runner, blobber, identity_config, image64):
        fake_runner.outputs = east_outputs(grid=(4, 4))
        detector = self._detector(fake_runner, blobber, identity_config)
        assert not detector.detect(image64)
        assert detector.get_results() == []

    @pytest.mark.parametrize("outputs", [
        [np.zeros((1, 5, 2, 2), dtype=np.float32)],
        [np.zeros((1, 4, 2, 2), dtype=np.float32), np.ones((1, 1, 2, 2), dtype=np.float32)],
        [np.zeros((1, 5, 2, 2), dtype=np.float32), np.ones((1, 1, 3, 3), dtype=np.float32)],
        [np.zeros((1, 5, 2, 2), dtype=np.float64), np.ones((1, 1, 2, 2), dtype=np.float64)],
        [np.zeros((5, 2, 2), dtype=np.float32), np.ones((1, 2, 2), dtype=np.float32)],
    ])
    def test_shape_mismatch_yields_nothing(
        self, fake_runner, blobber, identity_config, image64, outputs
    ):
        fake_runner.outputs = outputs
        detector = self._detector(fake_runner, blobber, identity_config)
        assert not detector.detect(image64)
