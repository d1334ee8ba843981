"""Tests for image loading, annotation and ROI cropping helpers."""

import numpy as np
import pytest
from PIL import Image

from detection import Result
from geometry import Rect
from utils import crop_rotated_roi, draw_results, load_image, result_label, save_annotated


class TestLoadImage:
    def test_returns_bgr(self, tmp_path):
        path = tmp_path / "red.png"
        Image.new("RGB", (8, 4), (255, 0, 0)).save(path)
        image = load_image(path)
        assert image.shape == (4, 8, 3)
        assert image[0, 0].tolist() == [0, 0, 255]

    def test_grayscale_converted(self, tmp_path):
        path = tmp_path / "gray.png"
        Image.new("L", (5, 5), 100).save(path)
        assert load_image(path).shape == (5, 5, 3)


class TestDrawResults:
    def test_draws_on_copy(self):
        image = np.zeros((50, 50, 3), dtype=np.uint8)
        out = draw_results(
            image, [Result(rect=Rect(10, 10, 30, 20), confidence=0.9)], draw_labels=False
        )
        assert not image.any()
        assert out.any()
        assert out[10, 20].tolist() == [0, 255, 0]

    def test_grayscale_input(self):
        out = draw_results(np.zeros((20, 20), dtype=np.uint8), [])
        assert out.shape == (20, 20, 3)

    def test_labels(self):
        assert result_label(Result(rect=Rect(0, 0, 1, 1), confidence=0.5)) == "50%"
        assert result_label(Result(rect=Rect(0, 0, 1, 1), text="car", confidence=0.9)) == "car (90%)"
        assert result_label(Result(rect=Rect(0, 0, 1, 1), text="abc")) == "abc"


class TestCropRotatedRoi:
    def test_axis_aligned_crop(self):
        image = np.arange(100 * 100, dtype=np.uint32).reshape(100, 100)
        crop = crop_rotated_roi(image, Result(rect=Rect(10, 20, 50, 30)), padding_ratio=0.0)
        assert crop.shape == (10, 40)
        assert crop[0, 0] == image[20, 10]

    def test_padding_grows_crop(self):
        image = np.zeros((100, 100, 3), dtype=np.uint8)
        crop = crop_rotated_roi(image, Result(rect=Rect(40, 40, 60, 50)), padding_ratio=0.1)
        assert crop.shape[:2] == (12, 24)

    def test_rotated_box_is_uprighted(self):
        # a vertical 10x40 bar described as a 40x10 box rotated by 90 degrees
        image = np.zeros((100, 100), dtype=np.uint8)
        image[30:70, 45:55] = 255
        result = Result(rect=Rect(30, 45, 70, 55), angle=90.0)
        crop = crop_rotated_roi(image, result, padding_ratio=0.0)
        assert crop.shape[0] == pytest.approx(10, abs=1)
        assert crop.shape[1] == pytest.approx(40, abs=1)
        assert crop.mean() > 150

    def test_box_outside_image_is_empty(self):
        image = np.zeros((20, 20), dtype=np.uint8)
        crop = crop_rotated_roi(image, Result(rect=Rect(50, 50, 60, 60)), padding_ratio=0.0)
        assert crop.size == 0


def test_save_annotated(tmp_path):
    image = np.zeros((20, 20, 3), dtype=np.uint8)
    output = tmp_path / "out" / "annotated.png"
    assert save_annotated(image, [Result(rect=Rect(2, 2, 10, 10), confidence=1.0)], output)
    assert output.exists()
