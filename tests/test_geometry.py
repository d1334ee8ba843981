"""Tests for shared rectangle geometry."""

import cv2
import numpy as np
import pytest

from geometry import Rect, RotatedRect, clamp_rect


class TestRect:
    def test_size_properties(self):
        rect = Rect(10, 20, 40, 30)
        assert rect.width == 30
        assert rect.height == 10
        assert rect.area == 300

    def test_inverted_rect_has_zero_area(self):
        assert Rect(10, 10, 5, 20).area == 0

    def test_xywh_round_trip(self):
        rect = Rect.from_xywh(1, 2, 3, 4)
        assert rect == Rect(1, 2, 4, 6)
        assert rect.to_xywh() == (1, 2, 3, 4)


class TestClampRect:
    def test_inside_unchanged(self):
        rect = Rect(1, 2, 3, 4)
        assert clamp_rect(rect, 10, 10) == rect

    def test_partially_outside(self):
        assert clamp_rect(Rect(-5, -5, 15, 8), 10, 10) == Rect(0, 0, 10, 8)

    def test_fully_outside_is_degenerate(self):
        clamped = clamp_rect(Rect(20, 20, 30, 30), 10, 10)
        assert clamped.width <= 0 or clamped.height <= 0


class TestRotatedRect:
    def test_axis_aligned_bounding_rect(self):
        box = RotatedRect(14, 9, 20, 10, 0.0)
        assert box.bounding_rect() == Rect(4, 4, 24, 14)

    def test_quarter_turn_swaps_extent(self):
        bounds = RotatedRect(50, 50, 40, 10, 90.0).bounding_rect()
        assert bounds.width == pytest.approx(10, abs=1)
        assert bounds.height == pytest.approx(40, abs=1)

    def test_points_centered(self):
        box = RotatedRect(5, 5, 4, 2, 30.0)
        pts = box.points()
        assert sum(p[0] for p in pts) / 4 == pytest.approx(5)
        assert sum(p[1] for p in pts) / 4 == pytest.approx(5)

    def test_points_follow_opencv_corner_order(self):
        box = RotatedRect(50, 40, 30, 10, 27.0)
        expected = cv2.boxPoints(((50.0, 40.0), (30.0, 10.0), 27.0))
        assert np.allclose(np.array(box.points()), expected, atol=1e-4)

    def test_unrotated_corners(self):
        pts = RotatedRect(10, 10, 8, 4, 0.0).points()
        assert sorted(pts) == [(6.0, 8.0), (6.0, 12.0), (14.0, 8.0), (14.0, 12.0)]
