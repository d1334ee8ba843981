"""
Tests for blob resize policies, the inverse blob mapping and the OpenCV blobber.
"""

import cv2
import numpy as np
import pytest

from detection import ModelConfig
from preprocessing import (
    BlobTransform,
    OpenCVBlobPreprocessor,
    ResizeMode,
    RESIZE_MODE_CV_NAMES,
    resize_mode_from_cv,
    resize_mode_to_cv,
    to_three_channels,
)


class TestResizeMode:
    @pytest.mark.parametrize("mode", list(ResizeMode))
    def test_keyword_round_trip(self, mode):
        assert ResizeMode.from_keyword(mode.keyword) is mode

    @pytest.mark.parametrize("mode", list(ResizeMode))
    def test_cv_mapping_round_trip(self, mode):
        value = resize_mode_to_cv(mode)
        assert value == getattr(cv2.dnn, RESIZE_MODE_CV_NAMES[mode])
        assert resize_mode_from_cv(value) is mode

    def test_unknown_keyword_raises(self):
        with pytest.raises(ValueError, match="Unknown resize mode"):
            ResizeMode.from_keyword("stretch")


class TestBlobTransform:
    def test_raw_scales_per_axis(self):
        t = BlobTransform.for_mode(ResizeMode.RAW, (1280, 720), (640, 640))
        assert t.scale_x == pytest.approx(2.0)
        assert t.scale_y == pytest.approx(1.125)
        assert t.map_point(320, 320) == pytest.approx((640, 360))

    def test_letterbox_offsets_padding(self):
        # 1280x720 -> 640x360 content, 140 px padding above and below
        t = BlobTransform.for_mode(ResizeMode.LETTERBOX, (1280, 720), (640, 640))
        assert t.scale_x == pytest.approx(2.0)
        assert t.offset_y == pytest.approx(-280.0)
        assert t.map_point(0, 140) == pytest.approx((0, 0))
        assert t.map_point(640, 500) == pytest.approx((1280, 720))

    def test_letterbox_round_trip(self):
        """A point placed by the forward letterbox lands back where it started."""
        img_w, img_h = 1000, 400
        in_w, in_h = 320, 320
        t = BlobTransform.for_mode(ResizeMode.LETTERBOX, (img_w, img_h), (in_w, in_h))
        factor = min(in_w / img_w, in_h / img_h)
        top = (in_h - int(img_h * factor)) // 2
        for x_img, y_img in [(0, 0), (500, 200), (999, 399)]:
            x_blob = x_img * factor
            y_blob = y_img * factor + top
            assert t.map_point(x_blob, y_blob) == pytest.approx((x_img, y_img))

    def test_crop_offsets_into_image(self):
        t = BlobTransform.for_mode(ResizeMode.CROP, (1280, 720), (640, 640))
        # scaled to 1137.8x640, 248.9 px cut on the left
        assert t.scale_x == pytest.approx(1.125)
        assert t.map_point(0, 0) == pytest.approx((280.0, 0.0))
        assert t.map_point(640, 640) == pytest.approx((1000.0, 720.0))

    def test_crop_uses_continuous_scaled_size(self):
        # 300x200 into 128x64: factor 0.4267, scaled width 128 exactly, height 85.33
        t = BlobTransform.for_mode(ResizeMode.CROP, (300, 200), (128, 64))
        factor = 128 / 300
        assert t.offset_x == pytest.approx(0.0)
        assert t.offset_y == pytest.approx((200 * factor - 64) / 2 / factor)
        assert t.map_point(0, 32) == pytest.approx((0.0, 100.0))

    @pytest.mark.parametrize("image_size,input_size", [
        ((0, 10), (10, 10)),
        ((10, 10), (10, -1)),
    ])
    def test_non_positive_sizes_raise(self, image_size, input_size):
        with pytest.raises(ValueError, match="must be positive"):
            BlobTransform.for_mode(ResizeMode.RAW, image_size, input_size)


class TestToThreeChannels:
    def test_grayscale_expanded(self):
        out = to_three_channels(np.zeros((5, 6), dtype=np.uint8))
        assert out.shape == (5, 6, 3)

    def test_bgra_dropped_alpha(self):
        out = to_three_channels(np.zeros((5, 6, 4), dtype=np.uint8))
        assert out.shape == (5, 6, 3)

    def test_invalid_type_raises(self):
        with pytest.raises(TypeError, match="Expected numpy.ndarray"):
            to_three_channels([[1, 2], [3, 4]])

    def test_unsupported_channels_raises(self):
        with pytest.raises(ValueError, match="Unsupported number of channels"):
            to_three_channels(np.zeros((5, 5, 2), dtype=np.uint8))


class TestOpenCVBlobPreprocessor:
    def _config(self, mode):
        return ModelConfig(
            model_path="unused.onnx",
            input_size=(100, 100),
            scale=(1.0, 1.0, 1.0),
            mean=(0.0, 0.0, 0.0),
            swap_rb=False,
            resize_mode=mode,
        )

    def test_blob_shape_and_dtype(self):
        blob, _ = OpenCVBlobPreprocessor().blobify(
            np.zeros((30, 40, 3), dtype=np.uint8), self._config(ResizeMode.RAW)
        )
        assert blob.shape == (1, 3, 100, 100)
        assert blob.dtype == np.float32

    def test_letterbox_mapping_matches_opencv(self):
        """A bright patch in the blob maps back onto the patch in the image."""
        image = np.zeros((100, 200, 3), dtype=np.uint8)
        image[40:50, 50:60] = 255
        blob, transform = OpenCVBlobPreprocessor().blobify(
            image, self._config(ResizeMode.LETTERBOX)
        )
        ys, xs = np.nonzero(blob[0, 0] > 127)
        left, top = transform.map_point(xs.min(), ys.min())
        right, bottom = transform.map_point(xs.max() + 1, ys.max() + 1)
        assert left == pytest.approx(50, abs=2)
        assert top == pytest.approx(40, abs=2)
        assert right == pytest.approx(60, abs=2)
        assert bottom == pytest.approx(50, abs=2)

    def test_params_rebuilt_for_new_config(self):
        blobber = OpenCVBlobPreprocessor()
        image = np.zeros((30, 40, 3), dtype=np.uint8)
        blobber.blobify(image, self._config(ResizeMode.RAW))
        blob, _ = blobber.blobify(
            image,
            ModelConfig(model_path="unused.onnx", input_size=(32, 16)),
        )
        assert blob.shape == (1, 3, 16, 32)

    def test_installed_opencv_supports_blob_params(self):
        major = int(cv2.__version__.split(".")[0])
        assert major == 4
        assert hasattr(cv2.dnn, "DNN_LAYOUT_NCHW")
        assert hasattr(cv2.dnn, "blobFromImageWithParams")
