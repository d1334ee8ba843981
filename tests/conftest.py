"""Pytest configuration: fast by default, real models only with --slow.

Slow tests (real model files) are skipped unless --slow is passed.
Run the full suite:   pytest --slow
Run fast tests only:  pytest          (default)

Fast tests never touch a real network: detectors are built with a fake
runner that returns canned output tensors and a blobber that only computes
the inverse mapping.
"""
import numpy as np
import pytest

from detection import ModelConfig
from preprocessing import BlobTransform, ResizeMode


def pytest_addoption(parser):
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow tests that load real model files",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        return  # run everything
    skip_slow = pytest.mark.skip(reason="slow test skipped, pass --slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class FakeRunner:
    """InferenceRunner returning preset outputs."""

    def __init__(self, outputs=None, load_ok=True):
        self.outputs = list(outputs or [])
        self.load_ok = load_ok
        self.loaded_configs = []
        self.blobs = []

    def load(self, config):
        self.loaded_configs.append(config)
        return self.load_ok

    def forward(self, blob):
        self.blobs.append(blob)
        return list(self.outputs)


class MappingBlobber:
    """BlobPreprocessor that skips pixel work and only builds the transform."""

    def blobify(self, image, config):
        height, width = image.shape[:2]
        in_w, in_h = config.input_size
        blob = np.zeros((1, 3, in_h, in_w), dtype=np.float32)
        transform = BlobTransform.for_mode(config.resize_mode, (width, height), (in_w, in_h))
        return blob, transform


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def blobber():
    return MappingBlobber()


@pytest.fixture
def identity_config():
    """Config whose blob mapping is 1:1 for a 64x64 image."""
    return ModelConfig(
        model_path="model.onnx",
        input_size=(64, 64),
        resize_mode=ResizeMode.RAW,
    )


@pytest.fixture
def image64():
    return np.zeros((64, 64, 3), dtype=np.uint8)


@pytest.fixture
def make_runner():
    """Factory for additional fake runners within one test."""
    return FakeRunner
