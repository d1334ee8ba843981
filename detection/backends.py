"""
Inference backend and target selectors.

Backend and Target are closed enums with their own values. They are mapped
to OpenCV's ``cv2.dnn.DNN_BACKEND_*`` / ``cv2.dnn.DNN_TARGET_*`` constants
through explicit name tables rather than by relying on the numeric values
happening to match, so an OpenCV build that renumbers or omits a constant
fails loudly instead of silently selecting the wrong device.
"""

from __future__ import annotations

import enum

import cv2


class Backend(enum.IntEnum):
    """Computation backend used to run a network."""

    DEFAULT = 0
    HALIDE = 1
    OPENVINO = 2
    OPENCV = 3
    VULKAN = 4
    CUDA = 5
    WEBNN = 6
    TIMVX = 7
    CANN = 8

    @property
    def keyword(self) -> str:
        return BACKEND_KEYWORDS[self]

    @classmethod
    def from_keyword(cls, keyword: str) -> Backend:
        return _lookup_keyword(BACKEND_KEYWORDS, keyword, "backend")


class Target(enum.IntEnum):
    """Device a backend runs the network on."""

    CPU = 0
    OPENCL = 1
    OPENCL_FP16 = 2
    MYRIAD = 3
    VULKAN = 4
    FPGA = 5
    CUDA = 6
    CUDA_FP16 = 7
    HDDL = 8
    NPU = 9
    CPU_FP16 = 10

    @property
    def keyword(self) -> str:
        return TARGET_KEYWORDS[self]

    @classmethod
    def from_keyword(cls, keyword: str) -> Target:
        return _lookup_keyword(TARGET_KEYWORDS, keyword, "target")


# Keywords used in settings files and on the command line
BACKEND_KEYWORDS: dict[Backend, str] = {
    Backend.DEFAULT: "default",
    Backend.HALIDE: "halide",
    Backend.OPENVINO: "openvino",
    Backend.OPENCV: "opencv",
    Backend.VULKAN: "vulkan",
    Backend.CUDA: "cuda",
    Backend.WEBNN: "webnn",
    Backend.TIMVX: "timvx",
    Backend.CANN: "cann",
}

TARGET_KEYWORDS: dict[Target, str] = {
    Target.CPU: "cpu",
    Target.OPENCL: "opencl",
    Target.OPENCL_FP16: "opencl-fp16",
    Target.MYRIAD: "myriad",
    Target.VULKAN: "vulkan",
    Target.FPGA: "fpga",
    Target.CUDA: "cuda",
    Target.CUDA_FP16: "cuda-fp16",
    Target.HDDL: "hddl",
    Target.NPU: "npu",
    Target.CPU_FP16: "cpu-fp16",
}

# OpenCV constant names, looked up on cv2.dnn at call time
BACKEND_CV_NAMES: dict[Backend, str] = {
    Backend.DEFAULT: "DNN_BACKEND_DEFAULT",
    Backend.HALIDE: "DNN_BACKEND_HALIDE",
    Backend.OPENVINO: "DNN_BACKEND_INFERENCE_ENGINE",
    Backend.OPENCV: "DNN_BACKEND_OPENCV",
    Backend.VULKAN: "DNN_BACKEND_VKCOM",
    Backend.CUDA: "DNN_BACKEND_CUDA",
    Backend.WEBNN: "DNN_BACKEND_WEBNN",
    Backend.TIMVX: "DNN_BACKEND_TIMVX",
    Backend.CANN: "DNN_BACKEND_CANN",
}

TARGET_CV_NAMES: dict[Target, str] = {
    Target.CPU: "DNN_TARGET_CPU",
    Target.OPENCL: "DNN_TARGET_OPENCL",
    Target.OPENCL_FP16: "DNN_TARGET_OPENCL_FP16",
    Target.MYRIAD: "DNN_TARGET_MYRIAD",
    Target.VULKAN: "DNN_TARGET_VULKAN",
    Target.FPGA: "DNN_TARGET_FPGA",
    Target.CUDA: "DNN_TARGET_CUDA",
    Target.CUDA_FP16: "DNN_TARGET_CUDA_FP16",
    Target.HDDL: "DNN_TARGET_HDDL",
    Target.NPU: "DNN_TARGET_NPU",
    Target.CPU_FP16: "DNN_TARGET_CPU_FP16",
}


def _lookup_keyword(table: dict, keyword: str, kind: str):
    wanted = keyword.strip().lower()
    for member, name in table.items():
        if name == wanted:
            return member
    raise ValueError(
        f"Unknown {kind}: {keyword!r}. Expected one of: {', '.join(table.values())}"
    )


def _cv_constant(name: str) -> int:
    value = getattr(cv2.dnn, name, None)
    if value is None:
        raise ValueError(f"Installed OpenCV does not define cv2.dnn.{name}")
    return int(value)


def is_available(name: str) -> bool:
    """Return True if the installed OpenCV defines ``cv2.dnn.<name>``."""
    return hasattr(cv2.dnn, name)


def backend_to_cv(backend: Backend) -> int:
    """Return the ``cv2.dnn`` backend constant for a Backend.

    Raises:
        ValueError: If the installed OpenCV does not define the constant.
    """
    return _cv_constant(BACKEND_CV_NAMES[Backend(backend)])


def backend_from_cv(value: int) -> Backend:
    """Return the Backend for a ``cv2.dnn`` backend constant."""
    for backend, name in BACKEND_CV_NAMES.items():
        if is_available(name) and int(getattr(cv2.dnn, name)) == int(value):
            return backend
    raise ValueError(f"Unsupported OpenCV backend id: {value}")


def target_to_cv(target: Target) -> int:
    """Return the ``cv2.dnn`` target constant for a Target.

    Raises:
        ValueError: If the installed OpenCV does not define the constant.
    """
    return _cv_constant(TARGET_CV_NAMES[Target(target)])


def target_from_cv(value: int) -> Target:
    """Return the Target for a ``cv2.dnn`` target constant."""
    for target, name in TARGET_CV_NAMES.items():
        if is_available(name) and int(getattr(cv2.dnn, name)) == int(value):
            return target
    raise ValueError(f"Unsupported OpenCV target id: {value}")
