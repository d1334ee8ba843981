"""Backends command: list backend/target keywords and their availability."""

from __future__ import annotations

import argparse
import logging

import cv2

from detection.backends import BACKEND_CV_NAMES, TARGET_CV_NAMES, is_available

logger = logging.getLogger(__name__)


def add_backends_subparser(subparsers: argparse._SubParsersAction) -> None:
    backends_parser = subparsers.add_parser(
        "backends",
        help="List inference backends and targets",
    )
    backends_parser.set_defaults(_cmd=cmd_backends)


def cmd_backends(args: argparse.Namespace) -> int:
    print(f"OpenCV {cv2.__version__}")
    print("Backends:")
    for backend, name in BACKEND_CV_NAMES.items():
        status = "yes" if is_available(name) else "no"
        print(f"  {backend.keyword:<12} {name:<32} {status}")
    print("Targets:")
    for target, name in TARGET_CV_NAMES.items():
        status = "yes" if is_available(name) else "no"
        print(f"  {target.keyword:<12} {name:<32} {status}")
    return 0
