#!/usr/bin/env python3
"""
Unified CLI for the neural detection engine.

Usage:
    ndet detect <settings.json> <images...>       # Run a detector on images
    ndet detect <settings.json> <dir> --annotate out/
    ndet backends                                 # List backends and targets
"""

import argparse
import logging
import sys

from logging_utils import configure_logging, add_logging_args
from cli.detect import add_detect_subparser
from cli.backends import add_backends_subparser

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ndet",
        description="Neural detection engine - detect text and objects in images",
    )
    add_logging_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    add_detect_subparser(subparsers)
    add_backends_subparser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet)

    cmd = getattr(args, "_cmd", None)
    if cmd is None:
        parser.print_help()
        return 1
    return cmd(args)


if __name__ == "__main__":
    sys.exit(main())
