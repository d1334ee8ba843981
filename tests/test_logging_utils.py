"""Tests for shared logging configuration."""

import argparse
import logging

import pytest

from logging_utils import add_logging_args, configure_opencv_logging, resolve_log_level


@pytest.mark.parametrize("verbose,quiet,expected", [
    (0, 0, logging.INFO),
    (1, 0, logging.DEBUG),
    (0, 1, logging.WARNING),
    (0, 2, logging.ERROR),
])
def test_resolve_from_modifiers(verbose, quiet, expected):
    assert resolve_log_level(verbose=verbose, quiet=quiet) == expected


def test_explicit_level_wins():
    assert resolve_log_level("error", verbose=2) == logging.ERROR


def test_parser_flags():
    parser = argparse.ArgumentParser()
    add_logging_args(parser)
    args = parser.parse_args(["-vv", "--log-level", "debug"])
    assert args.verbose == 2
    assert args.log_level == "debug"


@pytest.mark.parametrize("level", [logging.DEBUG, logging.INFO, logging.ERROR, logging.CRITICAL])
def test_opencv_level_accepted(level):
    configure_opencv_logging(level)
