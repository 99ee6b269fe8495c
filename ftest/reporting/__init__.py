"""
Failure reporters.

This package provides ready-made Reporter implementations that plug the
assertions into a test runner.

Usage:
    from ftest import Assertion
    from ftest.reporting import PytestReporter

    def test_numbers():
        Assertion(PytestReporter()).eq(2, 2)
"""

from .reporters import (
    AssertionFailed,
    LocatingReporter,
    PytestReporter,
    RaisingReporter,
)

__all__ = [
    "AssertionFailed",
    "LocatingReporter",
    "PytestReporter",
    "RaisingReporter",
]
