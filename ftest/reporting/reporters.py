"""
Reporter implementations for common test runners.

A Reporter aborts the current test with a message pointing at the line
of test code that made the failing check, instead of a stack trace
through the assertion library.
"""

from __future__ import annotations

import logging
import os
import sys
from abc import ABC, abstractmethod
from types import CodeType, FrameType
from typing import Any

import pytest

logger = logging.getLogger(__name__)

_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class AssertionFailed(AssertionError):
    """
    Raised by RaisingReporter when a check fails.

    Attributes:
        message: The formatted failure message
        location: "file:line" of the failing call site, if found
    """

    def __init__(self, message: str, location: str | None = None):
        self.message = message
        self.location = location
        super().__init__(_with_location(message, location))


class LocatingReporter(ABC):
    """
    Base for reporters that locate the failing call site.

    ``helper()`` marks the calling function as a helper; the reported
    location is the first frame that is neither inside this package nor
    a marked helper.
    """

    def __init__(self) -> None:
        self._helpers: set[CodeType] = set()

    def helper(self) -> None:
        frame = sys._getframe(1)
        self._helpers.add(frame.f_code)

    def fatalf(self, format: str, *args: Any) -> None:
        __tracebackhide__ = True
        message = format % args if args else format
        location = self.location()
        logger.debug(f"Check failed at {location}: {message}")
        self.abort(message, location)

    @abstractmethod
    def abort(self, message: str, location: str | None) -> None:
        """Stop the current test with the formatted message."""
        pass

    def location(self) -> str | None:
        """Return "file:line" of the first significant caller frame."""
        frame: FrameType | None = sys._getframe(1)
        while frame is not None:
            code = frame.f_code
            if code not in self._helpers and not _in_package(code.co_filename):
                return f"{_relative(code.co_filename)}:{frame.f_lineno}"
            frame = frame.f_back
        return None


class PytestReporter(LocatingReporter):
    """
    Reporter for pytest.

    Fails the test with ``pytest.fail(..., pytrace=False)`` so only the
    call-site location and the message are shown.
    """

    def abort(self, message: str, location: str | None) -> None:
        __tracebackhide__ = True
        pytest.fail(_with_location(message, location), pytrace=False)


class RaisingReporter(LocatingReporter):
    """Reporter raising AssertionFailed, for unittest or plain scripts."""

    def abort(self, message: str, location: str | None) -> None:
        __tracebackhide__ = True
        raise AssertionFailed(message, location)


def _in_package(filename: str) -> bool:
    return os.path.abspath(filename).startswith(_PACKAGE_DIR + os.sep)


def _relative(filename: str) -> str:
    try:
        return os.path.relpath(filename)
    except ValueError:
        # Different drive on Windows
        return filename


def _with_location(message: str, location: str | None) -> str:
    if location is None:
        return message
    return f"{location}: {message}"
