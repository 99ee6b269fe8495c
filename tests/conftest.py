"""Shared pytest fixtures for ftest tests.

The toolkit's own failure path is exercised through MockReporter, whose
``fatalf`` records the message and aborts the evaluated chain.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from ftest.assertions import Assertion
from ftest.client import Client, Handler, Request, ResponseRecorder

pytest_plugins = ["pytester"]


class MockFailure(Exception):
    """Raised by MockReporter.fatalf to abort the evaluated chain."""


class MockReporter:
    """Reporter recording the last failure message."""

    def __init__(self) -> None:
        self.err = ""
        self.helper_calls = 0

    def helper(self) -> None:
        self.helper_calls += 1

    def fatalf(self, format: str, *args: Any) -> None:
        self.err = format % args if args else format
        raise MockFailure(self.err)

    def should_fail(self, substr: str, fn: Callable[[], Any]) -> None:
        """Check that ``fn`` fails with a message containing ``substr``."""
        self.err = ""
        _evaluate(fn)
        assert self.err, f"Should fail with {substr!r}, but didn't"
        assert substr in self.err, (
            f"Should fail with {substr!r}, but failed with\n{self.err}"
        )

    def should_pass(self, fn: Callable[[], Any]) -> None:
        """Check that ``fn`` doesn't fail."""
        self.err = ""
        _evaluate(fn)
        assert not self.err, f"Should pass, but failed with {self.err!r}"


class RecordingReporter:
    """Reporter that records failures without aborting."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def helper(self) -> None:
        pass

    def fatalf(self, format: str, *args: Any) -> None:
        self.messages.append(format % args if args else format)


def _evaluate(fn: Callable[[], Any]) -> None:
    try:
        fn()
    except MockFailure:
        pass


@pytest.fixture
def mock_reporter() -> MockReporter:
    """Create a fresh MockReporter."""
    return MockReporter()


@pytest.fixture
def recording_reporter() -> RecordingReporter:
    """Create a reporter that never aborts."""
    return RecordingReporter()


@pytest.fixture
def ass(mock_reporter: MockReporter) -> Assertion:
    """Create an Assertion bound to the mock reporter."""
    return Assertion(mock_reporter)


@pytest.fixture
def make_client(mock_reporter: MockReporter) -> Callable[[Handler], Client]:
    """Build clients failing through the mock reporter."""

    def make(handler: Handler) -> Client:
        return Client(mock_reporter, handler)

    return make


def body_handler(body: str, status: int | None = None) -> Handler:
    """Handler writing a fixed body (and status, if given)."""

    def handler(w: ResponseRecorder, r: Request) -> None:
        if status is not None:
            w.write_header(status)
        w.write(body)

    return handler
