"""
Pytest fixtures for ftest.

Registered automatically through the ``pytest11`` entry point once the
package is installed.

Fixtures:
    ftest_reporter: PytestReporter failing the current test at the call site.
    fassert: Assertion bound to ftest_reporter.
    fclient: Factory building a Client around a handler.

Ini options:
    ftest_config: Path to a YAML client config used by ``fclient``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from .assertions import Assertion
from .client import Client, Handler
from .config import ClientConfig, load_client_config
from .reporting import PytestReporter


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addini(
        "ftest_config",
        help="Path to a YAML client config used by the fclient fixture",
        default="",
    )


@pytest.fixture
def ftest_reporter() -> PytestReporter:
    """Create a reporter failing the current test."""
    return PytestReporter()


@pytest.fixture
def fassert(ftest_reporter: PytestReporter) -> Assertion:
    """Create an assertion chain for the current test."""
    return Assertion(ftest_reporter)


@pytest.fixture(scope="session")
def ftest_client_config(pytestconfig: pytest.Config) -> ClientConfig:
    """
    Load the client config named by the ``ftest_config`` ini option.

    Returns the defaults when the option is not set. An invalid file
    fails the requesting test with the validation report.
    """
    value = pytestconfig.getini("ftest_config")
    if not value:
        return ClientConfig()

    path = Path(value)
    if not path.is_absolute():
        path = Path(pytestconfig.rootpath) / path

    config, result = load_client_config(path)
    if config is None:
        pytest.fail(str(result), pytrace=False)
    return config


@pytest.fixture
def fclient(
    ftest_reporter: PytestReporter, ftest_client_config: ClientConfig
) -> Callable[[Handler], Client]:
    """
    Provide a factory building clients for the current test.

    Example:
        def test_hello(fclient):
            fclient(hello).get("/").status_eq(200)
    """

    def make(handler: Handler) -> Client:
        return Client.from_config(ftest_reporter, handler, ftest_client_config)

    return make
