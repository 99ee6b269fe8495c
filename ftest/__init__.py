"""
ftest - Fluent assertions and an in-process HTTP testing client

Failures are reported at the exact line of test code that made the
failing check, and a test stops on its first failure. Comparisons treat
nil-like values (None, typed nils such as ``nil(list)``) as equal, while
an empty container stays a real value.

Subpackages:
    - assertions: Nil-aware comparator and the fluent Assertion chain
    - client: In-process HTTP client, cookie jar and response inspection
    - config: YAML client configuration
    - reporting: Reporter implementations for pytest and plain scripts

Usage:
    from ftest import Assertion, Client, PytestReporter

    def hello(w, r):
        w.write('{"foo": "bar"}')

    def test_hello():
        reporter = PytestReporter()
        Assertion(reporter).eq(2, 2).contains("FooBarBaz", "Bar")

        cl = Client(reporter, hello)
        cl.get("/hello").status_eq(200).body_contains("bar").json_eq({"foo": "bar"})
"""

__version__ = "0.1.0"

# Re-export assertions for convenience
from .assertions import (
    # Models
    Nil,
    NilKind,
    Reporter,
    nil,
    # Comparator
    classify,
    equal,
    is_nil,
    # Engine
    Assertion,
)

# Re-export client for convenience
from .client import (
    Client,
    Cookie,
    CookieJar,
    Handler,
    Request,
    Response,
    ResponseRecorder,
    json_field,
    wsgi_handler,
)

# Re-export config for convenience
from .config import (
    ClientConfig,
    ValidationResult,
    load_client_config,
    validate_config_yaml,
)

# Re-export reporting for convenience
from .reporting import (
    AssertionFailed,
    PytestReporter,
    RaisingReporter,
)


def new(reporter: Reporter) -> Assertion:
    """Create an Assertion with the default label."""
    return Assertion(reporter)


def new_label(reporter: Reporter, label: str) -> Assertion:
    """Create an Assertion with a custom label."""
    return Assertion(reporter, label)


__all__ = [
    # Package info
    "__version__",
    # Assertions
    "Nil",
    "NilKind",
    "Reporter",
    "nil",
    "classify",
    "equal",
    "is_nil",
    "Assertion",
    "new",
    "new_label",
    # Client
    "Client",
    "Cookie",
    "CookieJar",
    "Handler",
    "Request",
    "Response",
    "ResponseRecorder",
    "json_field",
    "wsgi_handler",
    # Config
    "ClientConfig",
    "ValidationResult",
    "load_client_config",
    "validate_config_yaml",
    # Reporting
    "AssertionFailed",
    "PytestReporter",
    "RaisingReporter",
]
