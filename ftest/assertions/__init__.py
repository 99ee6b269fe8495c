"""
Fluent assertions with nil-aware comparison.

This package provides the assertion chain used by tests and by the
HTTP response inspector, together with the comparator it relies on.

Supported checks:
    - eq / not_eq: nil-aware deep equality
    - contains: substring containment
    - raises_with_substr: the call raises an exception mentioning a substring
    - is_true / is_false: strict boolean checks
    - is_nil / is_not_nil: nil-like values (None, typed nils, dead weakrefs)

Usage:
    from ftest.assertions import Assertion, nil

    ass = Assertion(reporter)
    ass.eq({"foo": 1}, {"foo": 1}).is_nil(nil(list)).contains("FooBar", "Bar")
"""

# Models
from .models import Nil, NilKind, Reporter, nil

# Comparator
from .comparator import classify, equal, is_nil

# Engine
from .engine import DEFAULT_LABEL, Assertion

__all__ = [
    # Models
    "Nil",
    "NilKind",
    "Reporter",
    "nil",
    # Comparator
    "classify",
    "equal",
    "is_nil",
    # Engine
    "DEFAULT_LABEL",
    "Assertion",
]
