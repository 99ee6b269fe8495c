"""
Nil-aware deep equality.

Every assertion compares values through ``equal``. Two nil-like values
(``None``, a typed nil, a dead weak reference) are always equal, whatever
their types. Anything else goes through strict structural equality:
same runtime type, mappings by key, sequences element by element, sets
by strictly equal members.
"""

from __future__ import annotations

import weakref
from dataclasses import fields, is_dataclass
from typing import Any

from .models import Nil, NilKind


def classify(value: Any) -> NilKind:
    """Classify a value as absent, uninitialized or concrete."""
    if value is None:
        return NilKind.ABSENT
    if isinstance(value, Nil):
        return NilKind.UNINITIALIZED
    if isinstance(value, weakref.ReferenceType) and value() is None:
        return NilKind.UNINITIALIZED
    return NilKind.CONCRETE


def is_nil(value: Any) -> bool:
    """Return True if the value is nil-like (absent or uninitialized)."""
    return classify(value) != NilKind.CONCRETE


def equal(a: Any, b: Any) -> bool:
    """
    Compare two values, treating all nil-like values as equal.

    An allocated empty container is concrete: ``equal([], None)`` and
    ``equal([], nil(list))`` are both False, while ``equal(nil(list), None)``
    is True.

    Args:
        a: First operand
        b: Second operand

    Returns:
        True if both operands are nil-like or structurally equal
    """
    if is_nil(a) and is_nil(b):
        return True
    return _deep_equal(a, b, set())


_MISSING = object()


def _deep_equal(a: Any, b: Any, seen: set[tuple[int, int]]) -> bool:
    """Strict structural equality without type coercion."""
    if type(a) is not type(b):
        return False
    if a is b:
        return True

    container = isinstance(a, (dict, list, tuple, set, frozenset)) or (
        is_dataclass(a) and not isinstance(a, type)
    )
    if not container:
        return a == b

    # Pairs already under comparison are assumed equal (cyclic values)
    pair = (id(a), id(b))
    if pair in seen:
        return True
    seen.add(pair)
    if _container_equal(a, b, seen):
        return True
    seen.discard(pair)
    return False


def _container_equal(a: Any, b: Any, seen: set[tuple[int, int]]) -> bool:
    if isinstance(a, dict):
        if len(a) != len(b):
            return False
        for key, value in a.items():
            other = _find_key(b, key, seen)
            if other is _MISSING or not _deep_equal(value, b[other], seen):
                return False
        return True

    if isinstance(a, (list, tuple)):
        if len(a) != len(b):
            return False
        return all(_deep_equal(x, y, seen) for x, y in zip(a, b))

    if isinstance(a, (set, frozenset)):
        if len(a) != len(b):
            return False
        return all(any(_deep_equal(x, y, seen) for y in b) for x in a)

    return all(
        _deep_equal(getattr(a, f.name), getattr(b, f.name), seen)
        for f in fields(a)
    )


def _find_key(mapping: dict, key: Any, seen: set[tuple[int, int]]) -> Any:
    # 1, 1.0 and True hash alike; only a key of the same type matches
    if key not in mapping:
        return _MISSING
    for candidate in mapping:
        if _deep_equal(key, candidate, seen):
            return candidate
    return _MISSING
