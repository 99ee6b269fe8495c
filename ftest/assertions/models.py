"""
Core types shared by the comparator and the assertion chain.

This module defines the Reporter capability the assertions fail through,
and the tri-state classification used to recognise nil-like values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Reporter(Protocol):
    """
    Minimal failure-reporting capability consumed by assertions.

    Any host test framework can be plugged in as long as it provides
    these two methods. ``fatalf`` is expected to abort the current test
    (usually by raising); assertions keep working if it returns.
    """

    def fatalf(self, format: str, *args: Any) -> None:
        """Report a %-formatted failure message and abort the current test."""
        ...

    def helper(self) -> None:
        """Mark the calling function as a helper, hidden from locations."""
        ...


class NilKind(str, Enum):
    """Classification of a value with respect to absence."""
    ABSENT = "absent"  # literal None
    UNINITIALIZED = "uninitialized"  # typed nil or dead weak reference
    CONCRETE = "concrete"  # any real value, empty containers included


@dataclass(frozen=True)
class Nil:
    """
    A typed nil: a reference of a known type that was never initialized.

    ``nil(list)`` stands for a list that does not exist yet, which is
    different from the empty list ``[]``. ``nil()`` is an untyped nil.

    Attributes:
        of: The type the reference would have held, if any
    """
    of: type | None = None

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        if self.of is None:
            return "nil()"
        return f"nil({self.of.__name__})"


def nil(of: type | None = None) -> Nil:
    """Create a typed nil for the given type."""
    return Nil(of)
