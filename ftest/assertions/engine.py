"""
Fluent assertion chain.

This module provides the Assertion class: a labelled sequence of checks
that reports the first failure through a Reporter and stops the test.
"""

from __future__ import annotations

from typing import Any, Callable

from .comparator import equal, is_nil
from .models import Reporter

DEFAULT_LABEL = "Assertion"
NIL_MARKER = "*nil*"


class Assertion:
    """
    Chainable checks bound to a Reporter.

    Every check returns the assertion itself, so calls can be chained.
    On failure the message is prefixed with the label and handed to
    ``reporter.fatalf``, which normally aborts the test right there.

    Each check has an ``f`` variant taking an explicit %-format and
    arguments that replace the default failure message.

    Example:
        Assertion(reporter).eq(2, 2).contains("FooBarBaz", "Bar").raises_with_substr(
            lambda: int("x"), "invalid literal"
        )
    """

    def __init__(self, reporter: Reporter, label: str = DEFAULT_LABEL):
        self._t = reporter
        self.label = label

    # ─────────────────────────────────────────────────────────────────────
    # Equality
    # ─────────────────────────────────────────────────────────────────────

    def eq(self, got: Any, expected: Any) -> Assertion:
        """Check that two values are equal."""
        __tracebackhide__ = True
        self._t.helper()
        return self.eqf(
            got, expected, "got: %s, expected: %s",
            _describe(got), _describe(expected),
        )

    def eqf(self, got: Any, expected: Any, format: str, *args: Any) -> Assertion:
        __tracebackhide__ = True
        self._t.helper()
        if not equal(got, expected):
            self._fail(format, *args)
        return self

    def not_eq(self, got: Any, expected: Any) -> Assertion:
        """Check that two values are not equal."""
        __tracebackhide__ = True
        self._t.helper()
        return self.not_eqf(
            got, expected, "are equal: %s(%r)", type(got).__name__, got
        )

    def not_eqf(self, got: Any, expected: Any, format: str, *args: Any) -> Assertion:
        __tracebackhide__ = True
        self._t.helper()
        if equal(got, expected):
            self._fail(format, *args)
        return self

    # ─────────────────────────────────────────────────────────────────────
    # Text
    # ─────────────────────────────────────────────────────────────────────

    def contains(self, text: str, substr: str) -> Assertion:
        """Check that ``text`` contains ``substr``."""
        __tracebackhide__ = True
        self._t.helper()
        return self.containsf(text, substr, '"%s" doesn\'t contain "%s"', text, substr)

    def containsf(self, text: str, substr: str, format: str, *args: Any) -> Assertion:
        __tracebackhide__ = True
        self._t.helper()
        for value in (text, substr):
            if not isinstance(value, str):
                self._fail("contains expects text, got %s", type(value).__name__)
                return self
        if substr not in text:
            self._fail(format, *args)
        return self

    # ─────────────────────────────────────────────────────────────────────
    # Exceptions
    # ─────────────────────────────────────────────────────────────────────

    def raises_with_substr(self, fn: Callable[[], Any], substr: str) -> Assertion:
        """
        Check that calling ``fn`` raises an exception mentioning ``substr``.

        Pass an empty substring if any exception will do. Only
        ``Exception`` subclasses are intercepted; the chain resumes
        normally afterwards.
        """
        __tracebackhide__ = True
        self._t.helper()
        return self._check_raises(fn, substr, None)

    def raises_with_substrf(
        self, fn: Callable[[], Any], substr: str, format: str, *args: Any
    ) -> Assertion:
        __tracebackhide__ = True
        self._t.helper()
        return self._check_raises(fn, substr, (format, args))

    def _check_raises(
        self,
        fn: Callable[[], Any],
        substr: str,
        custom: tuple[str, tuple[Any, ...]] | None,
    ) -> Assertion:
        __tracebackhide__ = True
        self._t.helper()
        try:
            fn()
        except Exception as e:
            message = str(e)
            if substr not in message:
                if custom:
                    self._fail(custom[0], *custom[1])
                else:
                    self._fail(
                        'Error "%s" doesn\'t contain substring "%s"', message, substr
                    )
            return self

        if custom:
            self._fail(custom[0], *custom[1])
        else:
            self._fail("Function %r didn't raise as expected", fn)
        return self

    # ─────────────────────────────────────────────────────────────────────
    # Booleans and nil
    # ─────────────────────────────────────────────────────────────────────

    def is_true(self, got: bool) -> Assertion:
        __tracebackhide__ = True
        self._t.helper()
        return self.is_truef(got, "Not true")

    def is_truef(self, got: bool, format: str, *args: Any) -> Assertion:
        __tracebackhide__ = True
        self._t.helper()
        return self.eqf(got, True, format, *args)

    def is_false(self, got: bool) -> Assertion:
        __tracebackhide__ = True
        self._t.helper()
        return self.is_falsef(got, "Not false")

    def is_falsef(self, got: bool, format: str, *args: Any) -> Assertion:
        __tracebackhide__ = True
        self._t.helper()
        return self.eqf(got, False, format, *args)

    def is_nil(self, got: Any) -> Assertion:
        """Check that a value is nil-like."""
        __tracebackhide__ = True
        self._t.helper()
        return self.is_nilf(got, "%s(%r) isn't nil", type(got).__name__, got)

    def is_nilf(self, got: Any, format: str, *args: Any) -> Assertion:
        __tracebackhide__ = True
        self._t.helper()
        return self.eqf(got, None, format, *args)

    def is_not_nil(self, got: Any) -> Assertion:
        """Check that a value is not nil-like."""
        __tracebackhide__ = True
        self._t.helper()
        return self.is_not_nilf(got, "%s(%r) is nil", type(got).__name__, got)

    def is_not_nilf(self, got: Any, format: str, *args: Any) -> Assertion:
        __tracebackhide__ = True
        self._t.helper()
        return self.not_eqf(got, None, format, *args)

    def _fail(self, format: str, *args: Any) -> None:
        __tracebackhide__ = True
        self._t.helper()
        message = format % args if args else format
        self._t.fatalf("[%s] %s", self.label, message)

    def __repr__(self) -> str:
        return f"Assertion(label={self.label!r})"


def _describe(value: Any) -> str:
    """Render a value with its type, marking nil-like values explicitly."""
    marker = NIL_MARKER if is_nil(value) else ""
    return f"{type(value).__name__}({marker}{value!r})"
