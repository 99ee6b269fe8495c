"""
Fluent inspection of captured responses.

This module provides the Response wrapper returned by the client. Every
inspection method fails through a labelled Assertion and returns the
response, so checks can be chained:

    client.get("/hello").status_eq(200).body_contains("bar").json_eq({"foo": "bar"})
"""

from __future__ import annotations

import json
from dataclasses import field, fields, is_dataclass
from http import HTTPStatus
from typing import Any

from aiohttp import hdrs
from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.exceptions import JsonPathParserError
from multidict import CIMultiDict

from ..assertions import Assertion, Reporter
from .models import Cookie, Request, ResponseRecorder


class Response:
    """
    A captured response with chainable assertions.

    Attributes:
        recorder: The recorder the handler wrote into
        request: The request that produced this response
    """

    def __init__(
        self,
        recorder: ResponseRecorder,
        reporter: Reporter,
        request: Request | None = None,
    ):
        self.recorder = recorder
        self.request = request
        self._t = reporter

    @property
    def status(self) -> int:
        return self.recorder.status

    @property
    def headers(self) -> CIMultiDict[str]:
        return self.recorder.headers

    @property
    def body(self) -> bytes:
        return bytes(self.recorder.body)

    @property
    def text(self) -> str:
        return self.recorder.body.decode("utf-8", errors="replace")

    @property
    def cookies(self) -> list[Cookie]:
        """Cookies set by the response, in header order."""
        cookies = []
        for header in self.headers.getall(hdrs.SET_COOKIE, []):
            cookie = Cookie.from_header(header)
            if cookie is not None:
                cookies.append(cookie)
        return cookies

    def json(self) -> Any:
        """Parse the body as JSON (numbers are returned as floats)."""
        return _loads(self.body)

    # ─────────────────────────────────────────────────────────────────────
    # Assertions
    # ─────────────────────────────────────────────────────────────────────

    def status_eq(self, expected: int) -> Response:
        """Check the response status code."""
        __tracebackhide__ = True
        self._t.helper()
        if isinstance(expected, HTTPStatus):
            expected = int(expected)
        Assertion(self._t, "status_eq").eq(self.status, expected)
        return self

    def body_eq(self, expected: bytes | str) -> Response:
        """Check the whole body byte for byte. Accepts bytes or str."""
        __tracebackhide__ = True
        self._t.helper()
        want = to_bytes(self._t, expected)
        Assertion(self._t, "body_eq").eqf(
            self.body, want, 'got: "%s", expected: "%s"', _show(self.body), _show(want)
        )
        return self

    def body_contains(self, substr: str) -> Response:
        __tracebackhide__ = True
        self._t.helper()
        check = Assertion(self._t, "body_contains")
        if not isinstance(substr, str):
            check.contains(self.text, substr)
            return self
        check.is_truef(
            substr.encode("utf-8") in self.body,
            '"%s" doesn\'t contain "%s"', _show(self.body), substr,
        )
        return self

    def header_eq(self, name: str, value: str) -> Response:
        """Check the first value of a header; a missing header reads as ""."""
        __tracebackhide__ = True
        self._t.helper()
        Assertion(self._t, "header_eq").eq(self.headers.get(name, ""), value)
        return self

    def json_eq(self, expected: Any) -> Response:
        """
        Check that the body is JSON equal to ``expected``.

        A str argument is taken as raw JSON; anything else is serialized
        to JSON first. Both sides are parsed and compared as trees, so key
        order and formatting do not matter, while JSON types do
        (``22`` is not ``"22"``).
        """
        __tracebackhide__ = True
        self._t.helper()
        try:
            got = _loads(self.body)
        except ValueError:
            self._t.fatalf("json_eq: response body isn't valid JSON:\n%s", self.text)
            return self

        if isinstance(expected, str):
            expected_text = expected
        else:
            try:
                expected_text = dumps(expected)
            except (TypeError, ValueError) as e:
                self._t.fatalf("json_eq: can't convert to JSON: %s", e)
                return self

        try:
            want = _loads(expected_text)
        except ValueError as e:
            self._t.fatalf("json_eq: argument isn't valid JSON: %s", e)
            return self

        Assertion(self._t, "json_eq").eqf(
            got, want, "got:\n%s\nexpected:\n%s", self.text, expected_text
        )
        return self

    def json_path_eq(self, path: str, expected: Any) -> Response:
        """
        Check the first value matched by a JSONPath expression.

        ``expected`` is normalized through JSON like the body, so
        ``json_path_eq("$.price", 22)`` matches a body of ``{"price": 22}``.
        """
        __tracebackhide__ = True
        self._t.helper()
        try:
            expr = parse_jsonpath(path)
        except JsonPathParserError as e:
            self._t.fatalf("json_path_eq: invalid JSONPath expression %r: %s", path, e)
            return self
        except Exception as e:
            self._t.fatalf(
                "json_path_eq: failed to parse JSONPath %r: %s: %s",
                path, type(e).__name__, e,
            )
            return self

        try:
            data = _loads(self.body)
        except ValueError:
            self._t.fatalf("json_path_eq: response body isn't valid JSON:\n%s", self.text)
            return self

        try:
            want = _loads(dumps(expected))
        except (TypeError, ValueError) as e:
            self._t.fatalf("json_path_eq: can't convert to JSON: %s", e)
            return self

        matches = expr.find(data)
        if not matches:
            self._t.fatalf("json_path_eq: path %s does not exist in:\n%s", path, self.text)
            return self

        Assertion(self._t, "json_path_eq").eqf(
            matches[0].value, want, "%s: got %r, expected %r", path, matches[0].value, want
        )
        return self

    def __repr__(self) -> str:
        return f"Response(status={self.status}, body_size={len(self.recorder.body)})"


# ─────────────────────────────────────────────────────────────────────────────
# JSON helpers
# ─────────────────────────────────────────────────────────────────────────────

def json_field(name: str | None = None, *, omitempty: bool = False, **kwargs: Any) -> Any:
    """
    Declare a dataclass field with JSON naming hints.

    Args:
        name: Key to use in JSON ("-" drops the field); defaults to the field name
        omitempty: Drop the key when the value is empty (None, 0, "", [], {}, False)
        **kwargs: Passed through to ``dataclasses.field``

    Example:
        @dataclass
        class Product:
            name: str = json_field("name", omitempty=True, default="")
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata["json"] = name
    metadata["omitempty"] = omitempty
    return field(metadata=metadata, **kwargs)


def dumps(value: Any) -> str:
    """Serialize a value to JSON text, supporting dataclasses and to_dict()."""
    return json.dumps(value, default=_json_default, allow_nan=False)


def _json_default(obj: Any) -> Any:
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return _dataclass_to_json(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _dataclass_to_json(obj: Any) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for f in fields(obj):
        key = f.metadata.get("json") or f.name
        if key == "-":
            continue
        value = getattr(obj, f.name)
        if f.metadata.get("omitempty") and not value:
            continue
        result[key] = value
    return result


def _loads(data: str | bytes) -> Any:
    # JSON has a single number type
    return json.loads(data, parse_int=float, parse_constant=_reject_constant)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _show(data: bytes) -> str:
    """Render body bytes for messages; invalid UTF-8 stays visible as escapes."""
    return data.decode("utf-8", errors="backslashreplace")


def to_bytes(reporter: Reporter, value: Any) -> bytes:
    """Convert a bytes/str body argument, failing on any other type."""
    reporter.helper()
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    reporter.fatalf("Unexpected type %s!", type(value).__name__)
    return b""
