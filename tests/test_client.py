"""Tests for the in-process HTTP Client."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import pytest

from ftest.client import Client, Cookie, CookieJar, Handler, Request, ResponseRecorder
from ftest.config import ClientConfig

from conftest import MockReporter, body_handler


def echo_request(w: ResponseRecorder, r: Request) -> None:
    w.write(f"{r.method} {r.url}")


def cookie_handler(name: str, cookie: Cookie) -> Handler:
    """Serve /set (sets the cookie) and /get (echoes it or "empty")."""

    def handler(w: ResponseRecorder, r: Request) -> None:
        if r.path == "/get":
            got = r.cookie(name)
            w.write("empty" if got is None else got.value)
        elif r.path == "/set":
            w.set_cookie(cookie)
            w.write("Stored")
        else:
            raise AssertionError(f"unexpected: {r.path}")

    return handler


class TestRequests:
    """Tests for request building and dispatch."""

    def test_request_method_and_url(self, make_client: Callable[[Handler], Client]) -> None:
        cl = make_client(echo_request)

        assert cl.get("http://foo.bar/baz").text == "GET http://foo.bar/baz"
        assert cl.post("http://foo.bar/", None).text == "POST http://foo.bar/"
        assert cl.invoke(cl.new_request("HEAD", "http://foo.bar/baz")).text == (
            "HEAD http://foo.bar/baz"
        )
        assert cl.put("/item", "x").text == "PUT /item"
        assert cl.delete("/item").text == "DELETE /item"

    def test_post_body(self, make_client: Callable[[Handler], Client]) -> None:
        def echo_body(w: ResponseRecorder, r: Request) -> None:
            w.write(r.stream.read())

        cl = make_client(echo_body)
        cl.post("/", "text body").body_eq("text body")
        cl.post("/", b"raw body").body_eq(b"raw body")

    def test_post_rejects_other_types(
        self, make_client: Callable[[Handler], Client], mock_reporter: MockReporter
    ) -> None:
        cl = make_client(body_handler(""))
        mock_reporter.should_fail("Unexpected type int!", lambda: cl.post("/", 22))
        mock_reporter.should_fail("Unexpected type dict!", lambda: cl.post("/", {"a": 1}))

    def test_default_headers(self, make_client: Callable[[Handler], Client]) -> None:
        cl = make_client(body_handler(""))
        cl.default_headers["foo"] = "FOO"

        req = cl.new_request("GET", "/")
        assert req.headers.get("Foo") == "FOO"

    def test_default_headers_are_copied_at_construction(
        self, make_client: Callable[[Handler], Client]
    ) -> None:
        cl = make_client(body_handler(""))
        cl.default_headers["foo"] = "FOO"
        req = cl.new_request("GET", "/")

        cl.default_headers["foo"] = "BAR"
        assert req.headers["foo"] == "FOO"

    def test_default_headers_without_jar(
        self, make_client: Callable[[Handler], Client]
    ) -> None:
        cl = make_client(body_handler(""))
        cl.jar = None
        cl.default_headers["foo"] = "FOO"

        assert cl.new_request("GET", "/").headers["foo"] == "FOO"

    def test_handler_exceptions_propagate(
        self, make_client: Callable[[Handler], Client]
    ) -> None:
        def broken(w: ResponseRecorder, r: Request) -> None:
            raise ValueError("handler crashed")

        cl = make_client(broken)
        with pytest.raises(ValueError, match="handler crashed"):
            cl.get("/")

    def test_from_config(self, mock_reporter: MockReporter) -> None:
        config = ClientConfig(
            origin="https://app.test", cookies=False, default_headers={"Accept": "text/plain"}
        )
        cl = Client.from_config(mock_reporter, body_handler(""), config)

        assert cl.jar is None
        assert str(cl.origin) == "https://app.test"
        assert cl.new_request("GET", "/").headers["accept"] == "text/plain"

    def test_from_config_rejects_relative_origin(self, mock_reporter: MockReporter) -> None:
        with pytest.raises(ValueError, match="absolute URL"):
            Client.from_config(mock_reporter, body_handler(""), ClientConfig(origin="/x"))

    def test_from_config_reports_every_problem(self, mock_reporter: MockReporter) -> None:
        config = ClientConfig(origin="/x", default_headers={"X-Count": 3})  # type: ignore[dict-item]

        with pytest.raises(ValueError) as info:
            Client.from_config(mock_reporter, body_handler(""), config)

        assert "2 error(s)" in str(info.value)
        assert "default_headers.X-Count" in str(info.value)


class TestCookies:
    """End-to-end cookie handling through the client."""

    def test_get_set(self, make_client: Callable[[Handler], Client]) -> None:
        cookie = Cookie("foo", "bar")
        cl = make_client(cookie_handler("foo", cookie))

        cl.invoke(cl.new_request("GET", "/get")).body_eq("empty")
        cl.invoke(cl.new_request("GET", "/set"))
        cl.invoke(cl.new_request("GET", "/get")).body_eq("bar")

        cookie.expires = datetime.fromtimestamp(0, tz=timezone.utc)
        cl.invoke(cl.new_request("GET", "/set"))
        cl.invoke(cl.new_request("GET", "/get")).body_eq("empty")

    def test_any_domain(self, make_client: Callable[[Handler], Client]) -> None:
        cookie = Cookie("foo", "bar", domain="alexbyk.com")
        cl = make_client(cookie_handler("foo", cookie))

        cl.get("/set")
        cl.get("/get").body_eq("bar")

    def test_path(self, make_client: Callable[[Handler], Client]) -> None:
        cookie = Cookie("foo", "bar", path="/another")
        cl = make_client(cookie_handler("foo", cookie))
        cl.get("/set")
        cl.get("/get").body_eq("empty")

        cookie.path = "/get"
        cl.get("/set")
        cl.get("/get").body_eq("bar")

    def test_empty_jar(self, make_client: Callable[[Handler], Client]) -> None:
        cookie = Cookie("foo", "bar")
        cl = make_client(cookie_handler("foo", cookie))
        cl.jar = None

        cl.get("/set")
        cl.get("/get").body_eq("empty")

    def test_cookie_header_is_sent(self, make_client: Callable[[Handler], Client]) -> None:
        def set_two(w: ResponseRecorder, r: Request) -> None:
            if r.path == "/set":
                w.set_cookie(Cookie("a", "1"))
                w.set_cookie(Cookie("b", "2"))
            w.write(r.headers.get("Cookie", ""))

        cl = make_client(set_two)
        cl.get("/set")
        cl.get("/echo").body_eq("a=1; b=2")

    def test_custom_jar_is_used(self, mock_reporter: MockReporter) -> None:
        jar = CookieJar()
        cl = Client(mock_reporter, cookie_handler("foo", Cookie("foo", "bar")), jar=jar)

        cl.get("/set")
        assert [c.name for c in jar] == ["foo"]
        assert list(jar)[0].domain == ""

    def test_cookie_with_unknown_attribute_is_stored(
        self, make_client: Callable[[Handler], Client]
    ) -> None:
        def handler(w: ResponseRecorder, r: Request) -> None:
            if r.path == "/set":
                w.headers.add("Set-Cookie", "sid=abc; Path=/; Partitioned")
            got = r.cookie("sid")
            w.write("empty" if got is None else got.value)

        cl = make_client(handler)
        cl.get("/set")
        cl.get("/get").body_eq("abc")
