"""
In-process HTTP test client.

This module implements the Client, which builds synthetic requests, runs
the handler under test synchronously and threads cookies between calls
through a CookieJar. Nothing goes over the network: cookies are keyed by
a fixed placeholder origin plus the request path.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, replace
from typing import TYPE_CHECKING, Any

from aiohttp import hdrs
from multidict import CIMultiDict
from yarl import URL

from ..assertions import Reporter
from ..config.models import DEFAULT_ORIGIN
from ..config.validation import ConfigValidator
from .cookies import CookieJar
from .models import Handler, Request, ResponseRecorder
from .response import Response, to_bytes

if TYPE_CHECKING:
    from ..config.models import ClientConfig

logger = logging.getLogger(__name__)

_DEFAULT_JAR: Any = object()


class Client:
    """
    Testing client for HTTP handlers.

    A handler is any callable ``handler(recorder, request)`` writing its
    response into the given ResponseRecorder.

    Attributes:
        default_headers: Headers copied onto every new request
        jar: Cookie storage; set to None to turn cookies off

    Example:
        def hello(w, r):
            w.write('{"foo": "bar"}')

        def test_hello(ftest_reporter):
            cl = Client(ftest_reporter, hello)
            cl.get("/hello").status_eq(200).body_contains("bar").json_eq({"foo": "bar"})
    """

    def __init__(
        self,
        reporter: Reporter,
        handler: Handler,
        *,
        jar: CookieJar | None = _DEFAULT_JAR,
        default_headers: dict[str, str] | None = None,
        origin: str = DEFAULT_ORIGIN,
    ):
        """
        Initialize the client.

        Args:
            reporter: Failure reporter for usage errors and response checks
            handler: The handler under test
            jar: Cookie jar to use; a fresh one by default, None disables cookies
            default_headers: Initial default headers
            origin: Placeholder origin used to key cookies
        """
        reporter.helper()
        self._t = reporter
        self.handler = handler
        self.jar: CookieJar | None = CookieJar() if jar is _DEFAULT_JAR else jar
        self.default_headers: dict[str, str] = dict(default_headers or {})
        self.origin = URL(origin)

    @classmethod
    def from_config(
        cls, reporter: Reporter, handler: Handler, config: ClientConfig
    ) -> Client:
        """
        Create a client from a ClientConfig.

        The config goes through the same checks as a loaded YAML file.

        Raises:
            ValueError: Listing every problem if the config is invalid
        """
        ConfigValidator(asdict(config)).validate().check()
        return cls(
            reporter,
            handler,
            jar=CookieJar() if config.cookies else None,
            default_headers=config.default_headers,
            origin=config.origin,
        )

    # ─────────────────────────────────────────────────────────────────────
    # Requests
    # ─────────────────────────────────────────────────────────────────────

    def new_request(
        self, method: str, path: str, body: bytes | str | None = None
    ) -> Request:
        """
        Build a request carrying the default headers and the jar's cookies.

        Args:
            method: HTTP method
            path: Relative path ("/get") or absolute URL
            body: Request body, bytes or str

        Returns:
            A Request ready to be passed to ``invoke``
        """
        __tracebackhide__ = True
        self._t.helper()
        request = Request(
            method=method.upper(),
            url=URL(path),
            headers=CIMultiDict(self.default_headers),
            body=to_bytes(self._t, body),
        )
        if self.jar is None:
            return request

        for cookie in self.jar.cookies(self._jar_url(request)):
            request.add_cookie(cookie)
        return request

    def invoke(self, request: Request) -> Response:
        """
        Run the handler on a request and capture the response.

        Cookies set by the response are stored in the jar with their
        domain cleared.
        """
        __tracebackhide__ = True
        self._t.helper()
        recorder = ResponseRecorder()
        logger.debug(f"{request.method} {request.url}")
        self.handler(recorder, request)
        response = Response(recorder, self._t, request=request)

        jar = self.jar
        if jar is None:
            return response

        cookies = [replace(c, domain="") for c in response.cookies]
        if cookies:
            logger.debug(f"Captured {len(cookies)} cookie(s) from {request.path}")
            jar.set_cookies(self._jar_url(request), cookies)
        return response

    def request(
        self, method: str, path: str, body: bytes | str | None = None
    ) -> Response:
        __tracebackhide__ = True
        self._t.helper()
        return self.invoke(self.new_request(method, path, body))

    def get(self, path: str) -> Response:
        """Make a GET request without a body."""
        __tracebackhide__ = True
        self._t.helper()
        return self.request(hdrs.METH_GET, path)

    def post(self, path: str, body: bytes | str | None) -> Response:
        """Make a POST request. The body must be bytes or str."""
        __tracebackhide__ = True
        self._t.helper()
        return self.request(hdrs.METH_POST, path, body)

    def put(self, path: str, body: bytes | str | None) -> Response:
        __tracebackhide__ = True
        self._t.helper()
        return self.request(hdrs.METH_PUT, path, body)

    def delete(self, path: str) -> Response:
        __tracebackhide__ = True
        self._t.helper()
        return self.request(hdrs.METH_DELETE, path)

    def _jar_url(self, request: Request) -> URL:
        return self.origin.with_path(request.path)

    def __repr__(self) -> str:
        cookies = "off" if self.jar is None else str(len(self.jar))
        return f"Client(handler={self.handler!r}, cookies={cookies})"
