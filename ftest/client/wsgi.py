"""
WSGI adapter.

Wraps a WSGI application (Flask, Django, Bottle, ...) into a handler the
Client can drive, so a whole application with its routing can be tested:

    cl = Client(reporter, wsgi_handler(app))
    cl.get("/foo").body_eq("Foo")
"""

from __future__ import annotations

import sys
from typing import Any, Callable, Iterable

from aiohttp import hdrs

from .models import Handler, Request, ResponseRecorder

WSGIApp = Callable[[dict[str, Any], Callable[..., Any]], Iterable[bytes]]

DEFAULT_HOST = "example.com"


def wsgi_handler(app: WSGIApp) -> Handler:
    """Adapt a WSGI application into a client handler."""

    def handler(w: ResponseRecorder, r: Request) -> None:
        started = False
        body_sent = False

        def write(data: bytes) -> int:
            nonlocal body_sent
            if not started:
                raise AssertionError("write() before start_response()")
            if data:
                body_sent = True
            return w.write(data)

        def start_response(
            status: str,
            headers: list[tuple[str, str]],
            exc_info: Any = None,
        ) -> Callable[[bytes], Any]:
            nonlocal started
            if exc_info is not None:
                try:
                    if body_sent:
                        raise exc_info[1].with_traceback(exc_info[2])
                finally:
                    exc_info = None
            elif started:
                raise AssertionError("start_response() called again without exc_info")

            # Nothing has been sent yet: the latest status and headers win
            started = True
            w.status = int(status.split(" ", 1)[0])
            w.wrote_header = True
            w.headers.clear()
            for name, value in headers:
                w.headers.add(name, value)
            return write

        result = app(build_environ(r), start_response)
        try:
            for chunk in result:
                write(chunk)
        finally:
            close = getattr(result, "close", None)
            if close is not None:
                close()

    return handler


def build_environ(r: Request) -> dict[str, Any]:
    """Build a PEP 3333 environ dict for a request."""
    url = r.url
    scheme = url.scheme or "http"
    host = url.host or DEFAULT_HOST
    port = url.port or (443 if scheme == "https" else 80)

    environ: dict[str, Any] = {
        "REQUEST_METHOD": r.method,
        "SCRIPT_NAME": "",
        "PATH_INFO": r.path,
        "QUERY_STRING": url.raw_query_string,
        "SERVER_NAME": host,
        "SERVER_PORT": str(port),
        "SERVER_PROTOCOL": "HTTP/1.1",
        "REMOTE_ADDR": "127.0.0.1",
        "wsgi.version": (1, 0),
        "wsgi.url_scheme": scheme,
        "wsgi.input": r.stream,
        "wsgi.errors": sys.stderr,
        "wsgi.multithread": False,
        "wsgi.multiprocess": False,
        "wsgi.run_once": False,
    }

    if hdrs.CONTENT_TYPE in r.headers:
        environ["CONTENT_TYPE"] = r.headers[hdrs.CONTENT_TYPE]
    if r.body or hdrs.CONTENT_LENGTH in r.headers:
        environ["CONTENT_LENGTH"] = r.headers.get(hdrs.CONTENT_LENGTH, str(len(r.body)))

    for name, value in r.headers.items():
        if name.lower() in ("content-type", "content-length"):
            continue
        key = "HTTP_" + name.upper().replace("-", "_")
        if key in environ:
            environ[key] = f"{environ[key]},{value}"
        else:
            environ[key] = value

    if "HTTP_HOST" not in environ:
        environ["HTTP_HOST"] = host
    return environ
