"""
In-process HTTP client for testing handlers.

This package provides a client that builds synthetic requests, invokes a
handler directly (no network), keeps cookies between calls and wraps
responses in chainable assertions.

Usage:
    from ftest.client import Client

    def hello(w, r):
        w.write('{"foo": "bar"}')

    cl = Client(reporter, hello)
    cl.get("/hello").status_eq(200).body_contains("bar").json_eq('{"foo":"bar"}')

    # Turn cookies off
    cl.jar = None
"""

# Models
from .models import Cookie, Handler, Request, ResponseRecorder

# Cookie storage
from .cookies import CookieJar, default_path, path_match

# Response inspection
from .response import Response, json_field

# Client
from .client import DEFAULT_ORIGIN, Client

# WSGI adapter
from .wsgi import build_environ, wsgi_handler

__all__ = [
    # Models
    "Cookie",
    "Handler",
    "Request",
    "ResponseRecorder",
    # Cookie storage
    "CookieJar",
    "default_path",
    "path_match",
    # Response inspection
    "Response",
    "json_field",
    # Client
    "DEFAULT_ORIGIN",
    "Client",
    # WSGI adapter
    "build_environ",
    "wsgi_handler",
]
