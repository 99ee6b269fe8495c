"""
Request, response and cookie models for the in-process HTTP client.

This module defines the synthetic request handed to the handler under
test, the recorder the handler writes its response into, and the Cookie
structure shared with the cookie jar.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime, parsedate_to_datetime
from http import HTTPStatus
from http.cookies import SimpleCookie
from typing import Callable

from aiohttp import hdrs
from multidict import CIMultiDict
from yarl import URL

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Cookies
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Cookie:
    """
    An HTTP cookie as sent in a Set-Cookie header.

    Attributes:
        name: Cookie name
        value: Cookie value
        domain: Domain attribute; empty means "any domain"
        path: Path attribute; empty means the default path of the request
        expires: Absolute expiry; None for a session cookie
        max_age: Max-Age attribute in seconds; zero or negative deletes
        secure: Only sent over https
        http_only: HttpOnly attribute (informational here)
    """
    name: str
    value: str = ""
    domain: str = ""
    path: str = ""
    expires: datetime | None = None
    max_age: int | None = None
    secure: bool = False
    http_only: bool = False

    def expiry(self, now: datetime) -> datetime | None:
        """Return the absolute expiry, Max-Age taking precedence over Expires."""
        if self.max_age is not None:
            return now + timedelta(seconds=max(self.max_age, 0))
        if self.expires is None:
            return None
        return _as_utc(self.expires)

    def is_expired(self, now: datetime) -> bool:
        expiry = self.expiry(now)
        return expiry is not None and expiry <= now

    def to_header(self) -> str:
        """Format the cookie as a Set-Cookie header value."""
        jar = SimpleCookie()
        jar[self.name] = self.value
        morsel = jar[self.name]
        if self.path:
            morsel["path"] = self.path
        if self.domain:
            morsel["domain"] = self.domain
        if self.expires is not None:
            morsel["expires"] = format_datetime(_as_utc(self.expires), usegmt=True)
        if self.max_age is not None:
            morsel["max-age"] = str(self.max_age)
        if self.secure:
            morsel["secure"] = True
        if self.http_only:
            morsel["httponly"] = True
        return morsel.OutputString()

    @classmethod
    def from_header(cls, header: str) -> Cookie | None:
        """
        Parse a Set-Cookie header value.

        Attributes other than Path, Domain, Expires, Max-Age, Secure and
        HttpOnly (Partitioned, SameSite, vendor flags) are ignored.

        Returns:
            The parsed Cookie, or None if the header holds no valid cookie
        """
        pair, *attributes = header.split(";")
        name, sep, value = pair.partition("=")
        name = name.strip()
        if not sep or not name:
            logger.debug(f"Ignoring malformed Set-Cookie header {header!r}")
            return None

        cookie = cls(name=name, value=_unquote(value.strip()))
        for attribute in attributes:
            key, _, attr_value = attribute.partition("=")
            key = key.strip().lower()
            attr_value = attr_value.strip()
            if key == "path":
                cookie.path = attr_value
            elif key == "domain":
                cookie.domain = attr_value
            elif key == "expires":
                cookie.expires = _parse_expires(attr_value)
            elif key == "max-age":
                cookie.max_age = _parse_max_age(attr_value)
            elif key == "secure":
                cookie.secure = True
            elif key == "httponly":
                cookie.http_only = True
        return cookie


def _unquote(value: str) -> str:
    if len(value) > 1 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_expires(value: str) -> datetime | None:
    if not value:
        return None
    try:
        return _as_utc(parsedate_to_datetime(value))
    except (TypeError, ValueError):
        # Invalid dates make a session cookie
        return None


def _parse_max_age(value: str) -> int | None:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


# ─────────────────────────────────────────────────────────────────────────────
# Request
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Request:
    """
    A synthetic HTTP request handed to the handler under test.

    Attributes:
        method: HTTP method, e.g. "GET"
        url: Request URL; relative ("/get") or absolute
        headers: Case-insensitive request headers
        body: Raw request body
        cookies: Cookies attached to the request
    """
    method: str
    url: URL
    headers: CIMultiDict[str] = field(default_factory=CIMultiDict)
    body: bytes = b""
    cookies: list[Cookie] = field(default_factory=list)

    @property
    def path(self) -> str:
        return self.url.path or "/"

    @property
    def stream(self) -> io.BytesIO:
        """A fresh readable stream over the body."""
        return io.BytesIO(self.body)

    def cookie(self, name: str) -> Cookie | None:
        """Return the first attached cookie with the given name."""
        for cookie in self.cookies:
            if cookie.name == name:
                return cookie
        return None

    def add_cookie(self, cookie: Cookie) -> None:
        """Attach a cookie and append it to the Cookie header."""
        self.cookies.append(cookie)
        pair = f"{cookie.name}={cookie.value}"
        existing = self.headers.get(hdrs.COOKIE)
        self.headers[hdrs.COOKIE] = f"{existing}; {pair}" if existing else pair

    def __str__(self) -> str:
        return f"{self.method} {self.url}"


# ─────────────────────────────────────────────────────────────────────────────
# Response recorder
# ─────────────────────────────────────────────────────────────────────────────

class ResponseRecorder:
    """
    Response sink the handler under test writes into.

    The status defaults to 200 until ``write_header`` is called; only the
    first call counts. Writing body data without an explicit status
    commits the default one.
    """

    def __init__(self) -> None:
        self.status = int(HTTPStatus.OK)
        self.headers: CIMultiDict[str] = CIMultiDict()
        self.body = bytearray()
        self.wrote_header = False

    def write_header(self, status: int) -> None:
        if self.wrote_header:
            logger.warning(f"Superfluous write_header call with status {status}")
            return
        self.status = int(status)
        self.wrote_header = True

    def write(self, data: bytes | str) -> int:
        """Append data to the body, committing the status if needed."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        if not self.wrote_header:
            self.write_header(HTTPStatus.OK)
        self.body.extend(data)
        return len(data)

    def set_cookie(self, cookie: Cookie) -> None:
        """Add a Set-Cookie header for the given cookie."""
        self.headers.add(hdrs.SET_COOKIE, cookie.to_header())

    def __repr__(self) -> str:
        return f"ResponseRecorder(status={self.status}, body_size={len(self.body)})"


Handler = Callable[[ResponseRecorder, Request], None]
