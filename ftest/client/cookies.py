"""
In-memory cookie jar.

Cookies are keyed by (domain, path, name). An empty domain is a wildcard
matching any host; the client clears every cookie's domain before storing
it, so in practice only the path and the expiry scope cookies. Path
matching and default paths follow RFC 6265.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Iterator

from yarl import URL

from .models import Cookie

logger = logging.getLogger(__name__)

WILDCARD_DOMAIN = ""


@dataclass
class _Entry:
    cookie: Cookie
    created: int  # insertion sequence, kept across updates


class CookieJar:
    """
    Domain and path aware cookie store.

    Example:
        jar = CookieJar()
        jar.set_cookies("https://example.com/set", [Cookie("foo", "bar")])
        jar.cookies("https://example.com/get")  # [Cookie(name='foo', ...)]
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        """
        Initialize an empty jar.

        Args:
            clock: Returns the current time; defaults to the UTC wall clock
        """
        self._entries: dict[tuple[str, str, str], _Entry] = {}
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sequence = 0

    def set_cookies(self, url: URL | str, cookies: list[Cookie]) -> None:
        """
        Store cookies received in a response to ``url``.

        Cookies expiring at or before now delete any stored cookie with the
        same domain, path and name instead of being stored.
        """
        url = URL(url)
        now = self._clock()

        for cookie in cookies:
            domain = _normalize_domain(cookie.domain)
            path = cookie.path if cookie.path.startswith("/") else default_path(url.path)
            key = (domain, path, cookie.name)

            expiry = cookie.expiry(now)
            if expiry is not None and expiry <= now:
                if self._entries.pop(key, None) is not None:
                    logger.debug(f"Deleted expired cookie {cookie.name!r} (path={path})")
                continue

            stored = replace(cookie, domain=domain, path=path, expires=expiry, max_age=None)
            entry = self._entries.get(key)
            if entry is not None:
                entry.cookie = stored
            else:
                self._entries[key] = _Entry(stored, self._sequence)
                self._sequence += 1
            logger.debug(f"Stored cookie {cookie.name!r} (path={path})")

    def cookies(self, url: URL | str) -> list[Cookie]:
        """
        Return the cookies to send with a request to ``url``.

        Longer paths come first, then older cookies.
        """
        url = URL(url)
        now = self._clock()
        host = (url.host or "").lower()
        request_path = url.path or "/"

        matched: list[_Entry] = []
        for key, entry in list(self._entries.items()):
            cookie = entry.cookie
            if cookie.is_expired(now):
                del self._entries[key]
                continue
            if not _domain_match(host, cookie.domain):
                continue
            if not path_match(request_path, cookie.path):
                continue
            if cookie.secure and url.scheme != "https":
                continue
            matched.append(entry)

        matched.sort(key=lambda e: (-len(e.cookie.path), e.created))
        return [replace(e.cookie) for e in matched]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Cookie]:
        return iter([e.cookie for e in self._entries.values()])

    def __repr__(self) -> str:
        return f"CookieJar(cookies={len(self)})"


def default_path(path: str) -> str:
    """Compute the default cookie path for a request path (RFC 6265 5.1.4)."""
    if not path.startswith("/"):
        return "/"
    index = path.rfind("/")
    if index == 0:
        return "/"
    return path[:index]


def path_match(request_path: str, cookie_path: str) -> bool:
    """Check whether a cookie path matches a request path (RFC 6265 5.1.4)."""
    if request_path == cookie_path:
        return True
    if not request_path.startswith(cookie_path):
        return False
    return cookie_path.endswith("/") or request_path[len(cookie_path)] == "/"


def _normalize_domain(domain: str) -> str:
    return domain.strip().lstrip(".").lower()


def _domain_match(host: str, domain: str) -> bool:
    if domain == WILDCARD_DOMAIN:
        return True
    return host == domain or host.endswith("." + domain)
