"""
Typed client configuration.

This module contains the dataclass produced by loading a YAML client
configuration file.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_ORIGIN = "https://example.com"


@dataclass
class ClientConfig:
    """
    Settings applied to a Client built with ``Client.from_config``.

    Attributes:
        origin: Placeholder origin used to key cookies
        cookies: Whether the client keeps a cookie jar
        default_headers: Headers copied onto every request
    """
    origin: str = DEFAULT_ORIGIN
    cookies: bool = True
    default_headers: dict[str, str] = field(default_factory=dict)
