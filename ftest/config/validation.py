"""
Validation for client configuration files.

This module checks client settings, whether parsed from YAML or built in
code and handed to ``Client.from_config``, and collects every problem
with a hint on how to fix it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from yarl import URL


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ValidationError:
    """One problem found at a key of a client config."""
    path: str  # e.g., "default_headers.Accept"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        text = f"{self.path}: {self.message}"
        if self.value is not None:
            text += f" (got {self.value!r})"
        if self.suggestion:
            text += f". {self.suggestion}"
        return text


@dataclass
class ValidationResult:
    """Problems found in one client config; empty when the config is usable."""
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None,
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def check(self) -> None:
        """
        Raise if any problem was found.

        Raises:
            ValueError: Listing every problem, one per line
        """
        if self.errors:
            raise ValueError(str(self))

    def __str__(self) -> str:
        if self.is_valid:
            return "Configuration is valid"
        lines = [f"Invalid client config, {len(self.errors)} error(s):"]
        lines.extend(f"  - {e}" for e in self.errors)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Config Validator
# ─────────────────────────────────────────────────────────────────────────────

class ConfigValidator:
    """Validates raw parsed YAML against the client configuration schema."""

    KNOWN_KEYS = {"origin", "cookies", "default_headers"}

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.result = ValidationResult()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return the result."""
        self._validate_keys()
        self._validate_origin()
        self._validate_cookies()
        self._validate_default_headers()
        return self.result

    def _validate_keys(self) -> None:
        for key in sorted(set(self.data) - self.KNOWN_KEYS, key=str):
            self.result.add_error(
                str(key),
                f"Unknown field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.KNOWN_KEYS))}",
            )

    def _validate_origin(self) -> None:
        if "origin" not in self.data:
            return
        origin = self.data["origin"]
        if not isinstance(origin, str):
            self.result.add_error("origin", "Must be a string", value=origin)
            return
        try:
            url = URL(origin)
        except ValueError as e:
            self.result.add_error("origin", f"Invalid URL: {e}", value=origin)
            return
        if not url.scheme or not url.host:
            self.result.add_error(
                "origin",
                "Must be an absolute URL",
                value=origin,
                suggestion="Use a value like 'https://example.com'",
            )

    def _validate_cookies(self) -> None:
        if "cookies" in self.data and not isinstance(self.data["cookies"], bool):
            self.result.add_error(
                "cookies",
                "Must be true or false",
                value=self.data["cookies"],
            )

    def _validate_default_headers(self) -> None:
        if "default_headers" not in self.data:
            return
        headers = self.data["default_headers"]
        if headers is None:
            return
        if not isinstance(headers, dict):
            self.result.add_error(
                "default_headers",
                "Must be a mapping of header names to values",
                value=type(headers).__name__,
            )
            return
        for name, value in headers.items():
            if not isinstance(name, str):
                self.result.add_error(
                    f"default_headers.{name}", "Header name must be a string", value=name
                )
            elif not isinstance(value, str):
                self.result.add_error(
                    f"default_headers.{name}",
                    "Header value must be a string",
                    value=value,
                    suggestion="Quote numbers and booleans in YAML",
                )
