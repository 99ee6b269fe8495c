"""
Client configuration loader.

This module provides the public API for loading and validating client
configuration from YAML files or strings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .models import DEFAULT_ORIGIN, ClientConfig
from .validation import ConfigValidator, ValidationResult

logger = logging.getLogger(__name__)


def load_client_config(path: str | Path) -> tuple[ClientConfig | None, ValidationResult]:
    """
    Load and validate a client configuration from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Tuple of (ClientConfig or None, ValidationResult)
        If validation fails, ClientConfig will be None.

    Example:
        config, result = load_client_config("tests/ftest.yaml")
        if not result.is_valid:
            raise SystemExit(str(result))
        client = Client.from_config(reporter, handler, config)
    """
    path = Path(path)

    if not path.exists():
        result = ValidationResult()
        result.add_error(
            str(path),
            "File not found",
            suggestion="Check the file path is correct",
        )
        return None, result

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error(
            str(path),
            f"Invalid YAML syntax: {e}",
            suggestion="Check YAML formatting (indentation, colons, etc.)",
        )
        return None, result

    config, result = _build(data, str(path))
    if config is not None:
        logger.info(f"Loaded client config from {path}")
    return config, result


def validate_config_yaml(yaml_string: str) -> tuple[ClientConfig | None, ValidationResult]:
    """
    Validate a client configuration from a YAML string.

    Args:
        yaml_string: YAML content as a string

    Returns:
        Tuple of (ClientConfig or None, ValidationResult)
    """
    try:
        data = yaml.safe_load(yaml_string)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error("yaml", f"Invalid YAML syntax: {e}")
        return None, result

    return _build(data, "yaml")


def _build(data: Any, source: str) -> tuple[ClientConfig | None, ValidationResult]:
    # An empty file means all defaults
    if data is None:
        data = {}

    if not isinstance(data, dict):
        result = ValidationResult()
        result.add_error(
            source,
            "Content must be a YAML object (not a list or scalar)",
            value=type(data).__name__,
        )
        return None, result

    result = ConfigValidator(data).validate()
    if not result.is_valid:
        return None, result

    config = ClientConfig(
        origin=data.get("origin", DEFAULT_ORIGIN),
        cookies=data.get("cookies", True),
        default_headers=dict(data.get("default_headers") or {}),
    )
    return config, result
