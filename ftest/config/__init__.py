"""
Client configuration

This package loads YAML files describing how test clients are built:
the placeholder origin, whether cookies are kept, and default headers.

Usage:
    from ftest.config import load_client_config

    config, result = load_client_config("tests/ftest.yaml")
    if not result.is_valid:
        print(result)
"""

# Loader functions
from .loader import load_client_config, validate_config_yaml

# Models
from .models import ClientConfig

# Validation
from .validation import ConfigValidator, ValidationError, ValidationResult

__all__ = [
    # Loader functions
    "load_client_config",
    "validate_config_yaml",
    # Models
    "ClientConfig",
    # Validation
    "ConfigValidator",
    "ValidationError",
    "ValidationResult",
]
