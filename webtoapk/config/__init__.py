"""Configuration loading, validation and tool settings."""

from .loader import load_app_config
from .settings import WebToAPKSettings, create_settings
from .validator import ConfigValidator, ValidationIssue, ValidationResult


__all__ = [
    "ConfigValidator",
    "ValidationIssue",
    "ValidationResult",
    "WebToAPKSettings",
    "create_settings",
    "load_app_config",
]
