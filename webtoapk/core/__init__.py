from .errors import (
    BuildError,
    ConfigError,
    ErrorCategory,
    ProcessFailureKind,
    ResourceError,
    SignatureVerificationError,
    SigningError,
    WebToAPKError,
    redact_context,
)
from .logging import setup_logging


__all__ = [
    "setup_logging",
    "WebToAPKError",
    "ConfigError",
    "BuildError",
    "SigningError",
    "SignatureVerificationError",
    "ResourceError",
    "ErrorCategory",
    "ProcessFailureKind",
    "redact_context",
]
