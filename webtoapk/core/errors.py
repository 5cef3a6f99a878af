"""Error hierarchy for webtoapk.

Every error that leaves a pipeline component carries one of four category
tags and a context dictionary. Contexts are redacted on construction so a
signing credential can never ride along in a diagnostic payload.
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, SecretStr


REDACTED = "***"

# Context keys whose values are always replaced with the placeholder
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "alias_password",
        "aliasPassword",
        "ks_pass",
        "key_pass",
        "storepass",
        "keypass",
    }
)

# Context keys holding captured tool output, the only place a literal
# password can be echoed back
OUTPUT_KEYS = frozenset({"stdout", "stderr", "output"})


class ErrorCategory(str, Enum):
    """Category tags surfaced to the CLI and other front ends."""

    CONFIG = "CONFIG"
    BUILD = "BUILD"
    SIGNING = "SIGNING"
    RESOURCE = "RESOURCE"


class ProcessFailureKind(str, Enum):
    """How an external process failed."""

    EXIT = "exit"
    TIMEOUT = "timeout"
    SPAWN = "spawn"


def scrub_output(text: str, secrets: Iterable[str]) -> str:
    """Replace literal occurrences of ``secrets`` in captured process output."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


def _mask_pass_argument(text: str) -> str:
    if text.startswith("pass:"):
        return f"pass:{REDACTED}"
    return text


def redact_context(value: Any, secrets: Iterable[str] = ()) -> Any:
    """Return a deep copy of ``value`` with credentials replaced by ``***``.

    Keys listed in ``SENSITIVE_KEYS`` are replaced wholesale, ``SecretStr``
    values are never unwrapped and ``pass:<value>`` arguments are masked.
    Literal ``secrets`` are scrubbed only below ``OUTPUT_KEYS``; field names,
    paths and other values are left intact.

    Args:
        value: Context value (dict, list, model, scalar)
        secrets: Literal secret strings to scrub from process output

    Returns:
        Redacted, JSON-friendly copy of the value
    """
    secret_values = tuple(s for s in secrets if s)
    return _redact(value, secret_values, in_output=False)


def _redact(value: Any, secrets: tuple[str, ...], in_output: bool) -> Any:
    if isinstance(value, SecretStr):
        return REDACTED
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="python")
    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for key, item in value.items():
            name = str(key)
            if name in SENSITIVE_KEYS:
                redacted[name] = REDACTED
            else:
                redacted[name] = _redact(
                    item, secrets, in_output or name in OUTPUT_KEYS
                )
        return redacted
    if isinstance(value, list | tuple | set | frozenset):
        return [_redact(item, secrets, in_output) for item in value]
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, bool | int | float):
        return value
    text = _mask_pass_argument(str(value))
    return scrub_output(text, secrets) if in_output else text


class WebToAPKError(Exception):
    """Base class for all categorized webtoapk errors."""

    category: ErrorCategory = ErrorCategory.BUILD

    def __init__(
        self,
        message: str,
        context: Mapping[str, Any] | None = None,
        *,
        secrets: Iterable[str] = (),
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = redact_context(dict(context or {}), secrets)

    @property
    def failure_kind(self) -> ProcessFailureKind | None:
        """Process failure kind recorded in the context, if any."""
        kind = self.context.get("failure_kind")
        return ProcessFailureKind(kind) if kind else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "message": self.message,
            "context": self.context,
        }

    def __str__(self) -> str:
        return self.message


class ConfigError(WebToAPKError):
    """Invalid application or tool configuration."""

    category = ErrorCategory.CONFIG


class BuildError(WebToAPKError):
    """Project initialization or native build failure."""

    category = ErrorCategory.BUILD


class SigningError(WebToAPKError):
    """Keystore, signing or verification failure."""

    category = ErrorCategory.SIGNING


class SignatureVerificationError(SigningError):
    """Signing succeeded but the produced artifact did not verify."""


class ResourceError(WebToAPKError):
    """Web asset, icon or splash screen processing failure."""

    category = ErrorCategory.RESOURCE


ERROR_CLASSES: dict[ErrorCategory, type[WebToAPKError]] = {
    ErrorCategory.CONFIG: ConfigError,
    ErrorCategory.BUILD: BuildError,
    ErrorCategory.SIGNING: SigningError,
    ErrorCategory.RESOURCE: ResourceError,
}


__all__ = [
    "OUTPUT_KEYS",
    "REDACTED",
    "ErrorCategory",
    "ProcessFailureKind",
    "WebToAPKError",
    "ConfigError",
    "BuildError",
    "SigningError",
    "SignatureVerificationError",
    "ResourceError",
    "ERROR_CLASSES",
    "redact_context",
    "scrub_output",
]
