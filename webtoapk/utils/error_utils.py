"""Helpers for converting uncategorized exceptions into webtoapk errors."""

from collections.abc import Iterable, Mapping
from typing import Any

from webtoapk.core.errors import (
    ERROR_CLASSES,
    ErrorCategory,
    WebToAPKError,
)


def wrap_error(
    error: BaseException,
    category: ErrorCategory,
    message: str,
    context: Mapping[str, Any] | None = None,
    *,
    secrets: Iterable[str] = (),
) -> WebToAPKError:
    """Wrap an exception exactly once.

    A ``WebToAPKError`` is returned unchanged so its original category and
    context survive. Anything else becomes an error of ``category`` whose
    message ends with the underlying error text.

    Args:
        error: The exception being handled
        category: Category for the wrapping error
        message: Message prefix describing the failed operation
        context: Diagnostic context (redacted on construction)
        secrets: Literal secrets to scrub from the context

    Returns:
        The error to raise
    """
    if isinstance(error, WebToAPKError):
        return error

    error_cls = ERROR_CLASSES[category]
    full_context = dict(context or {})
    full_context.setdefault("error", str(error))
    full_context.setdefault("error_type", type(error).__name__)
    return error_cls(f"{message}: {error}", full_context, secrets=secrets)


__all__ = ["wrap_error"]
