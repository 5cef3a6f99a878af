"""Structlog helpers shared by the pipeline services."""

import logging
from typing import Any

import structlog
from structlog.typing import EventDict

from webtoapk.core.errors import WebToAPKError, redact_context


def get_struct_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return the structlog logger for ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]


def redact_event(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """Structlog processor masking credentials in every event.

    Applies the same rules as error contexts: sensitive keys, ``SecretStr``
    values and ``pass:`` arguments.
    """
    event = event_dict.pop("event", None)
    exc_info = event_dict.pop("exc_info", None)
    redacted: EventDict = redact_context(event_dict)
    if event is not None:
        redacted["event"] = event
    if exc_info is not None:
        redacted["exc_info"] = exc_info
    return redacted


class StructlogMixin:
    """Give a service a logger bound to its class name.

    Events carry ``service=<ClassName>`` so one build's log can be filtered
    per pipeline component.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._logger: structlog.stdlib.BoundLogger | None = None

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        if getattr(self, "_logger", None) is None:
            base_logger = get_struct_logger(self.__class__.__module__)
            self._logger = base_logger.bind(service=self.__class__.__name__)
        return self._logger  # type: ignore[return-value]

    def log_operation(
        self, operation: str, **context: Any
    ) -> structlog.stdlib.BoundLogger:
        """Logger bound to one pipeline operation and its (redacted) context."""
        return self.logger.bind(operation=operation, **redact_context(context))

    def log_error_with_context(
        self,
        message: str,
        error: BaseException,
        **context: Any,
    ) -> None:
        """Log ``error`` with its category and context.

        The stack trace is attached only when DEBUG logging is enabled.
        """
        if isinstance(error, WebToAPKError):
            context = {
                "category": error.category.value,
                "error_context": error.context,
                **context,
            }
        self.logger.error(
            message,
            error=str(error),
            error_type=error.__class__.__name__,
            exc_info=logging.getLogger().isEnabledFor(logging.DEBUG),
            **redact_context(context),
        )


__all__ = ["StructlogMixin", "get_struct_logger", "redact_event"]
