"""Error handling decorators for CLI commands."""

import logging
import sys
import traceback
from collections.abc import Callable
from functools import wraps
from typing import Any

import typer
from rich.console import Console

from webtoapk.cli.hints import hint_for
from webtoapk.core.errors import WebToAPKError
from webtoapk.core.structlog_logger import get_struct_logger


__all__ = ["handle_errors", "print_error", "print_stack_trace_if_verbose"]

logger = get_struct_logger(__name__)

err_console = Console(stderr=True)

_CATEGORY_LABELS = {
    "CONFIG": "Configuration error",
    "BUILD": "Build error",
    "SIGNING": "Signing error",
    "RESOURCE": "Resource error",
}


def print_error(error: WebToAPKError, show_context: bool = True) -> None:
    """Print the message, redacted context and remediation hint of ``error``."""
    label = _CATEGORY_LABELS[error.category.value]
    err_console.print(f"[bold red]{label}:[/bold red] {error.message}", highlight=False)
    if show_context and error.context:
        err_console.print("Details:", style="dim")
        err_console.print_json(data=error.context)

    hint = hint_for(error)
    err_console.print(f"\n[bold yellow]Solution:[/bold yellow] {hint.solution}")
    if hint.steps:
        err_console.print("\nTroubleshooting tips:")
        for index, step in enumerate(hint.steps, start=1):
            err_console.print(f"  {index}. {step}", highlight=False)


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to turn pipeline errors into messages and exit code 1.

    Args:
        func: The function to decorate

    Returns:
        Decorated function with error handling
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except WebToAPKError as e:
            logger.debug(
                "command_failed", category=e.category.value, error=e.message
            )
            print_error(e)
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except KeyboardInterrupt as e:
            err_console.print("Interrupted")
            raise typer.Exit(130) from e
        except Exception as e:
            exc_info = logging.getLogger().isEnabledFor(logging.DEBUG)
            logger.error("unexpected_error", error=str(e), exc_info=exc_info)
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e

    return wrapper


def print_stack_trace_if_verbose() -> None:
    """Print stack trace if verbose/debug mode is enabled."""
    if any(arg in sys.argv for arg in ["-vv", "--debug"]):
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
