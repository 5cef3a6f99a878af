"""External tool discovery."""

from .locator import (
    SDK_ENV_VARS,
    TOOL_FILENAMES,
    ExternalToolLocator,
    create_tool_locator,
)


__all__ = [
    "ExternalToolLocator",
    "SDK_ENV_VARS",
    "TOOL_FILENAMES",
    "create_tool_locator",
]
