"""Protocol definition for locating external Android tools."""

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ToolLocatorProtocol(Protocol):
    """Protocol for resolving tool executables."""

    def sdk_root(self) -> Path:
        """Return the Android SDK root.

        Raises:
            ConfigError: If no SDK environment variable is set
        """
        ...

    def locate_signing_tool(self) -> Path:
        """Return the path of ``apksigner``.

        Raises:
            ConfigError: If the SDK or the tool cannot be found
        """
        ...

    def locate_key_tool(self) -> str:
        """Return the ``keytool`` path, or its bare name to search PATH."""
        ...

    def locate_java(self) -> str:
        """Return the ``java`` path, or its bare name to search PATH."""
        ...

    def executable(self, tool: str) -> str:
        """Return the platform-specific file name of ``tool``."""
        ...

    def gradle_wrapper(self, android_dir: Path) -> Path:
        """Return the Gradle wrapper script inside ``android_dir``."""
        ...
