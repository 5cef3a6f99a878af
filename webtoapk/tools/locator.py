"""Locate Android SDK and JDK executables."""

import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from webtoapk.core.errors import ConfigError
from webtoapk.core.structlog_logger import StructlogMixin


Platform = Literal["windows", "posix"]

SDK_ENV_VARS = ("ANDROID_HOME", "ANDROID_SDK_ROOT")

TOOL_FILENAMES: dict[Platform, dict[str, str]] = {
    "windows": {
        "apksigner": "apksigner.bat",
        "keytool": "keytool.exe",
        "java": "java.exe",
        "gradlew": "gradlew.bat",
        "sdkmanager": "sdkmanager.bat",
        "npm": "npm.cmd",
        "npx": "npx.cmd",
    },
    "posix": {
        "apksigner": "apksigner",
        "keytool": "keytool",
        "java": "java",
        "gradlew": "gradlew",
        "sdkmanager": "sdkmanager",
        "npm": "npm",
        "npx": "npx",
    },
}


def current_platform() -> Platform:
    return "windows" if sys.platform.startswith("win") else "posix"


class ExternalToolLocator(StructlogMixin):
    """Resolve tool paths from environment variables and SDK layout.

    Lookups hit the filesystem every time; nothing is cached.

    Args:
        environ: Environment to read (defaults to ``os.environ``)
        platform: Filename convention to use (defaults to the host)
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        platform: Platform | None = None,
    ) -> None:
        super().__init__()
        self.environ = environ if environ is not None else os.environ
        self.platform: Platform = platform or current_platform()

    def executable(self, tool: str) -> str:
        """File name of ``tool`` on this platform (unknown tools pass through)."""
        return TOOL_FILENAMES[self.platform].get(tool, tool)

    def sdk_root_or_none(self) -> Path | None:
        for var in SDK_ENV_VARS:
            value = self.environ.get(var)
            if value:
                return Path(value)
        return None

    def sdk_root(self) -> Path:
        """Android SDK root from ``ANDROID_HOME`` then ``ANDROID_SDK_ROOT``.

        Raises:
            ConfigError: If neither variable is set
        """
        root = self.sdk_root_or_none()
        if root is None:
            raise ConfigError(
                "Android SDK not found. Please set ANDROID_HOME or "
                "ANDROID_SDK_ROOT environment variable.",
                {"env_vars": list(SDK_ENV_VARS)},
            )
        return root

    def signing_tool_candidates(self, sdk_root: Path) -> list[Path]:
        """Candidate ``apksigner`` paths in search order."""
        name = self.executable("apksigner")
        candidates: list[Path] = []

        build_tools = sdk_root / "build-tools"
        if build_tools.is_dir():
            # Plain string sort: "9.0.0" ranks above "34.0.0"
            versions = sorted(
                (p.name for p in build_tools.iterdir() if p.is_dir()), reverse=True
            )
            if versions:
                candidates.append(build_tools / versions[0] / name)

        candidates.append(sdk_root / "cmdline-tools" / "latest" / "bin" / name)
        candidates.append(sdk_root / "tools" / "bin" / name)
        return candidates

    def locate_signing_tool(self) -> Path:
        """Path of ``apksigner`` inside the Android SDK.

        Raises:
            ConfigError: If the SDK is not configured or no candidate exists
        """
        sdk_root = self.sdk_root()
        candidates = self.signing_tool_candidates(sdk_root)
        for candidate in candidates:
            if candidate.is_file():
                self.logger.debug("signing_tool_found", path=str(candidate))
                return candidate

        raise ConfigError(
            "apksigner not found. Please ensure Android SDK build-tools are installed.",
            {
                "sdk_root": str(sdk_root),
                "searched": [str(c) for c in candidates],
            },
        )

    def locate_key_tool(self) -> str:
        """``$JAVA_HOME/bin/keytool`` if present, else the bare name for PATH."""
        name = self.executable("keytool")
        java_home = self.environ.get("JAVA_HOME")
        if java_home:
            candidate = Path(java_home) / "bin" / name
            if candidate.is_file():
                return str(candidate)
        return name

    def locate_java(self) -> str:
        name = self.executable("java")
        java_home = self.environ.get("JAVA_HOME")
        if java_home:
            candidate = Path(java_home) / "bin" / name
            if candidate.is_file():
                return str(candidate)
        return name

    def gradle_wrapper(self, android_dir: Path) -> Path:
        """Gradle wrapper script of an Android project directory."""
        return android_dir / self.executable("gradlew")


def create_tool_locator(
    environ: Mapping[str, str] | None = None, platform: Platform | None = None
) -> ExternalToolLocator:
    """Factory function to create an ExternalToolLocator instance."""
    return ExternalToolLocator(environ=environ, platform=platform)


__all__ = [
    "ExternalToolLocator",
    "Platform",
    "SDK_ENV_VARS",
    "TOOL_FILENAMES",
    "create_tool_locator",
    "current_platform",
]
