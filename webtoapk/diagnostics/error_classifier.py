"""Turn raw build tool output into a short diagnosis."""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class ErrorPattern:
    """A known failure signature and the message shown for it."""

    pattern: re.Pattern[str]
    message: str

    @classmethod
    def compile(cls, pattern: str, message: str, flags: int = 0) -> "ErrorPattern":
        return cls(re.compile(pattern, flags), message)


class ErrorClassifier:
    """Classify combined stdout and stderr text.

    Resolution order:
    1. First table entry whose pattern matches anywhere in the text
    2. First line containing one of the marker substrings, trimmed
    3. The fallback message

    Classification is pure and never returns an empty string.
    """

    def __init__(
        self,
        patterns: Sequence[ErrorPattern],
        markers: Iterable[str],
        fallback: str,
    ) -> None:
        if not fallback:
            raise ValueError("fallback message must not be empty")
        self.patterns = tuple(patterns)
        self.markers = tuple(markers)
        self.fallback = fallback

    def classify(self, combined_output: str) -> str:
        for entry in self.patterns:
            if entry.pattern.search(combined_output):
                return entry.message

        for line in combined_output.splitlines():
            if any(marker in line for marker in self.markers):
                stripped = line.strip()
                if stripped:
                    return stripped

        return self.fallback


GRADLE_ERROR_CLASSIFIER = ErrorClassifier(
    patterns=[
        ErrorPattern.compile(
            r"FAILURE: Build failed with an exception", "Build failed with exception"
        ),
        ErrorPattern.compile(
            r"Could not resolve all files for configuration",
            "Dependency resolution failed. Check your internet connection "
            "and dependencies.",
        ),
        ErrorPattern.compile(
            r"Android SDK not found",
            "Android SDK not found. Please install Android SDK and set "
            "ANDROID_HOME environment variable.",
        ),
        ErrorPattern.compile(
            r"No toolchains found in the NDK toolchains folder",
            "Android NDK issue. Please check your NDK installation.",
        ),
        ErrorPattern.compile(
            r"Execution failed for task.*:compileDebugJavaWithJavac",
            "Java compilation failed. Check for syntax errors in generated code.",
        ),
        ErrorPattern.compile(
            r"Execution failed for task.*:packageDebug",
            "APK packaging failed. Check for resource conflicts or missing files.",
        ),
    ],
    markers=("ERROR:", "FAILURE:", "Exception:"),
    fallback="Unknown build error occurred",
)

SIGNING_ERROR_CLASSIFIER = ErrorClassifier(
    patterns=[
        ErrorPattern.compile(
            r"Keystore was tampered with, or password was incorrect",
            "Incorrect keystore password or corrupted keystore file",
        ),
        ErrorPattern.compile(r"Cannot recover key", "Incorrect key alias password"),
        ErrorPattern.compile(r"Alias .* does not exist", "Key alias not found in keystore"),
        ErrorPattern.compile(
            r"keystore password was incorrect", "Incorrect keystore password"
        ),
        ErrorPattern.compile(r"No such file or directory", "Keystore file not found"),
        ErrorPattern.compile(
            r"Permission denied", "Permission denied accessing keystore or APK file"
        ),
    ],
    markers=("ERROR:", "Exception:", "Error:"),
    fallback="Unknown signing error occurred",
)

NPM_ERROR_CLASSIFIER = ErrorClassifier(
    patterns=[
        ErrorPattern.compile(
            r"ENOTFOUND|ETIMEDOUT|ECONNRESET|EAI_AGAIN",
            "Network error while downloading packages. Check your internet connection.",
        ),
        ErrorPattern.compile(
            r"ERESOLVE",
            "npm could not resolve the dependency tree. Check plugin versions.",
        ),
        ErrorPattern.compile(
            r"E404|404 Not Found",
            "A requested npm package does not exist. Check plugin names.",
        ),
        ErrorPattern.compile(
            r"EACCES|EPERM",
            "Permission denied while installing packages.",
        ),
        ErrorPattern.compile(
            r"could not determine executable to run",
            "Capacitor CLI is not installed. Run dependency installation first.",
        ),
        ErrorPattern.compile(
            r"android platform already exists",
            "Android platform already exists in this project.",
            re.IGNORECASE,
        ),
    ],
    markers=("npm ERR!", "npm error", "[error]", "Error:"),
    fallback="Unknown npm or Capacitor error occurred",
)


__all__ = [
    "ErrorClassifier",
    "ErrorPattern",
    "GRADLE_ERROR_CLASSIFIER",
    "NPM_ERROR_CLASSIFIER",
    "SIGNING_ERROR_CLASSIFIER",
]
