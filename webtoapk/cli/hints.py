"""Remediation hints shown with categorized errors."""

from dataclasses import dataclass, field

from webtoapk.core.errors import ErrorCategory, WebToAPKError


@dataclass(frozen=True)
class Hint:
    solution: str
    steps: list[str] = field(default_factory=list)


# (substring of the message, solution), first match wins
_SOLUTIONS: dict[ErrorCategory, list[tuple[str, str]]] = {
    ErrorCategory.CONFIG: [
        ("package name", "Please use valid package name format, e.g. com.example.app"),
        ("version", "Please use valid version format, e.g. 1.0.0"),
        ("ANDROID_", "Please set ANDROID_SDK_ROOT or ANDROID_HOME environment variable"),
        ("apksigner", "Please install Android SDK build-tools"),
    ],
    ErrorCategory.RESOURCE: [
        ("icon", "Please provide valid icon file (PNG, JPG, WebP format)"),
        (
            "web assets",
            "Please ensure web directory exists and contains valid HTML files",
        ),
    ],
    ErrorCategory.BUILD: [
        (
            "Android platform",
            "Please check Android SDK installation and environment variable "
            "configuration",
        ),
        (
            "JAVA_HOME",
            "Please set JAVA_HOME environment variable to JDK installation directory",
        ),
        ("ANDROID_SDK_ROOT", "Please set ANDROID_SDK_ROOT or ANDROID_HOME environment variable"),
        ("ANDROID_HOME", "Please set ANDROID_SDK_ROOT or ANDROID_HOME environment variable"),
        ("timed out", "Increase WEBTOAPK_BUILD_TIMEOUT or check for a stuck Gradle daemon"),
        (
            "memory",
            "Insufficient system memory, please increase available memory or "
            "close other applications",
        ),
    ],
    ErrorCategory.SIGNING: [
        ("keystore", "Please check keystore file path and format"),
        ("password", "Please check keystore password and key password"),
        ("alias", "Please check if key alias is correct"),
    ],
}

_DEFAULT_SOLUTIONS: dict[ErrorCategory, str] = {
    ErrorCategory.CONFIG: "Please check configuration file format and required fields",
    ErrorCategory.RESOURCE: "Please ensure all resource files exist and are in correct format",
    ErrorCategory.BUILD: "Please check build environment configuration",
    ErrorCategory.SIGNING: "Please check APK signing configuration",
}

_STEPS: dict[ErrorCategory, list[str]] = {
    ErrorCategory.CONFIG: [
        "Verify configuration file format is correct",
        "Check all required fields are filled",
        "Confirm package name follows Android specifications",
    ],
    ErrorCategory.RESOURCE: [
        "Check file paths are correct",
        "Verify file formats are supported",
        "Confirm file permissions are correct",
    ],
    ErrorCategory.BUILD: [
        "Check Android SDK is properly installed",
        "Ensure all dependencies are installed",
        "Verify environment variable configuration",
        "Check network connection is available",
    ],
    ErrorCategory.SIGNING: [
        "Verify keystore file exists",
        "Check keystore password is correct",
        "Confirm key alias exists",
        "Verify the key has not expired",
    ],
}

_MEMORY_STEPS = [
    "Free up system memory",
    "Close unnecessary applications",
    "Consider increasing virtual memory",
]


def hint_for(error: WebToAPKError) -> Hint:
    """Solution and troubleshooting steps for ``error``."""
    category = error.category
    solution = _DEFAULT_SOLUTIONS[category]
    for needle, text in _SOLUTIONS[category]:
        if needle in error.message:
            solution = text
            break

    steps = list(_STEPS[category])
    if category is ErrorCategory.BUILD and "memory" in error.message:
        steps.extend(_MEMORY_STEPS)
    return Hint(solution=solution, steps=steps)


__all__ = ["Hint", "hint_for"]
