"""Tests for remediation hints."""

import pytest

from webtoapk.cli.hints import hint_for
from webtoapk.core.errors import BuildError, ConfigError, ResourceError, SigningError


@pytest.mark.parametrize(
    ("error", "solution"),
    [
        (
            ConfigError("Invalid package name format. Must be in format com.example.app"),
            "Please use valid package name format, e.g. com.example.app",
        ),
        (
            BuildError("JAVA_HOME environment variable is not set"),
            "Please set JAVA_HOME environment variable to JDK installation directory",
        ),
        (
            ResourceError("Invalid icon file: /tmp/x.png"),
            "Please provide valid icon file (PNG, JPG, WebP format)",
        ),
        (
            SigningError("Keystore file not found: release.jks"),
            "Please check APK signing configuration",
        ),
        (
            SigningError("Incorrect keystore password"),
            "Please check keystore file path and format",
        ),
        (BuildError("something else"), "Please check build environment configuration"),
    ],
)
def test_solution(error, solution):
    assert hint_for(error).solution == solution


def test_memory_errors_add_steps():
    hint = hint_for(BuildError("Gradle ran out of memory"))

    assert "Free up system memory" in hint.steps
    assert hint.steps[0] == "Check Android SDK is properly installed"


def test_signing_steps():
    assert hint_for(SigningError("x")).steps[-1] == "Verify the key has not expired"
