"""Tests for ErrorClassifier and its preset tables."""

import pytest

from webtoapk.diagnostics.error_classifier import (
    GRADLE_ERROR_CLASSIFIER,
    NPM_ERROR_CLASSIFIER,
    SIGNING_ERROR_CLASSIFIER,
    ErrorClassifier,
    ErrorPattern,
)


class TestErrorClassifier:
    def test_first_matching_pattern_wins(self):
        classifier = ErrorClassifier(
            patterns=[
                ErrorPattern.compile("alpha", "first"),
                ErrorPattern.compile("beta", "second"),
            ],
            markers=(),
            fallback="none",
        )

        assert classifier.classify("beta then alpha") == "first"

    def test_marker_line_is_returned_trimmed(self):
        classifier = ErrorClassifier([], markers=("ERROR:",), fallback="none")

        output = "starting\n   ERROR: something broke   \nERROR: second\n"

        assert classifier.classify(output) == "ERROR: something broke"

    def test_fallback_when_nothing_matches(self):
        classifier = ErrorClassifier([], markers=("ERROR:",), fallback="none")

        assert classifier.classify("all good") == "none"
        assert classifier.classify("") == "none"

    def test_empty_fallback_is_rejected(self):
        with pytest.raises(ValueError):
            ErrorClassifier([], markers=(), fallback="")

    def test_classification_is_deterministic(self):
        output = "FAILURE: Build failed with an exception.\n"

        assert GRADLE_ERROR_CLASSIFIER.classify(
            output
        ) == GRADLE_ERROR_CLASSIFIER.classify(output)


class TestGradleClassifier:
    @pytest.mark.parametrize(
        ("output", "expected"),
        [
            (
                "FAILURE: Build failed with an exception.",
                "Build failed with exception",
            ),
            (
                "Could not resolve all files for configuration ':app:debugRuntimeClasspath'.",
                "Dependency resolution failed. Check your internet connection "
                "and dependencies.",
            ),
            (
                "Android SDK not found",
                "Android SDK not found. Please install Android SDK and set "
                "ANDROID_HOME environment variable.",
            ),
            (
                "No toolchains found in the NDK toolchains folder for ABI",
                "Android NDK issue. Please check your NDK installation.",
            ),
            (
                "Execution failed for task ':app:compileDebugJavaWithJavac'.",
                "Java compilation failed. Check for syntax errors in generated code.",
            ),
            (
                "Execution failed for task ':app:packageDebug'.",
                "APK packaging failed. Check for resource conflicts or missing files.",
            ),
        ],
    )
    def test_known_signatures(self, output, expected):
        assert GRADLE_ERROR_CLASSIFIER.classify(f"> Task :app\n{output}\n") == expected

    def test_exception_marker_line(self):
        output = "BUILD FAILED\njava.lang.IllegalStateException: bad state\n"

        assert (
            GRADLE_ERROR_CLASSIFIER.classify(output)
            == "java.lang.IllegalStateException: bad state"
        )

    def test_generic_fallback(self):
        assert (
            GRADLE_ERROR_CLASSIFIER.classify("BUILD FAILED in 3s")
            == "Unknown build error occurred"
        )


class TestSigningClassifier:
    @pytest.mark.parametrize(
        ("output", "expected"),
        [
            (
                "java.io.IOException: Keystore was tampered with, or password was incorrect",
                "Incorrect keystore password or corrupted keystore file",
            ),
            (
                "java.security.UnrecoverableKeyException: Cannot recover key",
                "Incorrect key alias password",
            ),
            ("Alias release does not exist", "Key alias not found in keystore"),
            ("release.jks (No such file or directory)", "Keystore file not found"),
            (
                "app.apk (Permission denied)",
                "Permission denied accessing keystore or APK file",
            ),
        ],
    )
    def test_known_signatures(self, output, expected):
        assert SIGNING_ERROR_CLASSIFIER.classify(output) == expected

    def test_error_marker_is_signing_specific(self):
        output = "Failed to load signer\nError: unsupported key type\n"

        assert SIGNING_ERROR_CLASSIFIER.classify(output) == "Error: unsupported key type"
        # "Error:" is not a Gradle marker
        assert GRADLE_ERROR_CLASSIFIER.classify(output) == "Unknown build error occurred"

    def test_generic_fallback(self):
        assert SIGNING_ERROR_CLASSIFIER.classify("") == "Unknown signing error occurred"


class TestNpmClassifier:
    def test_network_error(self):
        output = "npm ERR! code ENOTFOUND\nnpm ERR! network request failed"

        assert NPM_ERROR_CLASSIFIER.classify(output).startswith("Network error")

    def test_marker_line(self):
        output = "npm ERR! missing script: build\n"

        assert NPM_ERROR_CLASSIFIER.classify(output) == "npm ERR! missing script: build"
