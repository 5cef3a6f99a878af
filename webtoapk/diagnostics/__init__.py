"""Diagnosis of external tool failures."""

from .error_classifier import (
    GRADLE_ERROR_CLASSIFIER,
    NPM_ERROR_CLASSIFIER,
    SIGNING_ERROR_CLASSIFIER,
    ErrorClassifier,
    ErrorPattern,
)


__all__ = [
    "ErrorClassifier",
    "ErrorPattern",
    "GRADLE_ERROR_CLASSIFIER",
    "NPM_ERROR_CLASSIFIER",
    "SIGNING_ERROR_CLASSIFIER",
]
