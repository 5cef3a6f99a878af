"""Data models shared across the webtoapk pipeline."""

from .app_config import AppConfig
from .base import WebToAPKBaseModel
from .keystore import DebugKeystoreConfig, KeystoreConfig
from .options import BuildOptions, BuildType
from .results import ArtifactLocation, ProcessResult


__all__ = [
    "AppConfig",
    "ArtifactLocation",
    "BuildOptions",
    "BuildType",
    "DebugKeystoreConfig",
    "KeystoreConfig",
    "ProcessResult",
    "WebToAPKBaseModel",
]
