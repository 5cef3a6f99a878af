"""Core test fixtures for the webtoapk project."""

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest
from typer.testing import CliRunner

from webtoapk.build.orchestrator import REQUIRED_PROJECT_FILES
from webtoapk.config.settings import WebToAPKSettings
from webtoapk.models.app_config import AppConfig
from webtoapk.models.keystore import DebugKeystoreConfig, KeystoreConfig
from webtoapk.models.results import ProcessResult
from webtoapk.protocols import ProcessRunnerProtocol, ToolLocatorProtocol


STORE_PASSWORD = "s3cr3t-store-pw"
KEY_PASSWORD = "s3cr3t-key-pw"


# ---- Base Fixtures ----


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_webtoapk_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's WEBTOAPK_* variables out of the settings."""
    import os

    for key in list(os.environ):
        if key.startswith("WEBTOAPK_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings(tmp_path: Path) -> WebToAPKSettings:
    """Settings with short timeouts and a debug keystore inside tmp_path."""
    return WebToAPKSettings(
        build_timeout=5.0,
        install_timeout=5.0,
        platform_timeout=5.0,
        sync_timeout=5.0,
        verify_timeout=5.0,
        debug_keystore=DebugKeystoreConfig(
            path=tmp_path / "home" / ".android" / "debug.keystore"
        ),
    )


@pytest.fixture
def success_result() -> ProcessResult:
    return ProcessResult(exit_code=0, stdout="", stderr="")


@pytest.fixture
def mock_runner(success_result: ProcessResult) -> Mock:
    """Process runner whose ``run`` succeeds unless reconfigured."""
    runner = Mock(spec=ProcessRunnerProtocol)
    runner.run = AsyncMock(return_value=success_result)
    runner.start = AsyncMock()
    return runner


@pytest.fixture
def mock_locator(tmp_path: Path) -> Mock:
    """Tool locator returning fixed, platform-neutral paths."""
    locator = Mock(spec=ToolLocatorProtocol)
    locator.locate_signing_tool.return_value = tmp_path / "sdk" / "apksigner"
    locator.locate_key_tool.return_value = "keytool"
    locator.locate_java.return_value = "java"
    locator.executable.side_effect = lambda tool: tool
    locator.gradle_wrapper.side_effect = lambda android_dir: android_dir / "gradlew"
    locator.sdk_root.return_value = tmp_path / "sdk"
    return locator


# ---- Domain Fixtures ----


@pytest.fixture
def app_config_data() -> dict[str, Any]:
    """Raw configuration as written by users (camelCase keys)."""
    return {
        "appName": "Test App",
        "packageName": "com.test.app",
        "version": "1.0.0",
        "webDir": "./dist",
        "startUrl": "index.html",
        "permissions": ["android.permission.INTERNET"],
    }


@pytest.fixture
def app_config(app_config_data: dict[str, Any]) -> AppConfig:
    return AppConfig.model_validate(app_config_data)


@pytest.fixture
def web_dir(tmp_path: Path) -> Path:
    """A small web application on disk."""
    web = tmp_path / "dist"
    (web / "assets").mkdir(parents=True)
    (web / "index.html").write_text("<html><body>Hello</body></html>")
    (web / "assets" / "app.js").write_text("console.log('hi');")
    return web


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory for an initialized Capacitor project tree.

    Usage:
        project = make_project(skip="android/build.gradle")
    """

    def factory(name: str = "project", skip: str | None = None) -> Path:
        project = tmp_path / name
        project.mkdir(parents=True, exist_ok=True)
        for relative in REQUIRED_PROJECT_FILES:
            if relative == skip:
                continue
            path = project / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("// generated\n")
        return project

    return factory


@pytest.fixture
def keystore_file(tmp_path: Path) -> Path:
    path = tmp_path / "release.jks"
    path.write_bytes(b"\xfe\xed\xfe\xed keystore bytes")
    return path


@pytest.fixture
def keystore_config(keystore_file: Path) -> KeystoreConfig:
    return KeystoreConfig(
        path=str(keystore_file),
        password=STORE_PASSWORD,
        alias="release",
        alias_password=KEY_PASSWORD,
    )


@pytest.fixture
def apk_file(tmp_path: Path) -> Path:
    """A non-empty unsigned APK."""
    path = tmp_path / "out" / "app-debug.apk"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"PK\x03\x04" + b"\x00" * 1024)
    return path
