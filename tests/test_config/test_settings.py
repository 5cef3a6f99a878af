"""Tests for WebToAPKSettings."""

from pathlib import Path

from webtoapk.config.settings import WebToAPKSettings, create_settings


class TestWebToAPKSettings:
    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        settings = WebToAPKSettings()

        assert settings.build_timeout == 600.0
        assert settings.output_tail_chars == 1000
        assert settings.signing_tail_chars == 500
        assert settings.debug_keystore.alias == "androiddebugkey"
        assert settings.debug_keystore.path == (
            Path.home() / ".android" / "debug.keystore"
        )

    def test_environment_overrides_arguments(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("WEBTOAPK_BUILD_TIMEOUT", "42")

        settings = create_settings(build_timeout=10.0, sync_timeout=7.0)

        assert settings.build_timeout == 42.0
        assert settings.sync_timeout == 7.0

    def test_nested_debug_keystore_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("WEBTOAPK_DEBUG_KEYSTORE__PATH", str(tmp_path / "d.ks"))

        settings = WebToAPKSettings()

        assert settings.debug_keystore.path == tmp_path / "d.ks"
        assert settings.debug_keystore.password == "android"
