"""Tests for loading configuration files."""

import json
from pathlib import Path

import pytest
import yaml

from webtoapk.config.loader import load_app_config
from webtoapk.core.errors import ConfigError


@pytest.fixture
def config_dir(tmp_path: Path, web_dir: Path) -> Path:
    (tmp_path / "icon.png").write_bytes(b"png")
    return tmp_path


class TestLoadAppConfig:
    def test_json_with_relative_paths(self, config_dir, app_config_data):
        data = {**app_config_data, "icon": "icon.png"}
        path = config_dir / "webtoapk.json"
        path.write_text(json.dumps(data))

        config = load_app_config(path)

        assert config.app_name == "Test App"
        assert config.package_name == "com.test.app"
        assert Path(config.web_dir) == (config_dir / "dist").resolve()
        assert Path(config.icon) == (config_dir / "icon.png").resolve()

    def test_yaml(self, config_dir, app_config_data):
        path = config_dir / "webtoapk.yaml"
        path.write_text(yaml.safe_dump(app_config_data))

        config = load_app_config(path)

        assert config.version == "1.0.0"
        assert config.permissions == ["android.permission.INTERNET"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Configuration file not found"):
            load_app_config(tmp_path / "nope.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError, match="Failed to parse configuration file"):
            load_app_config(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_app_config(path)

    def test_wrong_types(self, tmp_path):
        path = tmp_path / "types.json"
        path.write_text(json.dumps({"permissions": "INTERNET"}))

        with pytest.raises(ConfigError, match="Invalid configuration structure"):
            load_app_config(path)

    def test_invalid_values(self, config_dir, app_config_data):
        path = config_dir / "webtoapk.json"
        path.write_text(json.dumps({**app_config_data, "version": "one"}))

        with pytest.raises(ConfigError) as exc_info:
            load_app_config(path)

        assert exc_info.value.context["fields"] == ["version"]

    def test_validation_can_be_skipped(self, config_dir, app_config_data):
        path = config_dir / "webtoapk.json"
        path.write_text(json.dumps({**app_config_data, "version": "one"}))

        assert load_app_config(path, validate=False).version == "one"
