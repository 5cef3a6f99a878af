"""Load application configuration files (JSON or YAML)."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from webtoapk.config.validator import ConfigValidator
from webtoapk.core.errors import ConfigError
from webtoapk.models.app_config import AppConfig


logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def _read_mapping(config_path: Path) -> dict[str, Any]:
    text = config_path.read_text(encoding="utf-8")
    if config_path.suffix.lower() in YAML_SUFFIXES:
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration file must contain a mapping: {config_path}",
            {"config_path": str(config_path)},
        )
    return data


def load_app_config(
    config_path: Path | str,
    validator: ConfigValidator | None = None,
    validate: bool = True,
) -> AppConfig:
    """Read, parse and validate an application configuration file.

    Relative ``webDir``, ``icon`` and ``splashScreen`` entries are resolved
    against the directory containing the file.

    Args:
        config_path: Path to a ``.json``, ``.yaml`` or ``.yml`` file
        validator: Validator to use (a default one is created if omitted)
        validate: Run validation and raise on errors

    Returns:
        The loaded configuration

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            {"config_path": str(config_path)},
        )

    try:
        data = _read_mapping(config_path)
    except ConfigError:
        raise
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(
            f"Failed to parse configuration file {config_path}: {e}",
            {"config_path": str(config_path)},
        ) from e

    try:
        config = AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid configuration structure in {config_path}: {e}",
            {"config_path": str(config_path), "errors": e.errors()},
        ) from e

    base_dir = config_path.parent
    for name in ("web_dir", "icon", "splash_screen"):
        value = getattr(config, name)
        if value and not Path(value).is_absolute():
            setattr(config, name, str((base_dir / value).resolve()))

    if validate:
        result = (validator or ConfigValidator()).ensure_valid(config)
        for warning in result.warnings:
            logger.warning("Config warning [%s]: %s", warning.field, warning.message)

    return config


__all__ = ["load_app_config"]
