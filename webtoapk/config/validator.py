"""Validation of application configurations."""

import re
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

from pydantic import Field

from webtoapk.core.errors import ConfigError
from webtoapk.models.app_config import AppConfig
from webtoapk.models.base import WebToAPKBaseModel


PACKAGE_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)+$")
VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+$")
VALID_ORIENTATIONS = ("portrait", "landscape", "any")
REQUIRED_FIELDS = (
    "app_name",
    "package_name",
    "version",
    "web_dir",
    "start_url",
    "permissions",
)
ICON_EXTENSIONS = (".png", ".jpg", ".jpeg")


class ValidationIssue(WebToAPKBaseModel):
    field: str
    message: str
    severity: Literal["error", "warning"] = "error"


class ValidationResult(WebToAPKBaseModel):
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error_fields(self) -> list[str]:
        return sorted({issue.field for issue in self.errors})


class ConfigValidator:
    """Validate an ``AppConfig`` and collect every problem at once."""

    def validate_config(self, config: AppConfig) -> ValidationResult:
        result = ValidationResult()
        self._validate_required_fields(config, result)
        self._validate_field_formats(config, result)
        self._validate_file_paths(config, result)
        self._validate_permissions(config, result)
        if config.allow_navigation:
            nav = self.validate_navigation_urls(config.allow_navigation)
            result.errors.extend(nav.errors)
        return result

    def ensure_valid(self, config: AppConfig) -> ValidationResult:
        """Validate and raise ``ConfigError`` if there is any error.

        Returns:
            The validation result, possibly with warnings
        """
        result = self.validate_config(config)
        if not result.is_valid:
            details = "; ".join(f"{i.field}: {i.message}" for i in result.errors)
            raise ConfigError(
                f"Invalid configuration: {details}",
                {
                    "fields": result.error_fields(),
                    "errors": [issue.to_dict_full() for issue in result.errors],
                },
            )
        return result

    def _validate_required_fields(
        self, config: AppConfig, result: ValidationResult
    ) -> None:
        for name in REQUIRED_FIELDS:
            value = getattr(config, name)
            if value is None:
                result.errors.append(
                    ValidationIssue(field=name, message=f"{name} is required")
                )
            elif isinstance(value, str) and not value.strip():
                result.errors.append(
                    ValidationIssue(field=name, message=f"{name} cannot be empty")
                )
            elif isinstance(value, list) and not value:
                result.errors.append(
                    ValidationIssue(
                        field=name, message=f"{name} must contain at least one item"
                    )
                )

    def _validate_field_formats(
        self, config: AppConfig, result: ValidationResult
    ) -> None:
        if config.app_name and len(config.app_name) > 50:
            result.warnings.append(
                ValidationIssue(
                    field="app_name",
                    message="App name is longer than 50 characters, "
                    "may be truncated on some devices",
                    severity="warning",
                )
            )

        if config.package_name and not PACKAGE_NAME_PATTERN.match(
            config.package_name
        ):
            result.errors.append(
                ValidationIssue(
                    field="package_name",
                    message="Package name must follow Java package naming "
                    "convention (e.g., com.example.app)",
                )
            )

        if config.version and not VERSION_PATTERN.match(config.version):
            result.errors.append(
                ValidationIssue(
                    field="version",
                    message="Version must follow semantic versioning format "
                    "(e.g., 1.0.0)",
                )
            )

        if config.orientation and config.orientation not in VALID_ORIENTATIONS:
            result.errors.append(
                ValidationIssue(
                    field="orientation",
                    message="Orientation must be one of: "
                    + ", ".join(VALID_ORIENTATIONS),
                )
            )

        start_url = config.start_url
        if start_url.startswith(("http://", "https://")):
            result.warnings.append(
                ValidationIssue(
                    field="start_url",
                    message="Using remote URL as start_url may cause issues "
                    "if network is unavailable",
                    severity="warning",
                )
            )
        elif start_url and not start_url.endswith(".html") and "/" not in start_url:
            result.warnings.append(
                ValidationIssue(
                    field="start_url",
                    message="start_url should typically point to an HTML file",
                    severity="warning",
                )
            )

    def _validate_file_paths(
        self, config: AppConfig, result: ValidationResult
    ) -> None:
        if config.web_dir and not Path(config.web_dir).exists():
            result.errors.append(
                ValidationIssue(
                    field="web_dir",
                    message=f"Web directory does not exist: {config.web_dir}",
                )
            )
        elif config.web_dir and config.start_url:
            start_path = Path(config.web_dir) / config.start_url
            if not config.start_url.startswith("http") and not start_path.exists():
                result.warnings.append(
                    ValidationIssue(
                        field="start_url",
                        message=f"Start URL file does not exist: {start_path}",
                        severity="warning",
                    )
                )

        if config.icon:
            if not Path(config.icon).exists():
                result.warnings.append(
                    ValidationIssue(
                        field="icon",
                        message=f"Icon file does not exist: {config.icon}",
                        severity="warning",
                    )
                )
            elif Path(config.icon).suffix.lower() not in ICON_EXTENSIONS:
                result.warnings.append(
                    ValidationIssue(
                        field="icon",
                        message="Icon should be a PNG or JPEG file "
                        "for best compatibility",
                        severity="warning",
                    )
                )

        if config.splash_screen and not Path(config.splash_screen).exists():
            result.warnings.append(
                ValidationIssue(
                    field="splash_screen",
                    message=f"Splash screen file does not exist: "
                    f"{config.splash_screen}",
                    severity="warning",
                )
            )

    def _validate_permissions(
        self, config: AppConfig, result: ValidationResult
    ) -> None:
        if not config.permissions:
            return

        for permission in config.permissions:
            if not permission.startswith("android.permission."):
                result.warnings.append(
                    ValidationIssue(
                        field="permissions",
                        message=f'Permission "{permission}" does not follow '
                        "Android permission naming convention",
                        severity="warning",
                    )
                )

        if "android.permission.INTERNET" not in config.permissions:
            result.warnings.append(
                ValidationIssue(
                    field="permissions",
                    message="Missing INTERNET permission - "
                    "web content may not load properly",
                    severity="warning",
                )
            )
        if "android.permission.ACCESS_NETWORK_STATE" not in config.permissions:
            result.warnings.append(
                ValidationIssue(
                    field="permissions",
                    message="Missing ACCESS_NETWORK_STATE permission - "
                    "network status detection may not work",
                    severity="warning",
                )
            )

    def validate_navigation_urls(self, urls: list[str]) -> ValidationResult:
        """Check allow-navigation entries; wildcard patterns are accepted."""
        result = ValidationResult()
        for url in urls:
            parsed = urlparse(url)
            if parsed.scheme and parsed.netloc:
                continue
            if "*" in url:
                continue
            result.errors.append(
                ValidationIssue(
                    field="allow_navigation", message=f"Invalid URL format: {url}"
                )
            )
        return result


__all__ = [
    "ConfigValidator",
    "ValidationIssue",
    "ValidationResult",
    "PACKAGE_NAME_PATTERN",
    "VERSION_PATTERN",
]
