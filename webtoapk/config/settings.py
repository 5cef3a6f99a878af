"""Tool settings for webtoapk, read from the environment."""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from webtoapk.models.keystore import DebugKeystoreConfig


class WebToAPKSettings(BaseSettings):
    """Timeouts, diagnostic limits and the debug keystore definition.

    Precedence order (highest to lowest):
    1. Environment variables (``WEBTOAPK_BUILD_TIMEOUT=900``)
    2. Constructor arguments
    3. .env file
    4. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="WEBTOAPK_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        return (
            env_settings,
            init_settings,
            dotenv_settings,
            file_secret_settings,
        )

    build_timeout: float = Field(
        default=600.0, gt=0, description="Seconds before the Gradle build is killed"
    )
    install_timeout: float | None = Field(
        default=900.0, description="Seconds allowed for each npm install step"
    )
    platform_timeout: float | None = Field(
        default=300.0, description="Seconds allowed for `cap add android`"
    )
    sync_timeout: float | None = Field(
        default=300.0, description="Seconds allowed for `cap sync android`"
    )
    verify_timeout: float | None = Field(
        default=30.0, description="Seconds allowed for each environment probe"
    )
    output_tail_chars: int = Field(
        default=1000, ge=0, description="Characters of build output kept in errors"
    )
    signing_tail_chars: int = Field(
        default=500, ge=0, description="Characters of signer output kept in errors"
    )
    capacitor_core_version: str = "^6.0.0"
    capacitor_cli_version: str = "^5.7.0"
    capacitor_android_version: str = "^6.0.0"
    debug_keystore: DebugKeystoreConfig = Field(default_factory=DebugKeystoreConfig)


def create_settings(**overrides: Any) -> WebToAPKSettings:
    """Create settings, applying explicit overrides below the environment."""
    return WebToAPKSettings(**overrides)


__all__ = ["WebToAPKSettings", "create_settings"]
