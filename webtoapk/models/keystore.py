"""Keystore models used by the APK signer."""

from pathlib import Path
from typing import Any

from pydantic import ConfigDict, Field, SecretStr, field_validator

from webtoapk.core.errors import REDACTED
from webtoapk.models.base import WebToAPKBaseModel


class KeystoreConfig(WebToAPKBaseModel):
    """Credentials for signing an APK.

    Passwords are kept as ``SecretStr`` so they never show up in reprs or
    default serialization.
    """

    # Passwords are passed to apksigner byte for byte
    model_config = ConfigDict(str_strip_whitespace=False)

    path: str = ""
    password: SecretStr = SecretStr("")
    alias: str = ""
    alias_password: SecretStr = Field(default=SecretStr(""), alias="aliasPassword")

    @field_validator("path", mode="before")
    @classmethod
    def coerce_path(cls, v: object) -> object:
        return str(v) if isinstance(v, Path) else v

    def missing_fields(self) -> list[str]:
        """Names of the required fields that are empty."""
        values = {
            "path": self.path,
            "password": self.password.get_secret_value(),
            "alias": self.alias,
            "alias_password": self.alias_password.get_secret_value(),
        }
        return [name for name, value in values.items() if not value]

    def secrets(self) -> tuple[str, str]:
        """Plain-text secrets, for scrubbing diagnostic output."""
        return (
            self.password.get_secret_value(),
            self.alias_password.get_secret_value(),
        )

    def to_redacted_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "password": REDACTED,
            "alias": self.alias,
            "alias_password": REDACTED,
        }


def _default_debug_keystore_path() -> Path:
    return Path.home() / ".android" / "debug.keystore"


class DebugKeystoreConfig(WebToAPKBaseModel):
    """Fixed, low-security keystore used for development builds.

    One instance is built with the settings and handed to the signer; the
    keystore file itself is created lazily on disk.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: Path = Field(default_factory=_default_debug_keystore_path)
    password: str = "android"
    alias: str = "androiddebugkey"
    alias_password: str = "android"
    dname: str = "CN=Android Debug,O=Android,C=US"
    validity_days: int = 10000
    key_algorithm: str = "RSA"
    key_size: int = 2048

    def to_keystore_config(self) -> KeystoreConfig:
        return KeystoreConfig(
            path=str(self.path),
            password=SecretStr(self.password),
            alias=self.alias,
            alias_password=SecretStr(self.alias_password),
        )


__all__ = ["KeystoreConfig", "DebugKeystoreConfig"]
