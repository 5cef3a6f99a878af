"""Application configuration consumed by the build pipeline."""

from typing import Any

from pydantic import Field

from webtoapk.models.base import WebToAPKBaseModel


class AppConfig(WebToAPKBaseModel):
    """Description of the web application to package.

    Only types are enforced here. Format rules (package name, version,
    orientation, paths) are checked by ``ConfigValidator`` and re-checked by
    the build orchestrator, so an invalid config can still be constructed and
    reported with a proper ``ConfigError``.
    """

    app_name: str = Field(default="", alias="appName")
    package_name: str = Field(default="", alias="packageName")
    version: str = ""
    web_dir: str = Field(default="", alias="webDir")
    start_url: str = Field(default="", alias="startUrl")
    permissions: list[str] = Field(default_factory=list)
    orientation: str | None = None
    icon: str | None = None
    splash_screen: str | None = Field(default=None, alias="splashScreen")
    allow_navigation: list[str] | None = Field(default=None, alias="allowNavigation")
    plugins: dict[str, Any] | None = None


__all__ = ["AppConfig"]
