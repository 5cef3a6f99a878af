"""Options for a single native build invocation."""

from pathlib import Path
from typing import Literal

from pydantic import ConfigDict, Field

from webtoapk.models.base import WebToAPKBaseModel


BuildType = Literal["debug", "release"]


class BuildOptions(WebToAPKBaseModel):
    """Read-only input to one ``build_apk`` call."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    release: bool = Field(default=False, description="Build the release variant")
    output_dir: Path | None = Field(
        default=None,
        alias="outputDir",
        description="Directory the built APK is copied to",
    )
    minify_web: bool = Field(
        default=False,
        alias="minifyWeb",
        description="Pass -PminifyEnabled=true to Gradle",
    )
    clean: bool = Field(default=False, description="Run the Gradle clean task first")

    @property
    def build_type(self) -> BuildType:
        return "release" if self.release else "debug"


__all__ = ["BuildOptions", "BuildType"]
