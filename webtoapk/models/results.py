"""Result models produced by the process runner and the build pipeline."""

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import Field, field_validator

from webtoapk.models.base import WebToAPKBaseModel


@dataclass
class ProcessResult:
    """Exit status and complete output of one external process run."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""
    command: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def combined_output(self) -> str:
        """stderr followed by stdout, the order used for error classification."""
        return self.stderr + self.stdout

    def stdout_tail(self, chars: int) -> str:
        return self.stdout[-chars:] if chars > 0 else ""

    def stderr_tail(self, chars: int) -> str:
        return self.stderr[-chars:] if chars > 0 else ""


class ArtifactLocation(WebToAPKBaseModel):
    """A built package on disk. Only valid until the next build of the project."""

    path: Path = Field(description="Absolute path of the artifact")
    size: int = Field(description="Size in bytes")

    @field_validator("size")
    @classmethod
    def validate_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Artifact size must be greater than zero")
        return v

    @field_validator("path")
    @classmethod
    def validate_absolute(cls, v: Path) -> Path:
        return v if v.is_absolute() else v.resolve()


__all__ = ["ProcessResult", "ArtifactLocation"]
