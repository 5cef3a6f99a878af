"""Protocol definition for running external processes."""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from webtoapk.models.results import ProcessResult


if TYPE_CHECKING:
    from webtoapk.adapters.process_adapter import ProcessHandle
    from webtoapk.utils.stream_process import OutputMiddleware


@runtime_checkable
class ProcessRunnerProtocol(Protocol):
    """Protocol for spawning external tools."""

    async def run(
        self,
        command: str | Path,
        args: Sequence[str] = (),
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
        middleware: "OutputMiddleware[Any] | None" = None,
    ) -> ProcessResult:
        """Run a process to completion.

        Returns:
            Exit code and complete output; a non-zero exit is not raised

        Raises:
            ProcessSpawnError: If the process could not be started
            ProcessTimeoutError: If the timeout elapsed first
        """
        ...

    async def start(
        self,
        command: str | Path,
        args: Sequence[str] = (),
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> "ProcessHandle":
        """Spawn a process and return a handle streaming its output."""
        ...
