"""Process adapter for running external build tools."""

import asyncio
import codecs
import contextlib
import logging
import os
import shlex
from collections.abc import AsyncIterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from webtoapk.core.errors import REDACTED, ProcessFailureKind
from webtoapk.models.results import ProcessResult
from webtoapk.utils.stream_process import (
    LineSplitter,
    LoggerOutputMiddleware,
    OutputMiddleware,
    StreamType,
)


logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 4096
TERMINATE_GRACE_SECONDS = 5.0


class ProcessError(Exception):
    """Uncategorized process failure.

    Components convert this into a categorized error at their boundary,
    carrying ``kind`` into the error context.
    """

    kind: ProcessFailureKind = ProcessFailureKind.SPAWN

    def __init__(self, message: str, command: Sequence[str]) -> None:
        super().__init__(message)
        self.command = mask_arguments(command)


class ProcessSpawnError(ProcessError):
    """The operating system could not start the process."""

    kind = ProcessFailureKind.SPAWN


class ProcessTimeoutError(ProcessError):
    """The process did not finish in time and was terminated."""

    kind = ProcessFailureKind.TIMEOUT

    def __init__(
        self,
        message: str,
        command: Sequence[str],
        timeout: float,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message, command)
        self.timeout = timeout
        self.stdout = stdout
        self.stderr = stderr


@dataclass(frozen=True)
class OutputChunk:
    """A piece of decoded output from one stream."""

    stream: StreamType
    text: str


# Options whose following argument is a password
SECRET_OPTIONS = frozenset({"-storepass", "-keypass", "-srcstorepass", "-deststorepass"})


def mask_arguments(command: Sequence[str]) -> list[str]:
    """Copy of ``command`` with password arguments replaced by ``***``."""
    masked: list[str] = []
    hide_next = False
    for arg in map(str, command):
        if hide_next:
            masked.append(REDACTED)
            hide_next = False
        elif arg.startswith("pass:"):
            masked.append(f"pass:{REDACTED}")
        else:
            masked.append(arg)
            hide_next = arg in SECRET_OPTIONS
    return masked


def format_command(command: Sequence[str]) -> str:
    """Shell-like rendering of ``command`` for logs, with passwords masked."""
    return " ".join(shlex.quote(arg) for arg in mask_arguments(command))


class ProcessHandle:
    """A running process whose output is consumed as an async iterator.

    Iterating yields ``OutputChunk`` objects until both pipes are closed.
    Everything read is also appended to untruncated per-stream buffers.
    """

    def __init__(self, process: asyncio.subprocess.Process, command: list[str]):
        self._process = process
        self.command = command
        self._stdout_parts: list[str] = []
        self._stderr_parts: list[str] = []

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def returncode(self) -> int | None:
        return self._process.returncode

    @property
    def stdout(self) -> str:
        return "".join(self._stdout_parts)

    @property
    def stderr(self) -> str:
        return "".join(self._stderr_parts)

    async def _pump(
        self,
        stream: asyncio.StreamReader | None,
        stream_type: StreamType,
        queue: "asyncio.Queue[OutputChunk | None]",
    ) -> None:
        buffer = self._stdout_parts if stream_type == "stdout" else self._stderr_parts
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        try:
            if stream is None:
                return
            while True:
                data = await stream.read(READ_CHUNK_SIZE)
                text = decoder.decode(data, final=not data)
                if text:
                    buffer.append(text)
                    await queue.put(OutputChunk(stream_type, text))
                if not data:
                    return
        finally:
            await queue.put(None)

    async def __aiter__(self) -> AsyncIterator[OutputChunk]:
        queue: asyncio.Queue[OutputChunk | None] = asyncio.Queue()
        readers = [
            asyncio.create_task(self._pump(self._process.stdout, "stdout", queue)),
            asyncio.create_task(self._pump(self._process.stderr, "stderr", queue)),
        ]
        open_streams = len(readers)
        try:
            while open_streams:
                chunk = await queue.get()
                if chunk is None:
                    open_streams -= 1
                    continue
                yield chunk
        finally:
            for reader in readers:
                reader.cancel()
            await asyncio.gather(*readers, return_exceptions=True)

    async def wait(self) -> ProcessResult:
        """Wait for the process to exit and return its buffered result."""
        exit_code = await self._process.wait()
        return ProcessResult(
            exit_code=exit_code,
            stdout=self.stdout,
            stderr=self.stderr,
            command=mask_arguments(self.command),
        )

    async def terminate(self, grace_period: float = TERMINATE_GRACE_SECONDS) -> None:
        """Send SIGTERM, then SIGKILL if the process outlives ``grace_period``."""
        if self._process.returncode is not None:
            return
        with contextlib.suppress(ProcessLookupError):
            self._process.terminate()
        try:
            await asyncio.wait_for(self._process.wait(), grace_period)
        except asyncio.TimeoutError:
            logger.warning(
                "Process %s ignored SIGTERM, killing it", format_command(self.command)
            )
            with contextlib.suppress(ProcessLookupError):
                self._process.kill()
            await self._process.wait()


class ProcessRunner:
    """Spawn external executables with streamed output and optional timeout.

    Calls are independent of each other; nothing is serialized here.
    """

    async def start(
        self,
        command: str | Path,
        args: Sequence[str] = (),
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessHandle:
        """Spawn a process and return its handle.

        Raises:
            ProcessSpawnError: If the executable or working directory is
                missing, or the OS refuses to start the process
        """
        full_command = [str(command), *(str(arg) for arg in args)]
        logger.debug(
            "Spawning: %s (cwd=%s)", format_command(full_command), cwd or os.getcwd()
        )
        try:
            process = await asyncio.create_subprocess_exec(
                *full_command,
                cwd=str(cwd) if cwd is not None else None,
                env=dict(env) if env is not None else None,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ProcessSpawnError(
                f"Failed to start {full_command[0]}: {e}", full_command
            ) from e
        return ProcessHandle(process, full_command)

    async def run(
        self,
        command: str | Path,
        args: Sequence[str] = (),
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
        middleware: OutputMiddleware[Any] | None = None,
    ) -> ProcessResult:
        """Run a process to completion.

        Output is passed line by line through ``middleware`` as it arrives.
        A non-zero exit code is returned, not raised.

        Args:
            command: Executable to run
            args: Arguments
            cwd: Working directory of the child process
            env: Complete environment for the child (inherits when None)
            timeout: Seconds before the process is terminated
            middleware: Line consumer (logs through this module by default)

        Returns:
            Exit code with complete stdout and stderr

        Raises:
            ProcessSpawnError: If the process could not be started
            ProcessTimeoutError: If ``timeout`` elapsed first
        """
        if middleware is None:
            middleware = cast(OutputMiddleware[Any], LoggerOutputMiddleware(logger))

        handle = await self.start(command, args, cwd=cwd, env=env)

        async def consume() -> ProcessResult:
            splitters = {"stdout": LineSplitter(), "stderr": LineSplitter()}
            async for chunk in handle:
                for line in splitters[chunk.stream].feed(chunk.text):
                    middleware.process(line, chunk.stream)
            for stream_type, splitter in splitters.items():
                for line in splitter.flush():
                    middleware.process(line, stream_type)
            return await handle.wait()

        try:
            return await asyncio.wait_for(consume(), timeout)
        except asyncio.TimeoutError:
            await handle.terminate()
            raise ProcessTimeoutError(
                f"{Path(handle.command[0]).name} timed out after {timeout} seconds",
                handle.command,
                timeout=timeout or 0.0,
                stdout=handle.stdout,
                stderr=handle.stderr,
            ) from None
        except asyncio.CancelledError:
            await handle.terminate()
            raise


def create_process_runner() -> ProcessRunner:
    """Factory function to create a ProcessRunner instance."""
    logger.debug("Creating ProcessRunner")
    return ProcessRunner()


__all__ = [
    "OutputChunk",
    "ProcessError",
    "ProcessHandle",
    "ProcessRunner",
    "ProcessSpawnError",
    "ProcessTimeoutError",
    "create_process_runner",
    "format_command",
    "mask_arguments",
]
