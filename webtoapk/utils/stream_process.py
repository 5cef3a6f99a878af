"""Output middleware for streamed subprocess output.

Middleware receives complete lines from a running process as they arrive,
which makes it suitable for live progress logging while the process runner
keeps the raw output buffered for diagnostics.

Example:
    ```python
    from webtoapk.utils.stream_process import OutputMiddleware

    class WarningCollector(OutputMiddleware[None]):
        def __init__(self) -> None:
            self.warnings: list[str] = []

        def process(self, line: str, stream_type: str) -> None:
            if "warning:" in line:
                self.warnings.append(line)

    collector = WarningCollector()
    result = await runner.run("./gradlew", ["assembleDebug"], middleware=collector)
    ```
"""

import logging
from typing import Generic, Literal, TypeVar


T = TypeVar("T")  # Type of processed output

StreamType = Literal["stdout", "stderr"]


class OutputMiddleware(Generic[T]):
    """Base class for processing command output streams.

    Type parameter T represents the return type of the process method,
    allowing middleware to transform strings into other types if needed.
    """

    def process(self, line: str, stream_type: str) -> T:
        """Process a line of output from a subprocess stream.

        Args:
            line: A line of text from the process output, without newline
            stream_type: Either "stdout" or "stderr"

        Returns:
            Processed output of type T
        """
        raise NotImplementedError()


class LoggerOutputMiddleware(OutputMiddleware[str]):
    """Forward stdout lines at DEBUG and stderr lines at WARNING."""

    def __init__(
        self, logger: logging.Logger, stdout_prefix: str = "", stderr_prefix: str = ""
    ) -> None:
        self.logger = logger
        self.stdout_prefix = stdout_prefix
        self.stderr_prefix = stderr_prefix

    def process(self, line: str, stream_type: str) -> str:
        if stream_type == "stdout":
            self.logger.debug("%s%s", self.stdout_prefix, line)
        else:
            self.logger.warning("%s%s", self.stderr_prefix, line)
        return line


class NullOutputMiddleware(OutputMiddleware[None]):
    """Discard lines; output is still buffered by the runner."""

    def process(self, line: str, stream_type: str) -> None:
        return None


class LineSplitter:
    """Reassemble lines from arbitrarily split text chunks."""

    def __init__(self) -> None:
        self._pending = ""

    def feed(self, text: str) -> list[str]:
        """Add a chunk and return the lines it completed."""
        self._pending += text
        if "\n" not in self._pending:
            return []
        *lines, self._pending = self._pending.split("\n")
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> list[str]:
        """Return the trailing partial line, if any."""
        pending, self._pending = self._pending, ""
        return [pending.rstrip("\r")] if pending else []
