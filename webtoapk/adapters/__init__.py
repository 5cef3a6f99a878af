"""Adapters package for external system interfaces."""

from webtoapk.protocols import ProcessRunnerProtocol

from .process_adapter import (
    ProcessError,
    ProcessHandle,
    ProcessRunner,
    ProcessSpawnError,
    ProcessTimeoutError,
    create_process_runner,
)


__all__ = [
    "ProcessRunnerProtocol",
    "ProcessError",
    "ProcessHandle",
    "ProcessRunner",
    "ProcessSpawnError",
    "ProcessTimeoutError",
    "create_process_runner",
]
