"""Protocol definitions for the build pipeline collaborators."""

from .process_runner_protocol import ProcessRunnerProtocol
from .resource_processor_protocol import ResourceProcessorProtocol
from .tool_locator_protocol import ToolLocatorProtocol


__all__ = [
    "ProcessRunnerProtocol",
    "ResourceProcessorProtocol",
    "ToolLocatorProtocol",
]
