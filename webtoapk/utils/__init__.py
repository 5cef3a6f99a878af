"""Utility modules and functions for webtoapk.

1. Process Streaming: output middleware and line reassembly
2. Error Utilities: wrap-once conversion into categorized errors
3. File Utilities: timestamps, copying and artifact listing
"""

from webtoapk.utils.error_utils import wrap_error
from webtoapk.utils.file_utils import (
    artifact_timestamp,
    copy_directory,
    list_files_with_suffix,
    unused_path,
)
from webtoapk.utils.stream_process import (
    LineSplitter,
    LoggerOutputMiddleware,
    NullOutputMiddleware,
    OutputMiddleware,
)


__all__ = [
    "LineSplitter",
    "LoggerOutputMiddleware",
    "NullOutputMiddleware",
    "OutputMiddleware",
    "artifact_timestamp",
    "copy_directory",
    "list_files_with_suffix",
    "unused_path",
    "wrap_error",
]
