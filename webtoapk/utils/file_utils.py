"""File system helpers used by the build pipeline."""

import shutil
from datetime import UTC, datetime
from pathlib import Path


def artifact_timestamp(moment: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp safe for file names.

    Colons and dots are replaced by dashes, e.g. ``2024-05-01T10-20-30-123Z``.
    """
    moment = (moment or datetime.now(UTC)).astimezone(UTC)
    iso = moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return iso.replace(":", "-").replace(".", "-")


def unused_path(path: Path) -> Path:
    """``path``, or the first ``<stem>-<n><suffix>`` sibling that does not exist."""
    candidate = path
    counter = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.stem}-{counter}{path.suffix}")
        counter += 1
    return candidate


def copy_directory(source: Path, target: Path) -> int:
    """Recursively copy ``source`` into ``target``.

    Returns:
        Number of files copied
    """
    copied = 0
    target.mkdir(parents=True, exist_ok=True)
    for entry in sorted(source.iterdir()):
        destination = target / entry.name
        if entry.is_dir():
            copied += copy_directory(entry, destination)
        else:
            shutil.copy2(entry, destination)
            copied += 1
    return copied


def list_files_with_suffix(directory: Path, suffix: str) -> list[Path]:
    """Files in ``directory`` with ``suffix``, in sorted name order."""
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.name.endswith(suffix)),
        key=lambda p: p.name,
    )


__all__ = [
    "artifact_timestamp",
    "copy_directory",
    "list_files_with_suffix",
    "unused_path",
]
