"""Tests for file helpers."""

import re
from datetime import UTC, datetime

from webtoapk.utils.file_utils import (
    artifact_timestamp,
    copy_directory,
    list_files_with_suffix,
    unused_path,
)


def test_artifact_timestamp_replaces_colons_and_dots():
    moment = datetime(2024, 5, 1, 10, 20, 30, 123456, tzinfo=UTC)

    assert artifact_timestamp(moment) == "2024-05-01T10-20-30-123Z"


def test_artifact_timestamp_is_filename_safe():
    assert re.fullmatch(r"\d{4}-\d\d-\d\dT\d\d-\d\d-\d\d-\d{3}Z", artifact_timestamp())


def test_copy_directory_is_recursive(web_dir, tmp_path):
    target = tmp_path / "www"

    copied = copy_directory(web_dir, target)

    assert copied == 2
    assert (target / "index.html").read_text().startswith("<html>")
    assert (target / "assets" / "app.js").exists()


def test_list_files_with_suffix_sorted(tmp_path):
    for name in ("b.apk", "a.apk", "notes.txt"):
        (tmp_path / name).write_text("x")
    (tmp_path / "dir.apk").mkdir()

    assert [p.name for p in list_files_with_suffix(tmp_path, ".apk")] == [
        "a.apk",
        "b.apk",
    ]


def test_unused_path_returns_free_name_unchanged(tmp_path):
    assert unused_path(tmp_path / "app.apk") == tmp_path / "app.apk"


def test_unused_path_appends_counter(tmp_path):
    (tmp_path / "app.apk").write_bytes(b"one")
    (tmp_path / "app-1.apk").write_bytes(b"two")

    assert unused_path(tmp_path / "app.apk") == tmp_path / "app-2.apk"
