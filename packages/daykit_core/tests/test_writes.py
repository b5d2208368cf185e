from __future__ import annotations

from pathlib import Path

import pytest

from daykit_core.errors import DestinationExistsError, IoError
from daykit_core.writes import append_if_absent, ensure_file, write_new


def test_append_if_absent_creates_missing_file(tmp_path: Path) -> None:
    path = tmp_path / ".gitignore"

    assert append_if_absent(path, b"/target/") is True

    assert path.read_bytes() == b"/target/\n"


def test_append_if_absent_is_idempotent(tmp_path: Path) -> None:
    path = tmp_path / ".gitignore"

    append_if_absent(path, b"/target/")
    assert append_if_absent(path, b"/target/") is False

    assert path.read_bytes().count(b"/target/\n") == 1


def test_append_if_absent_keeps_existing_content(tmp_path: Path) -> None:
    path = tmp_path / ".gitignore"
    path.write_bytes(b"*.swp\n/target/\nnotes.txt\n")

    assert append_if_absent(path, "/target/") is False
    assert append_if_absent(path, "inputs/") is True

    assert path.read_bytes() == b"*.swp\n/target/\nnotes.txt\ninputs/\n"


def test_append_if_absent_matches_whole_lines_only(tmp_path: Path) -> None:
    path = tmp_path / ".gitignore"
    path.write_bytes(b"/target/debug\n")

    append_if_absent(path, b"/target/")

    assert path.read_bytes() == b"/target/debug\n/target/\n"


def test_append_if_absent_is_binary_safe(tmp_path: Path) -> None:
    path = tmp_path / "blob"
    path.write_bytes(b"\xff\xfe not utf-8\n\x00\x01\n")

    append_if_absent(path, b"\x00\x01")
    append_if_absent(path, b"\xc3\x28")

    assert path.read_bytes() == b"\xff\xfe not utf-8\n\x00\x01\n\xc3\x28\n"


def test_append_if_absent_starts_new_line_after_unterminated_content(tmp_path: Path) -> None:
    path = tmp_path / ".gitignore"
    path.write_bytes(b"*.swp")

    append_if_absent(path, b"/target/")

    assert path.read_bytes() == b"*.swp\n/target/\n"


def test_append_if_absent_treats_unterminated_last_line_as_present(tmp_path: Path) -> None:
    path = tmp_path / ".gitignore"
    path.write_bytes(b"*.swp\n/target/")

    assert append_if_absent(path, b"/target/") is False
    assert path.read_bytes() == b"*.swp\n/target/"


def test_append_if_absent_unopenable_file_reads_as_absent(tmp_path: Path) -> None:
    path = tmp_path / ".gitignore"
    path.mkdir()

    # The read phase does not raise; only the append itself fails.
    with pytest.raises(IoError, match="appending to"):
        append_if_absent(path, b"/target/")


def test_write_new_refuses_to_overwrite(tmp_path: Path) -> None:
    path = tmp_path / "Cargo.toml"
    path.write_text("original\n", encoding="utf-8")

    with pytest.raises(DestinationExistsError) as excinfo:
        write_new(path, b"replacement\n")

    assert excinfo.value.path == path
    assert path.read_text(encoding="utf-8") == "original\n"


def test_write_new_skip_policy_leaves_file_alone(tmp_path: Path) -> None:
    path = tmp_path / "Cargo.toml"
    path.write_text("original\n", encoding="utf-8")

    assert write_new(path, b"replacement\n", if_exists="skip") is False
    assert path.read_text(encoding="utf-8") == "original\n"

    fresh = tmp_path / "fresh.toml"
    assert write_new(fresh, b"new\n", if_exists="skip") is True
    assert fresh.read_bytes() == b"new\n"


def test_ensure_file_only_produces_missing_files(tmp_path: Path) -> None:
    calls: list[str] = []

    def _produce() -> bytes:
        calls.append("called")
        return b"fetched\n"

    path = tmp_path / "nested" / "dir" / "lib.rs"
    assert ensure_file(path, _produce) is True
    assert ensure_file(path, _produce) is False

    assert calls == ["called"]
    assert path.read_bytes() == b"fetched\n"
