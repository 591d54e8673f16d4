"""Unit tests for the key=value config codec."""

from __future__ import annotations

from bashlog.workspaces import codec


def test_encode_one_line_per_entry() -> None:
    text = codec.encode({"name": "proj", "created": "2024-01-01T00:00:00+00:00", "commands": "0"})
    assert text == "name=proj\ncreated=2024-01-01T00:00:00+00:00\ncommands=0\n"


def test_decode_splits_on_first_equals_and_trims() -> None:
    record = codec.decode("  name = proj \nurl=a=b\n")
    assert record == {"name": "proj", "url": "a=b"}


def test_decode_ignores_lines_without_equals() -> None:
    record = codec.decode("# comment\n\nname=proj\ngarbage\n")
    assert record == {"name": "proj"}


def test_decode_empty_value() -> None:
    assert codec.decode("commands=\n") == {"commands": ""}


def test_read_record_missing_file_is_empty(tmp_path) -> None:
    assert codec.read_record(tmp_path / "nope.txt") == {}


def test_read_record(tmp_path) -> None:
    path = tmp_path / "config.txt"
    path.write_text(codec.encode({"name": "x", "commands": "7"}))
    assert codec.read_record(path) == {"name": "x", "commands": "7"}


def test_read_record_replaces_undecodable_bytes(tmp_path) -> None:
    path = tmp_path / "config.txt"
    path.write_bytes(b"name=proj\ncreated=\xff\xfe\n")
    record = codec.read_record(path)
    assert record["name"] == "proj"
    assert record["created"] == "\ufffd\ufffd"
