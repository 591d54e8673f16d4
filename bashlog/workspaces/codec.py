"""Flat ``key=value`` config record codec.

One entry per line.  Values containing ``=`` after the first one survive
(decode splits on the first ``=`` only), but values containing newlines are
not supported and are written as-is.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path


def encode(record: Mapping[str, str]) -> str:
    """Render a record as ``key=value`` lines, in mapping order."""
    return "".join(f"{key}={value}\n" for key, value in record.items())


def decode(text: str) -> dict[str, str]:
    """Parse ``key=value`` lines.  Lines without ``=`` are ignored."""
    record: dict[str, str] = {}
    for line in text.split("\n"):
        key, sep, value = line.partition("=")
        if sep:
            record[key.strip()] = value.strip()
    return record


def read_record(path: Path) -> dict[str, str]:
    """Decode the record stored at ``path``.

    A missing or unreadable file decodes to an empty mapping, so a workspace
    whose config was never written (or was deleted externally) falls back to
    defaults instead of breaking listings.  Undecodable bytes become U+FFFD.
    """
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return {}
    return decode(text)
