from __future__ import annotations

from pathlib import Path
from typing import Iterator

from teams_presence.domain.errors import InputReadError


def iter_identifiers(path: str | Path) -> Iterator[str]:
    """Stream identifiers from a newline-delimited file without loading it whole."""
    try:
        handle = open(path, "r", encoding="utf-8")
    except OSError as e:
        raise InputReadError(str(path), f"Could not open input file ({e.strerror or e})") from e

    with handle:
        line_number = 0
        try:
            for line_number, line in enumerate(handle, start=1):
                identifier = line.strip()
                if identifier:
                    yield identifier
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadError(str(path), f"Error reading input file ({e})", line_number + 1) from e
