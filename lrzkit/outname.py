"""Default output names for decompressing an archive."""

from __future__ import annotations

import os


def strip_short_extension(path) -> str:
    """Drop the text after the last dot when it is shorter than four characters."""
    path = os.fspath(path)
    dot = path.rfind(".")
    if dot != -1 and len(path) - dot - 1 < 4:
        return path[:dot]
    return path