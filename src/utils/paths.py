"""Path utility helpers."""
from __future__ import annotations

from pathlib import Path


def normalise_path(path: Path) -> Path:
    """Return an absolute path with ``~`` expanded and Windows separators unified."""

    return Path(str(path).replace("\\", "/")).expanduser().resolve()
