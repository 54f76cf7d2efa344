"""Base class for ROM format readers used by the catalog scanner."""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

from ..entries import MISSING_AUTHOR, TitleMetadata


class FormatReader(ABC):
    """Abstract base class for container format readers.

    Readers are stateless: every call opens, reads and closes the file on its
    own and never raises to the caller.
    """

    extensions: Iterable[str] = ()
    label: str = ""

    def __init__(self, missing_author: str = MISSING_AUTHOR) -> None:
        self.missing_author = missing_author

    def sniff(self, path: Path) -> bool:
        """Return ``True`` if the extension of ``path`` belongs to this reader."""

        suffix = path.suffix.lower()
        if not suffix:
            return False
        return suffix in {ext.lower() for ext in self.extensions}

    @abstractmethod
    def verify(self, path: Path) -> bool:
        """Cheaply check whether ``path`` is a file of this format."""

    @abstractmethod
    def parse(self, path: Path) -> TitleMetadata:
        """Return title metadata for ``path``, degrading to a sentinel on failure."""

    def sentinel(self, path: Path) -> TitleMetadata:
        return TitleMetadata.sentinel(path, self.missing_author)
