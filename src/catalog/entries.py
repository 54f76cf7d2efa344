"""Entry models used by the catalog: title metadata, ROM leaves and tagged references."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:  # pragma: no cover
    from .handlers.base import FormatReader


MISSING_AUTHOR = "missing"


@dataclass(slots=True)
class TitleMetadata:
    """Title information extracted from a ROM; ``icon`` is never persisted."""

    name: str
    author: str
    icon: Optional[Any] = None

    @classmethod
    def sentinel(cls, path: Path, missing_author: str = MISSING_AUTHOR) -> "TitleMetadata":
        """Return the metadata used when nothing could be read from ``path``."""

        return cls(name=Path(path).name, author=missing_author, icon=None)


class EntryKind(str, Enum):
    """Discriminator for the two kinds of catalog entries."""

    HEADER = "header"
    LEAF = "leaf"


class EntryRef(BaseModel):
    """A tagged reference into one of the catalog's backing lists."""

    model_config = ConfigDict(frozen=True)

    kind: EntryKind
    index: int = Field(ge=0)


@total_ordering
class RomEntry:
    """A discovered ROM file together with the metadata parsed from it."""

    __slots__ = ("path", "format", "metadata")

    def __init__(self, path: Path, metadata: TitleMetadata, format: str = "NRO") -> None:
        self.path = Path(path)
        self.format = format
        self.metadata = metadata

    @classmethod
    def from_path(cls, path: Path, reader: "FormatReader") -> "RomEntry":
        return cls(path, reader.parse(path), format=reader.label)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def author(self) -> str:
        return self.metadata.author

    @property
    def icon(self) -> Optional[Any]:
        return self.metadata.icon

    @property
    def has_icon(self) -> bool:
        return self.metadata.icon is not None

    @property
    def file_type(self) -> str:
        """Upper-cased file extension without the dot (``"NRO"``)."""

        return self.path.suffix.lstrip(".").upper()

    @property
    def title(self) -> str:
        return f"{self.name} ({self.file_type})"

    @property
    def subtitle(self) -> str:
        return self.author

    def key(self) -> str:
        """Return the text matched against search queries.

        Entries without an icon only carry partial metadata, so their key is
        the bare name; entries with an icon also match on the author.
        """

        if self.metadata.icon is None:
            return self.name
        return f"{self.name} {self.author}"

    def _sort_key(self) -> tuple[str, str, str]:
        return (self.name.casefold(), self.author.casefold(), str(self.path))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RomEntry):
            return NotImplemented
        return (self.path, self.format, self.name, self.author) == (
            other.path,
            other.format,
            other.name,
            other.author,
        )

    def __lt__(self, other: "RomEntry") -> bool:
        if not isinstance(other, RomEntry):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return hash((self.path, self.format, self.name, self.author))

    def __repr__(self) -> str:
        return f"RomEntry(path={str(self.path)!r}, name={self.name!r}, author={self.author!r}, icon={self.has_icon})"
