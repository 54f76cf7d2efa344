"""Pydantic models describing the on-disk catalog cache and catalog summaries."""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from .entries import EntryKind, EntryRef, RomEntry

if TYPE_CHECKING:  # pragma: no cover
    from .index import Catalog


CACHE_FORMAT = "rom-catalog-cache"
CACHE_VERSION = 1


class LeafRecord(BaseModel):
    """Persisted form of a :class:`RomEntry`; the icon is deliberately absent."""

    path: Path
    format: str
    name: str
    author: str

    @classmethod
    def from_entry(cls, entry: RomEntry) -> "LeafRecord":
        return cls(path=entry.path, format=entry.format, name=entry.name, author=entry.author)


class CacheSnapshot(BaseModel):
    """Complete persisted state of a catalog: backing lists plus the full projection."""

    format: Literal["rom-catalog-cache"] = CACHE_FORMAT
    version: int = CACHE_VERSION
    leaves: List[LeafRecord] = Field(default_factory=list)
    headers: List[str] = Field(default_factory=list)
    projection: List[EntryRef] = Field(default_factory=list)

    @field_validator("version")
    def validate_version(cls, value: int) -> int:
        if value != CACHE_VERSION:
            raise ValueError(f"unsupported cache version {value}; expected {CACHE_VERSION}")
        return value

    @model_validator(mode="after")
    def validate_projection(self) -> "CacheSnapshot":
        sizes = {EntryKind.LEAF: len(self.leaves), EntryKind.HEADER: len(self.headers)}
        for ref in self.projection:
            if ref.index >= sizes[ref.kind]:
                raise ValueError(f"projection references missing {ref.kind.value} #{ref.index}")
        return self

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)


class CatalogSummary(BaseModel):
    """Aggregate summary information of a catalog."""

    total_entries: int
    total_headers: int
    with_icon: int
    formats: Dict[str, int]

    @classmethod
    def from_catalog(cls, catalog: "Catalog") -> "CatalogSummary":
        leaves = catalog.leaves
        counts: Dict[str, int] = {}
        for entry in leaves:
            counts[entry.format] = counts.get(entry.format, 0) + 1
        return cls(
            total_entries=len(leaves),
            total_headers=len(catalog.headers),
            with_icon=sum(1 for entry in leaves if entry.has_icon),
            formats=counts,
        )
