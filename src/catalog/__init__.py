"""ROM catalog: NRO metadata extraction, a searchable index and its cache."""

from .entries import EntryKind, EntryRef, RomEntry, TitleMetadata
from .errors import (
    CacheLoadFailure,
    CatalogError,
    DecodeFailure,
    FieldAbsent,
    FormatMismatch,
    IOFailure,
)
from .handlers import FormatReader, NroReader
from .index import Catalog
from .scanner import CatalogScanner, ScanConfig, refresh_catalog
from .schema import CacheSnapshot, CatalogSummary
from .search import FilterSettings

__all__ = [
    "CacheLoadFailure",
    "CacheSnapshot",
    "Catalog",
    "CatalogError",
    "CatalogScanner",
    "CatalogSummary",
    "DecodeFailure",
    "EntryKind",
    "EntryRef",
    "FieldAbsent",
    "FilterSettings",
    "FormatMismatch",
    "FormatReader",
    "IOFailure",
    "NroReader",
    "RomEntry",
    "ScanConfig",
    "TitleMetadata",
    "refresh_catalog",
]
