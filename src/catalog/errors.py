"""Exception hierarchy shared by format readers and the catalog."""
from __future__ import annotations


class CatalogError(Exception):
    """Base class for every error raised inside the catalog package."""


class FormatMismatch(CatalogError):
    """A magic value at the base or extension level did not match."""


class FieldAbsent(CatalogError):
    """An offset or size field is zero; the optional section is not present."""


class DecodeFailure(CatalogError):
    """Icon bytes could not be decoded into an image."""


class IOFailure(CatalogError):
    """Reading from a file failed (short read, seek past EOF, permissions)."""


class CacheLoadFailure(CatalogError):
    """The catalog cache is missing, truncated, corrupt or incompatible."""
