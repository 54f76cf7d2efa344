"""Filesystem scanning that feeds discovered ROMs into a :class:`Catalog`."""
from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import metadata
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from utils.config import AppConfig
from utils.logging import get_logger
from utils.paths import normalise_path

from .entries import MISSING_AUTHOR, RomEntry
from .errors import CacheLoadFailure
from .handlers.base import FormatReader
from .handlers.nro import NroReader
from .index import Catalog


LOGGER = get_logger(__name__)
READER_ENTRYPOINT_GROUP = "rom_catalog.readers"
NO_ROM_LABEL = "No ROMs found"

Walker = Callable[..., Iterable[Tuple[str, List[str], List[str]]]]


def _normalise_extension(ext: str) -> str:
    ext = ext.strip().lower()
    if not ext:
        return ext
    return ext if ext.startswith(".") else f".{ext}"


@dataclass(slots=True)
class ScanConfig:
    """Configuration parameters controlling scan behaviour."""

    root: Path
    cache_path: Optional[Path] = None
    limit_extensions: Optional[Sequence[str]] = None
    exclude_dirs: Sequence[str] = (".git", "__pycache__")
    follow_symlinks: bool = False
    no_rom_label: str = NO_ROM_LABEL

    def __post_init__(self) -> None:
        self.root = normalise_path(Path(self.root))
        if self.cache_path is not None:
            self.cache_path = Path(self.cache_path)
        if self.limit_extensions:
            self.limit_extensions = tuple(
                sorted({_normalise_extension(ext) for ext in self.limit_extensions if ext.strip()})
            )

    @classmethod
    def from_app_config(cls, config: AppConfig, root: Optional[Path] = None) -> "ScanConfig":
        return cls(
            root=root if root is not None else config.search_location,
            cache_path=config.cache_path,
            limit_extensions=config.extensions,
            exclude_dirs=tuple(config.exclude_dirs),
            follow_symlinks=config.follow_symlinks,
            no_rom_label=config.no_rom_label,
        )


class CatalogScanner:
    """Walk directories, verify candidate files and parse them into entries."""

    readers: List[FormatReader]

    def __init__(
        self,
        readers: Optional[Sequence[FormatReader]] = None,
        walker: Walker = os.walk,
        missing_author: str = MISSING_AUTHOR,
    ) -> None:
        self.missing_author = missing_author
        self.readers = list(readers) if readers else self._load_readers()
        self.walker = walker

    def _load_readers(self) -> List[FormatReader]:
        readers: List[FormatReader] = [NroReader(missing_author=self.missing_author)]
        for ep in metadata.entry_points(group=READER_ENTRYPOINT_GROUP):
            try:
                loaded = ep.load()
                reader = loaded() if isinstance(loaded, type) else loaded
                if isinstance(reader, FormatReader):
                    readers.append(reader)
                else:
                    LOGGER.warning("Entry point %s did not yield a FormatReader", ep.name)
            except Exception as exc:  # pragma: no cover - plugin safety
                LOGGER.warning("Failed to load reader plugin %s: %s", ep.name, exc)
        return readers

    def _select_reader(self, path: Path) -> Optional[FormatReader]:
        for reader in self.readers:
            if reader.sniff(path):
                return reader
        return None

    def scan(self, config: ScanConfig) -> Iterator[RomEntry]:
        root = config.root
        if not root.exists():
            raise FileNotFoundError(f"Scan root {root} does not exist")

        limit_extensions = set(config.limit_extensions) if config.limit_extensions else None
        exclude_dirs = {name.lower() for name in config.exclude_dirs}

        def on_walk_error(err: OSError) -> None:
            LOGGER.warning("Error walking directory %s: %s", err.filename, err)

        for dirpath, dirnames, filenames in self.walker(
            root, followlinks=config.follow_symlinks, onerror=on_walk_error
        ):
            dirnames[:] = sorted(d for d in dirnames if d.lower() not in exclude_dirs)
            for filename in sorted(filenames):
                try:
                    path = Path(dirpath) / filename
                    suffix = path.suffix.lower()
                except (TypeError, ValueError) as exc:
                    LOGGER.warning("Skipping unusable path %r in %s: %s", filename, dirpath, exc)
                    continue
                if not suffix:
                    continue
                if limit_extensions and suffix not in limit_extensions:
                    continue
                reader = self._select_reader(path)
                if reader is None or not reader.verify(path):
                    continue
                yield RomEntry.from_path(path, reader)

    def populate(self, catalog: Catalog, config: ScanConfig) -> int:
        """Clear ``catalog`` and fill it with a fresh scan, grouped by format.

        Returns the number of ROM entries added.
        """

        groups: Dict[str, List[RomEntry]] = {reader.label: [] for reader in self.readers}
        for entry in self.scan(config):
            groups.setdefault(entry.format, []).append(entry)
        catalog.clear()
        total = 0
        for label, entries in groups.items():
            if not entries:
                continue
            catalog.add_header(label)
            for entry in entries:
                catalog.add_entry(entry)
            total += len(entries)
        if total == 0:
            catalog.add_header(config.no_rom_label)
        LOGGER.info("Catalogued %d ROMs under %s", total, config.root)
        return total


def refresh_catalog(
    catalog: Catalog,
    config: ScanConfig,
    scanner: Optional[CatalogScanner] = None,
    try_load: bool = True,
) -> bool:
    """Bring ``catalog`` up to date from the cache or from a rescan.

    Returns ``True`` when the cache was used and ``False`` after a rescan.
    """

    if try_load and config.cache_path is not None:
        try:
            catalog.load(config.cache_path)
            return True
        except CacheLoadFailure as exc:
            LOGGER.warning("Ran into exception while loading: %s", exc)
    scanner = scanner or CatalogScanner(readers=list(catalog.readers.values()))
    scanner.populate(catalog, config)
    if config.cache_path is not None:
        try:
            catalog.save(config.cache_path)
        except OSError as exc:
            LOGGER.warning("Ran into exception while saving: %s", exc)
    return False
