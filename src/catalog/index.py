"""The header-grouped, searchable and persistable ROM catalog."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from utils.logging import get_logger

from .entries import EntryKind, EntryRef, RomEntry
from .errors import CacheLoadFailure
from .handlers.base import FormatReader
from .handlers.nro import NroReader
from .schema import CacheSnapshot, LeafRecord
from .search import FilterSettings, normalise_query, rank


LOGGER = get_logger(__name__)

CatalogItem = Union[str, RomEntry]


class Catalog:
    """Indexed collection of header labels and ROM entries.

    Headers and leaves live in two dense backing lists that are only ever
    appended to. What a front-end sees is a projection: an ordered list of
    :class:`EntryRef` pointing into those lists. Filtering replaces the
    visible projection and never reorders the backing data, so a
    ``(kind, index)`` reference stays valid until :meth:`clear`.

    The catalog does no locking; callers serialise all calls.
    """

    def __init__(
        self,
        readers: Optional[Sequence[FormatReader]] = None,
        settings: Optional[FilterSettings] = None,
    ) -> None:
        readers = list(readers) if readers else [NroReader()]
        self.readers: Dict[str, FormatReader] = {reader.label: reader for reader in readers}
        self.settings = settings or FilterSettings()
        self._leaves: List[RomEntry] = []
        self._headers: List[str] = []
        self._projection: List[EntryRef] = []
        self._visible: Optional[List[EntryRef]] = None
        self._query = ""

    @property
    def leaves(self) -> Tuple[RomEntry, ...]:
        return tuple(self._leaves)

    @property
    def headers(self) -> Tuple[str, ...]:
        return tuple(self._headers)

    @property
    def projection(self) -> Tuple[EntryRef, ...]:
        """The full, unfiltered projection."""

        return tuple(self._projection)

    @property
    def visible(self) -> Tuple[EntryRef, ...]:
        """The projection currently exposed to the front-end."""

        return tuple(self._projection if self._visible is None else self._visible)

    @property
    def query(self) -> str:
        return self._query

    def __len__(self) -> int:
        return len(self._projection if self._visible is None else self._visible)

    def __iter__(self) -> Iterator[CatalogItem]:
        for ref in self.visible:
            yield self.resolve(ref)

    def resolve(self, ref: EntryRef) -> CatalogItem:
        if ref.kind is EntryKind.LEAF:
            return self._leaves[ref.index]
        return self._headers[ref.index]

    def entry_kind(self, index: int) -> EntryKind:
        """Return the kind of the visible entry at ``index``."""

        return self.visible[index].kind

    def entry_at(self, index: int) -> CatalogItem:
        """Return the header label or :class:`RomEntry` visible at ``index``."""

        return self.resolve(self.visible[index])

    def add(self, item: CatalogItem, kind: EntryKind) -> EntryRef:
        kind = EntryKind(kind)
        if kind is EntryKind.LEAF:
            if not isinstance(item, RomEntry):
                raise TypeError(f"leaf entries must be RomEntry instances, got {type(item).__name__}")
            self._leaves.append(item)
            ref = EntryRef(kind=kind, index=len(self._leaves) - 1)
        else:
            if not isinstance(item, str):
                raise TypeError(f"header entries must be str labels, got {type(item).__name__}")
            self._headers.append(item)
            ref = EntryRef(kind=kind, index=len(self._headers) - 1)
        self._projection.append(ref)
        self._refilter()
        return ref

    def add_header(self, label: str) -> EntryRef:
        return self.add(label, EntryKind.HEADER)

    def add_entry(self, entry: RomEntry) -> EntryRef:
        return self.add(entry, EntryKind.LEAF)

    def clear(self) -> None:
        self._leaves.clear()
        self._headers.clear()
        self._projection.clear()
        self._refilter()

    def filter(self, query: str) -> List[CatalogItem]:
        """Apply ``query`` and return the visible entries in display order.

        An empty query shows the full projection. Otherwise only leaves are
        ranked by fuzzy similarity of their :meth:`RomEntry.key`; headers are
        never part of a filtered result.
        """

        self._query = normalise_query(query)
        self._refilter()
        return list(self)

    def _refilter(self) -> None:
        if not self._query:
            self._visible = None
            return
        keys: List[str] = []
        positions: List[int] = []
        for position, ref in enumerate(self._projection):
            if ref.kind is EntryKind.LEAF:
                keys.append(self._leaves[ref.index].key().lower())
                positions.append(position)
        self._visible = [self._projection[positions[index]] for index, _ in rank(self._query, keys, self.settings)]

    def snapshot(self) -> CacheSnapshot:
        return CacheSnapshot(
            leaves=[LeafRecord.from_entry(entry) for entry in self._leaves],
            headers=list(self._headers),
            projection=list(self._projection),
        )

    def save(self, path: Path) -> None:
        """Write the catalog to ``path``, replacing any previous cache."""

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.snapshot().to_json(), encoding="utf-8")
        LOGGER.debug("Saved %d entries and %d headers to %s", len(self._leaves), len(self._headers), path)

    def load(self, path: Path) -> None:
        """Replace the catalog contents with the cache stored at ``path``.

        Leaf metadata, icons included, is re-read from each stored ROM path.
        Raises :class:`CacheLoadFailure` and leaves the catalog untouched if
        the cache is missing, unreadable or incompatible.
        """

        path = Path(path)
        try:
            snapshot = CacheSnapshot.model_validate_json(path.read_bytes())
        except (OSError, ValidationError, ValueError) as exc:
            raise CacheLoadFailure(f"cannot load catalog cache {path}: {exc}") from exc
        leaves: List[RomEntry] = []
        for record in snapshot.leaves:
            reader = self.readers.get(record.format)
            if reader is None:
                raise CacheLoadFailure(f"cache {path} references unknown format {record.format!r}")
            leaves.append(RomEntry.from_path(record.path, reader))
        self._leaves = leaves
        self._headers = list(snapshot.headers)
        self._projection = list(snapshot.projection)
        self._refilter()
        LOGGER.debug("Loaded %d entries and %d headers from %s", len(leaves), len(self._headers), path)
