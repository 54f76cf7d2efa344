from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

from catalog import Catalog, EntryKind, EntryRef, FilterSettings, RomEntry, TitleMetadata
from catalog.search import normalise_query

ICON = object()


def _leaf(name: str, author: str = "Nintendo", icon: Optional[object] = None, filename: Optional[str] = None) -> RomEntry:
    path = Path("/roms") / (filename or f"{name.lower().replace(' ', '_')}.nro")
    return RomEntry(path, TitleMetadata(name=name, author=author, icon=icon))


@pytest.fixture
def catalog() -> Catalog:
    catalog = Catalog()
    catalog.add("NRO", EntryKind.HEADER)
    catalog.add(_leaf("Mario Kart", icon=ICON), EntryKind.LEAF)
    catalog.add(_leaf("Zelda"), EntryKind.LEAF)
    return catalog


def test_filter_scenario(catalog: Catalog) -> None:
    assert [item.name for item in catalog.filter("mario")] == ["Mario Kart"]
    assert catalog.filter("xyzzy") == []
    assert len(catalog) == 0


def test_empty_query_shows_everything_in_order(catalog: Catalog) -> None:
    catalog.filter("mario")
    items = catalog.filter("")
    assert items[0] == "NRO"
    assert [item.name for item in items[1:]] == ["Mario Kart", "Zelda"]
    assert catalog.visible == catalog.projection


def test_whitespace_only_query_counts_as_empty(catalog: Catalog) -> None:
    assert len(catalog.filter("   ")) == 3
    assert catalog.query == ""


@pytest.mark.parametrize("query", ["nro", "n", "zelda", "nintendo", "mario kart", "NRO0"])
def test_headers_never_match(catalog: Catalog, query: str) -> None:
    assert all(isinstance(item, RomEntry) for item in catalog.filter(query))


def test_query_is_normalised(catalog: Catalog) -> None:
    catalog.filter("  Mar Io ")
    assert catalog.query == "mario"
    assert normalise_query("Mario\tKart\n") == "mariokart"


def test_filter_keeps_backing_indices_stable(catalog: Catalog) -> None:
    before = catalog.projection
    catalog.filter("mario")
    assert catalog.projection == before
    assert catalog.visible == (EntryRef(kind=EntryKind.LEAF, index=0),)
    assert catalog.leaves[0].name == "Mario Kart"


def test_entry_kind_and_entry_at(catalog: Catalog) -> None:
    assert catalog.entry_kind(0) is EntryKind.HEADER
    assert catalog.entry_at(0) == "NRO"
    assert catalog.entry_kind(2) is EntryKind.LEAF
    assert catalog.entry_at(2).name == "Zelda"
    catalog.filter("mario")
    assert catalog.entry_kind(0) is EntryKind.LEAF
    assert catalog.entry_at(0).name == "Mario Kart"
    with pytest.raises(IndexError):
        catalog.entry_at(1)


def test_add_during_active_query_refilters(catalog: Catalog) -> None:
    catalog.filter("mario")
    catalog.add(_leaf("Mario Party"), EntryKind.LEAF)
    catalog.add("Homebrew", EntryKind.HEADER)
    assert sorted(item.name for item in catalog) == ["Mario Kart", "Mario Party"]
    catalog.filter("")
    assert len(catalog) == 5


def test_add_rejects_mismatched_kinds() -> None:
    catalog = Catalog()
    with pytest.raises(TypeError):
        catalog.add("label", EntryKind.LEAF)
    with pytest.raises(TypeError):
        catalog.add(_leaf("Zelda"), EntryKind.HEADER)
    with pytest.raises(ValueError):
        catalog.add("label", "folder")


def test_add_accepts_kind_values() -> None:
    catalog = Catalog()
    ref = catalog.add("Games", "header")
    assert ref == EntryRef(kind=EntryKind.HEADER, index=0)


def test_clear_resets_everything(catalog: Catalog) -> None:
    catalog.filter("mario")
    catalog.clear()
    assert len(catalog) == 0
    assert catalog.leaves == () and catalog.headers == () and catalog.projection == ()
    catalog.add(_leaf("Mario Kart", icon=ICON), EntryKind.LEAF)
    assert len(catalog) == 1


def test_result_limit_depends_on_query_length() -> None:
    catalog = Catalog()
    for number in range(10):
        catalog.add(_leaf(f"Mario {number}"), EntryKind.LEAF)
    items = catalog.filter("mario")
    assert [item.name for item in items] == [f"Mario {number}" for number in range(5)]
    assert len(catalog.filter("mariomario")) <= 1


def test_filter_settings_are_overridable() -> None:
    catalog = Catalog(settings=FilterSettings(score_threshold=10))
    catalog.add(_leaf("Mario Kart", icon=ICON), EntryKind.LEAF)
    catalog.add(_leaf("Zelda"), EntryKind.LEAF)
    assert [item.name for item in catalog.filter("xyzzy")] == ["Zelda"]
    assert FilterSettings().result_limit("abcdefghijklmnop") == 1
    assert FilterSettings(result_base=20).result_limit("abc") == 17


def test_key_ignores_author_without_icon() -> None:
    first = _leaf("Mario", author="Nintendo")
    second = _leaf("Mario", author="Hudson")
    assert first.key() == second.key() == "Mario"


def test_key_includes_author_with_icon() -> None:
    first = _leaf("Mario", author="Nintendo", icon=ICON)
    second = _leaf("Mario", author="Hudson")
    assert first.key() == "Mario Nintendo"
    assert first.key() != second.key()


def test_rom_entry_presentation() -> None:
    entry = _leaf("Mario Kart", icon=ICON, filename="mk8.nro")
    assert entry.title == "Mario Kart (NRO)"
    assert entry.subtitle == "Nintendo"
    assert entry.file_type == "NRO"
    assert entry.has_icon


def test_rom_entries_compare_by_title() -> None:
    zelda, mario = _leaf("Zelda"), _leaf("mario")
    assert sorted([zelda, mario]) == [mario, zelda]
    assert _leaf("Zelda") == zelda
    assert len({zelda, _leaf("Zelda"), mario}) == 2
