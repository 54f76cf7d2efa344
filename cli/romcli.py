"""Typer-based command line interface for rom-catalog."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from catalog import (  # type: ignore  # noqa: E402
    Catalog,
    CatalogScanner,
    CatalogSummary,
    NroReader,
    RomEntry,
    ScanConfig,
    refresh_catalog,
)
from catalog.errors import CacheLoadFailure  # type: ignore  # noqa: E402
from utils.config import AppConfig, load_config  # type: ignore  # noqa: E402
from utils.logging import configure_logging  # type: ignore  # noqa: E402

app = typer.Typer(add_completion=False)
console = Console()

DEFAULT_CONFIG = Path("rom-catalog.yml")


def _resolve_root(path: Path) -> Path:
    if not path.exists():
        raise typer.BadParameter(f"Path {path} does not exist")
    return path


def _build(config: AppConfig) -> tuple[Catalog, CatalogScanner]:
    reader = NroReader(missing_author=config.missing_author)
    return Catalog(readers=[reader], settings=config.filter), CatalogScanner(readers=[reader])


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    config_path: Path = typer.Option(DEFAULT_CONFIG, "--config", help="YAML configuration file."),
) -> None:
    configure_logging("DEBUG" if verbose else "INFO")
    ctx.obj = load_config(config_path)


@app.command()
def scan(
    ctx: typer.Context,
    root: Optional[Path] = typer.Argument(None, help="Directory to scan (defaults to search_location)."),
    cache: Optional[Path] = typer.Option(None, "--cache", help="Catalog cache file to write."),
) -> None:
    config: AppConfig = ctx.obj
    scan_config = ScanConfig.from_app_config(config, root=root)
    _resolve_root(scan_config.root)
    if cache is not None:
        scan_config.cache_path = cache
    catalog, scanner = _build(config)
    refresh_catalog(catalog, scan_config, scanner=scanner, try_load=False)
    typer.echo(f"Catalogued {len(catalog.leaves)} ROMs into {scan_config.cache_path}")


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument("", help="Fuzzy search query; empty lists everything."),
    root: Optional[Path] = typer.Option(None, "--root", help="Directory to scan when the cache is unusable."),
    cache: Optional[Path] = typer.Option(None, "--cache", help="Catalog cache file."),
    rescan: bool = typer.Option(False, "--rescan", help="Ignore the cache and rescan."),
) -> None:
    config: AppConfig = ctx.obj
    scan_config = ScanConfig.from_app_config(config, root=root)
    if cache is not None:
        scan_config.cache_path = cache
    catalog, scanner = _build(config)
    try:
        refresh_catalog(catalog, scan_config, scanner=scanner, try_load=not rescan)
    except FileNotFoundError as exc:
        raise typer.BadParameter(str(exc)) from exc
    catalog.filter(query)

    table = Table(title=f"ROMs matching {query!r}" if query else "ROMs")
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("Icon", justify="center")
    table.add_column("Path")
    for index in range(len(catalog)):
        item = catalog.entry_at(index)
        if isinstance(item, RomEntry):
            table.add_row(escape(item.title), escape(item.subtitle), "yes" if item.has_icon else "", escape(str(item.path)))
        else:
            table.add_section()
            table.add_row(f"[bold]{escape(item)}[/bold]", "", "", "")
    console.print(table)


@app.command()
def info(
    ctx: typer.Context,
    rom: Path = typer.Argument(..., help="ROM file to inspect."),
    icon_out: Optional[Path] = typer.Option(None, "--icon-out", help="Write the embedded icon as PNG."),
) -> None:
    rom = _resolve_root(rom)
    config: AppConfig = ctx.obj
    reader = NroReader(missing_author=config.missing_author)
    if not reader.verify(rom):
        raise typer.BadParameter(f"{rom} is not an NRO file")
    entry = RomEntry.from_path(rom, reader)
    typer.echo(f"Name:   {entry.name}")
    typer.echo(f"Author: {entry.author}")
    typer.echo(f"Icon:   {'present' if entry.has_icon else 'absent'}")
    if icon_out is not None:
        if not entry.has_icon:
            raise typer.BadParameter(f"{rom} has no decodable icon")
        icon_out.parent.mkdir(parents=True, exist_ok=True)
        entry.icon.save(icon_out, format="PNG")
        typer.echo(f"Saved icon to {icon_out}")


@app.command()
def summarize(ctx: typer.Context, cache: Path = typer.Argument(..., help="Catalog cache file.")) -> None:
    catalog, _ = _build(ctx.obj)
    try:
        catalog.load(cache)
    except CacheLoadFailure as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(CatalogSummary.from_catalog(catalog).model_dump_json(indent=2))


if __name__ == "__main__":
    app()
