"""Example script showing how to build and search a ROM catalog programmatically."""
from __future__ import annotations

from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from catalog import Catalog, ScanConfig, refresh_catalog  # type: ignore  # noqa: E402


def main() -> None:
    root = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.home() / "roms"
    catalog = Catalog()
    config = ScanConfig(root=root, cache_path=PROJECT_ROOT / "outputs" / "roms.json")
    refresh_catalog(catalog, config)
    query = sys.argv[2] if len(sys.argv) > 2 else ""
    for item in catalog.filter(query):
        print(item if isinstance(item, str) else f"  {item.title} - {item.subtitle}")


if __name__ == "__main__":
    main()
