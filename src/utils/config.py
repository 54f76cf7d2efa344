"""Configuration helpers for rom-catalog."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .paths import normalise_path


class FilterSettings(BaseModel):
    """Tunable constants of the search filter.

    ``score_threshold`` is on a 0-100 similarity scale; at most
    ``max(1, result_base - len(query))`` candidates are returned.
    """

    score_threshold: float = Field(default=35, ge=0, le=100)
    result_base: int = Field(default=10, ge=1)

    def result_limit(self, query: str) -> int:
        return max(1, self.result_base - len(query))


class AppConfig(BaseModel):
    """Application level configuration."""

    model_config = ConfigDict(validate_default=True)

    search_location: Path = Field(default=Path("~/roms"))
    cache_path: Path = Field(default=Path("~/.cache/rom-catalog/roms.json"))
    extensions: List[str] = Field(default_factory=lambda: ["nro"])
    exclude_dirs: List[str] = Field(default_factory=lambda: [".git", "__pycache__"])
    follow_symlinks: bool = False
    missing_author: str = "missing"
    no_rom_label: str = "No ROMs found"
    filter: FilterSettings = Field(default_factory=FilterSettings)

    @field_validator("search_location", "cache_path")
    def normalise(cls, value: Path) -> Path:
        return normalise_path(value)


def load_config(path: Path) -> AppConfig:
    """Load configuration from a YAML file."""

    data: Dict[str, Any] = {}
    if path.exists():
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return AppConfig(**data)
