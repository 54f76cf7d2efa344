"""Fuzzy ranking of catalog keys against a search query using :mod:`rapidfuzz`."""
from __future__ import annotations

import re
from typing import List, Sequence, Tuple

from rapidfuzz import fuzz, process, utils

from utils.config import FilterSettings

_WHITESPACE = re.compile(r"\s+")

__all__ = ["FilterSettings", "normalise_query", "rank"]


def normalise_query(query: str) -> str:
    """Lower-case ``query`` and drop all whitespace."""

    return _WHITESPACE.sub("", query.lower())


def rank(query: str, keys: Sequence[str], settings: FilterSettings) -> List[Tuple[int, float]]:
    """Return ``(key_index, score)`` pairs for the best matches of ``query``.

    Keys are scored with :func:`rapidfuzz.fuzz.WRatio` after
    :func:`rapidfuzz.utils.default_process`. Results are ordered by descending
    score; equal scores keep the order of ``keys``.
    """

    if not keys:
        return []
    matches = process.extract(
        query,
        keys,
        scorer=fuzz.WRatio,
        processor=utils.default_process,
        limit=settings.result_limit(query),
        score_cutoff=settings.score_threshold,
    )
    ordered = sorted(((index, float(score)) for _, score, index in matches), key=lambda item: (-item[1], item[0]))
    return ordered
