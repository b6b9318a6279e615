# showroom/filters/filter_state.py

"""Normalisation of user-entered inventory filters."""

import logging
from collections.abc import Mapping

from showroom.config.settings import Settings
from showroom.storage.search_cache import FilterValue

logger = logging.getLogger("showroom.filters")


def normalize_filters(
    raw: Mapping[str, FilterValue],
) -> dict[str, FilterValue]:
    """Keep only recognised, set filters with whitespace trimmed.

    Unknown filter names are dropped (and logged), as are empty
    strings, ``None`` and ``featured=False``.  Sorting defaults are
    filled in so "no sort chosen" and "default sort" share a key.
    """
    allowed = set(Settings.FILTER_FIELDS)
    normalized: dict[str, FilterValue] = {}
    unknown: list[str] = []

    for name, value in raw.items():
        if name not in allowed:
            unknown.append(name)
            continue
        if isinstance(value, str):
            value = value.strip()
        if value is None or value == "" or value is False:
            continue
        normalized[name] = value

    if unknown:
        logger.info("Ignoring unknown filters: %s", ", ".join(sorted(unknown)))

    normalized.setdefault("sortBy", Settings.DEFAULT_SORT_BY)
    normalized.setdefault("sortOrder", Settings.DEFAULT_SORT_ORDER)
    return normalized


def describe_filters(filters: Mapping[str, FilterValue]) -> str:
    """Short human summary such as ``make=BMW, yearFrom=2018``."""
    parts = [
        f"{name}={value}"
        for name, value in filters.items()
        if name not in ("sortBy", "sortOrder")
    ]
    return ", ".join(parts) if parts else "all vehicles"
