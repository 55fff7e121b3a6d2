"""Option fragments spliced into bucket aggregation bodies."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from EsQuery.core.fragment import Direction, Member, member
from EsQuery.dsl.timezone import resolve_offset


def interval(value: str | int | float) -> Member:
    """Bucket interval, e.g. ``"30m"`` for dates or ``50`` for numbers."""
    return member("interval", value)


def min_doc_count(count: int) -> Member:
    return member("min_doc_count", count)


def missing(value: Any) -> Member:
    """Value used for documents that lack the field."""
    return member("missing", value)


def extended_bounds(lower: int | float | str, upper: int | float | str) -> Member:
    """Force buckets to span ``lower`` to ``upper`` even when empty."""
    return member("extended_bounds", {"min": lower, "max": upper})


def order(key: str, direction: Direction = Direction.ASCENDING) -> Member:
    """Order buckets by key (``_key``, ``_count`` or a sub-aggregation name)."""
    return member("order", {key: Direction(direction).value})


def time_zone(name: str | None = None, *, at: datetime | None = None) -> Member:
    """Time zone used for date bucketing, as a ``+HH:MM`` offset.

    Args:
        name: Fixed offset (``-08:00``), zone name (``Asia/Kathmandu``), or
            None for the process zone (``TZ`` or the platform local zone).
        at: Instant used for daylight-saving evaluation. Defaults to now.

    Raises:
        TimeZoneError: If the descriptor cannot be resolved.
    """
    return member("time_zone", resolve_offset(name, at=at))
