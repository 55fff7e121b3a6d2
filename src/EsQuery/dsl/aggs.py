"""Aggregation clauses and aggregation blocks."""

from __future__ import annotations

import math

from EsQuery.core.fragment import Array, FragmentLike, Member, Raw, body, member


def _metric(kind: str, field: str) -> Member:
    return member(kind, {"field": field})


def sum_agg(field: str) -> Member:
    return _metric("sum", field)


def avg_agg(field: str) -> Member:
    return _metric("avg", field)


def min_agg(field: str) -> Member:
    return _metric("min", field)


def max_agg(field: str) -> Member:
    return _metric("max", field)


def stats_agg(field: str) -> Member:
    return _metric("stats", field)


def percentiles_agg(field: str, *percents: float) -> Member:
    """Percentiles of a field.

    Percents are rendered with two decimals in the order given. Without any,
    the ``percents`` key is left out and the engine defaults apply.

    Raises:
        ValueError: If a percent is NaN or infinite.
    """
    parts: list[FragmentLike] = [member("field", field)]
    if percents:
        values = [float(p) for p in percents]
        for idx, value in enumerate(values):
            if not math.isfinite(value):
                raise ValueError(f"percentiles_agg({field!r}) percent #{idx} must be finite, got {value!r}")
        parts.append(member("percents", Array(tuple(Raw(f"{value:.2f}") for value in values))))
    return member("stats", body(*parts))


def terms_agg(field: str, size: int) -> Member:
    """Bucket by distinct values, keeping at most ``size`` buckets."""
    return member("terms", {"field": field, "size": size})


def date_histogram(interval: str, *options: FragmentLike, field: str = "timestamp") -> Member:
    """Bucket a date field by calendar or fixed interval.

    Args:
        interval: Interval expression such as ``"1d"`` or ``"30m"``.
        options: Option fragments, e.g. ``time_zone()`` or ``min_doc_count(0)``.
        field: Date field to bucket.
    """
    return member("date_histogram", body(member("field", field), member("interval", interval), *options))


def histogram(field: str, *options: FragmentLike) -> Member:
    """Bucket a numeric field; pass ``interval(..)`` and friends as options."""
    return member("histogram", body(member("field", field), *options))


def agg(name: str, *children: FragmentLike) -> Member:
    """A named aggregation holding its clause, filter and sub-aggregations."""
    return member(name, body(*children))


def aggs(*named: FragmentLike) -> Member:
    """The ``"aggs"`` block holding named aggregations."""
    return member("aggs", body(*named))


def aggs_block(name: str, *children: FragmentLike) -> Member:
    """Shorthand for an ``aggs`` block with a single named aggregation."""
    return aggs(agg(name, *children))
