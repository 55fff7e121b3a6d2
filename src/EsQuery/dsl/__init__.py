"""Constructors for query clauses, options and blocks."""

from __future__ import annotations

from EsQuery.dsl.aggs import (
    agg,
    aggs,
    aggs_block,
    avg_agg,
    date_histogram,
    histogram,
    max_agg,
    min_agg,
    percentiles_agg,
    stats_agg,
    sum_agg,
    terms_agg,
)
from EsQuery.dsl.filters import Filter, range_filter, term_filter
from EsQuery.dsl.options import extended_bounds, interval, min_doc_count, missing, order, time_zone

__all__ = [
    "Filter",
    "range_filter",
    "term_filter",
    "sum_agg",
    "avg_agg",
    "min_agg",
    "max_agg",
    "stats_agg",
    "percentiles_agg",
    "terms_agg",
    "date_histogram",
    "histogram",
    "agg",
    "aggs",
    "aggs_block",
    "interval",
    "min_doc_count",
    "missing",
    "extended_bounds",
    "order",
    "time_zone",
]
