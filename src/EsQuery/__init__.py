"""EsQuery: compose Elasticsearch aggregation queries from small fragments.

Example:
    >>> from EsQuery import Filter, agg, aggs, pretty, query, range_filter, sum_agg, term_filter
    >>> recent = Filter(term_filter("user.login", "tj"), range_filter("now-7d", "now"))
    >>> print(pretty(query(aggs(agg("results", recent.apply(aggs(agg("total", sum_agg("duration")))))))))
"""

from __future__ import annotations

from EsQuery.core.errors import CompositionError, TimeZoneError
from EsQuery.core.fragment import EMPTY, Direction, Fragment, join, when
from EsQuery.core.query import compact, pretty, query
from EsQuery.dsl import (
    Filter,
    agg,
    aggs,
    aggs_block,
    avg_agg,
    date_histogram,
    extended_bounds,
    histogram,
    interval,
    max_agg,
    min_agg,
    min_doc_count,
    missing,
    order,
    percentiles_agg,
    range_filter,
    stats_agg,
    sum_agg,
    term_filter,
    terms_agg,
    time_zone,
)

__all__ = [
    "CompositionError",
    "TimeZoneError",
    "EMPTY",
    "Direction",
    "Fragment",
    "join",
    "when",
    "query",
    "compact",
    "pretty",
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
