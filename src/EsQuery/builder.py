"""Request compiler.

Compiles a `RequestDef` loaded from configuration into a query body using the
fragment constructors.

Mapping
- filter entries       -> Filter(...).apply(<clause>, <aggs>)
- terms/sum/avg/...    -> the matching constructor from `EsQuery.dsl`
- histogram options    -> interval/min_doc_count/extended_bounds/missing/order
- date_histogram zone  -> time_zone(); ``local`` resolves the process zone
"""

from __future__ import annotations

from typing import Any, Mapping

from EsQuery.core.definition import AggDef, FilterDef, MetricDef, RequestDef
from EsQuery.core.fragment import Direction, Fragment, Member
from EsQuery.core.query import query
from EsQuery.dsl import (
    Filter,
    agg,
    aggs,
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
from EsQuery.utils.log import log

_SIMPLE_METRICS = {
    "sum": sum_agg,
    "avg": avg_agg,
    "min": min_agg,
    "max": max_agg,
    "stats": stats_agg,
}

LOCAL_ZONE = "local"


def compile_request(request: RequestDef) -> str:
    """Compile a request definition into compact query JSON.

    Args:
        request: Normalized request.

    Returns:
        Compact JSON body.

    Raises:
        TimeZoneError: If a configured zone cannot be resolved.
        ValueError: If a definition uses an unsupported clause.
    """
    if not request.aggs:
        return query()
    return query(aggs(*(compile_agg(item, request) for item in request.aggs)))


def compile_agg(definition: AggDef, request: RequestDef) -> Member:
    """Compile one named aggregation and its sub-aggregations."""
    log.debug("Compiling aggregation %s", definition.name)
    children: list[Fragment] = []
    if definition.metric is not None:
        children.append(compile_metric(definition.metric, request))
    if definition.children:
        children.append(aggs(*(compile_agg(child, request) for child in definition.children)))

    if definition.filters:
        filter_set = Filter(*(compile_filter(f, request) for f in definition.filters))
        return agg(definition.name, filter_set.apply(*children))
    return agg(definition.name, *children)


def compile_filter(definition: FilterDef, request: RequestDef) -> Fragment:
    if definition.kind == "term":
        return term_filter(definition.field, definition.value)
    if definition.kind == "range":
        return range_filter(definition.gte, definition.lte, field=definition.field or request.time_field)
    raise ValueError(f"Unsupported filter: {definition.kind}")


def compile_metric(metric: MetricDef, request: RequestDef) -> Member:
    params = metric.params
    if metric.kind in _SIMPLE_METRICS:
        return _SIMPLE_METRICS[metric.kind](params["field"])
    if metric.kind == "terms":
        return terms_agg(params["field"], params["size"])
    if metric.kind == "percentiles":
        return percentiles_agg(params["field"], *params.get("percents", ()))
    if metric.kind == "histogram":
        return histogram(params["field"], *_bucket_options(params))
    if metric.kind == "date_histogram":
        zone = params["time_zone"] if "time_zone" in params else request.time_zone
        options = _bucket_options({k: v for k, v in params.items() if k != "interval"})
        if zone is not None:
            options.append(time_zone(None if zone == LOCAL_ZONE else zone))
        return date_histogram(params["interval"], *options, field=params.get("field") or request.time_field)
    raise ValueError(f"Unsupported aggregation: {metric.kind}")


def _bucket_options(params: Mapping[str, Any]) -> list[Fragment]:
    options: list[Fragment] = []
    if "interval" in params:
        options.append(interval(params["interval"]))
    if "min_doc_count" in params:
        options.append(min_doc_count(params["min_doc_count"]))
    if "missing" in params:
        options.append(missing(params["missing"]))
    if "extended_bounds" in params:
        lower, upper = params["extended_bounds"]
        options.append(extended_bounds(lower, upper))
    if "order" in params:
        key, direction = params["order"]
        options.append(order(key, Direction(direction)))
    return options
