"""Request domain configuration and aggregation DSL parsing."""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from EsQuery.config.common import (
    expect_float_list,
    expect_int,
    expect_number,
    expect_optional_str,
    expect_str,
    get_optional_value,
    get_required_value,
    get_section,
)
from EsQuery.core.definition import AggDef, FilterDef, MetricDef, RequestDef
from EsQuery.core.fragment import Direction
from EsQuery.dsl.timezone import is_offset

_FIELD_METRICS = {"sum", "avg", "min", "max", "stats"}
_BUCKET_OPTIONS = {"min_doc_count", "missing", "extended_bounds", "order"}
_METRIC_KEYS = _FIELD_METRICS | {"terms", "percentiles", "histogram", "date_histogram"}
_ENTRY_KEYS = _METRIC_KEYS | {"filter", "aggs"}
_DIRECTIONS = {d.value for d in Direction}


def load_request(raw: Mapping[str, Any]) -> RequestDef:
    """Load the request definition from raw mapping.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed request definition.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If keys are missing or unknown.
    """
    defaults = get_section(raw, "defaults", required=False)
    time_field = expect_str(get_optional_value(defaults, "time_field", "timestamp"), "defaults.time_field")
    time_zone = expect_optional_str(get_optional_value(defaults, "time_zone", None), "defaults.time_zone")

    aggs_obj = raw.get("aggs")
    aggs = parse_aggs(aggs_obj, "aggs") if aggs_obj is not None else ()
    return RequestDef(aggs=aggs, time_field=time_field, time_zone=time_zone)


def check_request(config: RequestDef) -> None:
    """Validate request domain constraints.

    Raises:
        ValueError: If values violate request constraints.
    """
    if not config.time_field.strip():
        raise ValueError("defaults.time_field must not be empty")
    _check_zone(config.time_zone, "defaults.time_zone")


def parse_aggs(value: Any, config_key: str) -> tuple[AggDef, ...]:
    """Parse a mapping of aggregation name to entry.

    Raises:
        TypeError: If shape/types are invalid.
        ValueError: If an entry is empty or uses unknown keys.
    """
    if not isinstance(value, Mapping):
        raise TypeError(f"{config_key} must be an object")
    out: list[AggDef] = []
    for name, entry in value.items():
        if not isinstance(name, str) or not name.strip():
            raise TypeError(f"{config_key} names must be non-empty strings")
        out.append(parse_agg(name, entry, f"{config_key}.{name}"))
    return tuple(out)


def parse_agg(name: str, value: Any, config_key: str) -> AggDef:
    """Parse one aggregation entry.

    Args:
        name: Aggregation name.
        value: Entry mapping.
        config_key: Full key path used in error messages.

    Returns:
        Parsed aggregation definition.

    Raises:
        TypeError: If entry shape/types are invalid.
        ValueError: If the entry is empty, has unknown keys, or more than one clause.
    """
    if not isinstance(value, Mapping):
        raise TypeError(f"{config_key} must be an object")

    unknown = {str(k) for k in value.keys()} - _ENTRY_KEYS
    if unknown:
        raise ValueError(f"{config_key} has unknown keys: {sorted(unknown)}")

    clauses = [k for k in value.keys() if k in _METRIC_KEYS]
    if len(clauses) > 1:
        raise ValueError(f"{config_key} must have at most one aggregation clause, got {sorted(clauses)}")

    metric = _parse_metric(clauses[0], value[clauses[0]], f"{config_key}.{clauses[0]}") if clauses else None

    filters: tuple[FilterDef, ...] = ()
    if "filter" in value:
        filters = _parse_filters(value["filter"], f"{config_key}.filter")

    children: tuple[AggDef, ...] = ()
    if "aggs" in value:
        children = parse_aggs(value["aggs"], f"{config_key}.aggs")

    if metric is None and not filters and not children:
        raise ValueError(f"{config_key} must include a filter, an aggregation clause or aggs")
    return AggDef(name=name, metric=metric, filters=filters, children=children)


def _parse_filters(value: Any, config_key: str) -> tuple[FilterDef, ...]:
    if not isinstance(value, list):
        raise TypeError(f"{config_key} must be a list")
    return tuple(_parse_filter(item, f"{config_key}[{idx}]") for idx, item in enumerate(value))


def _parse_filter(value: Any, config_key: str) -> FilterDef:
    """Parse ``{term: {<field>: <value>}}`` or ``{range: {gte, lte, field?}}``."""
    if not isinstance(value, Mapping) or len(value) != 1:
        raise TypeError(f"{config_key} must be an object with exactly one of: term, range")
    kind, spec = next(iter(value.items()))
    key = f"{config_key}.{kind}"
    if not isinstance(spec, Mapping):
        raise TypeError(f"{key} must be an object")

    if kind == "term":
        if len(spec) != 1:
            raise ValueError(f"{key} must map exactly one field to a value")
        field, match = next(iter(spec.items()))
        if isinstance(match, (Mapping, list)) or match is None:
            raise TypeError(f"{key}.{field} must be a scalar")
        return FilterDef(kind="term", field=expect_str(field, f"{key} field"), value=match)

    if kind == "range":
        unknown = {str(k) for k in spec.keys()} - {"gte", "lte", "field"}
        if unknown:
            raise ValueError(f"{key} has unknown keys: {sorted(unknown)}")
        return FilterDef(
            kind="range",
            field=expect_str(get_optional_value(spec, "field", ""), f"{key}.field"),
            gte=_expect_bound(get_required_value(spec, "gte", f"{key}.gte"), f"{key}.gte"),
            lte=_expect_bound(get_required_value(spec, "lte", f"{key}.lte"), f"{key}.lte"),
        )

    raise ValueError(f"{config_key} has unknown filter: {kind}")


def _parse_metric(kind: str, value: Any, config_key: str) -> MetricDef:
    if not isinstance(value, Mapping):
        raise TypeError(f"{config_key} must be an object")

    params: dict[str, Any] = {}
    if kind != "date_histogram":
        params["field"] = expect_str(get_required_value(value, "field", f"{config_key}.field"), f"{config_key}.field")
    elif "field" in value:
        params["field"] = expect_str(value["field"], f"{config_key}.field")

    if kind in _FIELD_METRICS:
        allowed = {"field"}
    elif kind == "terms":
        allowed = {"field", "size"}
        params["size"] = expect_int(get_optional_value(value, "size", 10), f"{config_key}.size")
        if params["size"] <= 0:
            raise ValueError(f"{config_key}.size must be positive")
    elif kind == "percentiles":
        allowed = {"field", "percents"}
        if "percents" in value:
            params["percents"] = tuple(expect_float_list(value["percents"], f"{config_key}.percents"))
    elif kind == "histogram":
        allowed = {"field", "interval"} | _BUCKET_OPTIONS
        params["interval"] = expect_number(
            get_required_value(value, "interval", f"{config_key}.interval"), f"{config_key}.interval"
        )
        params.update(_parse_bucket_options(value, config_key))
    else:
        allowed = {"field", "interval", "time_zone"} | _BUCKET_OPTIONS
        params["interval"] = expect_str(
            get_required_value(value, "interval", f"{config_key}.interval"), f"{config_key}.interval"
        )
        if "time_zone" in value:
            params["time_zone"] = expect_optional_str(value["time_zone"], f"{config_key}.time_zone")
            _check_zone(params["time_zone"], f"{config_key}.time_zone")
        params.update(_parse_bucket_options(value, config_key))

    unknown = {str(k) for k in value.keys()} - allowed
    if unknown:
        raise ValueError(f"{config_key} has unknown keys: {sorted(unknown)}")
    return MetricDef(kind=kind, params=params)


def _parse_bucket_options(value: Mapping[str, Any], config_key: str) -> dict[str, Any]:
    """Parse min_doc_count / missing / extended_bounds / order."""
    out: dict[str, Any] = {}
    if "min_doc_count" in value:
        count = expect_int(value["min_doc_count"], f"{config_key}.min_doc_count")
        if count < 0:
            raise ValueError(f"{config_key}.min_doc_count must not be negative")
        out["min_doc_count"] = count
    if "missing" in value:
        out["missing"] = value["missing"]
    if "extended_bounds" in value:
        bounds = value["extended_bounds"]
        key = f"{config_key}.extended_bounds"
        if not isinstance(bounds, Mapping):
            raise TypeError(f"{key} must be an object with min/max")
        out["extended_bounds"] = (
            get_required_value(bounds, "min", f"{key}.min"),
            get_required_value(bounds, "max", f"{key}.max"),
        )
    if "order" in value:
        order = value["order"]
        key = f"{config_key}.order"
        if not isinstance(order, Mapping) or len(order) != 1:
            raise TypeError(f"{key} must map exactly one key to asc/desc")
        sort_key, direction = next(iter(order.items()))
        direction = expect_str(direction, f"{key}.{sort_key}").lower()
        if direction not in _DIRECTIONS:
            raise ValueError(f"{key}.{sort_key} must be one of {sorted(_DIRECTIONS)}")
        out["order"] = (expect_str(sort_key, f"{key} key"), direction)
    return out


def _check_zone(value: str | None, config_key: str) -> None:
    if value is None:
        return
    if not value.strip():
        raise ValueError(f"{config_key} must not be empty")
    if value.strip()[0] in "+-" and not is_offset(value):
        raise ValueError(f"{config_key} must be a [+-]HH:MM offset, a zone name or 'local'")


def _expect_bound(value: Any, config_key: str) -> str:
    """Return a range bound as text.

    YAML reads unquoted ``2024-01-01`` (or a full timestamp) as a date, so
    dates and datetimes are turned back into ISO 8601 strings.
    """
    if isinstance(value, date):
        return value.isoformat()
    return expect_str(value, config_key)
