from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class FilterDef:
    """One filter clause declared in configuration.

    Attributes:
        kind: ``term`` or ``range``.
        field: Field the clause applies to.
        value: Match value for ``term``.
        gte: Lower bound for ``range``.
        lte: Upper bound for ``range``.
    """

    kind: str
    field: str
    value: Any = None
    gte: str | None = None
    lte: str | None = None


@dataclass(frozen=True, slots=True)
class MetricDef:
    """The metric or bucket clause of an aggregation.

    Attributes:
        kind: One of terms/sum/avg/min/max/stats/percentiles/histogram/date_histogram.
        params: Validated clause parameters, keyed by option name.
    """

    kind: str
    params: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class AggDef:
    """A named aggregation with optional filter and sub-aggregations."""

    name: str
    metric: MetricDef | None = None
    filters: tuple[FilterDef, ...] = ()
    children: tuple["AggDef", ...] = ()


@dataclass(frozen=True, slots=True)
class RequestDef:
    """Normalized request passed from configuration to the builder.

    Attributes:
        aggs: Top-level aggregations in declaration order.
        time_field: Default date field for ranges and date histograms.
        time_zone: Default zone descriptor for date histograms; ``local``
            means the process zone, None leaves the key out.
    """

    aggs: tuple[AggDef, ...] = ()
    time_field: str = "timestamp"
    time_zone: str | None = None
