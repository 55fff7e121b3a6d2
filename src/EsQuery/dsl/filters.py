"""Filter clauses and the reusable filter set."""

from __future__ import annotations

from EsQuery.core.fragment import Array, Body, FragmentLike, Member, Value, as_fragment, body, member


def range_filter(gte: str, lte: str, *, field: str = "timestamp") -> Value:
    """Range over a date field.

    Both bounds are passed through untouched, so absolute timestamps and
    relative expressions like ``now-7d`` both work.
    """
    return Value({"range": {field: {"gte": gte, "lte": lte}}})


def term_filter(field: str, value: str | int | float | bool) -> Value:
    """Exact match on a field."""
    return Value({"term": {field: value}})


class Filter:
    """A set of filters that can be applied to any number of bodies.

    Example:
        >>> recent = Filter(term_filter("user.login", "tj"), range_filter("now-7d", "now"))
        >>> by_repo = recent.apply(aggs(agg("repos", terms_agg("repo", 100))))
        >>> by_label = recent.apply(aggs(agg("labels", terms_agg("labels", 100))))

    Both bodies share the same ``"filter"`` block.
    """

    __slots__ = ("filters",)

    def __init__(self, *filters: FragmentLike) -> None:
        self.filters = tuple(as_fragment(f) for f in filters)

    def __repr__(self) -> str:
        return f"Filter({', '.join(repr(f) for f in self.filters)})"

    def clause(self) -> Member:
        """The ``"filter": {"bool": {"filter": [...]}}`` member; empty filters are dropped."""
        return member("filter", body(member("bool", body(member("filter", Array(self.filters))))))

    def apply(self, *children: FragmentLike) -> Body:
        """Return the filter clause followed by children."""
        return body(self.clause(), *children)
