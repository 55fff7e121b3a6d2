"""Query root and JSON normalization.

`query` wraps composed fragments in the request envelope and returns compact
JSON. The parse/serialize pass in `compact` and `pretty` is the single
syntactic validation point: text that does not decode raises
`CompositionError` instead of leaking a malformed body to the search engine.
"""

from __future__ import annotations

import json
from typing import Any

from EsQuery.core.errors import CompositionError
from EsQuery.core.fragment import FragmentLike, join, member
from EsQuery.utils.log import log


def query(*children: FragmentLike) -> str:
    """Build a complete request body that asks for aggregations only.

    Args:
        children: Top-level fragments, typically an ``aggs`` block.

    Returns:
        Compact JSON with ``"size": 0`` at the top level.

    Raises:
        CompositionError: If the fragments do not form valid JSON.
    """
    text = "{\n" + join((member("size", 0), *children)) + "\n}"
    out = compact(text)
    log.debug("Composed query: %d bytes", len(out))
    return out


def compact(text: str) -> str:
    """Re-serialize JSON text without insignificant whitespace."""
    return json.dumps(_decode(text), ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def pretty(text: str) -> str:
    """Re-serialize JSON text with two-space indentation.

    Works on any JSON text, not only `query` output. Idempotent.
    """
    return json.dumps(_decode(text), ensure_ascii=False, sort_keys=True, indent=2)


def _decode(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise CompositionError(f"Malformed query JSON: {e.msg}", text=text, lineno=e.lineno, colno=e.colno) from e
