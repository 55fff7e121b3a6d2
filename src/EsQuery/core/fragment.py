"""Query fragments.

A fragment is an immutable piece of an Elasticsearch request body. Fragments
form a small tagged tree:

- `Value`: a bare JSON value (``{"term": {...}}``, ``"30m"``, ``50``)
- `Member`: one ``"key": value`` pair of an object body
- `Body`: an object body without braces, i.e. members spliced into a parent
- `Array`: a JSON array of fragments
- `Raw`: hand-written JSON text, spliced verbatim

Fragments only become text when rendered. Plain strings are accepted anywhere
a fragment is and are treated as `Raw` text, which is why the root constructor
still parses the assembled document before returning it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Union

SEPARATOR = ",\n"


class Direction(str, Enum):
    """Bucket ordering direction."""

    ASCENDING = "asc"
    DESCENDING = "desc"


class Fragment:
    """Base class of all fragments."""

    __slots__ = ()

    def render(self) -> str:
        raise NotImplementedError

    def is_empty(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.render()


FragmentLike = Union[Fragment, str]


@dataclass(frozen=True, slots=True)
class Raw(Fragment):
    """Hand-written JSON text."""

    text: str

    def render(self) -> str:
        return self.text.strip()

    def is_empty(self) -> bool:
        return not self.text.strip()


@dataclass(frozen=True, slots=True)
class Value(Fragment):
    """A bare JSON value built from Python data."""

    value: Any

    def render(self) -> str:
        return json.dumps(_plain(self.value), ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class Body(Fragment):
    """Object members without surrounding braces.

    A body nested in another body (or array) is flattened into its parent when
    joined; a body used as a member value is wrapped in braces.
    """

    parts: tuple[Fragment, ...] = ()

    def render(self) -> str:
        return join(self.parts)

    def is_empty(self) -> bool:
        return all(part.is_empty() for part in self.parts)


@dataclass(frozen=True, slots=True)
class Member(Fragment):
    """A single ``"key": value`` pair."""

    key: str
    value: Fragment

    def render(self) -> str:
        if isinstance(self.value, Body):
            rendered = "{" + self.value.render() + "}"
        else:
            rendered = self.value.render()
        return f"{json.dumps(self.key, ensure_ascii=False)}: {rendered}"


@dataclass(frozen=True, slots=True)
class Array(Fragment):
    """A JSON array; empty items are dropped."""

    items: tuple[Fragment, ...] = ()

    def render(self) -> str:
        return "[" + join(self.items) + "]"


EMPTY = Body()


def as_fragment(item: FragmentLike) -> Fragment:
    """Wrap plain strings as `Raw` text; pass fragments through.

    Raises:
        TypeError: If item is neither a fragment nor a string.
    """
    if isinstance(item, Fragment):
        return item
    if isinstance(item, str):
        return Raw(item)
    raise TypeError(f"Expected a fragment or JSON text, got {type(item).__name__}")


def member(key: str, value: Any) -> Member:
    """Build a member, wrapping Python data as a `Value`."""
    if not isinstance(value, Fragment):
        value = Value(value)
    return Member(key, value)


def body(*parts: FragmentLike) -> Body:
    return Body(tuple(as_fragment(p) for p in parts))


def flatten(fragments: Iterable[FragmentLike]) -> list[Fragment]:
    """Splice nested bodies and drop empty fragments, keeping order."""
    out: list[Fragment] = []
    for item in fragments:
        fragment = as_fragment(item)
        if fragment.is_empty():
            continue
        if isinstance(fragment, Body):
            out.extend(flatten(fragment.parts))
        else:
            out.append(fragment)
    return out


def join(fragments: Iterable[FragmentLike]) -> str:
    """Join non-empty fragments with a comma-and-newline separator."""
    return SEPARATOR.join(f.render() for f in flatten(fragments))


def when(condition: bool, *fragments: FragmentLike) -> Body:
    """Include fragments only when condition holds.

    Returns:
        The fragments as one body, or `EMPTY` which every join drops.
    """
    if not condition:
        return EMPTY
    return body(*fragments)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
