"""Errors raised while composing or normalizing queries."""

from __future__ import annotations


class CompositionError(ValueError):
    """Composed fragments (or supplied text) do not form valid JSON.

    Attributes:
        text: The text that failed to parse.
        lineno: 1-based line of the decode failure.
        colno: 1-based column of the decode failure.
    """

    def __init__(self, message: str, *, text: str, lineno: int, colno: int) -> None:
        super().__init__(f"{message} (line {lineno}, column {colno})")
        self.text = text
        self.lineno = lineno
        self.colno = colno

    def excerpt(self, context: int = 1) -> str:
        """Return the lines around the failure, marking the failing column."""
        lines = self.text.splitlines() or [""]
        idx = min(max(self.lineno - 1, 0), len(lines) - 1)
        start = max(idx - context, 0)
        out = lines[start : idx + 1]
        out.append(" " * max(self.colno - 1, 0) + "^")
        out.extend(lines[idx + 1 : idx + 1 + context])
        return "\n".join(out)


class TimeZoneError(ValueError):
    """A zone descriptor is neither a fixed UTC offset nor a known zone name."""
