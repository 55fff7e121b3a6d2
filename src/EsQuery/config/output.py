"""Output domain configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from EsQuery.config.common import (
    expect_bool,
    expect_optional_str,
    get_optional_value,
    get_section,
)


@dataclass(frozen=True, slots=True)
class OutputConfig:
    """Output configuration.

    Attributes:
        pretty: Indent the query body instead of compacting it.
        path: File to write the body to; None prints to stdout.
    """

    pretty: bool
    path: str | None


def load_output(raw: Mapping[str, Any]) -> OutputConfig:
    """Load output domain config from raw mapping.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "output", required=False)
    return OutputConfig(
        pretty=expect_bool(get_optional_value(section, "pretty", True), "output.pretty"),
        path=expect_optional_str(get_optional_value(section, "path", None), "output.path"),
    )


def check_output(config: OutputConfig) -> None:
    """Validate output domain constraints.

    Raises:
        ValueError: If values violate output constraints.
    """
    if config.path is not None and not config.path.strip():
        raise ValueError("output.path must not be empty")
