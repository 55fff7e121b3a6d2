from __future__ import annotations

"""Public configuration API for EsQuery."""

from EsQuery.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from EsQuery.config.output import OutputConfig
from EsQuery.config.runtime import RuntimeConfig

__all__ = [
    "RuntimeConfig",
    "OutputConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
]
