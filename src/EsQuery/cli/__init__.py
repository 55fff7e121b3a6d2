"""CLI package for EsQuery.

Click command definitions live in `ui`, execution and error handling in
`runner`.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "cli", "main"]

from EsQuery.cli.runner import CommandRunner
from EsQuery.cli.ui import cli


def main() -> None:
    """Run EsQuery CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
