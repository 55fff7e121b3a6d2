"""Command runner for coordinating CLI execution.

Manages logging configuration, output and error handling for command
execution.
"""

from __future__ import annotations

from pathlib import Path

import click

from EsQuery.builder import compile_request
from EsQuery.config import AppConfig
from EsQuery.core.errors import CompositionError
from EsQuery.core.query import compact, pretty
from EsQuery.utils.log import configure_logging, log


class CommandRunner:
    """Runs CLI commands with logging configured and failures reported.

    The format commands work without a config file, so ``config`` is optional.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config

    def run_build(self, action: str) -> None:
        """Compile the configured request and emit it.

        Args:
            action: The CLI command name (e.g., 'build').

        Raises:
            click.Abort: When compilation fails.
        """
        if self.config is None:
            raise ValueError("build requires a loaded config")
        runtime = self.config.runtime
        configure_logging(level=runtime.level, action=action, log_to_file=runtime.to_file, log_dir=runtime.dir)
        try:
            log.debug("Compiling %d top-level aggregations", len(self.config.request.aggs))
            body = compile_request(self.config.request)
            if self.config.output.pretty:
                body = pretty(body)
            self._emit(body, self.config.output.path)
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Build failed: %s", e)
            raise click.Abort from e

    def run_format(self, action: str, text: str, *, indent: bool) -> None:
        """Normalize JSON text and print it.

        Raises:
            click.Abort: When the text is not valid JSON.
        """
        configure_logging(level="INFO", action=action, log_to_file=False)
        try:
            click.echo(pretty(text) if indent else compact(text))
        except CompositionError as e:
            log.error("%s", e)
            log.error("\n%s", e.excerpt())
            raise click.Abort from e

    @staticmethod
    def _emit(body: str, path: str | None) -> None:
        if path is None:
            click.echo(body)
            return
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(body + "\n", encoding="utf-8")
        log.info("Query saved to %s", output_path)
