"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

import click
import yaml
from dotenv import load_dotenv

from EsQuery.cli.runner import CommandRunner
from EsQuery.config import load_config


@click.group(help="EsQuery: compose Elasticsearch aggregation queries.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=Path("config/default.yml"),
    show_default=True,
    help="Path to YAML config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file (``TZ`` among them) before
    any command runs. The config is only read by commands that need it.

    Args:
        ctx: Click context.
        config_path: Path to YAML config file.
    """
    load_dotenv()
    ctx.obj = config_path


@cli.command("build")
@click.pass_context
def build_cmd(ctx: click.Context) -> None:
    """Compile the aggregations declared in the config into a query body.

    Args:
        ctx: Click context.

    Raises:
        click.ClickException: When the config cannot be loaded.
        click.Abort: When compilation fails.
    """
    config_path: Path = ctx.obj
    try:
        cfg = load_config(config_path)
    except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(f"Invalid config {config_path}: {e}") from e
    CommandRunner(cfg).run_build(action=ctx.command.name)


@cli.command("pretty")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_context
def pretty_cmd(ctx: click.Context, source: TextIO) -> None:
    """Pretty-print JSON from SOURCE (default: stdin)."""
    CommandRunner().run_format(ctx.command.name, source.read(), indent=True)


@cli.command("compact")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_context
def compact_cmd(ctx: click.Context, source: TextIO) -> None:
    """Compact JSON from SOURCE (default: stdin)."""
    CommandRunner().run_format(ctx.command.name, source.read(), indent=False)
