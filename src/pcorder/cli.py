"""Root ``pcorder`` command group."""

from __future__ import annotations

from typing import Any

import click

from pcorder import __version__
from pcorder.commands import register_commands
from pcorder.commands._context import AppContext
from pcorder.config.settings import PcOrderSettings


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(__version__, prog_name="pcorder")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="One line per result.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs, timings and order dates.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Read settings from this file instead of discovering pcorder.toml.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: Any) -> None:
    """pcorder: replay PC order batches and rank customers, models and parts."""
    ctx.obj = AppContext(PcOrderSettings.from_cli(config_path=config_path, **flags))
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
