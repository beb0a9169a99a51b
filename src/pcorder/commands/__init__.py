"""Subcommand modules for pcorder.

Provides register_commands() which uses deferred imports to keep
``pcorder --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from pcorder.commands.orders import orders
    from pcorder.commands.replay import replay
    from pcorder.commands.stats import stats

    cli.add_command(orders)
    cli.add_command(replay)
    cli.add_command(stats)
