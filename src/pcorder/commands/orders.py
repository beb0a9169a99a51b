"""Command: list the orders a batch file leaves in the ledger."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from pcorder.commands._base import PcCommand
from pcorder.domain.orders import OrderStatus

if TYPE_CHECKING:
    from pcorder.commands._context import AppContext


@click.command(
    cls=PcCommand,
    examples="""\
  pcorder orders orders.toml
  pcorder orders orders.toml --status cancelled
  pcorder --json orders orders.toml --status fulfilled""",
)
@click.argument("batch", type=click.Path(path_type=Path, dir_okay=False))
@click.option(
    "--status",
    type=click.Choice([s.value for s in OrderStatus]),
    default=None,
    help="Only show orders in this status.",
)
@click.pass_obj
def orders(app: AppContext, batch: Path, status: str | None) -> None:
    """Replay a batch file and list its orders."""
    from pcorder.services.batch import BatchService

    app.emit(BatchService(app.shop).list_orders(batch, status=status))
