"""Command: replay a batch file and show the resulting ledger."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from pcorder.commands._base import PcCommand

if TYPE_CHECKING:
    from pcorder.commands._context import AppContext


@click.command(
    cls=PcCommand,
    examples="""\
  pcorder replay orders.toml
  pcorder --json replay orders.toml
  pcorder -v replay orders.toml""",
)
@click.argument("batch", type=click.Path(path_type=Path, dir_okay=False))
@click.pass_obj
def replay(app: AppContext, batch: Path) -> None:
    """Issue cards and place orders from a TOML batch file."""
    from pcorder.services.batch import BatchService

    app.emit(BatchService(app.shop).replay(batch))
