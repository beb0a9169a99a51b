"""Command: ranked aggregates for a batch file."""

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
  pcorder stats orders.toml
  pcorder --json stats orders.toml""",
)
@click.argument("batch", type=click.Path(path_type=Path, dir_okay=False))
@click.pass_obj
def stats(app: AppContext, batch: Path) -> None:
    """Largest customer, most ordered model and most ordered part."""
    from pcorder.services.batch import BatchService

    app.emit(BatchService(app.shop).stats(batch))
