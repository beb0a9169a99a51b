"""Buffered Rich consoles and the pcorder colour theme.

Renderers print into a console backed by StringIO and hand back the text,
so the CLI decides which stream it lands on. Rich drops colour codes by
itself when the buffer is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

from pcorder.domain.orders import OrderStatus

DEFAULT_WIDTH = 120

PC_THEME = Theme(
    {
        "pc.ok": "bold green",
        "pc.error": "bold red",
        "pc.warning": "bold yellow",
        "pc.op": "bold cyan",
        "pc.key": "dim",
        "pc.index": "bold blue",
        "pc.customer": "bold",
        "pc.price": "magenta",
        f"pc.status.{OrderStatus.PLACED}": "yellow",
        f"pc.status.{OrderStatus.FULFILLED}": "green",
        f"pc.status.{OrderStatus.CANCELLED}": "red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=PC_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Everything printed to *console* so far."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        msg = "console was not created by create_console()"
        raise TypeError(msg)
    return buffer.getvalue()


def style_for_status(status: str) -> str:
    """Theme style for an order status, or "" for anything unknown."""
    if status in {s.value for s in OrderStatus}:
        return f"pc.status.{status}"
    return ""
