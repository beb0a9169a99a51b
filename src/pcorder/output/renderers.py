"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers
are dispatched by ``result.op`` in :func:`render_result`; unknown ops
fall through to a generic key-value renderer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from pcorder.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from pcorder.services.result import ServiceResult


@dataclass(frozen=True)
class RenderOptions:
    verbose: bool = False
    currency: str = "GBP"
    show_prices: bool = True


# ── Public API ────────────────────────────────────────────────────────


def render_result(
    result: ServiceResult,
    *,
    verbose: bool = False,
    currency: str = "GBP",
    show_prices: bool = True,
) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    opts = RenderOptions(verbose=verbose, currency=currency, show_prices=show_prices)

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, opts)
    else:
        _render_error(result, console, opts)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="pc.ok"), Text(f"  {result.op}", style="pc.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}:", style="pc.key")
    if key == "index":
        v = Text(str(value), style="pc.index")
    elif key == "customer":
        v = Text(str(value), style="pc.customer")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    else:
        v = Text(str(value))
    console.print(k, v)


def _format_price(value: Any, currency: str) -> str:
    if isinstance(value, (int, float)):
        return f"{value:,.2f} {currency}"
    return str(value)


def _render_span(console: Console, span: dict[str, Any], depth: int = 0) -> None:
    indent = "    " + "  " * depth
    duration = Text(f"{indent}{span.get('duration_ms', 0.0):>8.2f}ms", style="dim")
    console.print(duration, Text(str(span.get("name", "?"))))
    for child in span.get("children", []):
        _render_span(console, child, depth + 1)


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry" and isinstance(v, dict):
            _render_span(console, v)
        else:
            console.print(Text(f"    {k}: {v}"))


def _orders_table(items: list[dict[str, Any]], opts: RenderOptions) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", style="pc.index", justify="right", no_wrap=True)
    table.add_column("Customer", style="pc.customer")
    table.add_column("Model")
    table.add_column("Kind")
    if opts.show_prices:
        table.add_column("Price", style="pc.price", justify="right")
    table.add_column("Status")
    table.add_column("Card", no_wrap=True)
    if opts.verbose:
        table.add_column("Placed", style="dim")

    for item in items:
        status = str(item.get("status", ""))
        row: list[str | Text] = [
            str(item.get("index", "")),
            str(item.get("customer", "")),
            str(item.get("model", "")),
            str(item.get("kind", "")),
        ]
        if opts.show_prices:
            row.append(_format_price(item.get("price"), opts.currency))
        row.append(Text(status, style=style_for_status(status)))
        row.append(str(item.get("card", "")))
        if opts.verbose:
            row.append(str(item.get("date_placed", "")))
        table.add_row(*row)
    return table


_STAT_LABELS = (
    ("largest_customer", "largest customer"),
    ("most_ordered_model", "most ordered model"),
    ("most_ordered_part", "most ordered part"),
)


def _stats_block(console: Console, stats: dict[str, Any]) -> None:
    _field(console, "orders", stats.get("orders", 0))
    _field(console, "fulfilled", stats.get("fulfilled", 0))
    for key, label in _STAT_LABELS:
        entry = stats.get(key)
        value = f"{entry['key']} ({entry['count']})" if entry else "none"
        _field(console, label, value)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, opts: RenderOptions) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text("ERROR", style="pc.error"), Text(f"  {result.op}", style="pc.op"), Text(msg))
    if err is None or not err.detail:
        return
    for line in err.detail.get("errors", []):
        console.print(Text.assemble("  ", ("-", "pc.error"), f" {line}"))
    if opts.verbose:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Op renderers ──────────────────────────────────────────────────────


def _render_replay(result: ServiceResult, console: Console, opts: RenderOptions) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "batch", d.get("batch", ""))
    _field(console, "cards_issued", d.get("cards_issued", 0))

    items = d.get("orders", [])
    if items:
        console.print()
        console.print(_orders_table(items, opts))

    rejected = d.get("rejected", [])
    if rejected:
        console.print()
        for rej in rejected:
            console.print(
                Text.assemble(
                    "  ",
                    ("rejected", "pc.error"),
                    f" {rej.get('step')} {rej.get('index')}: {rej.get('message')} ",
                    (f"({rej.get('code')})", "dim"),
                )
            )

    console.print()
    _stats_block(console, d.get("stats", {}))
    if opts.verbose:
        _render_meta(console, result)


def _render_stats(result: ServiceResult, console: Console, opts: RenderOptions) -> None:
    _status_line(console, result)
    _stats_block(console, result.data)
    if opts.verbose:
        _render_meta(console, result)


def _render_order_list(result: ServiceResult, console: Console, opts: RenderOptions) -> None:
    items = result.data.get("items", [])
    console.print(_orders_table(items, opts))
    console.print(f"\n{result.data.get('count', len(items))} orders")
    if opts.verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, opts: RenderOptions) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if opts.verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Callable[[ServiceResult, Console, RenderOptions], None]] = {
    "replay": _render_replay,
    "stats": _render_stats,
    "list_orders": _render_order_list,
}
