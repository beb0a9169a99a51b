"""Output mode dispatch.

The CLI renders ServiceResult for humans (Rich tables and panels) or
machines (--json). ``--quiet`` reduces success output to a single line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pcorder.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from pcorder.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output switches taken from the global CLI flags."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    currency: str = "GBP"
    show_prices: bool = True


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display in the requested mode."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(
        result,
        verbose=settings.verbose,
        currency=settings.currency,
        show_prices=settings.show_prices,
    )
