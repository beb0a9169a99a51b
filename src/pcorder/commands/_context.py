"""AppContext: the object every subcommand receives through ``@click.pass_obj``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pcorder.config.logging import configure_logging
from pcorder.output.formatters import OutputSettings, format_result
from pcorder.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from pcorder.config.settings import PcOrderSettings
    from pcorder.services.result import ServiceResult
    from pcorder.shop import Shop


class AppContext:
    """Settings, the run's Shop, and result emission.

    Logging is configured on construction. The Shop (and with it plugin
    discovery) is only built when a command first asks for it, so
    ``--help`` and ``--examples`` stay cheap.
    """

    def __init__(self, settings: PcOrderSettings) -> None:
        self.settings = settings
        self._shop: Shop | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def shop(self) -> Shop:
        if self._shop is None:
            from pcorder.shop import Shop

            self._shop = Shop(self.settings)
            self._shop.init_plugins()
        return self._shop

    @property
    def output_settings(self) -> OutputSettings:
        report = self.settings.report
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            currency=report.currency,
            show_prices=report.show_prices,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; exit with status 1 if it failed.

        Successful output goes to stdout. Failures and, outside JSON mode,
        warnings go to stderr (JSON output already carries the warnings).
        """
        out = self.output_settings
        text = format_result(result, settings=out)
        if not result.ok:
            click.echo(text, err=True)
            raise click.exceptions.Exit(1)

        click.echo(text)
        if not out.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
