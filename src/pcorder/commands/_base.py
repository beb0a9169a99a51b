"""Click command class carrying an ``--examples`` flag.

``pcorder replay --examples`` prints sample invocations and exits before
any argument is validated, so ``--help`` can stay short.
"""

from __future__ import annotations

from typing import Any

import click


class PcCommand(click.Command):
    """A click.Command that takes an ``examples`` text block."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    is_eager=True,
                    expose_value=False,
                    callback=self._print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
            ctx.exit(0)
