"""Pluggy hook specifications for pcorder lifecycle events.

Hooks fire synchronously after the change has been applied. A failing
plugin never undoes the change; the service reports it as a warning.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("pcorder")


class PcOrderHookSpec:
    """Hook specifications for the pcorder plugin system."""

    @hookspec
    def post_issue_card(self, number: str, holder_name: str) -> None:
        """Called after a card is issued."""

    @hookspec
    def post_place_order(
        self,
        index: int,
        customer: str,
        model: str,
        card_number: str,
    ) -> None:
        """Called after an order is placed."""

    @hookspec
    def post_fulfil(self, index: int, customer: str, model: str) -> None:
        """Called after an order moves to fulfilled."""

    @hookspec
    def post_cancel(self, index: int, customer: str, model: str) -> None:
        """Called after an order moves to cancelled."""
