"""Shop: the per-run aggregate handed to every service.

A Shop bundles the card issuer, the book of issued cards, the order
ledger, and the optional plugin manager. Nothing outlives the process.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pcorder.domain.cards import CardIssuer
from pcorder.domain.ledger import OrderLedger

if TYPE_CHECKING:
    from pcorder.config.settings import PcOrderSettings
    from pcorder.domain.cards import Card
    from pcorder.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Shop:
    """In-memory state for a single run."""

    def __init__(self, settings: PcOrderSettings) -> None:
        self.settings = settings
        self.issuer = CardIssuer()
        self.ledger = OrderLedger()
        self.cards: dict[str, Card] = {}
        self.plugin_manager: PluginManager | None = None

    def init_plugins(self) -> PluginManager | None:
        """Create the plugin manager and load entry-point plugins.

        No-op when ``[plugins] enabled = false``.
        """
        if not self.settings.plugins.enabled:
            logger.debug("Plugins disabled by configuration")
            return None
        if self.plugin_manager is None:
            from pcorder.plugins.manager import PluginManager

            self.plugin_manager = PluginManager()
            self.plugin_manager.discover_and_load()
        return self.plugin_manager

    def reset(self) -> None:
        """Drop all orders and forget every issued card."""
        self.ledger.clear_all()
        self.issuer.reset()
        self.cards.clear()
