"""Plugin discovery and registration.

Installed packages advertise plugins under the ``pcorder.plugins`` entry
point group; tests and embedding code can register instances directly.
"""

from __future__ import annotations

import logging

import pluggy

from pcorder.plugins.hookspecs import PcOrderHookSpec

PROJECT_NAME = "pcorder"
ENTRY_POINT_GROUP = "pcorder.plugins"

logger = logging.getLogger(__name__)


class PluginManager(pluggy.PluginManager):
    """pluggy manager preloaded with the pcorder hook specifications."""

    def __init__(self) -> None:
        super().__init__(PROJECT_NAME)
        self.add_hookspecs(PcOrderHookSpec)
        self._discovered = False

    @property
    def is_loaded(self) -> bool:
        """Whether entry-point discovery has run."""
        return self._discovered

    def discover_and_load(self) -> list[str]:
        """Load every entry-point plugin and return all registered names."""
        count = self.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._discovered = True
        logger.debug("Loaded %d plugin(s) from %s", count, ENTRY_POINT_GROUP)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> str | None:
        """Register *plugin* under *name*, defaulting to its class name."""
        registered = self.register(plugin, name=name or type(plugin).__name__)
        logger.debug("Registered plugin %s", registered)
        return registered

    def list_plugin_names(self) -> list[str]:
        return [name for name, _ in self.list_name_plugin()]
