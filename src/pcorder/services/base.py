"""Common base for services that operate on a :class:`~pcorder.shop.Shop`."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pcorder.shop import Shop

logger = logging.getLogger(__name__)


class BaseService:
    """Holds the Shop and fires plugin hooks on its behalf."""

    def __init__(self, shop: Shop) -> None:
        self._shop = shop

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call the *hook_name* plugin hook with *payload*.

        Does nothing when plugins were never initialised. A plugin that
        raises becomes an entry in *warnings*; the change that triggered
        the hook stands.
        """
        pm = self._shop.plugin_manager
        if pm is None:
            return
        try:
            getattr(pm.hook, hook_name)(**payload)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")
