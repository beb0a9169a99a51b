"""Sections of ``pcorder.toml``.

Every field has a default, so the file only needs the values it changes::

    [cards]
    expiry_warning_days = 14

    [report]
    currency = "EUR"
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CardsConfig(BaseModel):
    """[cards]: warning window for cards close to expiry."""

    model_config = {"frozen": True}

    # 0 turns the warning off.
    expiry_warning_days: int = Field(default=30, ge=0)


class ReportConfig(BaseModel):
    """[report]: how prices appear in human output."""

    model_config = {"frozen": True}

    currency: str = "GBP"
    show_prices: bool = True


class PluginsConfig(BaseModel):
    model_config = {"frozen": True}

    enabled: bool = True
