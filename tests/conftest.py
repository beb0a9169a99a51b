"""Shared pytest fixtures and test helpers for pcorder tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from datetime import UTC, date, datetime, timedelta
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from pcorder.config.settings import PcOrderSettings
from pcorder.domain.cards import Card, CardIssuer
from pcorder.domain.customers import Customer
from pcorder.domain.ledger import OrderLedger
from pcorder.domain.models import CustomPCModel, PresetPCModel
from pcorder.services.telemetry import disable_telemetry
from pcorder.shop import Shop


@pytest.fixture(autouse=True)
def _reset_context() -> Iterator[None]:
    """Keep telemetry, log handlers and bound log context from leaking between tests."""
    root = logging.getLogger()
    level = root.level
    yield
    disable_telemetry()
    structlog.contextvars.clear_contextvars()
    for handler in list(root.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI from an empty temp directory so no stray pcorder.toml is found."""
    monkeypatch.delenv("PCORDER_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


@pytest.fixture
def future_expiry() -> datetime:
    """Roughly two years from now."""
    return datetime.now(UTC) + timedelta(days=730)


@pytest.fixture
def past_expiry() -> datetime:
    return datetime.now(UTC) - timedelta(days=1)


# ---------------------------------------------------------------------------
# Domain objects
# ---------------------------------------------------------------------------


@pytest.fixture
def issuer() -> CardIssuer:
    return CardIssuer()


@pytest.fixture
def ledger() -> OrderLedger:
    return OrderLedger()


@pytest.fixture
def nick() -> Customer:
    return Customer("Nick", "Davis")


@pytest.fixture
def maria() -> Customer:
    return Customer("Maria", "Kolesnichenko")


@pytest.fixture
def nick_card(issuer: CardIssuer, future_expiry: datetime) -> Card:
    return issuer.issue("11112222", future_expiry, "Nick Davis")


@pytest.fixture
def maria_card(issuer: CardIssuer, future_expiry: datetime) -> Card:
    return issuer.issue("33334444", future_expiry, "Maria Kolesnichenko")


@pytest.fixture
def dell() -> PresetPCModel:
    return PresetPCModel(
        "ProStation X1", "Dell", ["Intel i7 CPU", "16GB RAM", "1TB SSD"], 1499.99
    )


@pytest.fixture
def asus() -> PresetPCModel:
    return PresetPCModel(
        "ROG Strix Tower", "ASUS", ["Ryzen 9 CPU", "32GB RAM", "RTX 4070 GPU"], 1999.99
    )


def custom_model(name: str, *parts: tuple[str, float]) -> CustomPCModel:
    """Build a custom model from ``(part, price)`` pairs."""
    model = CustomPCModel(name)
    for part, price in parts:
        model.add_part(part, price)
    return model


@pytest.fixture
def gamer_build() -> CustomPCModel:
    return custom_model(
        "Custom Gamer Build",
        ("Ryzen 9 CPU", 550.0),
        ("RTX 4070 GPU", 850.0),
        ("32GB RAM", 250.0),
    )


# ---------------------------------------------------------------------------
# Shop / services
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> PcOrderSettings:
    monkeypatch.delenv("PCORDER_CONFIG", raising=False)
    return PcOrderSettings.from_cli(root=tmp_path)


@pytest.fixture
def shop(settings: PcOrderSettings) -> Shop:
    return Shop(settings)


# ---------------------------------------------------------------------------
# Batch files
# ---------------------------------------------------------------------------


def in_years(years: int) -> date:
    return date.today() + timedelta(days=365 * years)


SCENARIO_BATCH = """\
[[cards]]
number = "11112222"
expiry = {future}
holder = "Nick Davis"

[[cards]]
number = "33334444"
expiry = {future}
holder = "Maria Kolesnichenko"

[[models]]
kind = "preset"
name = "ProStation X1"
manufacturer = "Dell"
price = 1499.99
parts = ["Intel i7 CPU", "16GB RAM", "1TB SSD"]

[[models]]
kind = "custom"
name = "GamerOne"
parts = [{{ name = "RTX 4070 GPU", price = 850.0 }}, {{ name = "32GB RAM", price = 250.0 }}]

[[models]]
kind = "custom"
name = "GamerTwo"
parts = [{{ name = "32GB RAM", price = 250.0 }}, {{ name = "1TB SSD", price = 150.0 }}]

[[orders]]
first_name = "Maria"
last_name = "Kolesnichenko"
model = "ProStation X1"
card = "33334444"
action = "fulfil"

[[orders]]
first_name = "Maria"
last_name = "Kolesnichenko"
model = "ProStation X1"
card = "33334444"
action = "fulfil"

[[orders]]
first_name = "Nick"
last_name = "Davis"
model = "ProStation X1"
card = "11112222"
action = "fulfil"

[[orders]]
first_name = "Nick"
last_name = "Davis"
model = "GamerOne"
card = "11112222"
action = "fulfil"

[[orders]]
first_name = "Maria"
last_name = "Kolesnichenko"
model = "GamerTwo"
card = "33334444"
action = "fulfil"

[[orders]]
first_name = "Nick"
last_name = "Davis"
model = "GamerTwo"
card = "11112222"
action = "cancel"
"""


@pytest.fixture
def write_batch(tmp_path: Path) -> Callable[[str], Path]:
    """Return a helper that writes TOML text to a batch file and returns its path."""

    def _write(text: str, name: str = "orders.toml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def scenario_batch(write_batch: Callable[[str], Path]) -> Path:
    """Three fulfilled Dell orders (Maria x2, Nick x1), two fulfilled custom builds."""
    return write_batch(SCENARIO_BATCH.format(future=in_years(2).isoformat()))
