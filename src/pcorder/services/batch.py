"""BatchService: replay a TOML batch file against the shop.

A batch file describes cards to issue, the PC models on offer, and the
orders to place (optionally fulfilling or cancelling each one)::

    [[cards]]
    number = "11112222"
    expiry = 2028-10-19
    holder = "Nick Davis"

    [[models]]
    kind = "preset"
    name = "ProStation X1"
    manufacturer = "Dell"
    price = 1499.99
    parts = ["Intel i7 CPU", "16GB RAM", "1TB SSD"]

    [[models]]
    kind = "custom"
    name = "GamerOne"
    parts = [{ name = "32GB RAM", price = 250.0 }]

    [[orders]]
    first_name = "Nick"
    last_name = "Davis"
    model = "ProStation X1"
    card = "11112222"
    action = "fulfil"

Structural problems (bad TOML, schema errors, unknown model names) fail
the whole replay. Business rejections (duplicate card, expired card) are
collected in ``rejected`` and the replay carries on.
"""

from __future__ import annotations

import logging
import tomllib
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, Any, Literal

import pydantic
from pydantic import BaseModel, Field

from pcorder.config.logging import bind_batch_context
from pcorder.domain.customers import Customer
from pcorder.domain.errors import ValidationError
from pcorder.domain.models import CustomPCModel, PCModel, PresetPCModel
from pcorder.services.base import BaseService
from pcorder.services.orders import OrderService
from pcorder.services.result import ServiceResult
from pcorder.services.telemetry import traced

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Batch file schema
# ---------------------------------------------------------------------------


class _Entry(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}


class CardEntry(_Entry):
    number: str
    expiry: datetime | date
    holder: str


class PartEntry(_Entry):
    name: str
    price: float = 0.0


class PresetEntry(_Entry):
    kind: Literal["preset"]
    name: str
    manufacturer: str
    price: float
    parts: list[str]


class CustomEntry(_Entry):
    kind: Literal["custom"]
    name: str
    parts: list[PartEntry] = Field(default_factory=list)


ModelEntry = Annotated[PresetEntry | CustomEntry, Field(discriminator="kind")]


class OrderEntry(_Entry):
    first_name: str
    last_name: str
    model: str
    card: str
    action: Literal["fulfil", "cancel"] | None = None


class BatchFile(_Entry):
    cards: list[CardEntry] = Field(default_factory=list)
    models: list[ModelEntry] = Field(default_factory=list)
    orders: list[OrderEntry] = Field(default_factory=list)


def build_model(entry: PresetEntry | CustomEntry) -> PCModel:
    """Turn a batch model entry into a domain model."""
    if isinstance(entry, PresetEntry):
        return PresetPCModel(entry.name, entry.manufacturer, entry.parts, entry.price)
    custom = CustomPCModel(entry.name)
    for part in entry.parts:
        custom.add_part(part.name, part.price)
    return custom


def _format_errors(exc: pydantic.ValidationError) -> list[str]:
    return [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class BatchService(BaseService):
    """Loads batch files and replays them through :class:`OrderService`."""

    def load(self, path: Path) -> BatchFile | ServiceResult:
        """Parse and validate *path*; returns a failure result on any problem."""
        op = "replay"
        if not path.is_file():
            return ServiceResult.failure(op, "NOT_FOUND", f"Batch file not found: {path}")
        try:
            raw = tomllib.loads(path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            return ServiceResult.failure(op, "INVALID_BATCH", f"Invalid TOML in {path}: {exc}")
        try:
            return BatchFile.model_validate(raw)
        except pydantic.ValidationError as exc:
            return ServiceResult.failure(
                op,
                "INVALID_BATCH",
                f"Batch file {path.name} does not match the schema",
                detail={"errors": _format_errors(exc)},
            )

    @traced
    def replay(self, path: Path) -> ServiceResult:
        """Issue cards, place orders, apply actions, and report the outcome."""
        op = "replay"
        bind_batch_context(path.name)

        loaded = self.load(path)
        if isinstance(loaded, ServiceResult):
            return loaded
        batch = loaded

        models: dict[str, PCModel] = {}
        for entry in batch.models:
            if entry.name in models:
                return ServiceResult.failure(
                    op, "INVALID_BATCH", f"Duplicate model name: {entry.name!r}"
                )
            try:
                models[entry.name] = build_model(entry)
            except ValidationError as exc:
                return ServiceResult.failure(
                    op, "INVALID_BATCH", f"Model {entry.name!r}: {exc}"
                )

        unknown = sorted({o.model for o in batch.orders if o.model not in models})
        if unknown:
            return ServiceResult.failure(
                op,
                "INVALID_BATCH",
                f"Orders reference unknown models: {', '.join(unknown)}",
                detail={"unknown_models": unknown},
            )

        # A batch describes the whole shop, so each replay starts empty.
        orders = OrderService(self._shop)
        orders.reset()
        warnings: list[str] = []
        rejected: list[dict[str, Any]] = []

        def reject(step: str, index: int, result: ServiceResult) -> None:
            err = result.error
            code = err.code if err else "ERROR"
            message = err.message if err else "Unknown error"
            rejected.append({"step": step, "index": index, "code": code, "message": message})
            warnings.append(f"{step} {index} rejected ({code}): {message}")

        issued = 0
        for i, card in enumerate(batch.cards):
            result = orders.issue_card(card.number, card.expiry, card.holder)
            if not result.ok:
                reject("card", i, result)
                continue
            issued += 1
            warnings.extend(result.warnings)

        for i, entry in enumerate(batch.orders):
            try:
                customer = Customer(entry.first_name, entry.last_name)
            except ValidationError as exc:
                reject("order", i, ServiceResult.from_exception("place_order", exc))
                continue

            placed = orders.place_order(customer, models[entry.model], entry.card)
            if not placed.ok:
                reject("order", i, placed)
                continue
            warnings.extend(placed.warnings)

            index = placed.data["index"]
            if entry.action == "fulfil":
                warnings.extend(orders.fulfil(index).warnings)
            elif entry.action == "cancel":
                warnings.extend(orders.cancel(index).warnings)

        logger.debug(
            "Replayed %s: %d card(s), %d order(s), %d rejected",
            path.name,
            issued,
            len(self._shop.ledger),
            len(rejected),
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "batch": str(path),
                "cards_issued": issued,
                "orders": orders.list_orders().data["items"],
                "rejected": rejected,
                "stats": orders.stats().data,
            },
            warnings=warnings,
        )

    def stats(self, path: Path) -> ServiceResult:
        """Replay *path* and report only the ranked aggregates."""
        replayed = self.replay(path)
        if not replayed.ok:
            return replayed.model_copy(update={"op": "stats"})
        return ServiceResult(
            ok=True,
            op="stats",
            data=replayed.data["stats"],
            warnings=replayed.warnings,
            meta=replayed.meta,
        )

    def list_orders(self, path: Path, *, status: str | None = None) -> ServiceResult:
        """Replay *path* and list the resulting orders, optionally by status."""
        replayed = self.replay(path)
        if not replayed.ok:
            return replayed.model_copy(update={"op": "list_orders"})
        listed = OrderService(self._shop).list_orders(status=status)
        return listed.model_copy(update={"warnings": replayed.warnings + listed.warnings})
