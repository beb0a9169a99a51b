"""OrderService: card issuance, order placement and status transitions.

Orders are addressed by their position in the ledger (``index``, 0-based),
which is stable because the ledger never removes individual orders.

Transition refusals (fulfil/cancel of a settled order) are successful
results with ``changed: False`` and a warning, not errors.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Any

from pcorder.domain.errors import (
    DuplicateCardError,
    InvalidPaymentError,
    ValidationError,
)
from pcorder.domain.orders import OrderStatus
from pcorder.services.base import BaseService
from pcorder.services.result import ServiceResult
from pcorder.services.telemetry import traced

if TYPE_CHECKING:
    from pcorder.domain.cards import Card
    from pcorder.domain.customers import Customer
    from pcorder.domain.ledger import Ranked
    from pcorder.domain.models import PCModel
    from pcorder.domain.orders import Order

logger = logging.getLogger(__name__)


def card_data(card: Card) -> dict[str, Any]:
    return {
        "number": card.number,
        "masked": card.masked_number,
        "holder": card.holder_name,
        "expiry": card.expiry.isoformat(),
        "valid": card.is_valid(),
    }


def _ranked_data(ranked: Ranked[Any] | None) -> dict[str, Any] | None:
    if ranked is None:
        return None
    return {"key": str(ranked.key), "count": ranked.count}


class OrderService(BaseService):
    """Drives the shop's issuer and ledger."""

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------

    @traced
    def issue_card(
        self,
        number: str,
        expiry: datetime | date,
        holder_name: str,
    ) -> ServiceResult:
        op = "issue_card"
        warnings: list[str] = []
        try:
            card = self._shop.issuer.issue(number, expiry, holder_name)
        except (ValidationError, DuplicateCardError) as exc:
            logger.debug("Card %s rejected: %s", number, exc)
            return ServiceResult.from_exception(op, exc)

        self._shop.cards[card.number] = card
        logger.debug("Issued card %s", card.masked_number)
        self._dispatch_event(
            "post_issue_card",
            {"number": card.number, "holder_name": card.holder_name},
            warnings,
        )
        return ServiceResult(ok=True, op=op, data=card_data(card), warnings=warnings)

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    @traced
    def place_order(self, customer: Customer, model: PCModel, card_number: str) -> ServiceResult:
        op = "place_order"
        warnings: list[str] = []

        card = self._shop.cards.get(card_number)
        if card is None:
            return ServiceResult.failure(
                op,
                "UNKNOWN_CARD",
                f"No card issued with number: {card_number}",
            )

        try:
            order = self._shop.ledger.place_order(customer, model, card)
        except (ValidationError, InvalidPaymentError) as exc:
            logger.debug("Order rejected for %s: %s", customer, exc)
            return ServiceResult.from_exception(op, exc)

        window_days = self._shop.settings.cards.expiry_warning_days
        if window_days and card.expires_within(timedelta(days=window_days)):
            warnings.append(f"Card {card.masked_number} expires within {window_days} days")

        index = self._index_of(order)
        logger.debug("Placed order %d: %s", index, order)
        self._dispatch_event(
            "post_place_order",
            {
                "index": index,
                "customer": order.customer.full_name,
                "model": order.model.name,
                "card_number": card.number,
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"index": index, **order.to_dict()},
            warnings=warnings,
        )

    @traced
    def fulfil(self, index: int) -> ServiceResult:
        return self._transition("fulfil", index, OrderStatus.FULFILLED)

    @traced
    def cancel(self, index: int) -> ServiceResult:
        return self._transition("cancel", index, OrderStatus.CANCELLED)

    def _transition(self, op: str, index: int, target: OrderStatus) -> ServiceResult:
        warnings: list[str] = []
        orders = self._shop.ledger.all_orders()
        if not 0 <= index < len(orders):
            return ServiceResult.failure(op, "NOT_FOUND", f"No order at index {index}")

        order = orders[index]
        if target is OrderStatus.FULFILLED:
            changed = self._shop.ledger.fulfil(order)
        else:
            changed = self._shop.ledger.cancel(order)

        if changed:
            logger.debug("Order %d -> %s", index, order.status)
            self._dispatch_event(
                f"post_{op}",
                {
                    "index": index,
                    "customer": order.customer.full_name,
                    "model": order.model.name,
                },
                warnings,
            )
        else:
            warnings.append(f"Order {index} is already {order.status}; {op} ignored")

        return ServiceResult(
            ok=True,
            op=op,
            data={"index": index, "changed": changed, **order.to_dict()},
            warnings=warnings,
        )

    def _index_of(self, order: Order) -> int:
        for i, candidate in enumerate(self._shop.ledger.all_orders()):
            if candidate is order:
                return i
        msg = "Order is not in the ledger"
        raise LookupError(msg)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @traced
    def list_orders(self, *, status: str | None = None) -> ServiceResult:
        op = "list_orders"
        known = [s.value for s in OrderStatus]
        if status is not None and status not in known:
            return ServiceResult.failure(
                op,
                "VALIDATION_FAILED",
                f"Unknown status: {status!r}. Expected one of {known}",
            )
        items = [
            {"index": i, **order.to_dict()}
            for i, order in enumerate(self._shop.ledger.all_orders())
            if status is None or order.status == status
        ]
        return ServiceResult(ok=True, op=op, data={"items": items, "count": len(items)})

    @traced
    def stats(self) -> ServiceResult:
        """Ranked aggregates over fulfilled orders."""
        ledger = self._shop.ledger
        orders = ledger.all_orders()
        data = {
            "orders": len(orders),
            "fulfilled": sum(1 for o in orders if o.is_fulfilled),
            "largest_customer": _ranked_data(ledger.largest_customer()),
            "most_ordered_model": _ranked_data(ledger.most_ordered_model()),
            "most_ordered_part": _ranked_data(ledger.most_ordered_part()),
        }
        return ServiceResult(ok=True, op="stats", data=data)

    def reset(self) -> ServiceResult:
        self._shop.reset()
        return ServiceResult(ok=True, op="reset")
