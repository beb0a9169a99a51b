"""Order entity and its three-state lifecycle.

    placed ──► fulfilled
       │
       └─────► cancelled

Both targets are terminal. Transition requests outside ``placed`` are
silent no-ops on the order itself; the ledger reports them as ``False``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pcorder.domain.errors import ValidationError

if TYPE_CHECKING:
    from pcorder.domain.cards import Card
    from pcorder.domain.customers import Customer
    from pcorder.domain.models import PCModel


class OrderStatus(StrEnum):
    """Lifecycle status of an order."""

    PLACED = "placed"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"


ORDER_TRANSITIONS: dict[str, list[str]] = {
    "placed": ["fulfilled", "cancelled"],
    "fulfilled": [],
    "cancelled": [],
}


def is_valid_transition(current: str, target: str) -> bool:
    """Check if moving an order from *current* to *target* is allowed."""
    return target in ORDER_TRANSITIONS.get(current, [])


class Order:
    """A single purchase of one PC model by one customer.

    Equality is over (customer, model, date placed).
    """

    def __init__(self, customer: Customer, model: PCModel, card: Card) -> None:
        if customer is None or model is None or card is None:
            msg = "Customer, model, and card cannot be empty"
            raise ValidationError(msg)
        self._customer = customer
        self._model = model
        self._card = card
        self._date_placed = datetime.now(UTC)
        self._status = OrderStatus.PLACED

    @property
    def customer(self) -> Customer:
        return self._customer

    @property
    def model(self) -> PCModel:
        return self._model

    @property
    def card(self) -> Card:
        return self._card

    @property
    def date_placed(self) -> datetime:
        return self._date_placed

    @property
    def status(self) -> OrderStatus:
        return self._status

    @property
    def is_placed(self) -> bool:
        return self._status is OrderStatus.PLACED

    @property
    def is_fulfilled(self) -> bool:
        return self._status is OrderStatus.FULFILLED

    @property
    def is_cancelled(self) -> bool:
        return self._status is OrderStatus.CANCELLED

    def _move_to(self, target: OrderStatus) -> None:
        if is_valid_transition(self._status, target):
            self._status = target

    def cancel(self) -> None:
        """Cancel the order if it is still placed."""
        self._move_to(OrderStatus.CANCELLED)

    def fulfil(self) -> None:
        """Mark the order fulfilled if it is still placed."""
        self._move_to(OrderStatus.FULFILLED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "customer": self._customer.full_name,
            "model": self._model.name,
            "kind": str(self._model.kind),
            "price": self._model.price,
            "card": self._card.masked_number,
            "status": str(self._status),
            "date_placed": self._date_placed.isoformat(),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Order):
            return NotImplemented
        return (
            self._customer == other._customer
            and self._model == other._model
            and self._date_placed == other._date_placed
        )

    def __hash__(self) -> int:
        return hash((self._customer, self._model, self._date_placed))

    def __repr__(self) -> str:
        return (
            f"Order[customer={self._customer}, model={self._model.name}, "
            f"status={self._status.name}, date={self._date_placed.isoformat()}]"
        )

    __str__ = __repr__
