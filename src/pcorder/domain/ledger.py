"""OrderLedger: owns every order and answers ranked aggregate queries.

The ledger is append-only for new orders; individual orders only change
status in place. Aggregates count FULFILLED orders only and share one
ranking rule:

1. count, descending
2. display key, ascending and case-insensitive
3. display key as-is (keeps equal-ignoring-case keys deterministic)

All mutations and queries hold one re-entrant lock, so a query never sees
a half-appended order list.
"""

from __future__ import annotations

import threading
from collections import Counter
from collections.abc import Hashable, Iterator
from typing import TYPE_CHECKING, Generic, NamedTuple, TypeVar

from pcorder.domain.errors import InvalidPaymentError, ValidationError
from pcorder.domain.models import ModelKind
from pcorder.domain.orders import Order, OrderStatus

if TYPE_CHECKING:
    from pcorder.domain.cards import Card
    from pcorder.domain.customers import Customer
    from pcorder.domain.models import PCModel, PresetPCModel

K = TypeVar("K")


class Ranked(NamedTuple, Generic[K]):
    """Winner of an aggregate query: the key and its fulfilled count."""

    key: K
    count: int


def rank_top(counts: Counter[Hashable], labels: dict[Hashable, K]) -> Ranked[K] | None:
    """Pick the best entry of *counts* using the ledger ranking rule.

    *labels* maps each group to the value reported to the caller; its
    ``str()`` is the display key used for tie-breaking.
    """
    if not counts:
        return None

    def sort_key(group: Hashable) -> tuple[int, str, str]:
        display = str(labels[group])
        return (-counts[group], display.casefold(), display)

    best = min(counts, key=sort_key)
    return Ranked(labels[best], counts[best])


class OrderLedger:
    """The insertion-ordered collection of all orders placed in this run."""

    def __init__(self) -> None:
        self._orders: list[Order] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    def all_orders(self) -> tuple[Order, ...]:
        """Read-only snapshot of every order, in placement order."""
        with self._lock:
            return tuple(self._orders)

    def add_order(self, order: Order) -> None:
        """Append an existing order (tests and manual insertion)."""
        if order is None:
            msg = "Order cannot be empty"
            raise ValidationError(msg)
        with self._lock:
            self._orders.append(order)

    def clear_all(self) -> None:
        with self._lock:
            self._orders.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)

    def __iter__(self) -> Iterator[Order]:
        return iter(self.all_orders())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def place_order(self, customer: Customer, model: PCModel, card: Card) -> Order:
        """Create a PLACED order and append it.

        Payment is checked once, here; a card that expires later does not
        affect orders already placed.

        Raises:
            ValidationError: any argument is missing.
            InvalidPaymentError: the card is not valid right now.
        """
        if customer is None or model is None or card is None:
            msg = "Model, customer, and card must not be empty"
            raise ValidationError(msg)
        if not card.is_valid():
            msg = f"Credit card is not valid: {card.masked_number}"
            raise InvalidPaymentError(msg)

        with self._lock:
            order = Order(customer, model, card)
            self._orders.append(order)
            return order

    def cancel(self, order: Order | None) -> bool:
        """Cancel a placed order. Returns False if it was not placed."""
        return self._transition(order, OrderStatus.CANCELLED)

    def fulfil(self, order: Order | None) -> bool:
        """Fulfil a placed order. Returns False if it was not placed."""
        return self._transition(order, OrderStatus.FULFILLED)

    def _transition(self, order: Order | None, target: OrderStatus) -> bool:
        if order is None:
            return False
        with self._lock:
            if not order.is_placed:
                return False
            if target is OrderStatus.CANCELLED:
                order.cancel()
            else:
                order.fulfil()
            return True

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def _fulfilled(self) -> list[Order]:
        with self._lock:
            return [o for o in self._orders if o.is_fulfilled]

    def largest_customer(self) -> Ranked[Customer] | None:
        """Customer with the most fulfilled orders."""
        counts: Counter[Hashable] = Counter()
        labels: dict[Hashable, Customer] = {}
        for order in self._fulfilled():
            counts[order.customer] += 1
            labels.setdefault(order.customer, order.customer)
        return rank_top(counts, labels)

    def most_ordered_model(self) -> Ranked[str] | None:
        """Most fulfilled preset model, keyed ``"<manufacturer> - <name>"``.

        Custom models are not counted.
        """
        counts: Counter[Hashable] = Counter()
        labels: dict[Hashable, str] = {}
        for order in self._fulfilled():
            if order.model.kind != ModelKind.PRESET:
                continue
            preset: PresetPCModel = order.model  # type: ignore[assignment]
            counts[preset.key] += 1
            labels.setdefault(preset.key, preset.display_key)
        return rank_top(counts, labels)

    def most_ordered_part(self) -> Ranked[str] | None:
        """Most fulfilled part across custom models.

        A part listed twice in one order counts twice. Preset parts are not
        counted.
        """
        counts: Counter[Hashable] = Counter()
        for order in self._fulfilled():
            if order.model.kind != ModelKind.CUSTOM:
                continue
            counts.update(order.model.parts)
        return rank_top(counts, {part: part for part in counts})
