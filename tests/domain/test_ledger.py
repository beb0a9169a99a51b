"""Tests for OrderLedger placement, transitions and ranked aggregates."""

from __future__ import annotations

import threading
import time
from collections import Counter
from datetime import UTC, datetime, timedelta

import pytest

from pcorder.domain.cards import Card, CardIssuer
from pcorder.domain.customers import Customer
from pcorder.domain.errors import InvalidPaymentError, ValidationError
from pcorder.domain.ledger import OrderLedger, Ranked, rank_top
from pcorder.domain.models import PresetPCModel
from pcorder.domain.orders import Order, OrderStatus
from tests.conftest import custom_model


def _place_fulfilled(ledger: OrderLedger, customer: Customer, model, card: Card) -> Order:
    order = ledger.place_order(customer, model, card)
    assert ledger.fulfil(order)
    return order


class TestRankTop:
    def test_empty(self) -> None:
        assert rank_top(Counter(), {}) is None

    def test_highest_count_wins(self) -> None:
        counts = Counter({"a": 1, "b": 3})
        assert rank_top(counts, {"a": "a", "b": "b"}) == Ranked("b", 3)

    def test_tie_breaks_case_insensitively(self) -> None:
        counts = Counter({"b": 2, "A": 2, "c": 2})
        assert rank_top(counts, {k: k for k in counts}) == Ranked("A", 2)

    def test_case_only_tie_is_deterministic(self) -> None:
        counts = Counter({"ram": 1, "RAM": 1})
        assert rank_top(counts, {k: k for k in counts}).key == "RAM"


class TestPlacement:
    def test_place_appends_placed_order(
        self, ledger: OrderLedger, nick: Customer, dell: PresetPCModel, nick_card: Card
    ) -> None:
        order = ledger.place_order(nick, dell, nick_card)
        assert order.status is OrderStatus.PLACED
        assert ledger.all_orders() == (order,)
        assert len(ledger) == 1
        assert list(ledger) == [order]

    def test_expired_card_never_appends(
        self,
        ledger: OrderLedger,
        issuer: CardIssuer,
        nick: Customer,
        dell: PresetPCModel,
        past_expiry: datetime,
    ) -> None:
        card = issuer.issue("99990000", past_expiry, "Nick Davis")
        with pytest.raises(InvalidPaymentError, match=r"\*\*\*\*0000"):
            ledger.place_order(nick, dell, card)
        assert len(ledger) == 0

    @pytest.mark.parametrize("missing", [0, 1, 2])
    def test_missing_argument(
        self,
        missing: int,
        ledger: OrderLedger,
        nick: Customer,
        dell: PresetPCModel,
        nick_card: Card,
    ) -> None:
        args: list[object] = [nick, dell, nick_card]
        args[missing] = None
        with pytest.raises(ValidationError):
            ledger.place_order(*args)  # type: ignore[arg-type]
        assert len(ledger) == 0

    def test_add_order_rejects_none(self, ledger: OrderLedger) -> None:
        with pytest.raises(ValidationError):
            ledger.add_order(None)  # type: ignore[arg-type]

    def test_add_order_appends_in_insertion_order(
        self, ledger: OrderLedger, nick: Customer, maria: Customer, nick_card: Card
    ) -> None:
        placed = ledger.place_order(maria, custom_model("GamerTwo", ("1TB SSD", 150.0)), nick_card)
        added = Order(nick, custom_model("GamerOne", ("32GB RAM", 250.0)), nick_card)
        added.fulfil()
        ledger.add_order(added)

        assert ledger.all_orders() == (placed, added)
        assert ledger.largest_customer() == Ranked(nick, 1)
        assert ledger.most_ordered_part() == Ranked("32GB RAM", 1)

    def test_card_expiring_after_placement_keeps_order(
        self, ledger: OrderLedger, issuer: CardIssuer, nick: Customer, dell: PresetPCModel
    ) -> None:
        card = issuer.issue("55556666", datetime.now(UTC) + timedelta(milliseconds=200), "Nick Davis")
        order = ledger.place_order(nick, dell, card)

        deadline = time.monotonic() + 5
        while card.is_valid() and time.monotonic() < deadline:
            time.sleep(0.05)
        assert not card.is_valid()

        assert ledger.fulfil(order)
        assert ledger.largest_customer() == Ranked(nick, 1)

    def test_snapshot_is_detached(
        self, ledger: OrderLedger, nick: Customer, dell: PresetPCModel, nick_card: Card
    ) -> None:
        snapshot = ledger.all_orders()
        ledger.place_order(nick, dell, nick_card)
        assert snapshot == ()

    def test_concurrent_placement(
        self, ledger: OrderLedger, nick: Customer, dell: PresetPCModel, nick_card: Card
    ) -> None:
        def place() -> None:
            for _ in range(50):
                ledger.place_order(nick, dell, nick_card)

        threads = [threading.Thread(target=place) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(ledger) == 200


class TestTransitions:
    def test_fulfil_once(
        self, ledger: OrderLedger, nick: Customer, dell: PresetPCModel, nick_card: Card
    ) -> None:
        order = ledger.place_order(nick, dell, nick_card)
        assert ledger.fulfil(order)
        assert not ledger.fulfil(order)
        assert not ledger.cancel(order)
        assert order.status is OrderStatus.FULFILLED

    def test_cancel_once(
        self, ledger: OrderLedger, nick: Customer, dell: PresetPCModel, nick_card: Card
    ) -> None:
        order = ledger.place_order(nick, dell, nick_card)
        assert ledger.cancel(order)
        assert not ledger.fulfil(order)
        assert order.status is OrderStatus.CANCELLED

    def test_none_is_refused(self, ledger: OrderLedger) -> None:
        assert not ledger.fulfil(None)
        assert not ledger.cancel(None)


class TestAggregates:
    def test_empty_ledger_has_no_results(self, ledger: OrderLedger) -> None:
        assert ledger.largest_customer() is None
        assert ledger.most_ordered_model() is None
        assert ledger.most_ordered_part() is None

    def test_unfulfilled_orders_are_ignored(
        self, ledger: OrderLedger, nick: Customer, dell: PresetPCModel, nick_card: Card
    ) -> None:
        ledger.place_order(nick, dell, nick_card)
        ledger.cancel(ledger.place_order(nick, dell, nick_card))
        assert ledger.largest_customer() is None
        assert ledger.most_ordered_model() is None

    def test_preset_scenario(
        self,
        ledger: OrderLedger,
        nick: Customer,
        maria: Customer,
        dell: PresetPCModel,
        nick_card: Card,
    ) -> None:
        _place_fulfilled(ledger, maria, dell, nick_card)
        _place_fulfilled(ledger, maria, dell, nick_card)
        _place_fulfilled(ledger, nick, dell, nick_card)

        largest = ledger.largest_customer()
        assert largest is not None
        assert largest.key == Customer("Maria", "Kolesnichenko")
        assert largest.count == 2
        assert ledger.most_ordered_model() == Ranked("Dell - ProStation X1", 3)

    def test_custom_part_scenario(self, ledger: OrderLedger, nick: Customer, nick_card: Card) -> None:
        one = custom_model("GamerOne", ("32GB RAM", 250.0), ("RTX 4070 GPU", 850.0))
        two = custom_model("GamerTwo", ("32GB RAM", 250.0), ("1TB SSD", 150.0))
        _place_fulfilled(ledger, nick, one, nick_card)
        _place_fulfilled(ledger, nick, two, nick_card)

        assert ledger.most_ordered_part() == Ranked("32GB RAM", 2)
        assert ledger.most_ordered_model() is None

    def test_clear_all_resets_results(
        self, ledger: OrderLedger, nick: Customer, dell: PresetPCModel, nick_card: Card
    ) -> None:
        _place_fulfilled(ledger, nick, dell, nick_card)
        assert ledger.largest_customer() is not None
        ledger.clear_all()
        assert len(ledger) == 0
        assert ledger.largest_customer() is None
        assert ledger.most_ordered_model() is None
        assert ledger.most_ordered_part() is None

    def test_customers_grouped_case_insensitively(
        self, ledger: OrderLedger, dell: PresetPCModel, nick_card: Card
    ) -> None:
        _place_fulfilled(ledger, Customer("Nick", "Davis"), dell, nick_card)
        _place_fulfilled(ledger, Customer("NICK", "davis"), dell, nick_card)
        _place_fulfilled(ledger, Customer("Maria", "Kolesnichenko"), dell, nick_card)

        largest = ledger.largest_customer()
        assert largest is not None
        assert largest.count == 2
        assert largest.key.full_name == "Nick Davis"

    def test_customer_tie_break_alphabetical(
        self, ledger: OrderLedger, dell: PresetPCModel, nick_card: Card
    ) -> None:
        _place_fulfilled(ledger, Customer("Zoe", "Adams"), dell, nick_card)
        _place_fulfilled(ledger, Customer("adam", "Zimmer"), dell, nick_card)

        largest = ledger.largest_customer()
        assert largest is not None
        assert largest.key.full_name == "adam Zimmer"

    def test_model_tie_break_and_case_grouping(
        self,
        ledger: OrderLedger,
        nick: Customer,
        dell: PresetPCModel,
        asus: PresetPCModel,
        nick_card: Card,
    ) -> None:
        _place_fulfilled(ledger, nick, dell, nick_card)
        _place_fulfilled(ledger, nick, asus, nick_card)
        assert ledger.most_ordered_model() == Ranked("ASUS - ROG Strix Tower", 1)

        shouting = PresetPCModel("PROSTATION X1", "DELL", ["CPU"], 1.0)
        _place_fulfilled(ledger, nick, shouting, nick_card)
        assert ledger.most_ordered_model() == Ranked("Dell - ProStation X1", 2)

    def test_preset_parts_not_counted(
        self, ledger: OrderLedger, nick: Customer, dell: PresetPCModel, nick_card: Card
    ) -> None:
        _place_fulfilled(ledger, nick, dell, nick_card)
        assert ledger.most_ordered_part() is None

    def test_repeated_part_counts_twice(
        self, ledger: OrderLedger, nick: Customer, nick_card: Card
    ) -> None:
        twins = custom_model("Twins", ("16GB RAM", 100.0), ("16GB RAM", 100.0), ("1TB SSD", 150.0))
        _place_fulfilled(ledger, nick, twins, nick_card)
        assert ledger.most_ordered_part() == Ranked("16GB RAM", 2)

    def test_part_snapshot_taken_at_query_time(
        self, ledger: OrderLedger, nick: Customer, nick_card: Card
    ) -> None:
        build = custom_model("Live", ("1TB SSD", 150.0))
        _place_fulfilled(ledger, nick, build, nick_card)
        build.set_parts(["32GB RAM"])
        assert ledger.most_ordered_part() == Ranked("32GB RAM", 1)
