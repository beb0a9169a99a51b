"""Payment cards and the card issuer.

A :class:`Card` is an immutable value whose validity is derived on every
call: the number format, the holder name, and an expiry still in the future.
A card that was valid when issued becomes invalid purely by time passing.

:class:`CardIssuer` is the registry of issued numbers.

INVARIANT: a number is issued at most once per issuer until ``reset()``.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta

from pcorder.domain.errors import DuplicateCardError, ValidationError

CARD_NUMBER_LENGTH = 8
CARD_NUMBER_PATTERN = re.compile(rf"[0-9]{{{CARD_NUMBER_LENGTH}}}")


def as_instant(value: datetime | date) -> datetime:
    """Normalize *value* to a timezone-aware instant.

    Naive datetimes are read as local time; a bare ``date`` means the start
    of that day in local time.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.astimezone()
    return datetime.combine(value, time.min).astimezone()


def is_card_number(number: object) -> bool:
    """Check whether *number* is a string of exactly eight ASCII digits."""
    return isinstance(number, str) and CARD_NUMBER_PATTERN.fullmatch(number) is not None


@dataclass(frozen=True)
class Card:
    """A credit card used to pay for orders.

    Two cards are equal when their numbers are equal.
    """

    number: str
    expiry: datetime = field(compare=False)
    holder_name: str = field(compare=False)

    def __post_init__(self) -> None:
        if not is_card_number(self.number):
            msg = f"Card number must be exactly {CARD_NUMBER_LENGTH} digits."
            raise ValidationError(msg)
        if not isinstance(self.expiry, date):
            msg = "Expiry date cannot be empty."
            raise ValidationError(msg)
        if not isinstance(self.holder_name, str) or not self.holder_name.strip():
            msg = "Card holder name cannot be empty."
            raise ValidationError(msg)
        object.__setattr__(self, "expiry", as_instant(self.expiry))
        object.__setattr__(self, "holder_name", self.holder_name.strip())

    @property
    def masked_number(self) -> str:
        return "*" * (len(self.number) - 4) + self.number[-4:]

    def is_valid(self, now: datetime | None = None) -> bool:
        """Check the card right now (or at *now*). Never cached."""
        current = datetime.now(UTC) if now is None else as_instant(now)
        return (
            is_card_number(self.number)
            and bool(self.holder_name.strip())
            and self.expiry > current
        )

    def expires_within(self, window: timedelta, now: datetime | None = None) -> bool:
        """Check whether the card expires within *window* of *now*."""
        current = datetime.now(UTC) if now is None else as_instant(now)
        return self.expiry - current <= window

    def __str__(self) -> str:
        return f"{self.number} - {self.holder_name} (exp: {self.expiry.isoformat()})"


class CardIssuer:
    """Issues cards and remembers every number it has handed out.

    Construct one per run (or per test) and pass it where it is needed.
    """

    def __init__(self) -> None:
        self._issued: set[str] = set()
        self._lock = threading.RLock()

    def issue(self, number: str, expiry: datetime | date, holder_name: str) -> Card:
        """Create a card with a number that has never been issued before.

        Raises:
            DuplicateCardError: *number* was already issued.
            ValidationError: the card fields are malformed.
        """
        with self._lock:
            if number in self._issued:
                msg = f"Card number already used: {number}"
                raise DuplicateCardError(msg)
            card = Card(number, expiry, holder_name)
            self._issued.add(card.number)
            return card

    def reset(self) -> None:
        """Forget every issued number."""
        with self._lock:
            self._issued.clear()

    def count(self) -> int:
        with self._lock:
            return len(self._issued)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, number: object) -> bool:
        with self._lock:
            return number in self._issued
