"""Customer value type.

Customers are compared by a normalized name key, so "maria KOLESNICHENKO"
and "Maria Kolesnichenko" are the same customer for grouping purposes.
"""

from __future__ import annotations

from dataclasses import dataclass

from pcorder.domain.errors import ValidationError


def normalize_key(*parts: str) -> tuple[str, ...]:
    """Lowercase and trim each part; used for equality, hashing and grouping."""
    return tuple(p.strip().lower() for p in parts)


def _require_name(value: object, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        msg = f"{label} must not be empty"
        raise ValidationError(msg)
    return value.strip()


@dataclass(frozen=True, eq=False)
class Customer:
    """An immutable first/last name pair."""

    first_name: str
    last_name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "first_name", _require_name(self.first_name, "First name"))
        object.__setattr__(self, "last_name", _require_name(self.last_name, "Last name"))

    @property
    def key(self) -> tuple[str, ...]:
        return normalize_key(self.first_name, self.last_name)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Customer):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.full_name
