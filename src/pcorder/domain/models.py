"""PC model variants.

Both variants expose the same read-only capability: ``kind``, ``name``,
``price`` and ``parts``. ``kind`` is the tag the ledger branches on.

- Preset models come from a manufacturer: fixed parts and fixed price.
- Custom models are assembled by the customer. The price is a running total
  adjusted explicitly on each add/remove and is never recomputed from parts.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from typing import ClassVar, Protocol, runtime_checkable

from pcorder.domain.customers import normalize_key
from pcorder.domain.errors import ValidationError


class ModelKind(StrEnum):
    """Tag distinguishing the two PC model variants."""

    PRESET = "preset"
    CUSTOM = "custom"


@runtime_checkable
class PCModel(Protocol):
    """Capability consumed by orders and the ledger."""

    @property
    def kind(self) -> ModelKind: ...

    @property
    def name(self) -> str: ...

    @property
    def price(self) -> float: ...

    @property
    def parts(self) -> tuple[str, ...]: ...


def _require_text(value: object, msg: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(msg)
    return value.strip()


class PresetPCModel:
    """A manufacturer-supplied model with a fixed parts list and price.

    Equality is by (name, manufacturer), case-insensitively; price and parts
    are ignored.
    """

    kind: ClassVar[ModelKind] = ModelKind.PRESET

    __slots__ = ("_manufacturer", "_name", "_parts", "_price")

    def __init__(self, name: str, manufacturer: str, parts: Iterable[str], price: float) -> None:
        self._name = _require_text(name, "Model name must not be empty")
        self._manufacturer = _require_text(manufacturer, "Manufacturer must not be empty")
        if parts is None:
            msg = "Parts list must not be empty"
            raise ValidationError(msg)
        if isinstance(parts, str):
            msg = "Parts must be a list of names, not a single string"
            raise ValidationError(msg)
        cleaned = tuple(_require_text(p, "Part names must not be empty") for p in parts)
        if not cleaned:
            msg = "Parts list must not be empty"
            raise ValidationError(msg)
        self._parts = cleaned
        self._price = float(price)

    @property
    def name(self) -> str:
        return self._name

    @property
    def manufacturer(self) -> str:
        return self._manufacturer

    @property
    def price(self) -> float:
        return self._price

    @property
    def parts(self) -> tuple[str, ...]:
        return self._parts

    @property
    def key(self) -> tuple[str, ...]:
        """Normalized (manufacturer, name) identity."""
        return normalize_key(self._manufacturer, self._name)

    @property
    def display_key(self) -> str:
        return f"{self._manufacturer} - {self._name}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PresetPCModel):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return (
            f"PresetPCModel(name={self._name!r}, manufacturer={self._manufacturer!r}, "
            f"price={self._price:.2f}, parts={list(self._parts)!r})"
        )


class CustomPCModel:
    """A customer-assembled model whose parts can change over time."""

    kind: ClassVar[ModelKind] = ModelKind.CUSTOM

    def __init__(self, name: str) -> None:
        self._name = _require_text(name, "Model name must not be empty")
        self._parts: list[str] = []
        self._price = 0.0

    @property
    def name(self) -> str:
        return self._name

    @property
    def price(self) -> float:
        return self._price

    @property
    def parts(self) -> tuple[str, ...]:
        """Snapshot of the current parts; later edits do not affect it."""
        return tuple(self._parts)

    def add_part(self, part: str, part_price: float) -> None:
        """Append *part* and add *part_price* to the running total."""
        self._parts.append(_require_text(part, "Part must not be empty"))
        self._price += part_price

    def remove_part(self, part: str, part_price: float) -> bool:
        """Remove the first occurrence of *part*.

        The price drops by *part_price* only when something was removed.
        """
        target = _require_text(part, "Part must not be empty")
        try:
            self._parts.remove(target)
        except ValueError:
            return False
        self._price -= part_price
        return True

    def set_parts(self, parts: Iterable[str]) -> None:
        """Replace the parts list. The price is left untouched."""
        if parts is None:
            msg = "Parts cannot be empty"
            raise ValidationError(msg)
        if isinstance(parts, str):
            msg = "Parts must be a list of names, not a single string"
            raise ValidationError(msg)
        cleaned = [_require_text(p, "Part names must not be empty") for p in parts]
        self._parts = cleaned

    def __repr__(self) -> str:
        return f"CustomPCModel(name={self._name!r}, price={self._price:.2f}, parts={self._parts!r})"

    def __str__(self) -> str:
        return f"Custom Model: {self._name}"
