from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any


class InvalidCarRecord(ValueError):
    pass


def _count(name: str, value: Any) -> int:
    # bool is an int subclass but never a meaningful count.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidCarRecord(f"{name} must be an integer; got {value!r}")
    if value < 0:
        raise InvalidCarRecord(f"{name} must be >= 0; got {value}")
    return value


def _money(name: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidCarRecord(f"{name} must be a decimal amount; got {value!r}")
    try:
        # str() keeps 35000.1 as 35000.1 instead of its binary expansion.
        d = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidCarRecord(f"{name} must be a decimal amount; got {value!r}") from e
    if not d.is_finite():
        raise InvalidCarRecord(f"{name} must be finite; got {value!r}")
    if d < 0:
        raise InvalidCarRecord(f"{name} must be >= 0; got {d}")
    return d


@dataclass(frozen=True)
class CarRecord:
    age_in_months: int
    number_of_miles: int
    number_of_previous_owners: int
    number_of_collisions: int
    purchase_value: Decimal

    def __post_init__(self) -> None:
        _count("age_in_months", self.age_in_months)
        _count("number_of_miles", self.number_of_miles)
        _count("number_of_previous_owners", self.number_of_previous_owners)
        _count("number_of_collisions", self.number_of_collisions)
        # Frozen: coerce through object.__setattr__.
        object.__setattr__(self, "purchase_value", _money("purchase_value", self.purchase_value))
