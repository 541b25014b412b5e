from __future__ import annotations

import dataclasses
from decimal import Decimal

import pytest

from car_pricing.valuation.record import CarRecord, InvalidCarRecord


def _kwargs(**overrides):
    kw = dict(
        age_in_months=36,
        number_of_miles=50_000,
        number_of_previous_owners=1,
        number_of_collisions=1,
        purchase_value=Decimal("35000"),
    )
    kw.update(overrides)
    return kw


def test_purchase_value_is_coerced_to_decimal():
    assert CarRecord(**_kwargs(purchase_value=35000)).purchase_value == Decimal("35000")
    assert CarRecord(**_kwargs(purchase_value="35000.50")).purchase_value == Decimal("35000.50")
    # Floats go through str(), not the binary expansion.
    assert CarRecord(**_kwargs(purchase_value=35000.1)).purchase_value == Decimal("35000.1")


@pytest.mark.parametrize(
    "field",
    ["age_in_months", "number_of_miles", "number_of_previous_owners", "number_of_collisions"],
)
def test_negative_counts_rejected(field):
    with pytest.raises(InvalidCarRecord, match=field):
        CarRecord(**_kwargs(**{field: -1}))


@pytest.mark.parametrize("bad", [1.5, "3", True, None])
def test_non_integer_counts_rejected(bad):
    with pytest.raises(InvalidCarRecord):
        CarRecord(**_kwargs(number_of_collisions=bad))


@pytest.mark.parametrize("bad", ["-0.01", "abc", "NaN", float("inf"), None, False])
def test_bad_purchase_value_rejected(bad):
    with pytest.raises(InvalidCarRecord, match="purchase_value"):
        CarRecord(**_kwargs(purchase_value=bad))


def test_invalid_record_is_a_value_error():
    with pytest.raises(ValueError):
        CarRecord(**_kwargs(number_of_miles=-5))


def test_record_is_immutable():
    car = CarRecord(**_kwargs())
    with pytest.raises(dataclasses.FrozenInstanceError):
        car.purchase_value = Decimal("1")  # type: ignore[misc]
