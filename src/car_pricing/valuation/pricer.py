from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import MAX_EMAX, MIN_EMIN, ROUND_DOWN, Decimal, getcontext, localcontext

from car_pricing.settings import DepreciationMode
from car_pricing.valuation.record import CarRecord

logger = logging.getLogger(__name__)

MAX_AGE_MONTHS = 12 * 10
MAX_KILO_MILES = 150
MAX_COLLISIONS = 5
MILES_PER_UNIT = 1000

AGE_RATE = Decimal("0.005")
MILES_RATE = Decimal("0.002")
COLLISION_RATE = Decimal("0.02")
OWNER_DEDUCTION = 1 - Decimal("0.25")
OWNER_ADDUCTION = 1 + Decimal("0.10")

CENT = Decimal("0.01")

# Digits beyond the purchase value's own that a full pipeline can add:
# three float factors of up to 17 digits plus the owner multipliers.
PRECISION_HEADROOM = 64


@dataclass(frozen=True)
class PriceBreakdown:
    purchase_value: Decimal
    after_age: Decimal
    after_mileage: Decimal
    after_owners: Decimal
    after_collisions: Decimal
    owner_bonus_pending: bool
    after_owner_bonus: Decimal
    final_price: Decimal
    mode: DepreciationMode


def _resolve_mode(mode: DepreciationMode | str | None) -> DepreciationMode:
    if mode is None:
        return DepreciationMode.LINEAR
    return DepreciationMode(mode)


def depreciation_factor(rate: Decimal, units: int, mode: DepreciationMode) -> Decimal:
    """
    Multiplier for `units` qualifying units at `rate` each.

    LINEAR:   1 - rate * units (exact Decimal)
    COMPOUND: (1 - rate) ** units, evaluated in float and converted back to
              Decimal through its shortest repr
    """
    if units < 0:
        raise ValueError("units must be >= 0")
    if mode is DepreciationMode.COMPOUND:
        return Decimal(repr((1.0 - float(rate)) ** units))
    return 1 - rate * units


def age_units(car: CarRecord) -> int:
    return min(car.age_in_months, MAX_AGE_MONTHS)


def mileage_units(car: CarRecord) -> int:
    # Remaining miles below a full thousand are not counted.
    return min(car.number_of_miles // MILES_PER_UNIT, MAX_KILO_MILES)


def collision_units(car: CarRecord) -> int:
    return min(car.number_of_collisions, MAX_COLLISIONS)


def adjust_for_age(value: Decimal, car: CarRecord, mode: DepreciationMode) -> Decimal:
    return value * depreciation_factor(AGE_RATE, age_units(car), mode)


def adjust_for_mileage(value: Decimal, car: CarRecord, mode: DepreciationMode) -> Decimal:
    return value * depreciation_factor(MILES_RATE, mileage_units(car), mode)


def adjust_for_owners(value: Decimal, car: CarRecord) -> tuple[Decimal, bool]:
    """
    Returns (value, bonus_pending).

    More than two previous owners is a deduction applied right away, before
    collisions. No previous owners is a bonus, deferred until after collisions.
    """
    owners = car.number_of_previous_owners
    if owners == 0:
        return value, True
    if owners <= 2:
        return value, False
    return value * OWNER_DEDUCTION, False


def adjust_for_collisions(value: Decimal, car: CarRecord, mode: DepreciationMode) -> Decimal:
    return value * depreciation_factor(COLLISION_RATE, collision_units(car), mode)


def apply_owner_bonus(value: Decimal, pending: bool) -> Decimal:
    return value * OWNER_ADDUCTION if pending else value


def _money_context(value: Decimal):
    """Decimal context wide enough to carry `value` through the pipeline without rounding."""
    ctx = getcontext().copy()
    ctx.prec = max(ctx.prec, len(value.as_tuple().digits) + abs(value.adjusted()) + PRECISION_HEADROOM)
    ctx.Emax = MAX_EMAX
    ctx.Emin = MIN_EMIN
    return localcontext(ctx)


def truncate_to_cents(value: Decimal) -> Decimal:
    with _money_context(value):
        return value.quantize(CENT, rounding=ROUND_DOWN)


def price_breakdown(car: CarRecord, *, mode: DepreciationMode | str | None = None) -> PriceBreakdown:
    """
    Runs the full pricing pipeline and keeps every intermediate value.

    Order: age -> mileage -> owner check -> collisions -> owner bonus -> truncate.
    """
    m = _resolve_mode(mode)

    with _money_context(car.purchase_value):
        after_age = adjust_for_age(car.purchase_value, car, m)
        after_mileage = adjust_for_mileage(after_age, car, m)
        after_owners, bonus_pending = adjust_for_owners(after_mileage, car)
        after_collisions = adjust_for_collisions(after_owners, car, m)
        after_bonus = apply_owner_bonus(after_collisions, bonus_pending)
        final = truncate_to_cents(after_bonus)

    logger.debug(
        "Priced car at %s (%s)",
        final,
        m.value,
        extra={
            "extra_data": {
                "purchase_value": str(car.purchase_value),
                "age_units": age_units(car),
                "mileage_units": mileage_units(car),
                "previous_owners": car.number_of_previous_owners,
                "collision_units": collision_units(car),
            }
        },
    )
    return PriceBreakdown(
        purchase_value=car.purchase_value,
        after_age=after_age,
        after_mileage=after_mileage,
        after_owners=after_owners,
        after_collisions=after_collisions,
        owner_bonus_pending=bonus_pending,
        after_owner_bonus=after_bonus,
        final_price=final,
        mode=m,
    )


def compute_price(car: CarRecord, *, mode: DepreciationMode | str | None = None) -> Decimal:
    return price_breakdown(car, mode=mode).final_price
