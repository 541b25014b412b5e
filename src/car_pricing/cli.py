from __future__ import annotations

import argparse
import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ValidationError

from car_pricing.logging_config import configure_logging
from car_pricing.settings import DepreciationMode, get_settings
from car_pricing.valuation.pricer import PriceBreakdown, price_breakdown
from car_pricing.valuation.record import CarRecord, InvalidCarRecord

logger = logging.getLogger(__name__)


def _decimal_arg(raw: str) -> Decimal:
    try:
        return Decimal(raw)
    except InvalidOperation as e:
        raise argparse.ArgumentTypeError(f"not a decimal amount: {raw!r}") from e


def _breakdown_json(b: PriceBreakdown) -> dict[str, Any]:
    # Money stays a string so nothing passes through float.
    return {
        "purchase_value": str(b.purchase_value),
        "after_age": str(b.after_age),
        "after_mileage": str(b.after_mileage),
        "after_owners": str(b.after_owners),
        "after_collisions": str(b.after_collisions),
        "owner_bonus_pending": b.owner_bonus_pending,
        "after_owner_bonus": str(b.after_owner_bonus),
    }


def cmd_price(args: argparse.Namespace) -> int:
    try:
        car = CarRecord(
            age_in_months=args.age_months,
            number_of_miles=args.miles,
            number_of_previous_owners=args.previous_owners,
            number_of_collisions=args.collisions,
            purchase_value=args.purchase_value,
        )
    except InvalidCarRecord as e:
        logger.warning("Rejected car record: %s", e)
        raise SystemExit(f"invalid car record: {e}") from e

    mode = args.mode or get_settings().depreciation_mode
    b = price_breakdown(car, mode=mode)
    out: dict[str, Any] = {
        "inputs": {
            "age_in_months": car.age_in_months,
            "number_of_miles": car.number_of_miles,
            "number_of_previous_owners": car.number_of_previous_owners,
            "number_of_collisions": car.number_of_collisions,
            "purchase_value": str(car.purchase_value),
        },
        "mode": b.mode.value,
        "final_price": str(b.final_price),
    }
    if args.breakdown:
        out["breakdown"] = _breakdown_json(b)
    print(json.dumps(out, indent=2, sort_keys=True))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="car-pricer")
    sub = p.add_subparsers(dest="cmd", required=True)

    pr = sub.add_parser("price", help="Compute the resale value of a single used car.")
    pr.add_argument("--age-months", type=int, required=True)
    pr.add_argument("--miles", type=int, required=True)
    pr.add_argument("--previous-owners", type=int, required=True)
    pr.add_argument("--collisions", type=int, required=True)
    pr.add_argument("--purchase-value", type=_decimal_arg, required=True)
    pr.add_argument(
        "--mode",
        choices=[m.value for m in DepreciationMode],
        default=None,
        help="Depreciation mode; defaults to CAR_PRICING_DEPRECIATION_MODE.",
    )
    pr.add_argument("--breakdown", action="store_true", default=False, help="Include every intermediate value.")
    pr.set_defaults(func=cmd_price)

    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as e:
        raise SystemExit(f"invalid configuration: {e}") from e
    configure_logging(settings.log_level, settings.log_format)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
