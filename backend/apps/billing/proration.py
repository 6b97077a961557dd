"""
Billing calendar arithmetic.

Pure functions - no database access - so plan-change pricing can be tested
for any date.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Proration:
    """Result of pricing a mid-month plan change.

    prorated_credit is unrounded. new_invoice_amount is in whole cents.
    """

    days_in_month: int
    days_remaining: int
    prorated_credit: Decimal
    new_invoice_amount: Decimal


def to_cents(value: Decimal) -> Decimal:
    """Round a money value to two decimals, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def days_in_month(day: date) -> int:
    """Number of calendar days in the month containing `day`."""
    return calendar.monthrange(day.year, day.month)[1]


def calculate_proration(current_price: Decimal, new_price: Decimal, today: date) -> Proration:
    """
    Price a switch from the current plan to a new plan on `today`.

    The unused share of the current plan's monthly price is credited linearly,
    counting today as unused:

        days_remaining  = days_in_month - today.day + 1
        prorated_credit = current_price / days_in_month * days_remaining
        new_amount      = new_price - prorated_credit

    The credit keeps full precision. Only the new amount is rounded to cents,
    half up, and it is not clamped, so it may be negative.
    """
    total_days = days_in_month(today)
    remaining = total_days - today.day + 1

    credit = Decimal(current_price) * remaining / total_days
    return Proration(
        days_in_month=total_days,
        days_remaining=remaining,
        prorated_credit=credit,
        new_invoice_amount=to_cents(Decimal(new_price) - credit),
    )


def add_one_month(moment: datetime) -> datetime:
    """
    Same day-of-month one month later.

    Days that do not exist in the next month are clamped to its last day
    (Jan 31 -> Feb 28/29).
    """
    year = moment.year + moment.month // 12
    month = moment.month % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)
