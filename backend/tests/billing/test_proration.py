"""
Tests for billing calendar arithmetic.
"""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from apps.billing.proration import add_one_month, calculate_proration, days_in_month, to_cents


class TestDaysInMonth:
    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            (date(2024, 1, 15), 31),
            (date(2024, 2, 1), 29),
            (date(2023, 2, 1), 28),
            (date(2024, 4, 30), 30),
        ],
    )
    def test_counts_calendar_days(self, day: date, expected: int) -> None:
        assert days_in_month(day) == expected


class TestCalculateProration:
    """Tests for calculate_proration."""

    def test_mid_month_upgrade_in_thirty_day_month(self) -> None:
        """$30 -> $60 on day 16 of a 30-day month credits $15 and bills $45."""
        result = calculate_proration(Decimal("30.00"), Decimal("60.00"), date(2024, 4, 16))

        assert result.days_in_month == 30
        assert result.days_remaining == 15
        assert result.prorated_credit == Decimal("15.00")
        assert result.new_invoice_amount == Decimal("45.00")

    def test_first_day_credits_full_price(self) -> None:
        result = calculate_proration(Decimal("30.00"), Decimal("60.00"), date(2024, 4, 1))

        assert result.days_remaining == 30
        assert result.prorated_credit == Decimal("30.00")
        assert result.new_invoice_amount == Decimal("30.00")

    def test_last_day_counts_today_as_unused(self) -> None:
        result = calculate_proration(Decimal("31.00"), Decimal("10.00"), date(2024, 1, 31))

        assert result.days_remaining == 1
        assert result.prorated_credit == Decimal("1.00")
        assert result.new_invoice_amount == Decimal("9.00")

    def test_downgrade_can_go_negative(self) -> None:
        """The new amount is not clamped at zero."""
        result = calculate_proration(Decimal("100.00"), Decimal("10.00"), date(2024, 4, 1))

        assert result.prorated_credit == Decimal("100.00")
        assert result.new_invoice_amount == Decimal("-90.00")

    def test_credit_keeps_full_precision(self) -> None:
        result = calculate_proration(Decimal("10.00"), Decimal("20.00"), date(2024, 1, 17))

        assert result.days_remaining == 15
        assert result.prorated_credit == Decimal("10.00") * 15 / 31
        assert result.new_invoice_amount == Decimal("15.16")

    def test_non_terminating_credit_in_short_february(self) -> None:
        result = calculate_proration(Decimal("10"), Decimal("20"), date(2023, 2, 2))

        assert result.days_remaining == 27
        assert result.prorated_credit == Decimal(10) * 27 / 28
        assert result.prorated_credit != to_cents(result.prorated_credit)
        assert result.new_invoice_amount == Decimal("10.36")

    def test_new_amount_rounds_after_subtracting_credit(self) -> None:
        """A half-cent credit is not rounded before it is subtracted."""
        # 10.05 * 15 / 30 = 5.025
        result = calculate_proration(Decimal("10.05"), Decimal("20.00"), date(2024, 4, 16))

        assert result.prorated_credit == Decimal("5.025")
        assert result.new_invoice_amount == Decimal("14.98")

    def test_leap_february(self) -> None:
        result = calculate_proration(Decimal("29.00"), Decimal("58.00"), date(2024, 2, 15))

        assert result.days_in_month == 29
        assert result.days_remaining == 15
        assert result.prorated_credit == Decimal("15.00")


class TestToCents:
    def test_rounds_half_up(self) -> None:
        assert to_cents(Decimal("1.005")) == Decimal("1.01")
        assert to_cents(Decimal("1.004")) == Decimal("1.00")


class TestAddOneMonth:
    """Tests for add_one_month."""

    def test_same_day_next_month(self) -> None:
        moment = datetime(2024, 3, 10, 9, 30, tzinfo=UTC)

        assert add_one_month(moment) == datetime(2024, 4, 10, 9, 30, tzinfo=UTC)

    def test_december_rolls_into_next_year(self) -> None:
        moment = datetime(2024, 12, 5, tzinfo=UTC)

        assert add_one_month(moment) == datetime(2025, 1, 5, tzinfo=UTC)

    def test_clamps_to_end_of_shorter_month(self) -> None:
        assert add_one_month(datetime(2024, 1, 31, tzinfo=UTC)) == datetime(2024, 2, 29, tzinfo=UTC)
        assert add_one_month(datetime(2023, 1, 31, tzinfo=UTC)) == datetime(2023, 2, 28, tzinfo=UTC)
        assert add_one_month(datetime(2024, 3, 31, tzinfo=UTC)) == datetime(2024, 4, 30, tzinfo=UTC)
