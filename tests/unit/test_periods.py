"""Unit tests for business period resolution"""

import pytest
from datetime import date, datetime
from inala_ledger.domain.exceptions import InvalidPeriodError
from inala_ledger.domain.models import BusinessPeriod, Payment
from inala_ledger.domain.periods import (
    current_business_period,
    parse_period_key,
    resolve_business_period,
    resolve_payment_period,
    shift_period,
)


def test_days_before_start_day_wrap_to_previous_year():
    """3 Jan still belongs to December of the previous year"""
    assert resolve_business_period(date(2025, 1, 3), 5) == BusinessPeriod(month=12, year=2024)


def test_start_day_opens_new_period():
    assert resolve_business_period(date(2025, 1, 5)) == BusinessPeriod(month=1, year=2025)
    assert resolve_business_period(date(2025, 1, 4)) == BusinessPeriod(month=12, year=2024)


def test_mid_year_rollback():
    assert resolve_business_period(date(2025, 3, 4)) == BusinessPeriod(month=2, year=2025)
    assert resolve_business_period(date(2025, 3, 31)) == BusinessPeriod(month=3, year=2025)


def test_start_day_one_is_calendar_month():
    assert resolve_business_period(date(2025, 1, 1), fiscal_start_day=1) == BusinessPeriod(month=1, year=2025)


def test_datetime_input():
    assert resolve_business_period(datetime(2025, 6, 2, 23, 59)) == BusinessPeriod(month=5, year=2025)


def test_payment_override_takes_precedence():
    """A February payment pinned to March counts towards March"""
    payment = Payment(
        customer_name="Amy",
        amount_cents=1000,
        date=date(2025, 2, 14),
        applies_to_period=BusinessPeriod(month=3, year=2025),
    )
    assert resolve_payment_period(payment) == BusinessPeriod(month=3, year=2025)


def test_payment_override_returned_verbatim():
    """Overrides are not range-checked"""
    override = BusinessPeriod(month=13, year=2025)
    payment = Payment(customer_name="Amy", amount_cents=1000, date=date(2025, 2, 14), applies_to_period=override)
    assert resolve_payment_period(payment) is override


def test_payment_incomplete_override_falls_back_to_date():
    payment = Payment(
        customer_name="Amy",
        amount_cents=1000,
        date=date(2025, 2, 3),
        applies_to_period=BusinessPeriod(month=0, year=2025),
    )
    assert resolve_payment_period(payment) == BusinessPeriod(month=1, year=2025)


def test_payment_without_date_or_override():
    payment = Payment(customer_name="Amy", amount_cents=1000)
    assert resolve_payment_period(payment) is None


def test_current_business_period():
    assert current_business_period(date(2025, 3, 4)) == BusinessPeriod(month=2, year=2025)
    assert current_business_period(date(2025, 3, 5)) == BusinessPeriod(month=3, year=2025)


def test_parse_period_key():
    assert parse_period_key("2025-03") == BusinessPeriod(month=3, year=2025)
    assert parse_period_key(" 2025-3 ") == BusinessPeriod(month=3, year=2025)


@pytest.mark.parametrize("key", ["2025-13", "2025-00", "March 2025", "", "25-03"])
def test_parse_period_key_rejects_invalid(key):
    with pytest.raises(InvalidPeriodError):
        parse_period_key(key)


def test_shift_period_across_years():
    january = BusinessPeriod(month=1, year=2025)
    assert shift_period(january, -1) == BusinessPeriod(month=12, year=2024)
    assert shift_period(january, 13) == BusinessPeriod(month=2, year=2026)
    assert shift_period(january, -25) == BusinessPeriod(month=12, year=2022)


def test_period_labels():
    period = BusinessPeriod(month=3, year=2025)
    assert period.key == "2025-03"
    assert period.display_name == "March 2025"
