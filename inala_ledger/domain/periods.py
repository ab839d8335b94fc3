"""Business period resolution (fiscal months starting on a configurable day)"""

import re
from datetime import date
from typing import Optional

from inala_ledger.domain.exceptions import InvalidPeriodError
from inala_ledger.domain.models import BusinessPeriod, Payment
from inala_ledger.utils.date_utils import add_months

DEFAULT_FISCAL_START_DAY = 5

_PERIOD_KEY = re.compile(r"^(\d{4})-(\d{1,2})$")


def resolve_business_period(on: date, fiscal_start_day: int = DEFAULT_FISCAL_START_DAY) -> BusinessPeriod:
    """
    Map a calendar date to the business period it belongs to.

    Days before fiscal_start_day still belong to the previous month's period,
    so with the default of 5, 3 Jan 2025 is in December 2024 and 5 Jan 2025
    opens January 2025. A fiscal_start_day of 1 gives plain calendar months.

    The date must be valid; callers drop unparseable dates before calling.
    """
    year, month = on.year, on.month
    if on.day < fiscal_start_day:
        year, month = add_months(year, month, -1)
    return BusinessPeriod(month=month, year=year)


def resolve_payment_period(
    payment: Payment,
    fiscal_start_day: int = DEFAULT_FISCAL_START_DAY,
) -> Optional[BusinessPeriod]:
    """
    Period a payment counts towards.

    An explicit applies_to_period (both fields truthy) wins and is returned
    as-is, without range checks. Otherwise the payment date decides; a payment
    with neither resolves to None.
    """
    override = payment.applies_to_period
    if override is not None and override.month and override.year:
        return override
    if payment.date is None:
        return None
    return resolve_business_period(payment.date, fiscal_start_day)


def current_business_period(
    today: Optional[date] = None,
    fiscal_start_day: int = DEFAULT_FISCAL_START_DAY,
) -> BusinessPeriod:
    """Business period that today falls into"""
    return resolve_business_period(today or date.today(), fiscal_start_day)


def parse_period_key(key: str) -> BusinessPeriod:
    """
    Parse a "YYYY-MM" period key.

    Raises:
        InvalidPeriodError: key is malformed or the month is outside 1..12
    """
    match = _PERIOD_KEY.match((key or "").strip())
    if not match:
        raise InvalidPeriodError(f"Invalid period '{key}', expected YYYY-MM")

    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Invalid month {month} in period '{key}'")
    return BusinessPeriod(month=month, year=year)


def shift_period(period: BusinessPeriod, months: int) -> BusinessPeriod:
    """Period the given number of months before (negative) or after (positive)"""
    year, month = add_months(period.year, period.month, months)
    return BusinessPeriod(month=month, year=year)
