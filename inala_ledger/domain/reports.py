"""Period reports built from sales, payments and expenses"""

from datetime import date
from typing import Dict, Iterable, List, Optional

from inala_ledger.domain.ledger import normalize_customer_key
from inala_ledger.domain.models import (
    CREDIT,
    BusinessPeriod,
    CollectedCustomer,
    CollectionReport,
    CollectorSummary,
    Expense,
    MonthComparisonRow,
    Payment,
    PeriodCollection,
    PeriodOverview,
    Sale,
)
from inala_ledger.domain.periods import (
    DEFAULT_FISCAL_START_DAY,
    resolve_business_period,
    resolve_payment_period,
    shift_period,
)

UNKNOWN_COLLECTOR = "Unknown"
CALENDAR_MONTH = 1


def _in_period(on: Optional[date], period: Optional[BusinessPeriod], fiscal_start_day: int) -> bool:
    if period is None:
        return True
    if on is None:
        return False
    return resolve_business_period(on, fiscal_start_day) == period


def build_collection_report(
    payments: Iterable[Payment],
    sales: Iterable[Sale],
    period: Optional[BusinessPeriod] = None,
    fiscal_start_day: int = DEFAULT_FISCAL_START_DAY,
) -> CollectionReport:
    """
    Payments received in a calendar month, grouped by collector then customer.

    The window is the calendar month the money came in. Each payment is then
    broken down by the business period it applies to, and the customer's
    credit purchases in that period are attached for reference.
    """
    received = [p for p in payments if _in_period(p.date, period, CALENDAR_MONTH)]
    credit_sales = [s for s in sales if s.payment_type == CREDIT]

    collectors: Dict[str, CollectorSummary] = {}
    total_collected = 0

    for payment in received:
        collector_name = payment.received_by or UNKNOWN_COLLECTOR
        collector = collectors.setdefault(collector_name, CollectorSummary(name=collector_name))
        collector.total_collected_cents += payment.amount_cents
        collector.payments_count += 1
        total_collected += payment.amount_cents

        customer = collector.customers.setdefault(
            payment.customer_name, CollectedCustomer(name=payment.customer_name)
        )
        customer.total_paid_cents += payment.amount_cents
        customer.payments.append(payment)

        applies_to = resolve_payment_period(payment, fiscal_start_day)
        if applies_to is None:
            continue

        breakdown = customer.periods.setdefault(applies_to.key, PeriodCollection(period=applies_to))
        breakdown.total_paid_cents += payment.amount_cents
        breakdown.payments.append(payment)

        customer_key = normalize_customer_key(payment.customer_name)
        for sale in credit_sales:
            if normalize_customer_key(sale.customer_name) != customer_key:
                continue
            if not _in_period(sale.date, applies_to, fiscal_start_day):
                continue
            if not any(sale is seen for seen in customer.purchases):
                customer.purchases.append(sale)

    ranked = sorted(collectors.values(), key=lambda c: c.total_collected_cents, reverse=True)
    return CollectionReport(
        period=period,
        total_collected_cents=total_collected,
        payments_count=len(received),
        collectors=ranked,
    )


def build_period_overview(
    sales: Iterable[Sale],
    expenses: Iterable[Expense],
    period: Optional[BusinessPeriod] = None,
    fiscal_start_day: int = DEFAULT_FISCAL_START_DAY,
) -> PeriodOverview:
    """Sales vs expenses for a period (all time when period is None)"""
    period_sales = [s for s in sales if _in_period(s.date, period, fiscal_start_day)]
    period_expenses = [e for e in expenses if _in_period(e.date, period, fiscal_start_day)]

    total_sales = sum(s.total_cents for s in period_sales)
    total_expenses = sum(e.amount_cents for e in period_expenses)

    return PeriodOverview(
        period=period,
        total_sales_cents=total_sales,
        total_expenses_cents=total_expenses,
        net_profit_cents=total_sales - total_expenses,
        transaction_count=len(period_sales) + len(period_expenses),
    )


def build_month_comparison(
    sales: Iterable[Sale],
    expenses: Iterable[Expense],
    end_period: BusinessPeriod,
    months: int = 6,
) -> List[MonthComparisonRow]:
    """Calendar-month sales, expenses and profit, oldest first, ending at end_period"""
    sales = list(sales)
    expenses = list(expenses)

    rows = []
    for offset in range(months - 1, -1, -1):
        period = shift_period(end_period, -offset)
        overview = build_period_overview(sales, expenses, period, CALENDAR_MONTH)
        rows.append(
            MonthComparisonRow(
                period=period,
                sales_cents=overview.total_sales_cents,
                expenses_cents=overview.total_expenses_cents,
                profit_cents=overview.net_profit_cents,
            )
        )
    return rows
