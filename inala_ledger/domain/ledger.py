"""Credit ledger aggregation - core business logic for creditor balances"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from inala_ledger.domain.models import (
    CREDIT,
    UNKNOWN_CUSTOMER,
    CustomerLedgerEntry,
    LedgerOptions,
    LedgerTotals,
    Payment,
    Sale,
)
from inala_ledger.domain.periods import resolve_business_period, resolve_payment_period

logger = logging.getLogger(__name__)

CreditSummary = Dict[str, CustomerLedgerEntry]

STATUS_ALL = "all"
STATUS_DEBT = "debt"
STATUS_PAID = "paid"


def normalize_customer_key(name: Optional[str]) -> str:
    """Ledger key for a customer: trimmed, lower-cased name"""
    return (name or UNKNOWN_CUSTOMER).strip().lower()


def _select_window(
    sales: Iterable[Sale],
    payments: Iterable[Payment],
    options: LedgerOptions,
) -> Tuple[List[Sale], List[Payment]]:
    """Credit sales and payments that fall inside the aggregation window"""
    credit_sales = [s for s in sales if s.payment_type == CREDIT]
    payments = list(payments)

    if not options.filters_by_period:
        return credit_sales, payments

    target = options.period_filter
    window_sales = [
        s for s in credit_sales
        if s.date is not None and resolve_business_period(s.date, options.fiscal_start_day) == target
    ]
    window_payments = [
        p for p in payments
        if resolve_payment_period(p, options.fiscal_start_day) == target
    ]
    return window_sales, window_payments


def build_credit_summary(
    sales: Iterable[Sale],
    payments: Iterable[Payment],
    options: LedgerOptions = LedgerOptions(),
) -> CreditSummary:
    """
    Aggregate credit sales and payments into per-customer ledger entries.

    Steps:
    1. Keep credit sales only
    2. Restrict sales and payments to options.period_filter (unless
       include_all_periods is set or no filter is given)
    3. Accumulate credit per customer key, tracking the latest purchase
    4. Accumulate payments into existing entries; payments for customers
       without credit in the window are orphans and are dropped unless
       options.surface_orphan_payments creates a zero-credit entry for them
    5. outstanding = max(0, credit - paid); overpayment is absorbed

    Returns every entry, settled or not, keyed by normalized customer name.
    Pure: a fresh dict is built on every call and nothing raises for
    malformed records (they arrive already coerced by record mapping).
    """
    window_sales, window_payments = _select_window(sales, payments, options)
    summary: CreditSummary = {}

    for sale in window_sales:
        key = normalize_customer_key(sale.customer_name)
        entry = summary.get(key)
        if entry is None:
            entry = CustomerLedgerEntry(name=sale.customer_name or UNKNOWN_CUSTOMER)
            summary[key] = entry

        entry.total_credit_cents += sale.total_cents
        entry.transactions.append(sale)

        # Strictly later wins; equal dates keep the first seen
        if sale.date is not None and (entry.last_purchase is None or sale.date > entry.last_purchase):
            entry.last_purchase = sale.date

    orphans = 0
    for payment in window_payments:
        key = normalize_customer_key(payment.customer_name)
        entry = summary.get(key)
        if entry is None:
            if not options.surface_orphan_payments:
                orphans += 1
                continue
            entry = CustomerLedgerEntry(name=payment.customer_name or UNKNOWN_CUSTOMER)
            summary[key] = entry

        entry.total_paid_cents += payment.amount_cents
        entry.payments.append(payment)

    for entry in summary.values():
        entry.outstanding_cents = max(0, entry.total_credit_cents - entry.total_paid_cents)

    if orphans:
        logger.info("Dropped payments with no credit in window", extra={"orphan_payments": orphans})

    return summary


def find_orphan_payments(
    summary: CreditSummary,
    payments: Iterable[Payment],
    options: LedgerOptions = LedgerOptions(),
) -> List[Payment]:
    """Payments inside the window whose customer has no entry in the summary"""
    _, window_payments = _select_window([], payments, options)
    return [p for p in window_payments if normalize_customer_key(p.customer_name) not in summary]


def customers_with_debt(summary: CreditSummary) -> CreditSummary:
    """Entries that still owe money"""
    return {key: entry for key, entry in summary.items() if entry.outstanding_cents > 0}


def summarize_ledger(summary: CreditSummary) -> LedgerTotals:
    """Scalar rollups: clients, debtors, outstanding (debtors only), paid (everyone)"""
    debtors = customers_with_debt(summary)
    return LedgerTotals(
        total_clients=len(summary),
        clients_with_debt=len(debtors),
        total_outstanding_cents=sum(e.outstanding_cents for e in debtors.values()),
        total_paid_cents=sum(e.total_paid_cents for e in summary.values()),
    )


def filter_entries(
    summary: CreditSummary,
    search: Optional[str] = None,
    status: str = STATUS_ALL,
) -> CreditSummary:
    """Creditor list filters: name substring search and debt/paid status"""
    term = (search or "").strip().lower()
    result: CreditSummary = {}
    for key, entry in summary.items():
        if term and term not in entry.name.lower():
            continue
        if status == STATUS_DEBT and entry.outstanding_cents <= 0:
            continue
        if status == STATUS_PAID and entry.outstanding_cents > 0:
            continue
        result[key] = entry
    return result
