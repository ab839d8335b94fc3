"""GET /v1/creditors - Credit ledger per customer for a business period"""

import time
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from inala_ledger.api.dependencies import get_period, get_request_id, ledger_options, load_credit_summary
from inala_ledger.api.v1.schemas import (
    CreditorsResponse,
    LedgerEntryDetail,
    LedgerTotalsSchema,
    ledger_entry_schema,
    payment_schema,
    period_schema,
    sale_schema,
)
from inala_ledger.domain.ledger import (
    build_credit_summary,
    filter_entries,
    find_orphan_payments,
    normalize_customer_key,
    summarize_ledger,
)
from inala_ledger.domain.models import BusinessPeriod
from inala_ledger.infrastructure.database.repositories import PaymentRepository, SaleRepository
from inala_ledger.infrastructure.database.session import get_db
from inala_ledger.infrastructure.observability.logging import log_ledger_built
from inala_ledger.infrastructure.observability.metrics import record_ledger_build

router = APIRouter()


@router.get("/creditors", response_model=CreditorsResponse)
def list_creditors(
    request: Request,
    period: Optional[BusinessPeriod] = Depends(get_period),
    all_periods: bool = Query(False, description="Aggregate the full history instead of one period"),
    search: Optional[str] = Query(None, description="Case-insensitive customer name filter"),
    status: Literal["all", "debt", "paid"] = Query("debt", description="Which customers to list"),
    db: Session = Depends(get_db),
):
    """
    Credit summary for a business period (default: the current one).

    Totals always cover every customer in the window; search and status only
    narrow the listed customers. Customers are ordered by outstanding balance,
    largest first.
    """
    start_time = time.time()
    options = ledger_options(period, all_periods)

    payments = PaymentRepository(db).list_payments()
    summary = build_credit_summary(SaleRepository(db).list_sales(), payments, options)
    orphans = len(find_orphan_payments(summary, payments, options))
    totals = summarize_ledger(summary)

    listed = filter_entries(summary, search=search, status=status)
    ordered = sorted(listed.items(), key=lambda item: (-item[1].outstanding_cents, item[1].name.lower()))

    duration_ms = (time.time() - start_time) * 1000
    record_ledger_build(options.include_all_periods, totals, orphans)
    log_ledger_built(
        get_request_id(request),
        options.period_filter.key if options.period_filter else None,
        totals.total_clients,
        totals.clients_with_debt,
        totals.total_outstanding_cents,
        orphans,
        duration_ms,
    )

    return CreditorsResponse(
        period=period_schema(options.period_filter),
        all_periods=options.include_all_periods,
        status=status,
        totals=LedgerTotalsSchema(
            total_clients=totals.total_clients,
            clients_with_debt=totals.clients_with_debt,
            total_outstanding_cents=totals.total_outstanding_cents,
            total_paid_cents=totals.total_paid_cents,
        ),
        customers=[ledger_entry_schema(key, entry) for key, entry in ordered],
    )


@router.get("/creditors/{customer_name}", response_model=LedgerEntryDetail)
def get_creditor(
    customer_name: str,
    period: Optional[BusinessPeriod] = Depends(get_period),
    all_periods: bool = Query(False),
    db: Session = Depends(get_db),
):
    """
    Single customer's ledger entry with its sales and payments.

    The name is matched on the ledger key, so any spelling differing only in
    case or surrounding whitespace finds the same entry.
    """
    options = ledger_options(period, all_periods)
    summary = load_credit_summary(db, options)

    key = normalize_customer_key(customer_name)
    entry = summary.get(key)
    if entry is None:
        raise HTTPException(status_code=404, detail="No credit activity for customer in period")

    base = ledger_entry_schema(key, entry)
    return LedgerEntryDetail(
        **base.model_dump(),
        period=period_schema(options.period_filter),
        transactions=[sale_schema(s) for s in entry.transactions],
        payments=[payment_schema(p) for p in entry.payments],
    )
