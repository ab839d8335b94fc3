"""Dependency injection and shared helpers for FastAPI endpoints"""

from datetime import date
from typing import Optional

from fastapi import HTTPException, Query, Request
from sqlalchemy.orm import Session

from inala_ledger.config import settings
from inala_ledger.domain.exceptions import InvalidPeriodError
from inala_ledger.domain.ledger import CreditSummary, build_credit_summary
from inala_ledger.domain.models import BusinessPeriod, LedgerOptions
from inala_ledger.domain.periods import current_business_period, parse_period_key
from inala_ledger.infrastructure.clients.records import RecordsClient
from inala_ledger.infrastructure.database.repositories import PaymentRepository, SaleRepository


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_records_client() -> RecordsClient:
    """Provide remote records store client instance"""
    return RecordsClient()


def get_period(
    period: Optional[str] = Query(None, description="Business period YYYY-MM"),
) -> Optional[BusinessPeriod]:
    """Parse the optional ?period= query parameter (422 when malformed)"""
    if period is None:
        return None
    try:
        return parse_period_key(period)
    except InvalidPeriodError as e:
        raise HTTPException(status_code=422, detail=str(e))


def ledger_options(
    period: Optional[BusinessPeriod],
    all_periods: bool = False,
    today: Optional[date] = None,
) -> LedgerOptions:
    """Options for a ledger build; no explicit period means the current business period"""
    if period is None and not all_periods:
        period = current_business_period(today, settings.fiscal_start_day)
    return LedgerOptions(
        period_filter=None if all_periods else period,
        include_all_periods=all_periods,
        fiscal_start_day=settings.fiscal_start_day,
        surface_orphan_payments=settings.surface_orphan_payments,
    )


def load_credit_summary(db: Session, options: LedgerOptions) -> CreditSummary:
    """Build the credit summary from the full stored history"""
    sales = SaleRepository(db).list_sales()
    payments = PaymentRepository(db).list_payments()
    return build_credit_summary(sales, payments, options)
