"""GET /v1/reports/* - Collection, overview and month comparison reports"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from inala_ledger.api.dependencies import get_period
from inala_ledger.api.v1.schemas import (
    CollectedCustomerSchema,
    CollectionReportResponse,
    CollectorSchema,
    MonthComparisonItem,
    MonthComparisonResponse,
    OverviewResponse,
    PeriodCollectionSchema,
    payment_schema,
    period_schema,
    sale_schema,
)
from inala_ledger.config import settings
from inala_ledger.domain.models import BusinessPeriod
from inala_ledger.domain.periods import current_business_period
from inala_ledger.domain.reports import (
    CALENDAR_MONTH,
    build_collection_report,
    build_month_comparison,
    build_period_overview,
)
from inala_ledger.infrastructure.database.repositories import (
    ExpenseRepository,
    PaymentRepository,
    SaleRepository,
)
from inala_ledger.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/reports/collections", response_model=CollectionReportResponse)
def collection_report(
    period: Optional[BusinessPeriod] = Depends(get_period),
    db: Session = Depends(get_db),
):
    """
    Payments received in a calendar month (all time without ?period=),
    grouped by collector and customer, broken down by the credit period each
    payment settles.
    """
    report = build_collection_report(
        PaymentRepository(db).list_payments(),
        SaleRepository(db).list_sales(),
        period,
        settings.fiscal_start_day,
    )

    collectors = [
        CollectorSchema(
            name=collector.name,
            total_collected_cents=collector.total_collected_cents,
            payments_count=collector.payments_count,
            customers=[
                CollectedCustomerSchema(
                    name=customer.name,
                    total_paid_cents=customer.total_paid_cents,
                    payments_count=len(customer.payments),
                    periods=[
                        PeriodCollectionSchema(
                            period=period_schema(breakdown.period),
                            total_paid_cents=breakdown.total_paid_cents,
                            payments=[payment_schema(p) for p in breakdown.payments],
                        )
                        for _, breakdown in sorted(customer.periods.items())
                    ],
                    purchases=[sale_schema(s) for s in customer.purchases],
                )
                for customer in collector.customers.values()
            ],
        )
        for collector in report.collectors
    ]

    return CollectionReportResponse(
        period=period_schema(report.period),
        total_collected_cents=report.total_collected_cents,
        payments_count=report.payments_count,
        collectors=collectors,
    )


@router.get("/reports/overview", response_model=OverviewResponse)
def period_overview(
    period: Optional[BusinessPeriod] = Depends(get_period),
    all_periods: bool = Query(False, description="Report on the full history"),
    calendar: bool = Query(False, description="Use calendar months instead of business months"),
    db: Session = Depends(get_db),
):
    """Sales, expenses and net profit for a period (default: the current one)"""
    fiscal_start_day = CALENDAR_MONTH if calendar else settings.fiscal_start_day
    if all_periods:
        period = None
    elif period is None:
        period = current_business_period(fiscal_start_day=fiscal_start_day)

    overview = build_period_overview(
        SaleRepository(db).list_sales(),
        ExpenseRepository(db).list_expenses(),
        period,
        fiscal_start_day,
    )

    return OverviewResponse(
        period=period_schema(overview.period),
        calendar=calendar,
        total_sales_cents=overview.total_sales_cents,
        total_expenses_cents=overview.total_expenses_cents,
        net_profit_cents=overview.net_profit_cents,
        transaction_count=overview.transaction_count,
    )


@router.get("/reports/month-comparison", response_model=MonthComparisonResponse)
def month_comparison(
    months: int = Query(6, ge=1, le=24, description="Number of calendar months to compare"),
    db: Session = Depends(get_db),
):
    """Sales vs expenses for the last N calendar months, oldest first"""
    today = date.today()
    rows = build_month_comparison(
        SaleRepository(db).list_sales(),
        ExpenseRepository(db).list_expenses(),
        BusinessPeriod(month=today.month, year=today.year),
        months,
    )

    return MonthComparisonResponse(
        months=[
            MonthComparisonItem(
                period=period_schema(row.period),
                sales_cents=row.sales_cents,
                expenses_cents=row.expenses_cents,
                profit_cents=row.profit_cents,
            )
            for row in rows
        ]
    )
