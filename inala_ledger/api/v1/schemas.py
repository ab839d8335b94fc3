"""Pydantic schemas for API request/response validation"""

import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from inala_ledger.domain.models import BusinessPeriod, CustomerLedgerEntry, Payment, Sale

PERIOD_PATTERN = r"^\d{4}-\d{1,2}$"
NAME_PATTERN = r"\S"  # at least one non-whitespace character


class PeriodSchema(BaseModel):
    """Business period"""

    month: int
    year: int
    key: str
    display_name: str


class SaleRequest(BaseModel):
    """Request body for POST /v1/sales"""

    customer_name: str = Field(..., min_length=1, pattern=NAME_PATTERN, description="Customer the sale is for")
    total_cents: int = Field(..., ge=0, description="Sale total in cents")
    payment_type: str = Field("cash", min_length=1, description="'credit' for deferred payment")
    date: datetime.date
    product: Optional[str] = None
    quantity: float = Field(1, ge=0)
    created_by: str = "system"


class SaleResponse(BaseModel):
    """Response for POST /v1/sales"""

    sale_id: str


class SaleSchema(BaseModel):
    """Sale as listed in ledger details and reports"""

    sale_id: Optional[str] = None
    customer_name: str
    product: Optional[str] = None
    quantity: float = 0
    total_cents: int
    payment_type: str
    date: Optional[datetime.date] = None


class PaymentRequest(BaseModel):
    """Request body for POST /v1/payments"""

    customer_name: str = Field(..., min_length=1, pattern=NAME_PATTERN)
    amount_cents: int = Field(..., gt=0, description="Payment amount in cents")
    date: datetime.date
    applies_to_period: Optional[str] = Field(
        None, pattern=PERIOD_PATTERN, description="Business period YYYY-MM the payment settles (default: from date)"
    )
    payment_method: Optional[str] = None
    received_by: str = Field(..., min_length=1, pattern=NAME_PATTERN, description="Collector who took the money")
    notes: Optional[str] = None


class PaymentResponse(BaseModel):
    """Response for POST /v1/payments"""

    payment_id: str
    customer_name: str
    amount_cents: int
    applies_to_period: str
    outstanding_before_cents: int
    outstanding_after_cents: int


class PaymentSchema(BaseModel):
    """Payment as listed in ledger details and reports"""

    payment_id: Optional[str] = None
    customer_name: str
    amount_cents: int
    date: Optional[datetime.date] = None
    applies_to_period: Optional[str] = None
    payment_method: Optional[str] = None
    received_by: Optional[str] = None
    notes: Optional[str] = None


class ExpenseRequest(BaseModel):
    """Request body for POST /v1/expenses"""

    amount_cents: int = Field(..., gt=0)
    date: datetime.date
    category: Optional[str] = None
    description: Optional[str] = None


class ExpenseResponse(BaseModel):
    """Response for POST /v1/expenses"""

    expense_id: str


class LedgerEntrySchema(BaseModel):
    """One customer's credit position"""

    customer_key: str
    name: str
    total_credit_cents: int
    total_paid_cents: int
    outstanding_cents: int
    last_purchase: Optional[datetime.date] = None
    transaction_count: int
    payment_count: int


class LedgerEntryDetail(LedgerEntrySchema):
    """Customer credit position with the underlying records"""

    period: Optional[PeriodSchema] = None
    transactions: List[SaleSchema]
    payments: List[PaymentSchema]


class LedgerTotalsSchema(BaseModel):
    """Rollups over the whole summary"""

    total_clients: int
    clients_with_debt: int
    total_outstanding_cents: int
    total_paid_cents: int


class CreditorsResponse(BaseModel):
    """Response for GET /v1/creditors"""

    period: Optional[PeriodSchema] = None
    all_periods: bool
    status: Literal["all", "debt", "paid"]
    totals: LedgerTotalsSchema
    customers: List[LedgerEntrySchema]


class RenameRequest(BaseModel):
    """Request body for PUT /v1/customers/{customer_name}/name"""

    new_name: str = Field(..., min_length=1, pattern=NAME_PATTERN)


class RenameResponse(BaseModel):
    """Response for PUT /v1/customers/{customer_name}/name"""

    old_name: str
    new_name: str
    sales_updated: int
    payments_updated: int


class PeriodCollectionSchema(BaseModel):
    """Payments towards one business period"""

    period: PeriodSchema
    total_paid_cents: int
    payments: List[PaymentSchema]


class CollectedCustomerSchema(BaseModel):
    """Customer within a collector's report"""

    name: str
    total_paid_cents: int
    payments_count: int
    periods: List[PeriodCollectionSchema]
    purchases: List[SaleSchema]


class CollectorSchema(BaseModel):
    """Collector totals"""

    name: str
    total_collected_cents: int
    payments_count: int
    customers: List[CollectedCustomerSchema]


class CollectionReportResponse(BaseModel):
    """Response for GET /v1/reports/collections"""

    period: Optional[PeriodSchema] = None
    total_collected_cents: int
    payments_count: int
    collectors: List[CollectorSchema]


class OverviewResponse(BaseModel):
    """Response for GET /v1/reports/overview"""

    period: Optional[PeriodSchema] = None
    calendar: bool
    total_sales_cents: int
    total_expenses_cents: int
    net_profit_cents: int
    transaction_count: int


class MonthComparisonItem(BaseModel):
    """Single month in a comparison"""

    period: PeriodSchema
    sales_cents: int
    expenses_cents: int
    profit_cents: int


class MonthComparisonResponse(BaseModel):
    """Response for GET /v1/reports/month-comparison"""

    months: List[MonthComparisonItem]


class SyncResponse(BaseModel):
    """Response for POST /v1/sync"""

    sales_imported: int
    payments_imported: int
    expenses_imported: int


def period_schema(period: Optional[BusinessPeriod]) -> Optional[PeriodSchema]:
    if period is None:
        return None
    return PeriodSchema(
        month=period.month,
        year=period.year,
        key=period.key,
        display_name=period.display_name,
    )


def sale_schema(sale: Sale) -> SaleSchema:
    return SaleSchema(
        sale_id=sale.sale_id,
        customer_name=sale.customer_name,
        product=sale.product,
        quantity=sale.quantity,
        total_cents=sale.total_cents,
        payment_type=sale.payment_type,
        date=sale.date,
    )


def payment_schema(payment: Payment) -> PaymentSchema:
    return PaymentSchema(
        payment_id=payment.payment_id,
        customer_name=payment.customer_name,
        amount_cents=payment.amount_cents,
        date=payment.date,
        applies_to_period=payment.applies_to_period.key if payment.applies_to_period else None,
        payment_method=payment.payment_method,
        received_by=payment.received_by,
        notes=payment.notes,
    )


def ledger_entry_schema(customer_key: str, entry: CustomerLedgerEntry) -> LedgerEntrySchema:
    return LedgerEntrySchema(
        customer_key=customer_key,
        name=entry.name,
        total_credit_cents=entry.total_credit_cents,
        total_paid_cents=entry.total_paid_cents,
        outstanding_cents=entry.outstanding_cents,
        last_purchase=entry.last_purchase,
        transaction_count=len(entry.transactions),
        payment_count=len(entry.payments),
    )
