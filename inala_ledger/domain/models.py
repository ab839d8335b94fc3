"""Domain models - pure Python dataclasses representing business entities"""

import calendar
from dataclasses import dataclass, field
import datetime
from typing import Dict, List, Optional

CREDIT = "credit"
UNKNOWN_CUSTOMER = "Unknown Customer"


@dataclass(frozen=True)
class BusinessPeriod:
    """Fiscal month running from the Nth day of one month to the (N-1)th of the next"""

    month: int
    year: int

    @property
    def key(self) -> str:
        return f"{self.year}-{self.month:02d}"

    @property
    def display_name(self) -> str:
        if 1 <= self.month <= 12:
            return f"{calendar.month_name[self.month]} {self.year}"
        return self.key


@dataclass
class Sale:
    """Sale as recorded at the till"""

    customer_name: str
    total_cents: int
    payment_type: str  # "credit", "cash", ...
    date: Optional[datetime.date] = None
    product: Optional[str] = None
    quantity: float = 0
    sale_id: Optional[str] = None
    created_by: str = "system"


@dataclass
class Payment:
    """Payment collected against a customer's credit"""

    customer_name: str
    amount_cents: int
    date: Optional[datetime.date] = None
    applies_to_period: Optional[BusinessPeriod] = None
    payment_method: Optional[str] = None
    received_by: Optional[str] = None
    notes: Optional[str] = None
    payment_id: Optional[str] = None


@dataclass
class Expense:
    """Business expenditure, used by period reports only"""

    amount_cents: int
    date: Optional[datetime.date] = None
    category: Optional[str] = None
    description: Optional[str] = None
    expense_id: Optional[str] = None


@dataclass
class CustomerLedgerEntry:
    """Per-customer aggregate of credit extended vs paid (derived, never persisted)"""

    name: str
    total_credit_cents: int = 0
    total_paid_cents: int = 0
    outstanding_cents: int = 0
    transactions: List[Sale] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)
    last_purchase: Optional[datetime.date] = None


@dataclass(frozen=True)
class LedgerOptions:
    """Aggregation window and policy for a single ledger build"""

    period_filter: Optional[BusinessPeriod] = None
    include_all_periods: bool = False
    fiscal_start_day: int = 5
    surface_orphan_payments: bool = False

    @property
    def filters_by_period(self) -> bool:
        return self.period_filter is not None and not self.include_all_periods


@dataclass
class LedgerTotals:
    """Scalar rollups over a credit summary"""

    total_clients: int
    clients_with_debt: int
    total_outstanding_cents: int
    total_paid_cents: int


@dataclass
class PeriodCollection:
    """Payments a customer made towards one business period"""

    period: BusinessPeriod
    total_paid_cents: int = 0
    payments: List[Payment] = field(default_factory=list)


@dataclass
class CollectedCustomer:
    """A customer's payments as handled by one collector"""

    name: str
    total_paid_cents: int = 0
    payments: List[Payment] = field(default_factory=list)
    periods: Dict[str, PeriodCollection] = field(default_factory=dict)
    purchases: List[Sale] = field(default_factory=list)


@dataclass
class CollectorSummary:
    """Money brought in by one collector"""

    name: str
    total_collected_cents: int = 0
    payments_count: int = 0
    customers: Dict[str, CollectedCustomer] = field(default_factory=dict)


@dataclass
class CollectionReport:
    """Payments received in a period, grouped by collector"""

    period: Optional[BusinessPeriod]
    total_collected_cents: int
    payments_count: int
    collectors: List[CollectorSummary]


@dataclass
class PeriodOverview:
    """Sales vs expenses for a period"""

    period: Optional[BusinessPeriod]
    total_sales_cents: int
    total_expenses_cents: int
    net_profit_cents: int
    transaction_count: int


@dataclass
class MonthComparisonRow:
    """Single calendar month in a month comparison"""

    period: BusinessPeriod
    sales_cents: int
    expenses_cents: int
    profit_cents: int
