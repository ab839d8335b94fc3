"""Mapping of raw store documents to typed domain records

Documents come from the remote records store (and historic browser exports), so
fields may be missing, mistyped or named differently. Mapping is best-effort:
bad amounts become 0, bad dates become None, and every coercion is logged.
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Optional

from inala_ledger.domain.models import BusinessPeriod, Expense, Payment, Sale, UNKNOWN_CUSTOMER
from inala_ledger.utils.date_utils import parse_iso_date
from inala_ledger.infrastructure.observability.metrics import record_malformed_field

logger = logging.getLogger(__name__)

# First non-empty field wins when identifying the counterparty
COUNTERPARTY_FIELDS = ("customer_name", "customer_id", "to_customer", "from_collector")

_CENT = Decimal("0.01")


def _parse_cents(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    try:
        return int(amount.quantize(_CENT, rounding=ROUND_HALF_UP) * 100)
    except InvalidOperation:
        # Too many digits to hold at cent precision
        return None


def to_cents(value: Any) -> int:
    """Convert a money amount (number or numeric string) to integer cents, 0 if not numeric"""
    cents = _parse_cents(value)
    return cents if cents is not None else 0


def counterparty_name(document: Dict[str, Any]) -> str:
    """Single customer name from whichever identifying field the document carries"""
    for field_name in COUNTERPARTY_FIELDS:
        value = document.get(field_name)
        if value:
            return str(value)
    return UNKNOWN_CUSTOMER


def _amount_cents(document: Dict[str, Any], field_name: str) -> int:
    raw = document.get(field_name)
    if raw is None or raw == "":
        return 0
    cents = _parse_cents(raw)
    if cents is None:
        record_malformed_field(field_name)
        logger.warning(
            "Invalid amount coerced to 0",
            extra={"field": field_name, "value": repr(raw), "record_id": document.get("id")},
        )
        return 0
    return cents


def _record_date(document: Dict[str, Any]) -> Optional[date]:
    raw = document.get("date")
    parsed = parse_iso_date(raw)
    if parsed is None and raw:
        record_malformed_field("date")
        logger.warning(
            "Unparseable date dropped",
            extra={"field": "date", "value": repr(raw), "record_id": document.get("id")},
        )
    return parsed


def _document_id(document: Dict[str, Any]) -> Optional[str]:
    raw = document.get("id")
    return str(raw) if raw not in (None, "") else None


def _quantity(raw: Any) -> float:
    try:
        return float(raw or 0)
    except (TypeError, ValueError):
        return 0.0


def period_from_document(raw: Any) -> Optional[BusinessPeriod]:
    """applies_to_period override, if it carries a truthy month and year"""
    if not isinstance(raw, dict):
        return None
    try:
        month = int(raw.get("month") or 0)
        year = int(raw.get("year") or 0)
    except (TypeError, ValueError):
        return None
    if not month or not year:
        return None
    return BusinessPeriod(month=month, year=year)


def sale_from_document(document: Dict[str, Any]) -> Sale:
    """Build a Sale from a stored sales document"""
    payment_type = document.get("payment_type") or document.get("payment") or ""
    return Sale(
        customer_name=counterparty_name(document),
        total_cents=_amount_cents(document, "total"),
        payment_type=str(payment_type),
        date=_record_date(document),
        product=document.get("product"),
        quantity=_quantity(document.get("quantity")),
        sale_id=_document_id(document),
        created_by=document.get("created_by") or "system",
    )


def payment_from_document(document: Dict[str, Any]) -> Payment:
    """Build a Payment from a stored payments document"""
    return Payment(
        customer_name=counterparty_name(document),
        amount_cents=_amount_cents(document, "amount"),
        date=_record_date(document),
        applies_to_period=period_from_document(document.get("applies_to_period")),
        payment_method=document.get("payment_method"),
        received_by=document.get("received_by") or document.get("from_collector"),
        notes=document.get("notes"),
        payment_id=_document_id(document),
    )


def expense_from_document(document: Dict[str, Any]) -> Expense:
    """Build an Expense from a stored expenditure document"""
    return Expense(
        amount_cents=_amount_cents(document, "amount"),
        date=_record_date(document),
        category=document.get("category"),
        description=document.get("description"),
        expense_id=_document_id(document),
    )
