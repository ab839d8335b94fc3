"""Data access layer for ledger records"""

from typing import Iterable, List, Set, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from inala_ledger.infrastructure.database.models import ExpenseRecord, PaymentRecord, SaleRecord
from inala_ledger.domain.ledger import normalize_customer_key
from inala_ledger.domain.models import BusinessPeriod, Expense, Payment, Sale


def _sale_to_domain(row: SaleRecord) -> Sale:
    return Sale(
        customer_name=row.customer_name,
        total_cents=row.total_cents,
        payment_type=row.payment_type,
        date=row.sale_date,
        product=row.product,
        quantity=row.quantity or 0,
        sale_id=row.external_id or str(row.id),
        created_by=row.created_by,
    )


def _payment_to_domain(row: PaymentRecord) -> Payment:
    applies_to = None
    if row.applies_to_month and row.applies_to_year:
        applies_to = BusinessPeriod(month=row.applies_to_month, year=row.applies_to_year)
    return Payment(
        customer_name=row.customer_name,
        amount_cents=row.amount_cents,
        date=row.payment_date,
        applies_to_period=applies_to,
        payment_method=row.payment_method,
        received_by=row.received_by,
        notes=row.notes,
        payment_id=row.external_id or str(row.id),
    )


def _expense_to_domain(row: ExpenseRecord) -> Expense:
    return Expense(
        amount_cents=row.amount_cents,
        date=row.expense_date,
        category=row.category,
        description=row.description,
        expense_id=row.external_id or str(row.id),
    )


def _existing_external_ids(db: Session, model, external_ids: Iterable[str]) -> Set[str]:
    ids = [i for i in external_ids if i]
    if not ids:
        return set()
    rows = db.query(model.external_id).filter(model.external_id.in_(ids)).all()
    return {row[0] for row in rows}


class SaleRepository:
    """Repository for sales"""

    def __init__(self, db: Session):
        self.db = db

    def create_sale(self, sale: Sale) -> SaleRecord:
        """Persist a sale"""
        db_sale = SaleRecord(
            external_id=sale.sale_id,
            customer_name=sale.customer_name,
            product=sale.product,
            quantity=sale.quantity,
            total_cents=sale.total_cents,
            payment_type=sale.payment_type,
            sale_date=sale.date,
            created_by=sale.created_by,
        )
        self.db.add(db_sale)
        self.db.flush()  # Get ID without committing
        return db_sale

    def list_sales(self) -> List[Sale]:
        """Full sales history, oldest entry first"""
        rows = self.db.query(SaleRecord).order_by(SaleRecord.created_at, SaleRecord.sale_date).all()
        return [_sale_to_domain(row) for row in rows]

    def import_sales(self, sales: List[Sale]) -> int:
        """Insert sales not seen before (by external id); returns number inserted"""
        known = _existing_external_ids(self.db, SaleRecord, (s.sale_id for s in sales))
        imported = 0
        for sale in sales:
            if sale.sale_id and sale.sale_id in known:
                continue
            self.create_sale(sale)
            if sale.sale_id:
                known.add(sale.sale_id)
            imported += 1
        return imported


class PaymentRepository:
    """Repository for customer payments"""

    def __init__(self, db: Session):
        self.db = db

    def create_payment(self, payment: Payment) -> PaymentRecord:
        """Persist a payment, keeping any explicit period override"""
        applies_to = payment.applies_to_period
        db_payment = PaymentRecord(
            external_id=payment.payment_id,
            customer_name=payment.customer_name,
            amount_cents=payment.amount_cents,
            payment_date=payment.date,
            applies_to_month=applies_to.month if applies_to else None,
            applies_to_year=applies_to.year if applies_to else None,
            payment_method=payment.payment_method,
            received_by=payment.received_by,
            notes=payment.notes,
        )
        self.db.add(db_payment)
        self.db.flush()
        return db_payment

    def list_payments(self) -> List[Payment]:
        """Full payment history, oldest entry first"""
        rows = self.db.query(PaymentRecord).order_by(PaymentRecord.created_at, PaymentRecord.payment_date).all()
        return [_payment_to_domain(row) for row in rows]

    def import_payments(self, payments: List[Payment]) -> int:
        """Insert payments not seen before (by external id); returns number inserted"""
        known = _existing_external_ids(self.db, PaymentRecord, (p.payment_id for p in payments))
        imported = 0
        for payment in payments:
            if payment.payment_id and payment.payment_id in known:
                continue
            self.create_payment(payment)
            if payment.payment_id:
                known.add(payment.payment_id)
            imported += 1
        return imported


class ExpenseRepository:
    """Repository for expenditures"""

    def __init__(self, db: Session):
        self.db = db

    def create_expense(self, expense: Expense) -> ExpenseRecord:
        """Persist an expenditure"""
        db_expense = ExpenseRecord(
            external_id=expense.expense_id,
            amount_cents=expense.amount_cents,
            expense_date=expense.date,
            category=expense.category,
            description=expense.description,
        )
        self.db.add(db_expense)
        self.db.flush()
        return db_expense

    def list_expenses(self) -> List[Expense]:
        """Full expenditure history"""
        rows = self.db.query(ExpenseRecord).order_by(ExpenseRecord.created_at, ExpenseRecord.expense_date).all()
        return [_expense_to_domain(row) for row in rows]

    def import_expenses(self, expenses: List[Expense]) -> int:
        """Insert expenditures not seen before (by external id); returns number inserted"""
        known = _existing_external_ids(self.db, ExpenseRecord, (e.expense_id for e in expenses))
        imported = 0
        for expense in expenses:
            if expense.expense_id and expense.expense_id in known:
                continue
            self.create_expense(expense)
            if expense.expense_id:
                known.add(expense.expense_id)
            imported += 1
        return imported


class CustomerRepository:
    """Customer-level operations spanning sales and payments"""

    def __init__(self, db: Session):
        self.db = db

    def rename_customer(self, old_name: str, new_name: str) -> Tuple[int, int]:
        """
        Rename a customer on every sale and payment.

        Matching uses the ledger key (trimmed, case-insensitive), so all
        spellings that aggregate together are renamed together.

        Returns:
            (sales updated, payments updated)
        """
        key = normalize_customer_key(old_name)
        sales_updated = (
            self.db.query(SaleRecord)
            .filter(func.lower(func.trim(SaleRecord.customer_name)) == key)
            .update({SaleRecord.customer_name: new_name}, synchronize_session=False)
        )
        payments_updated = (
            self.db.query(PaymentRecord)
            .filter(func.lower(func.trim(PaymentRecord.customer_name)) == key)
            .update({PaymentRecord.customer_name: new_name}, synchronize_session=False)
        )
        return sales_updated, payments_updated
