"""SQLAlchemy ORM models for sales, payments and expenditures"""

import uuid
from sqlalchemy import Column, BigInteger, Float, DateTime, Date, Integer, Text, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class SaleRecord(Base):
    """Sale entered at the till (cash or credit)"""

    __tablename__ = "sales"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    external_id = Column(Text, nullable=True, unique=True)
    customer_name = Column(Text, nullable=False, index=True)
    product = Column(Text, nullable=True)
    quantity = Column(Float, nullable=False, default=0)
    total_cents = Column(BigInteger, nullable=False)
    payment_type = Column(Text, nullable=False)
    sale_date = Column(Date, nullable=True, index=True)
    created_by = Column(Text, nullable=False, default="system")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class PaymentRecord(Base):
    """Payment collected from a credit customer"""

    __tablename__ = "payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    external_id = Column(Text, nullable=True, unique=True)
    customer_name = Column(Text, nullable=False, index=True)
    amount_cents = Column(BigInteger, nullable=False)
    payment_date = Column(Date, nullable=True, index=True)
    applies_to_month = Column(Integer, nullable=True)
    applies_to_year = Column(Integer, nullable=True)
    payment_method = Column(Text, nullable=True)
    received_by = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ExpenseRecord(Base):
    """Business expenditure"""

    __tablename__ = "expenses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    external_id = Column(Text, nullable=True, unique=True)
    amount_cents = Column(BigInteger, nullable=False)
    expense_date = Column(Date, nullable=True, index=True)
    category = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
