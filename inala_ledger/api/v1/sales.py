"""POST /v1/sales and /v1/expenses - Capture till sales and expenditures"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from inala_ledger.api.dependencies import get_request_id
from inala_ledger.api.v1.schemas import ExpenseRequest, ExpenseResponse, SaleRequest, SaleResponse
from inala_ledger.domain.models import Expense, Sale
from inala_ledger.infrastructure.database.repositories import ExpenseRepository, SaleRepository
from inala_ledger.infrastructure.database.session import get_db

router = APIRouter()


@router.post("/sales", response_model=SaleResponse, status_code=201)
def create_sale(request_body: SaleRequest, request: Request, db: Session = Depends(get_db)):
    """Record a cash or credit sale"""
    sale = Sale(
        customer_name=request_body.customer_name.strip(),
        total_cents=request_body.total_cents,
        payment_type=request_body.payment_type.strip().lower(),
        date=request_body.date,
        product=request_body.product,
        quantity=request_body.quantity,
        created_by=request_body.created_by,
    )
    try:
        db_sale = SaleRepository(db).create_sale(sale)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to record sale: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")

    return SaleResponse(sale_id=str(db_sale.id))


@router.post("/expenses", response_model=ExpenseResponse, status_code=201)
def create_expense(request_body: ExpenseRequest, request: Request, db: Session = Depends(get_db)):
    """Record a business expenditure"""
    expense = Expense(
        amount_cents=request_body.amount_cents,
        date=request_body.date,
        category=request_body.category,
        description=request_body.description,
    )
    try:
        db_expense = ExpenseRepository(db).create_expense(expense)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to record expense: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")

    return ExpenseResponse(expense_id=str(db_expense.id))
