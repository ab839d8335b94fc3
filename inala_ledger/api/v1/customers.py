"""PUT /v1/customers/{customer_name}/name - Rename a customer everywhere"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from inala_ledger.api.v1.schemas import RenameRequest, RenameResponse
from inala_ledger.infrastructure.database.repositories import CustomerRepository
from inala_ledger.infrastructure.database.session import get_db

router = APIRouter()


@router.put("/customers/{customer_name}/name", response_model=RenameResponse)
def rename_customer(customer_name: str, request_body: RenameRequest, db: Session = Depends(get_db)):
    """
    Rename a customer on all sales and payments.

    Returns:
        Number of sales and payments updated (404 when the customer has neither)
    """
    new_name = request_body.new_name.strip()
    sales_updated, payments_updated = CustomerRepository(db).rename_customer(customer_name, new_name)

    if not sales_updated and not payments_updated:
        db.rollback()
        raise HTTPException(status_code=404, detail="Customer not found")

    db.commit()
    return RenameResponse(
        old_name=customer_name,
        new_name=new_name,
        sales_updated=sales_updated,
        payments_updated=payments_updated,
    )
