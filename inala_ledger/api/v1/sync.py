"""POST /v1/sync - Import records from the remote records store"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from inala_ledger.api.dependencies import get_records_client, get_request_id
from inala_ledger.api.v1.schemas import SyncResponse
from inala_ledger.domain.exceptions import RecordsAPIError
from inala_ledger.infrastructure.clients.records import RecordsClient
from inala_ledger.infrastructure.database.repositories import (
    ExpenseRepository,
    PaymentRepository,
    SaleRepository,
)
from inala_ledger.infrastructure.database.session import get_db
from inala_ledger.infrastructure.observability.metrics import records_imported_counter

router = APIRouter()


@router.post("/sync", response_model=SyncResponse)
async def sync_records(
    request: Request,
    db: Session = Depends(get_db),
    records_client: RecordsClient = Depends(get_records_client),
):
    """
    Pull sales, payments and expenditures from the remote store.

    Records already imported (same external id) are skipped, so the call is
    safe to repeat. Nothing is written unless all three collections load.
    """
    request_id = get_request_id(request)

    try:
        sales = await records_client.fetch_sales()
        payments = await records_client.fetch_payments()
        expenses = await records_client.fetch_expenses()

        sales_imported = SaleRepository(db).import_sales(sales)
        payments_imported = PaymentRepository(db).import_payments(payments)
        expenses_imported = ExpenseRepository(db).import_expenses(expenses)
        db.commit()

    except RecordsAPIError as e:
        db.rollback()
        logging.error(f"Records API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Records store unavailable")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    records_imported_counter.labels(collection="sales").inc(sales_imported)
    records_imported_counter.labels(collection="payments").inc(payments_imported)
    records_imported_counter.labels(collection="expenditures").inc(expenses_imported)
    logging.info(
        "Records synced",
        extra={
            "request_id": request_id,
            "step": "sync_complete",
            "sales_imported": sales_imported,
            "payments_imported": payments_imported,
            "expenses_imported": expenses_imported,
        },
    )

    return SyncResponse(
        sales_imported=sales_imported,
        payments_imported=payments_imported,
        expenses_imported=expenses_imported,
    )
