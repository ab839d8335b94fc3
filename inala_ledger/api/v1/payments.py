"""POST /v1/payments - Record a payment against a customer's credit"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from inala_ledger.api.dependencies import get_request_id, load_credit_summary
from inala_ledger.api.v1.schemas import PaymentRequest, PaymentResponse
from inala_ledger.config import settings
from inala_ledger.domain.exceptions import CustomerNotFoundError, InvalidPeriodError, OverpaymentError
from inala_ledger.domain.ledger import normalize_customer_key
from inala_ledger.domain.models import LedgerOptions, Payment
from inala_ledger.domain.periods import parse_period_key, resolve_payment_period
from inala_ledger.infrastructure.database.repositories import PaymentRepository
from inala_ledger.infrastructure.database.session import get_db
from inala_ledger.infrastructure.observability.logging import log_payment_recorded
from inala_ledger.infrastructure.observability.metrics import record_payment

router = APIRouter()


@router.post("/payments", response_model=PaymentResponse, status_code=201)
def create_payment(
    request_body: PaymentRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Record a payment for a credit customer.

    Flow:
    1. Resolve the period the payment settles (explicit applies_to_period,
       else the business period of the payment date)
    2. Build the ledger for that period and find the customer
    3. Reject payments above the outstanding balance
    4. Persist with the resolved period pinned on the payment
    """
    request_id = get_request_id(request)

    try:
        override = (
            parse_period_key(request_body.applies_to_period)
            if request_body.applies_to_period
            else None
        )
        payment = Payment(
            customer_name=request_body.customer_name.strip(),
            amount_cents=request_body.amount_cents,
            date=request_body.date,
            applies_to_period=override,
            payment_method=request_body.payment_method,
            received_by=request_body.received_by.strip(),
            notes=(request_body.notes or "").strip() or None,
        )
        period = resolve_payment_period(payment, settings.fiscal_start_day)
        payment.applies_to_period = period

        summary = load_credit_summary(
            db,
            LedgerOptions(period_filter=period, fiscal_start_day=settings.fiscal_start_day),
        )
        entry = summary.get(normalize_customer_key(payment.customer_name))
        if entry is None:
            raise CustomerNotFoundError(
                f"No credit for '{payment.customer_name}' in {period.display_name}"
            )
        if payment.amount_cents > entry.outstanding_cents:
            raise OverpaymentError(
                f"Payment of {payment.amount_cents} cents exceeds outstanding balance "
                f"of {entry.outstanding_cents} cents"
            )

        db_payment = PaymentRepository(db).create_payment(payment)
        db.commit()

        remaining = entry.outstanding_cents - payment.amount_cents
        record_payment(payment.payment_method, payment.amount_cents)
        log_payment_recorded(request_id, entry.name, payment.amount_cents, period.key, remaining)

        return PaymentResponse(
            payment_id=str(db_payment.id),
            customer_name=entry.name,
            amount_cents=payment.amount_cents,
            applies_to_period=period.key,
            outstanding_before_cents=entry.outstanding_cents,
            outstanding_after_cents=remaining,
        )

    except InvalidPeriodError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))

    except CustomerNotFoundError as e:
        db.rollback()
        logging.warning(f"Payment for unknown creditor: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))

    except OverpaymentError as e:
        db.rollback()
        logging.warning(f"Overpayment rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
