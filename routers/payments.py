"""
Payment API.

Records a customer payment and its principal/interest split across that
customer's invoices. The split is validated before anything is written and
the payment is stored as a single record with its allocations, so readers
never see a partial allocation.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload

from auth import ROLE_ADMIN, ROLE_DEVELOPER, require_role, verify_token
from database import get_session
from models import Payment
from schemas.payment import (
     PaymentCreate,
     PaymentUpdate,
     PaymentResponse,
     PaymentListResponse,
)
from services.allocation import AllocationError
from services.payment_service import PaymentService

router = APIRouter(prefix="/api/payments", tags=["payments"])


def _get_payment_or_404(db: Session, payment_id: int) -> Payment:
     payment = (
          db.query(Payment)
          .options(selectinload(Payment.allocations))
          .filter(Payment.id == payment_id)
          .first()
     )
     if not payment:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Payment with ID {payment_id} not found"
          )
     return payment


@router.post(
     "",
     response_model=PaymentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record payment",
)
def record_payment(
     body: PaymentCreate,
     as_of: Optional[date] = Query(None, description="Evaluation date for the due caps (defaults to today)"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     """
     Record a payment against a customer's invoices.

     1. Computes what is currently due on every allocated invoice.
     2. Validates that principal/interest shares stay within what is due and
        add up to the payment amount (within 0.01).
     3. Stores the payment and its allocations.

     Rejected allocations return 422 with the figures needed to correct them.
     """
     try:
          payment = PaymentService.record_payment(db, body, as_of=as_of)
     except AllocationError as exc:
          db.rollback()
          raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.to_dict())
     except ValueError as exc:
          db.rollback()
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

     db.commit()
     db.refresh(payment)
     return PaymentService.to_response(payment)


@router.get(
     "",
     response_model=PaymentListResponse,
     summary="List payments",
)
def list_payments(
     customer_id: Optional[int] = Query(None, description="Filter by customer ID"),
     invoice_id: Optional[str] = Query(None, description="Only payments allocated to this invoice"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     query = db.query(Payment).options(selectinload(Payment.allocations))
     if customer_id:
          query = query.filter(Payment.customer_id == customer_id)
     if invoice_id:
          query = query.filter(Payment.allocations.any(invoice_id=invoice_id))
     payments = query.order_by(Payment.payment_date.desc(), Payment.id.desc()).all()
     return {
          "payments": [PaymentService.to_response(payment) for payment in payments],
          "total": len(payments),
     }


@router.get(
     "/{payment_id}",
     response_model=PaymentResponse,
     summary="Get payment",
)
def get_payment(
     payment_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     return PaymentService.to_response(_get_payment_or_404(db, payment_id))


@router.put(
     "/{payment_id}",
     response_model=PaymentResponse,
     summary="Edit payment",
)
def edit_payment(
     payment_id: int,
     body: PaymentUpdate,
     as_of: Optional[date] = Query(None, description="Evaluation date for the due caps (defaults to today)"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     """
     Replace a payment's amount and allocation map. The caps are what is due
     with this payment left out of the history.
     """
     payment = _get_payment_or_404(db, payment_id)
     try:
          PaymentService.edit_payment(db, payment, body, as_of=as_of)
     except AllocationError as exc:
          db.rollback()
          raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.to_dict())
     except ValueError as exc:
          db.rollback()
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

     db.commit()
     db.refresh(payment)
     return PaymentService.to_response(payment)


@router.delete(
     "/{payment_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete payment",
)
def delete_payment(
     payment_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(require_role(ROLE_ADMIN, ROLE_DEVELOPER)),
):
     """Delete a payment. Invoices it covered are due again on the next read."""
     payment = _get_payment_or_404(db, payment_id)
     PaymentService.delete_payment(db, payment)
     db.commit()
     return None
