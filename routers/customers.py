"""
Customer API routes: records of who invoices are issued to, and their
outstanding balance.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from auth import ROLE_ADMIN, ROLE_DEVELOPER, require_role, verify_token
from database import get_session
from models import Customer, Invoice, Payment
from schemas.customer import (
     CustomerCreate,
     CustomerUpdate,
     CustomerResponse,
     CustomerListResponse,
)
from schemas.payment import CustomerBalanceResponse
from services.invoice_service import InvoiceService
from services.settings_service import clean_gstin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/customers", tags=["customers"])


def _get_customer_or_404(db: Session, customer_id: int) -> Customer:
     customer = db.query(Customer).filter(Customer.id == customer_id).first()
     if not customer:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Customer with ID {customer_id} not found"
          )
     return customer


@router.post(
     "",
     response_model=CustomerResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a customer"
)
def create_customer(
     body: CustomerCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     data = body.model_dump()
     data["gstin"] = clean_gstin(data.get("gstin"))
     customer = Customer(**data)
     db.add(customer)
     db.commit()
     db.refresh(customer)
     return customer


@router.get(
     "",
     response_model=CustomerListResponse,
     summary="List customers"
)
def list_customers(
     search: Optional[str] = Query(None, description="Match on name or business name"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     query = db.query(Customer)
     if search:
          pattern = f"%{search}%"
          query = query.filter(Customer.name.ilike(pattern) | Customer.business_name.ilike(pattern))
     customers = query.order_by(Customer.name).all()
     return {"customers": customers, "total": len(customers)}


@router.get(
     "/{customer_id}",
     response_model=CustomerResponse,
     summary="Get customer by ID"
)
def get_customer(
     customer_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return _get_customer_or_404(db, customer_id)


@router.put(
     "/{customer_id}",
     response_model=CustomerResponse,
     summary="Update customer"
)
def update_customer(
     customer_id: int,
     body: CustomerUpdate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Update a customer. Only provided fields are changed. Changing the GSTIN
     affects invoices issued or edited afterwards, not stored totals.
     """
     customer = _get_customer_or_404(db, customer_id)
     changes = body.model_dump(exclude_unset=True)
     if "gstin" in changes:
          changes["gstin"] = clean_gstin(changes["gstin"])
     for field, value in changes.items():
          setattr(customer, field, value)
     db.commit()
     db.refresh(customer)
     return customer


@router.delete(
     "/{customer_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete customer"
)
def delete_customer(
     customer_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(require_role(ROLE_ADMIN, ROLE_DEVELOPER))
):
     """
     Delete a customer with no billing history. Customers with any invoice
     (soft-deleted ones included) or payment are refused with 409.
     """
     customer = _get_customer_or_404(db, customer_id)
     has_invoices = db.query(Invoice.id).filter(Invoice.customer_id == customer_id).first() is not None
     has_payments = db.query(Payment.id).filter(Payment.customer_id == customer_id).first() is not None
     if has_invoices or has_payments:
          raise HTTPException(
               status_code=status.HTTP_409_CONFLICT,
               detail=f"Customer with ID {customer_id} has invoices or payments and cannot be deleted"
          )
     db.delete(customer)
     db.commit()
     logger.info("Deleted customer %s", customer_id)
     return None


@router.get(
     "/{customer_id}/balance",
     response_model=CustomerBalanceResponse,
     summary="Get customer balance"
)
def get_customer_balance(
     customer_id: int,
     as_of: Optional[date] = Query(None, description="Evaluation date (defaults to today)"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Outstanding principal and interest across the customer's active
     (not soft-deleted) invoices, with counts by status.
     """
     _get_customer_or_404(db, customer_id)
     return InvoiceService.calculate_customer_balance(db, customer_id, as_of or date.today())
