"""
Invoice API routes.

Issues, edits, soft-deletes and recovers jewelry invoices, and reports what is
due on them as of a date. Role-based access:
- Any signed-in user: quote, issue, view, edit
- Admin / Developer: delete and recover
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload

from auth import ROLE_ADMIN, ROLE_DEVELOPER, require_role, verify_token
from database import get_session
from models import Customer, Invoice
from schemas.invoice import (
     BusinessDetails,
     InvoiceCreate,
     InvoiceUpdate,
     InvoiceQuoteRequest,
     InvoiceResponse,
     InvoiceListResponse,
     InvoiceStatusEnum,
     InvoiceTotalsResponse,
)
from services.interest import compute_due
from services.invoice_service import InvoiceService
from services.settings_service import SettingsService
from services.records import round2
from services.snapshots import invoice_status, load_payment_records, to_invoice_record

router = APIRouter(prefix="/api/invoices", tags=["invoices"])

TAX_INVOICE_TITLE = "TAX Invoice"
CASH_MEMO_TITLE = "Cash Memo"


def _business_details(db: Session) -> BusinessDetails:
     return BusinessDetails(**SettingsService.get_business_details(db))


def _get_invoice_or_404(db: Session, invoice_id: str) -> Invoice:
     invoice = (
          db.query(Invoice)
          .options(selectinload(Invoice.line_items), selectinload(Invoice.customer))
          .filter(Invoice.id == invoice_id)
          .first()
     )
     if not invoice:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Invoice {invoice_id} not found"
          )
     return invoice


def _due_response(invoice: Invoice, figures, as_of: date) -> dict:
     return {
          "as_of": as_of,
          "principal": round2(invoice.total),
          "status": invoice_status(figures, invoice.due_date, as_of),
          **figures.as_dict(),
     }


def _build_invoice_response(
     invoice: Invoice,
     figures,
     as_of: date,
     business: BusinessDetails
) -> InvoiceResponse:
     """Build InvoiceResponse with customer details and live due figures."""
     customer = invoice.customer
     return InvoiceResponse(
          id=invoice.id,
          document_title=TAX_INVOICE_TITLE if invoice.is_tax_invoice else CASH_MEMO_TITLE,
          customer_id=invoice.customer_id,
          customer_name=customer.name if customer else None,
          customer_gstin=customer.gstin if customer else None,
          issue_date=invoice.issue_date,
          due_date=invoice.due_date,
          payment_mode=invoice.payment_mode,
          subtotal=round2(invoice.subtotal),
          cgst=round2(invoice.cgst),
          sgst=round2(invoice.sgst),
          discount=round2(invoice.discount),
          total=round2(invoice.total),
          interest_rate=invoice.interest_rate,
          interest_compound=invoice.interest_compound,
          is_deleted=invoice.is_deleted,
          created_at=invoice.created_at,
          line_items=[
               {
                    "position": item.position,
                    "item_name": item.item_name,
                    "quantity": item.quantity,
                    "hsn": item.hsn,
                    "purity": item.purity,
                    "gross_weight": item.gross_weight,
                    "net_weight": item.net_weight,
                    "rate": round2(item.rate),
                    "making_charge_type": item.making_charge_type,
                    "making_charge_value": round2(item.making_charge_value),
                    "apply_tax": item.apply_tax,
                    "amount": round2(item.amount),
               }
               for item in invoice.line_items
          ],
          business=business,
          due=_due_response(invoice, figures, as_of),
     )


def _single_response(db: Session, invoice: Invoice, as_of: Optional[date]) -> InvoiceResponse:
     as_of = as_of or date.today()
     figures = InvoiceService.get_due_figures(db, invoice, as_of)
     return _build_invoice_response(invoice, figures, as_of, _business_details(db))


@router.post(
     "/quote",
     response_model=InvoiceTotalsResponse,
     summary="Price invoice lines without issuing"
)
def quote_invoice(
     body: InvoiceQuoteRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Compute line amounts, CGST/SGST and total for a draft invoice.

     - **customer_id**: when given, the customer's GSTIN decides tax mode
     - **customer_has_tax_id**: used when no customer is given
     """
     has_tax_id = body.customer_has_tax_id
     if body.customer_id is not None:
          customer = db.query(Customer).filter(Customer.id == body.customer_id).first()
          if not customer:
               raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Customer with ID {body.customer_id} not found"
               )
          has_tax_id = customer.has_tax_id

     amounts, totals = InvoiceService.quote(body.line_items, body.discount, has_tax_id)
     return InvoiceTotalsResponse(
          line_amounts=[round2(amount) for amount in amounts],
          document_title=TAX_INVOICE_TITLE if has_tax_id else CASH_MEMO_TITLE,
          **totals.as_dict(),
     )


@router.post(
     "",
     response_model=InvoiceResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Issue a new invoice"
)
def create_invoice(
     invoice_data: InvoiceCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Issue an invoice: prices every line, applies GST for customers with a
     GSTIN, subtracts the discount and assigns the next invoice number.
     """
     try:
          invoice = InvoiceService.create_invoice(db, invoice_data)
     except ValueError as exc:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))

     db.commit()
     return _single_response(db, _get_invoice_or_404(db, invoice.id), None)


@router.get(
     "",
     response_model=InvoiceListResponse,
     summary="List invoices with filters"
)
def list_invoices(
     customer_id: Optional[int] = Query(None, description="Filter by customer ID"),
     status_filter: Optional[InvoiceStatusEnum] = Query(None, alias="status", description="Filter by derived status"),
     include_deleted: bool = Query(False, description="Include soft-deleted invoices"),
     as_of: Optional[date] = Query(None, description="Evaluation date for due figures (defaults to today)"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Retrieve a paginated list of invoices, newest first, each with its due
     figures as of the evaluation date.
     """
     as_of = as_of or date.today()
     query = db.query(Invoice).options(
          selectinload(Invoice.line_items), selectinload(Invoice.customer)
     )
     if customer_id:
          query = query.filter(Invoice.customer_id == customer_id)
     if not include_deleted:
          query = query.filter(Invoice.is_deleted.is_(False))

     invoices = query.order_by(Invoice.issue_date.desc(), Invoice.id.desc()).all()
     payments = load_payment_records(db, [inv.id for inv in invoices])

     business = _business_details(db)
     responses = []
     for invoice in invoices:
          figures = compute_due(to_invoice_record(invoice), payments, as_of)
          if status_filter and invoice_status(figures, invoice.due_date, as_of) != status_filter.value:
               continue
          responses.append(_build_invoice_response(invoice, figures, as_of, business))

     offset = (page - 1) * page_size
     return InvoiceListResponse(
          invoices=responses[offset:offset + page_size],
          total=len(responses),
          page=page,
          page_size=page_size
     )


@router.get(
     "/{invoice_id}",
     response_model=InvoiceResponse,
     summary="Get invoice by number"
)
def get_invoice(
     invoice_id: str,
     as_of: Optional[date] = Query(None, description="Evaluation date for due figures (defaults to today)"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """Retrieve an invoice (including soft-deleted ones) with its lines and due figures."""
     invoice = _get_invoice_or_404(db, invoice_id)
     return _single_response(db, invoice, as_of)


@router.get(
     "/{invoice_id}/due",
     summary="Get due figures for an invoice"
)
def get_invoice_due(
     invoice_id: str,
     as_of: Optional[date] = Query(None, description="Evaluation date (defaults to today)"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Principal/interest paid and due, derived from the full payment history.
     Interest compounds per whole period elapsed since the due date.
     """
     invoice = _get_invoice_or_404(db, invoice_id)
     as_of = as_of or date.today()
     figures = InvoiceService.get_due_figures(db, invoice, as_of)
     return {"invoice_id": invoice.id, **_due_response(invoice, figures, as_of)}


@router.put(
     "/{invoice_id}",
     response_model=InvoiceResponse,
     summary="Edit invoice"
)
def update_invoice(
     invoice_id: str,
     invoice_data: InvoiceUpdate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Replace the invoice's customer, terms and lines. The invoice is re-priced
     and keeps its number.
     """
     invoice = _get_invoice_or_404(db, invoice_id)
     if invoice.is_deleted:
          raise HTTPException(
               status_code=status.HTTP_409_CONFLICT,
               detail=f"Invoice {invoice_id} is deleted; recover it before editing"
          )
     try:
          InvoiceService.update_invoice(db, invoice, invoice_data)
     except ValueError as exc:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))

     db.commit()
     db.refresh(invoice)
     return _single_response(db, invoice, None)


@router.delete(
     "/{invoice_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Soft-delete invoice"
)
def delete_invoice(
     invoice_id: str,
     db: Session = Depends(get_session),
     token: dict = Depends(require_role(ROLE_ADMIN, ROLE_DEVELOPER))
):
     """
     Mark an invoice as deleted. It drops out of balances and listings but can
     be recovered.
     """
     invoice = _get_invoice_or_404(db, invoice_id)
     InvoiceService.soft_delete_invoice(db, invoice)
     db.commit()
     return None


@router.post(
     "/{invoice_id}/recover",
     response_model=InvoiceResponse,
     summary="Recover a soft-deleted invoice"
)
def recover_invoice(
     invoice_id: str,
     db: Session = Depends(get_session),
     token: dict = Depends(require_role(ROLE_ADMIN, ROLE_DEVELOPER))
):
     invoice = _get_invoice_or_404(db, invoice_id)
     if not invoice.is_deleted:
          raise HTTPException(
               status_code=status.HTTP_409_CONFLICT,
               detail=f"Invoice {invoice_id} is not deleted"
          )
     InvoiceService.recover_invoice(db, invoice)
     db.commit()
     return _single_response(db, invoice, None)
