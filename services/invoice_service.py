"""
Invoice Service - Business logic layer for invoice operations.

This service handles invoice issuance, full edits, soft deletion and the
derived balance figures, separate from the API layer. Pricing and interest
arithmetic are delegated to the pure engine modules.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from models import Customer, Invoice, InvoiceLineItem
from .interest import compute_due
from .numbering import invoice_prefix, next_invoice_number, period_key
from .pricing import InvoiceTotals, LineItem, aggregate_totals, price_line
from .records import ZERO, DueFigures, round2, to_decimal
from .snapshots import (
     STATUS_OVERDUE,
     STATUS_PAID,
     STATUS_UNPAID,
     invoice_status,
     load_payment_records,
     to_invoice_record,
)

logger = logging.getLogger(__name__)


def _line_item_from_input(data) -> LineItem:
     return LineItem(
          quantity=data.quantity,
          net_weight=to_decimal(data.net_weight),
          rate=to_decimal(data.rate),
          making_charge_type=data.making_charge_type,
          making_charge_value=to_decimal(data.making_charge_value),
          apply_tax=data.apply_tax,
          gross_weight=to_decimal(data.gross_weight),
          item_name=data.item_name,
          hsn=data.hsn or "",
          purity=data.purity or "",
     )


class InvoiceService:
     """Service class for invoice-related business logic."""

     @staticmethod
     def quote(
          line_items: Iterable,
          discount: Decimal,
          customer_has_tax_id: bool
     ) -> Tuple[List[Decimal], InvoiceTotals]:
          """
          Price lines and aggregate totals without touching the database.

          Returns:
               (per-line amounts, InvoiceTotals)
          """
          items = [_line_item_from_input(item) for item in line_items]
          amounts = [price_line(item) for item in items]
          return amounts, aggregate_totals(items, discount, customer_has_tax_id)

     @staticmethod
     def _get_customer(db: Session, customer_id: int) -> Customer:
          customer = db.query(Customer).filter(Customer.id == customer_id).first()
          if not customer:
               raise ValueError(f"Customer with ID {customer_id} not found")
          return customer

     @staticmethod
     def _apply_terms(invoice: Invoice, data, customer: Customer) -> None:
          """Copy terms and lines onto the invoice and (re)price it."""
          amounts, totals = InvoiceService.quote(data.line_items, data.discount, customer.has_tax_id)

          invoice.customer = customer
          invoice.customer_id = customer.id
          invoice.due_date = data.due_date
          invoice.payment_mode = data.payment_mode.value
          invoice.interest_rate = data.interest_rate
          invoice.interest_compound = data.interest_compound.value
          invoice.subtotal = round2(totals.subtotal)
          invoice.cgst = round2(totals.cgst)
          invoice.sgst = round2(totals.sgst)
          invoice.discount = round2(totals.discount)
          invoice.total = round2(totals.total)

          invoice.line_items.clear()
          for position, (item, amount) in enumerate(zip(data.line_items, amounts)):
               invoice.line_items.append(
                    InvoiceLineItem(
                         position=position,
                         item_name=item.item_name,
                         hsn=item.hsn,
                         purity=item.purity,
                         quantity=item.quantity,
                         gross_weight=item.gross_weight,
                         net_weight=item.net_weight,
                         rate=item.rate,
                         making_charge_type=item.making_charge_type.value,
                         making_charge_value=item.making_charge_value,
                         apply_tax=item.apply_tax,
                         amount=round2(amount),
                    )
               )

     @staticmethod
     def create_invoice(db: Session, data, today: Optional[date] = None) -> Invoice:
          """
          Issue a new invoice.

          The number is the next free one for the customer's prefix (INV for
          tax invoices, CSH for cash memos) and the issue month.

          Args:
               db: SQLAlchemy database session
               data: InvoiceCreate payload
               today: Issue date used when the payload has none

          Returns:
               Created Invoice object

          Raises:
               ValueError: If the customer doesn't exist
          """
          customer = InvoiceService._get_customer(db, data.customer_id)
          issue_date = data.issue_date or today or date.today()
          prefix = invoice_prefix(customer.has_tax_id)

          existing = db.query(Invoice.id).filter(
               Invoice.id.like(f"{period_key(prefix, issue_date)}%")
          ).all()
          invoice_id = next_invoice_number(prefix, issue_date, (row[0] for row in existing))

          invoice = Invoice(id=invoice_id, issue_date=issue_date, is_deleted=False)
          InvoiceService._apply_terms(invoice, data, customer)

          db.add(invoice)
          db.flush()

          logger.info("Issued invoice %s for customer %s, total %s", invoice.id, customer.id, invoice.total)
          return invoice

     @staticmethod
     def update_invoice(db: Session, invoice: Invoice, data) -> Invoice:
          """
          Replace an invoice's customer, terms and lines and re-price it.

          The invoice number is preserved. Payments already allocated to it are
          kept; what remains due is derived from the new total on next read.
          """
          if invoice.is_deleted:
               raise ValueError(f"Invoice {invoice.id} is deleted; recover it before editing")

          customer = InvoiceService._get_customer(db, data.customer_id)
          if data.issue_date is not None:
               invoice.issue_date = data.issue_date
          InvoiceService._apply_terms(invoice, data, customer)
          db.flush()

          logger.info("Edited invoice %s, new total %s", invoice.id, invoice.total)
          return invoice

     @staticmethod
     def soft_delete_invoice(db: Session, invoice: Invoice) -> Invoice:
          invoice.soft_delete()
          db.flush()
          logger.info("Soft-deleted invoice %s", invoice.id)
          return invoice

     @staticmethod
     def recover_invoice(db: Session, invoice: Invoice) -> Invoice:
          invoice.recover()
          db.flush()
          logger.info("Recovered invoice %s", invoice.id)
          return invoice

     @staticmethod
     def get_due_figures(db: Session, invoice: Invoice, as_of: date) -> DueFigures:
          """Derive paid and due amounts for one invoice from its payment history."""
          payments = load_payment_records(db, [invoice.id])
          return compute_due(to_invoice_record(invoice), payments, as_of)

     @staticmethod
     def calculate_customer_balance(db: Session, customer_id: int, as_of: date) -> dict:
          """
          Calculate what a customer owes across active invoices.

          Args:
               db: SQLAlchemy database session
               customer_id: ID of the customer
               as_of: Evaluation date for interest

          Returns:
               Dictionary with per-invoice and aggregate balance information
          """
          InvoiceService._get_customer(db, customer_id)

          invoices = (
               db.query(Invoice)
               .filter(Invoice.customer_id == customer_id, Invoice.is_deleted.is_(False))
               .order_by(Invoice.issue_date, Invoice.id)
               .all()
          )
          payments = load_payment_records(db, [inv.id for inv in invoices])

          rows = []
          counts = {STATUS_PAID: 0, STATUS_UNPAID: 0, STATUS_OVERDUE: 0}
          principal_due = interest_due = ZERO
          for invoice in invoices:
               figures = compute_due(to_invoice_record(invoice), payments, as_of)
               status = invoice_status(figures, invoice.due_date, as_of)
               counts[status] += 1
               principal_due += figures.principal_due
               interest_due += figures.interest_due
               rows.append({
                    "invoice_id": invoice.id,
                    "due_date": invoice.due_date,
                    "as_of": as_of,
                    "principal": round2(invoice.total),
                    "status": status,
                    **figures.as_dict(),
               })

          return {
               "customer_id": customer_id,
               "as_of": as_of,
               "invoices": rows,
               "principal_due": round2(principal_due),
               "interest_due": round2(interest_due),
               "total_due": round2(principal_due + interest_due),
               "paid_count": counts[STATUS_PAID],
               "unpaid_count": counts[STATUS_UNPAID],
               "overdue_count": counts[STATUS_OVERDUE],
          }
