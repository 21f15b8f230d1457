"""
Payment Service - records, edits and deletes customer payments.

Every write goes through the allocation validator first: the payment row and
its allocation rows are only added to the session once the split conserves
the paid amount and stays within what is due on each invoice. Nothing about
the balance is stored; due figures are recomputed from payments on read.
"""
import logging
from datetime import date
from typing import Dict, Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from models import Customer, Invoice, Payment, PaymentAllocation
from .allocation import AllocationError, validate_allocation
from .interest import compute_due
from .records import Allocation, DueFigures, round2, to_decimal
from .snapshots import allocation_map, load_payment_records, to_invoice_record

logger = logging.getLogger(__name__)


def _allocations_from_input(allocations: Mapping) -> Dict[str, Allocation]:
     return {
          invoice_id: Allocation(
               principal=to_decimal(entry.principal),
               interest=to_decimal(entry.interest),
          )
          for invoice_id, entry in allocations.items()
     }


class PaymentService:
     """Service class for payment-related business logic."""

     @staticmethod
     def due_figures_for(
          db: Session,
          customer_id: int,
          invoice_ids: Iterable[str],
          as_of: date,
          exclude_payment_id: Optional[int] = None
     ) -> Dict[str, DueFigures]:
          """
          Current due figures for the customer's active invoices among invoice_ids.

          With exclude_payment_id the figures are derived from the history
          without that payment, as if it had never been recorded.

          Raises:
               ValueError: If an id is not an active invoice of the customer
          """
          invoice_ids = sorted(set(invoice_ids))
          if not invoice_ids:
               return {}

          invoices = (
               db.query(Invoice)
               .filter(
                    Invoice.id.in_(invoice_ids),
                    Invoice.customer_id == customer_id,
                    Invoice.is_deleted.is_(False),
               )
               .all()
          )
          found = {invoice.id: invoice for invoice in invoices}
          missing = [invoice_id for invoice_id in invoice_ids if invoice_id not in found]
          if missing:
               raise ValueError(
                    f"Not an active invoice of customer {customer_id}: {', '.join(missing)}"
               )

          payments = load_payment_records(db, invoice_ids, exclude_payment_id=exclude_payment_id)
          return {
               invoice_id: compute_due(to_invoice_record(invoice), payments, as_of)
               for invoice_id, invoice in found.items()
          }

     @staticmethod
     def _write_allocations(payment: Payment, cleaned: Mapping[str, Allocation]) -> None:
          payment.allocations.clear()
          for invoice_id, entry in cleaned.items():
               payment.allocations.append(
                    PaymentAllocation(
                         invoice_id=invoice_id,
                         principal=round2(entry.principal),
                         interest=round2(entry.interest),
                    )
               )

     @staticmethod
     def record_payment(db: Session, data, as_of: Optional[date] = None) -> Payment:
          """
          Record a new payment against a customer's invoices.

          Args:
               db: SQLAlchemy database session
               data: PaymentCreate payload
               as_of: Date the due caps are evaluated at (defaults to today)

          Returns:
               Created Payment object

          Raises:
               ValueError: If the customer or an allocated invoice doesn't exist
               AllocationError: If the allocation is rejected
          """
          as_of = as_of or date.today()
          customer = db.query(Customer).filter(Customer.id == data.customer_id).first()
          if not customer:
               raise ValueError(f"Customer with ID {data.customer_id} not found")

          proposed = _allocations_from_input(data.allocations)
          due = PaymentService.due_figures_for(db, customer.id, proposed.keys(), as_of)
          try:
               cleaned = validate_allocation(data.amount, proposed, due)
          except AllocationError as exc:
               logger.warning("Rejected payment for customer %s: %s", customer.id, exc)
               raise

          payment = Payment(
               customer_id=customer.id,
               amount=round2(data.amount),
               payment_date=date.today(),
               payment_method=data.payment_method.value,
               notes=data.notes,
          )
          PaymentService._write_allocations(payment, cleaned)
          db.add(payment)
          db.flush()

          logger.info(
               "Recorded payment %s of %s for customer %s across %d invoice(s)",
               payment.id, payment.amount, customer.id, len(cleaned),
          )
          return payment

     @staticmethod
     def edit_payment(db: Session, payment: Payment, data, as_of: Optional[date] = None) -> Payment:
          """
          Replace a payment's amount and allocation map.

          The caps are what is due with this payment left out of the history,
          so interest is re-accrued on any principal it had paid and an
          unchanged payment is always accepted again.
          """
          as_of = as_of or date.today()
          proposed = _allocations_from_input(data.allocations)
          due = PaymentService.due_figures_for(
               db, payment.customer_id, proposed.keys(), as_of, exclude_payment_id=payment.id
          )
          try:
               cleaned = validate_allocation(data.amount, proposed, due)
          except AllocationError as exc:
               logger.warning("Rejected edit of payment %s: %s", payment.id, exc)
               raise

          payment.amount = round2(data.amount)
          if data.payment_method is not None:
               payment.payment_method = data.payment_method.value
          if data.notes is not None:
               payment.notes = data.notes
          PaymentService._write_allocations(payment, cleaned)
          db.flush()

          logger.info("Edited payment %s, new amount %s", payment.id, payment.amount)
          return payment

     @staticmethod
     def delete_payment(db: Session, payment: Payment) -> None:
          """Remove a payment; the invoices it paid become due again on next read."""
          payment_id = payment.id
          db.delete(payment)
          db.flush()
          logger.info("Deleted payment %s", payment_id)

     @staticmethod
     def to_response(payment: Payment) -> dict:
          return {
               "id": payment.id,
               "customer_id": payment.customer_id,
               "amount": round2(payment.amount),
               "payment_date": payment.payment_date,
               "payment_method": payment.payment_method,
               "notes": payment.notes,
               "allocations": {
                    invoice_id: {
                         "principal": round2(entry.principal),
                         "interest": round2(entry.interest),
                    }
                    for invoice_id, entry in allocation_map(payment).items()
               },
               "created_at": payment.created_at,
          }
