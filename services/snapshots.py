"""
Builds engine records from ORM rows.

This is the only place where the calculation engine meets the database: the
rows are read once per request and handed to the pure functions as frozen
records, so every read derives due figures from the full payment history.
"""
from datetime import date
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from models import Invoice, InvoiceLineItem, Payment, PaymentAllocation
from .pricing import LineItem
from .records import (
     CENT,
     Allocation,
     CompoundPeriod,
     DueFigures,
     InvoiceRecord,
     PaymentRecord,
     to_decimal,
)


STATUS_PAID = "Paid"
STATUS_UNPAID = "Unpaid"
STATUS_OVERDUE = "Overdue"


def to_invoice_record(invoice: Invoice) -> InvoiceRecord:
     return InvoiceRecord(
          invoice_id=invoice.id,
          principal=to_decimal(invoice.total),
          due_date=invoice.due_date,
          interest_rate=to_decimal(invoice.interest_rate),
          compound_period=CompoundPeriod(invoice.interest_compound),
          is_deleted=bool(invoice.is_deleted),
     )


def to_line_item(row: InvoiceLineItem) -> LineItem:
     return LineItem(
          quantity=row.quantity,
          net_weight=to_decimal(row.net_weight),
          rate=to_decimal(row.rate),
          making_charge_type=row.making_charge_type,
          making_charge_value=to_decimal(row.making_charge_value),
          apply_tax=bool(row.apply_tax),
          gross_weight=to_decimal(row.gross_weight),
          item_name=row.item_name,
          hsn=row.hsn or "",
          purity=row.purity or "",
     )


def allocation_map(payment: Payment) -> Dict[str, Allocation]:
     return {
          entry.invoice_id: Allocation(
               principal=to_decimal(entry.principal),
               interest=to_decimal(entry.interest),
          )
          for entry in payment.allocations
     }


def to_payment_record(payment: Payment) -> PaymentRecord:
     return PaymentRecord(
          payment_id=payment.id,
          amount=to_decimal(payment.amount),
          allocations=allocation_map(payment),
     )


def load_payment_records(
     db: Session,
     invoice_ids: Iterable[str],
     exclude_payment_id: Optional[int] = None
) -> List[PaymentRecord]:
     """Every payment touching any of the invoices, as records."""
     invoice_ids = list(invoice_ids)
     if not invoice_ids:
          return []
     query = (
          db.query(Payment)
          .join(PaymentAllocation, PaymentAllocation.payment_id == Payment.id)
          .filter(PaymentAllocation.invoice_id.in_(invoice_ids))
     )
     if exclude_payment_id is not None:
          query = query.filter(Payment.id != exclude_payment_id)
     payments = query.distinct().order_by(Payment.id).all()
     return [to_payment_record(payment) for payment in payments]


def invoice_status(figures: DueFigures, due_date: date, as_of: date) -> str:
     if figures.total_due <= CENT:
          return STATUS_PAID
     if as_of > due_date:
          return STATUS_OVERDUE
     return STATUS_UNPAID
