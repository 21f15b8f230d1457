"""
Interest accrual on overdue invoices.

Due figures are always derived from the invoice terms plus the full payment
history; nothing is cached or stored. Interest compounds per whole period
elapsed since the original due date on the principal still outstanding.
Partial periods do not accrue.
"""
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from .records import (
     ZERO,
     CompoundPeriod,
     DueFigures,
     InvoiceRecord,
     PaymentRecord,
     round2,
     to_decimal,
)


def months_between(start: date, end: date) -> int:
     """
     Whole calendar months from start to end.

     A month counts once the day of month is reached again, so 2024-01-31 to
     2024-02-29 is 0 months and 2024-01-01 to 2024-04-01 is 3.
     """
     months = (end.year - start.year) * 12 + (end.month - start.month)
     if end.day < start.day:
          months -= 1
     return months


def periods_elapsed(due_date: date, as_of: date, period) -> int:
     """Whole compounding periods between the due date and as_of (never negative)."""
     if as_of <= due_date:
          return 0
     period = CompoundPeriod(period)
     return max(0, months_between(due_date, as_of) // period.months)


def sum_paid(
     invoice_id: str,
     payments: Iterable[PaymentRecord],
     exclude_payment_id: Optional[int] = None
) -> Tuple[Decimal, Decimal]:
     """Total principal and interest applied to one invoice across payments."""
     principal_paid = ZERO
     interest_paid = ZERO
     for payment in payments:
          if exclude_payment_id is not None and payment.payment_id == exclude_payment_id:
               continue
          entry = payment.allocations.get(invoice_id)
          if entry is None:
               continue
          principal_paid += to_decimal(entry.principal)
          interest_paid += to_decimal(entry.interest)
     return principal_paid, interest_paid


def compute_due(
     invoice: InvoiceRecord,
     payments: Iterable[PaymentRecord],
     as_of: date,
     exclude_payment_id: Optional[int] = None
) -> DueFigures:
     """
     Derive what is paid and owed on an invoice as of a date.

     Args:
          invoice: Invoice terms (principal, due date, rate, compounding)
          payments: Payment history; entries for other invoices are ignored
          as_of: Evaluation date
          exclude_payment_id: Payment left out of the history, so an edited
               payment is checked against what is due without its own
               earlier contribution (interest included)

     Returns:
          DueFigures for the invoice
     """
     principal_paid, interest_paid = sum_paid(invoice.invoice_id, payments, exclude_payment_id)
     principal_due = to_decimal(invoice.principal) - principal_paid
     rate = to_decimal(invoice.interest_rate)

     def _figures(interest_due: Decimal, periods: int = 0) -> DueFigures:
          return DueFigures(
               principal_paid=principal_paid,
               interest_paid=interest_paid,
               principal_due=principal_due,
               interest_due=interest_due,
               periods_elapsed=periods,
          )

     # Fully paid invoices stop reporting interest; interest_paid is kept.
     if principal_due <= 0:
          return _figures(ZERO)

     if as_of <= invoice.due_date or rate == 0:
          return _figures(ZERO)

     periods = periods_elapsed(invoice.due_date, as_of, invoice.compound_period)
     if periods <= 0:
          return _figures(ZERO)

     factor = (1 + rate / Decimal(100)) ** periods
     accrued = principal_due * (factor - 1)
     interest_due = max(ZERO, round2(accrued - interest_paid))
     return _figures(interest_due, periods)
