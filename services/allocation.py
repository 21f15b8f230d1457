"""
Payment allocation validation.

A payment is split across invoices into principal and interest shares. Before
it is persisted the split must conserve the paid amount and must not exceed
what is due on any invoice.
"""
from decimal import Decimal
from typing import Dict, Mapping

from .records import ZERO, Allocation, DueFigures, round2, to_decimal


ALLOCATION_EPSILON = Decimal("0.01")


class AllocationError(ValueError):
     """Base class for rejected payment allocations."""
     code = "allocation_error"

     def to_dict(self) -> dict:
          return {"error": self.code, "message": str(self)}


class AllocationMismatch(AllocationError):
     code = "allocation_mismatch"

     def __init__(self, declared: Decimal, allocated: Decimal):
          self.declared = declared
          self.allocated = allocated
          super().__init__(
               f"Allocated amount {round2(allocated)} does not match payment amount {round2(declared)}"
          )

     def to_dict(self) -> dict:
          data = super().to_dict()
          data.update(declared=str(round2(self.declared)), allocated=str(round2(self.allocated)))
          return data


class AllocationExceedsDue(AllocationError):
     code = "allocation_exceeds_due"

     def __init__(self, invoice_id: str, component: str, requested: Decimal, max_allowed: Decimal):
          self.invoice_id = invoice_id
          self.component = component
          self.requested = requested
          self.max_allowed = max_allowed
          super().__init__(
               f"{component.capitalize()} of {round2(requested)} for invoice {invoice_id} "
               f"exceeds the {round2(max_allowed)} due"
          )

     def to_dict(self) -> dict:
          data = super().to_dict()
          data.update(
               invoice_id=self.invoice_id,
               component=self.component,
               requested=str(round2(self.requested)),
               max_allowed=str(round2(self.max_allowed)),
          )
          return data


class NoAllocation(AllocationError):
     code = "no_allocation"

     def __init__(self, total_amount: Decimal):
          self.total_amount = total_amount
          super().__init__(f"Payment of {round2(total_amount)} is not allocated to any invoice")

     def to_dict(self) -> dict:
          data = super().to_dict()
          data.update(total_amount=str(round2(self.total_amount)))
          return data


class NegativeAllocation(AllocationError):
     code = "negative_allocation"

     def __init__(self, invoice_id: str, component: str, value: Decimal):
          self.invoice_id = invoice_id
          self.component = component
          self.value = value
          super().__init__(f"{component.capitalize()} of {round2(value)} for invoice {invoice_id} is negative")

     def to_dict(self) -> dict:
          data = super().to_dict()
          data.update(invoice_id=self.invoice_id, component=self.component, value=str(round2(self.value)))
          return data


def clean_allocations(allocations: Mapping[str, Allocation]) -> Dict[str, Allocation]:
     """
     Drop entries with nothing positive allocated.

     An entry that carries a positive share next to a negative one is
     rejected with NegativeAllocation rather than adjusted.
     """
     cleaned = {}
     for invoice_id, entry in allocations.items():
          principal = to_decimal(entry.principal)
          interest = to_decimal(entry.interest)
          if principal <= 0 and interest <= 0:
               continue
          if principal < 0:
               raise NegativeAllocation(invoice_id, "principal", principal)
          if interest < 0:
               raise NegativeAllocation(invoice_id, "interest", interest)
          cleaned[invoice_id] = Allocation(principal=principal, interest=interest)
     return cleaned


def validate_allocation(
     total_amount,
     allocations: Mapping[str, Allocation],
     due_figures: Mapping[str, DueFigures]
) -> Dict[str, Allocation]:
     """
     Validate a payment's allocation map and return it cleaned.

     When an existing payment is edited, due_figures must be computed without
     that payment (compute_due(..., exclude_payment_id=...)), so the caps are
     what is due excluding its own earlier contribution.

     Args:
          total_amount: Declared payment amount
          allocations: Proposed invoice_id -> Allocation
          due_figures: Current invoice_id -> DueFigures

     Returns:
          The allocation map without empty entries

     Raises:
          NegativeAllocation: A share is negative next to a positive one
          NoAllocation: A positive payment with nothing allocated
          AllocationMismatch: Shares do not add up to the payment amount
          AllocationExceedsDue: A share is above what is due on its invoice
     """
     total_amount = to_decimal(total_amount)
     cleaned = clean_allocations(allocations)

     if not cleaned and total_amount > 0:
          raise NoAllocation(total_amount)

     allocated = sum((entry.total for entry in cleaned.values()), ZERO)
     if abs(allocated - total_amount) > ALLOCATION_EPSILON:
          raise AllocationMismatch(total_amount, allocated)

     for invoice_id, entry in cleaned.items():
          figures = due_figures.get(invoice_id)
          principal_due = figures.principal_due if figures else ZERO
          interest_due = figures.interest_due if figures else ZERO
          if entry.principal > principal_due + ALLOCATION_EPSILON:
               raise AllocationExceedsDue(invoice_id, "principal", entry.principal, max(principal_due, ZERO))
          if entry.interest > interest_due + ALLOCATION_EPSILON:
               raise AllocationExceedsDue(invoice_id, "interest", entry.interest, max(interest_due, ZERO))

     return cleaned
