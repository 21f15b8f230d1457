"""
Plain records consumed and produced by the billing calculation engine.

These are immutable snapshots built by the service layer from ORM rows (or by
any other caller). The engine never sees a database session.
"""
import enum
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping, Optional


CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
     """Coerce ints, floats, strings and None to Decimal without float noise."""
     if value is None:
          return ZERO
     if isinstance(value, Decimal):
          return value
     return Decimal(str(value))


def round2(value) -> Decimal:
     """Round to two places, half up (display / reconciliation boundary)."""
     return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class CompoundPeriod(str, enum.Enum):
     """Interval at which overdue interest capitalizes."""
     MONTHLY = "Monthly"
     QUARTERLY = "Quarterly"
     HALF_YEARLY = "HalfYearly"
     ANNUALLY = "Annually"

     @property
     def months(self) -> int:
          return {
               CompoundPeriod.MONTHLY: 1,
               CompoundPeriod.QUARTERLY: 3,
               CompoundPeriod.HALF_YEARLY: 6,
               CompoundPeriod.ANNUALLY: 12,
          }[self]


@dataclass(frozen=True)
class Allocation:
     """Share of one payment applied to one invoice."""
     principal: Decimal = ZERO
     interest: Decimal = ZERO

     @property
     def total(self) -> Decimal:
          return self.principal + self.interest


@dataclass(frozen=True)
class PaymentRecord:
     payment_id: Optional[int]
     amount: Decimal
     allocations: Mapping[str, Allocation] = field(default_factory=dict)


@dataclass(frozen=True)
class InvoiceRecord:
     """The interest-relevant terms of an issued invoice."""
     invoice_id: str
     principal: Decimal
     due_date: date
     interest_rate: Decimal = ZERO
     compound_period: CompoundPeriod = CompoundPeriod.MONTHLY
     is_deleted: bool = False


@dataclass(frozen=True)
class DueFigures:
     principal_paid: Decimal
     interest_paid: Decimal
     principal_due: Decimal
     interest_due: Decimal
     periods_elapsed: int = 0

     @property
     def total_due(self) -> Decimal:
          return self.principal_due + self.interest_due

     def as_dict(self) -> dict:
          return {
               "principal_paid": round2(self.principal_paid),
               "interest_paid": round2(self.interest_paid),
               "principal_due": round2(self.principal_due),
               "interest_due": round2(self.interest_due),
               "total_due": round2(self.total_due),
               "periods_elapsed": self.periods_elapsed,
          }
