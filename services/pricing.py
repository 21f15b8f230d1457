"""
Line item pricing and invoice totals.

Jewelry lines are priced on net weight: material value (net weight x rate)
plus a making charge whose meaning depends on its type. Nothing here rounds;
callers round for display.
"""
import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Union

from .records import ZERO, round2, to_decimal


GST_RATE = Decimal("0.03")


class MakingChargeType(str, enum.Enum):
     PERCENTAGE = "percentage"
     FLAT = "flat"
     PER_GRAM = "per_gram"
     PER_ITEM = "per_item"


@dataclass(frozen=True)
class LineItem:
     """One priced entry on an invoice. Display-only fields are never priced."""
     quantity: int
     net_weight: Decimal
     rate: Decimal
     making_charge_type: Union[MakingChargeType, str]
     making_charge_value: Decimal
     apply_tax: bool = True
     gross_weight: Decimal = ZERO
     item_name: str = ""
     hsn: str = ""
     purity: str = ""


@dataclass(frozen=True)
class InvoiceTotals:
     subtotal: Decimal
     cgst: Decimal
     sgst: Decimal
     discount: Decimal
     total: Decimal

     @property
     def tax(self) -> Decimal:
          return self.cgst + self.sgst

     def as_dict(self) -> dict:
          return {
               "subtotal": round2(self.subtotal),
               "cgst": round2(self.cgst),
               "sgst": round2(self.sgst),
               "tax": round2(self.tax),
               "discount": round2(self.discount),
               "total": round2(self.total),
          }


def _charge_type(value) -> Union[MakingChargeType, None]:
     if isinstance(value, MakingChargeType):
          return value
     try:
          return MakingChargeType(value)
     except ValueError:
          return None


def making_charge(item: LineItem) -> Decimal:
     """
     Making charge for a line.

     Zero when the charge value is not positive or the type is unknown; a bad
     line must not fail the whole invoice.
     """
     value = to_decimal(item.making_charge_value)
     if value <= 0:
          return ZERO

     net_weight = to_decimal(item.net_weight)
     charge_type = _charge_type(item.making_charge_type)

     if charge_type is MakingChargeType.PERCENTAGE:
          return net_weight * to_decimal(item.rate) * (value / Decimal(100))
     if charge_type is MakingChargeType.FLAT:
          return value
     if charge_type is MakingChargeType.PER_GRAM:
          return value * net_weight
     if charge_type is MakingChargeType.PER_ITEM:
          return value * to_decimal(item.quantity)
     return ZERO


def price_line(item: LineItem) -> Decimal:
     """Monetary total of one line: net_weight * rate + making charge."""
     base = to_decimal(item.net_weight) * to_decimal(item.rate)
     return base + making_charge(item)


def aggregate_totals(
     line_items: Iterable[LineItem],
     discount=ZERO,
     customer_has_tax_id: bool = False
) -> InvoiceTotals:
     """
     Sum line amounts into subtotal, CGST/SGST and total.

     Tax is only charged on lines flagged apply_tax and only when the customer
     has a GSTIN (cash memos carry no tax). The discount is subtracted after
     tax and the total is not clamped at zero.
     """
     subtotal = ZERO
     taxable_base = ZERO
     for item in line_items:
          amount = price_line(item)
          subtotal += amount
          if customer_has_tax_id and item.apply_tax:
               taxable_base += amount

     tax = taxable_base * GST_RATE
     half = tax / 2
     discount = to_decimal(discount)

     return InvoiceTotals(
          subtotal=subtotal,
          cgst=half,
          sgst=half,
          discount=discount,
          total=subtotal + tax - discount,
     )
