"""
Pydantic schemas for Invoice API request/response validation.

Request schemas reject malformed input (negative weights, rates, charges,
zero quantities); the pricing engine itself computes whatever it is given.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict
from enum import Enum

from services.pricing import MakingChargeType
from services.records import CompoundPeriod


class PaymentModeEnum(str, Enum):
     """How the customer settles the invoice."""
     CASH = "Cash"
     CARD = "Card"
     ONLINE = "Online"


class InvoiceStatusEnum(str, Enum):
     """Derived payment status; never stored."""
     PAID = "Paid"
     UNPAID = "Unpaid"
     OVERDUE = "Overdue"


class LineItemIn(BaseModel):
     """One jewelry line as entered on the invoice form."""
     item_name: str = Field(..., min_length=1, max_length=200)
     quantity: int = Field(1, ge=1)
     hsn: Optional[str] = Field(None, max_length=20)
     purity: Optional[str] = Field(None, max_length=20)
     gross_weight: Decimal = Field(Decimal("0"), ge=0, description="Display weight in grams")
     net_weight: Decimal = Field(..., ge=0, description="Priced weight in grams")
     rate: Decimal = Field(..., ge=0, description="Rate per gram")
     making_charge_type: MakingChargeType = MakingChargeType.FLAT
     making_charge_value: Decimal = Field(Decimal("0"), ge=0)
     apply_tax: bool = True


class InvoiceCreate(BaseModel):
     """Schema for issuing a new invoice."""
     customer_id: int = Field(..., gt=0)
     issue_date: Optional[date] = Field(None, description="Defaults to today")
     due_date: date
     payment_mode: PaymentModeEnum = PaymentModeEnum.CASH
     interest_rate: Decimal = Field(Decimal("0"), ge=0, description="Percent per compounding period")
     interest_compound: CompoundPeriod = CompoundPeriod.MONTHLY
     discount: Decimal = Field(Decimal("0"), ge=0)
     line_items: List[LineItemIn] = Field(..., min_length=1)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "customer_id": 1,
                    "issue_date": "2024-07-15",
                    "due_date": "2024-08-14",
                    "payment_mode": "Cash",
                    "interest_rate": 2,
                    "interest_compound": "Monthly",
                    "discount": 0,
                    "line_items": [
                         {
                              "item_name": "Gold Ring",
                              "quantity": 1,
                              "hsn": "7113",
                              "purity": "22K",
                              "gross_weight": 5.2,
                              "net_weight": 5,
                              "rate": 6000,
                              "making_charge_type": "percentage",
                              "making_charge_value": 10,
                              "apply_tax": True
                         }
                    ]
               }
          }
     )


class InvoiceUpdate(InvoiceCreate):
     """Full replacement of an invoice's customer, terms and lines; the number is kept."""


class InvoiceQuoteRequest(BaseModel):
     """Price lines without issuing an invoice."""
     line_items: List[LineItemIn] = Field(..., min_length=1)
     discount: Decimal = Field(Decimal("0"), ge=0)
     customer_id: Optional[int] = Field(None, gt=0)
     customer_has_tax_id: bool = False


class InvoiceTotalsResponse(BaseModel):
     line_amounts: List[Decimal]
     subtotal: Decimal
     cgst: Decimal
     sgst: Decimal
     tax: Decimal
     discount: Decimal
     total: Decimal
     document_title: str


class LineItemResponse(BaseModel):
     position: int
     item_name: str
     quantity: int
     hsn: Optional[str] = None
     purity: Optional[str] = None
     gross_weight: Decimal
     net_weight: Decimal
     rate: Decimal
     making_charge_type: str
     making_charge_value: Decimal
     apply_tax: bool
     amount: Decimal

     model_config = ConfigDict(from_attributes=True)


class DueFiguresResponse(BaseModel):
     as_of: date
     principal: Decimal
     principal_paid: Decimal
     interest_paid: Decimal
     principal_due: Decimal
     interest_due: Decimal
     total_due: Decimal
     periods_elapsed: int
     status: InvoiceStatusEnum


class BusinessDetails(BaseModel):
     name: str
     address: str
     phone: str
     gstin: Optional[str] = None


class InvoiceResponse(BaseModel):
     """Schema for invoice response."""
     id: str
     document_title: str
     customer_id: int
     customer_name: Optional[str] = None
     customer_gstin: Optional[str] = None
     issue_date: date
     due_date: date
     payment_mode: str
     subtotal: Decimal
     cgst: Decimal
     sgst: Decimal
     discount: Decimal
     total: Decimal
     interest_rate: Decimal
     interest_compound: CompoundPeriod
     is_deleted: bool
     created_at: datetime
     line_items: List[LineItemResponse]
     business: Optional[BusinessDetails] = None
     due: Optional[DueFiguresResponse] = None


class InvoiceListResponse(BaseModel):
     """Schema for paginated invoice list response."""
     invoices: List[InvoiceResponse]
     total: int
     page: int = 1
     page_size: int = 50
