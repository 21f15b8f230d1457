"""
Pydantic schemas for payment recording API.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .invoice import DueFiguresResponse, PaymentModeEnum


class AllocationIn(BaseModel):
     """Share of the payment applied to one invoice."""
     principal: Decimal = Field(Decimal("0"), ge=0)
     interest: Decimal = Field(Decimal("0"), ge=0)


class PaymentCreate(BaseModel):
     """Request body for POST /api/payments."""
     customer_id: int = Field(..., gt=0)
     amount: Decimal = Field(..., gt=0, description="Total amount received")
     payment_method: PaymentModeEnum = PaymentModeEnum.CASH
     notes: Optional[str] = Field(None, max_length=500)
     allocations: Dict[str, AllocationIn] = Field(
          default_factory=dict,
          description="Invoice number -> principal/interest split; must add up to amount",
     )

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "customer_id": 1,
                    "amount": 500.00,
                    "payment_method": "Cash",
                    "allocations": {
                         "INV-240700001": {"principal": 300.00, "interest": 200.00}
                    }
               }
          }
     )


class PaymentUpdate(BaseModel):
     """Replaces a payment's amount and allocation map."""
     amount: Decimal = Field(..., gt=0)
     payment_method: Optional[PaymentModeEnum] = None
     notes: Optional[str] = Field(None, max_length=500)
     allocations: Dict[str, AllocationIn] = Field(default_factory=dict)


class AllocationOut(BaseModel):
     principal: Decimal
     interest: Decimal


class PaymentResponse(BaseModel):
     id: int
     customer_id: int
     amount: Decimal
     payment_date: date
     payment_method: str
     notes: Optional[str] = None
     allocations: Dict[str, AllocationOut]
     created_at: datetime


class PaymentListResponse(BaseModel):
     payments: List[PaymentResponse]
     total: int


class InvoiceBalance(DueFiguresResponse):
     invoice_id: str
     due_date: date


class CustomerBalanceResponse(BaseModel):
     """Outstanding position of a customer across active invoices."""
     customer_id: int
     as_of: date
     invoices: List[InvoiceBalance]
     principal_due: Decimal
     interest_due: Decimal
     total_due: Decimal
     paid_count: int
     unpaid_count: int
     overdue_count: int
