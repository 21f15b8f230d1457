from .customer import (
     CustomerCreate,
     CustomerUpdate,
     CustomerResponse,
     CustomerListResponse,
)
from .invoice import (
     LineItemIn,
     InvoiceCreate,
     InvoiceUpdate,
     InvoiceQuoteRequest,
     InvoiceTotalsResponse,
     InvoiceResponse,
     InvoiceListResponse,
     InvoiceStatusEnum,
     DueFiguresResponse,
)
from .payment import (
     AllocationIn,
     PaymentCreate,
     PaymentUpdate,
     PaymentResponse,
     PaymentListResponse,
     CustomerBalanceResponse,
)
from .settings import BusinessSettingsUpdate

__all__ = [
     "CustomerCreate",
     "CustomerUpdate",
     "CustomerResponse",
     "CustomerListResponse",
     "LineItemIn",
     "InvoiceCreate",
     "InvoiceUpdate",
     "InvoiceQuoteRequest",
     "InvoiceTotalsResponse",
     "InvoiceResponse",
     "InvoiceListResponse",
     "InvoiceStatusEnum",
     "DueFiguresResponse",
     "AllocationIn",
     "PaymentCreate",
     "PaymentUpdate",
     "PaymentResponse",
     "PaymentListResponse",
     "CustomerBalanceResponse",
     "BusinessSettingsUpdate",
]
