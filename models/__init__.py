from .base import Base
from .business_settings import BusinessSettings
from .customer import Customer
from .invoice import Invoice, InvoiceLineItem
from .payment import Payment, PaymentAllocation

__all__ = [
     "Base",
     "BusinessSettings",
     "Customer",
     "Invoice",
     "InvoiceLineItem",
     "Payment",
     "PaymentAllocation",
]
