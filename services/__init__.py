from .records import (
     Allocation,
     CompoundPeriod,
     DueFigures,
     InvoiceRecord,
     PaymentRecord,
     round2,
)
from .pricing import (
     GST_RATE,
     InvoiceTotals,
     LineItem,
     MakingChargeType,
     aggregate_totals,
     price_line,
)
from .interest import compute_due, months_between, periods_elapsed
from .allocation import (
     ALLOCATION_EPSILON,
     AllocationError,
     AllocationExceedsDue,
     AllocationMismatch,
     NoAllocation,
     validate_allocation,
)
from .numbering import invoice_prefix, next_invoice_number

__all__ = [
     "Allocation",
     "CompoundPeriod",
     "DueFigures",
     "InvoiceRecord",
     "PaymentRecord",
     "round2",
     "GST_RATE",
     "InvoiceTotals",
     "LineItem",
     "MakingChargeType",
     "aggregate_totals",
     "price_line",
     "compute_due",
     "months_between",
     "periods_elapsed",
     "ALLOCATION_EPSILON",
     "AllocationError",
     "AllocationExceedsDue",
     "AllocationMismatch",
     "NoAllocation",
     "validate_allocation",
     "invoice_prefix",
     "next_invoice_number",
]
