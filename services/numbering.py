"""
Invoice numbers: {PREFIX}-{YY}{MM}{sequence:05d}.

INV is used for tax invoices (customer has a GSTIN) and CSH for cash memos.
The sequence restarts at 1 for every prefix and issue month.
"""
import re
from datetime import date
from typing import Iterable, Optional


TAX_INVOICE_PREFIX = "INV"
CASH_MEMO_PREFIX = "CSH"


def invoice_prefix(customer_has_tax_id: bool) -> str:
     return TAX_INVOICE_PREFIX if customer_has_tax_id else CASH_MEMO_PREFIX


def period_key(prefix: str, issue_date: date) -> str:
     """The part of the number shared by every invoice of a prefix and month."""
     return f"{prefix}-{issue_date.year % 100:02d}{issue_date.month:02d}"


def format_invoice_number(prefix: str, issue_date: date, sequence: int) -> str:
     return f"{period_key(prefix, issue_date)}{sequence:05d}"


def parse_sequence(invoice_id: str, prefix: str, issue_date: date) -> Optional[int]:
     """Sequence number of invoice_id if it belongs to the prefix/period, else None."""
     match = re.fullmatch(re.escape(period_key(prefix, issue_date)) + r"(\d{5,})", invoice_id)
     if not match:
          return None
     return int(match.group(1))


def next_invoice_number(prefix: str, issue_date: date, existing_ids: Iterable[str]) -> str:
     """Next free number for the prefix and month: highest existing sequence + 1."""
     sequences = [
          seq for seq in (parse_sequence(i, prefix, issue_date) for i in existing_ids)
          if seq is not None
     ]
     return format_invoice_number(prefix, issue_date, max(sequences, default=0) + 1)
