"""Unit tests for invoice numbering."""

from datetime import date

from services.numbering import (
    CASH_MEMO_PREFIX,
    TAX_INVOICE_PREFIX,
    format_invoice_number,
    invoice_prefix,
    next_invoice_number,
    parse_sequence,
)

EXISTING = [
    "INV-240700001",
    "INV-240700007",
    "INV-240600009",
    "CSH-240700003",
]


class TestInvoiceNumbering:
    def test_prefix_follows_tax_id(self):
        assert invoice_prefix(True) == TAX_INVOICE_PREFIX == "INV"
        assert invoice_prefix(False) == CASH_MEMO_PREFIX == "CSH"

    def test_format(self):
        assert format_invoice_number("INV", date(2024, 7, 15), 42) == "INV-240700042"

    def test_first_number_of_month(self):
        assert next_invoice_number("INV", date(2024, 8, 1), EXISTING) == "INV-240800001"

    def test_continues_after_highest_sequence(self):
        assert next_invoice_number("INV", date(2024, 7, 31), EXISTING) == "INV-240700008"

    def test_prefixes_have_independent_sequences(self):
        assert next_invoice_number("CSH", date(2024, 7, 2), EXISTING) == "CSH-240700004"

    def test_parse_sequence_rejects_foreign_numbers(self):
        assert parse_sequence("INV-240700012", "INV", date(2024, 7, 1)) == 12
        assert parse_sequence("INV-240600012", "INV", date(2024, 7, 1)) is None
        assert parse_sequence("INV-2407000x2", "INV", date(2024, 7, 1)) is None
        assert parse_sequence("CSH-240700012", "INV", date(2024, 7, 1)) is None
