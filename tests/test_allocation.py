"""Unit tests for payment allocation validation."""

from datetime import date
from decimal import Decimal

import pytest

from services.allocation import (
    AllocationExceedsDue,
    AllocationMismatch,
    NegativeAllocation,
    NoAllocation,
    clean_allocations,
    validate_allocation,
)
from services.interest import compute_due
from services.records import Allocation, CompoundPeriod, DueFigures, InvoiceRecord, PaymentRecord


def _due(principal_due, interest_due, principal_paid="0", interest_paid="0"):
    return DueFigures(
        principal_paid=Decimal(principal_paid),
        interest_paid=Decimal(interest_paid),
        principal_due=Decimal(principal_due),
        interest_due=Decimal(interest_due),
    )


def _alloc(principal="0", interest="0"):
    return Allocation(Decimal(principal), Decimal(interest))


@pytest.fixture
def due():
    return {"INV-240700001": _due("300", "200"), "INV-240700002": _due("1000", "0")}


class TestValidateAllocation:
    """Tests for validate_allocation."""

    def test_exact_allocation_is_accepted(self, due):
        result = validate_allocation(Decimal("500"), {"INV-240700001": _alloc("300", "200")}, due)
        assert result == {"INV-240700001": _alloc("300", "200")}

    def test_split_across_invoices(self, due):
        allocations = {"INV-240700001": _alloc("100", "200"), "INV-240700002": _alloc("700")}
        result = validate_allocation(Decimal("1000"), allocations, due)
        assert set(result) == {"INV-240700001", "INV-240700002"}

    def test_sum_mismatch_is_rejected(self, due):
        with pytest.raises(AllocationMismatch) as exc_info:
            validate_allocation(Decimal("500"), {"INV-240700001": _alloc("300", "150")}, due)

        assert exc_info.value.declared == Decimal("500")
        assert exc_info.value.allocated == Decimal("450")
        assert exc_info.value.to_dict()["error"] == "allocation_mismatch"
        assert exc_info.value.to_dict()["allocated"] == "450.00"

    def test_sum_within_a_cent_is_accepted(self, due):
        result = validate_allocation(Decimal("500"), {"INV-240700001": _alloc("300", "199.995")}, due)
        assert "INV-240700001" in result

    def test_principal_above_due_is_rejected(self, due):
        with pytest.raises(AllocationExceedsDue) as exc_info:
            validate_allocation(Decimal("550"), {"INV-240700001": _alloc("350", "200")}, due)

        error = exc_info.value
        assert error.invoice_id == "INV-240700001"
        assert error.component == "principal"
        assert error.max_allowed == Decimal("300")
        assert error.to_dict()["requested"] == "350.00"

    def test_interest_above_due_is_rejected(self, due):
        with pytest.raises(AllocationExceedsDue) as exc_info:
            validate_allocation(Decimal("10"), {"INV-240700002": _alloc(interest="10")}, due)
        assert exc_info.value.component == "interest"
        assert exc_info.value.max_allowed == Decimal("0")

    def test_cap_tolerates_a_cent(self, due):
        result = validate_allocation(Decimal("300.01"), {"INV-240700001": _alloc("300.01")}, due)
        assert result["INV-240700001"].principal == Decimal("300.01")

    def test_unknown_invoice_has_nothing_due(self, due):
        with pytest.raises(AllocationExceedsDue) as exc_info:
            validate_allocation(Decimal("10"), {"INV-999900001": _alloc("10")}, due)
        assert exc_info.value.max_allowed == Decimal("0")

    def test_empty_entries_are_dropped(self, due):
        allocations = {"INV-240700001": _alloc("300", "200"), "INV-240700002": _alloc("0", "0")}
        result = validate_allocation(Decimal("500"), allocations, due)
        assert list(result) == ["INV-240700001"]

    def test_positive_payment_with_no_allocation(self, due):
        with pytest.raises(NoAllocation) as exc_info:
            validate_allocation(Decimal("500"), {"INV-240700002": _alloc()}, due)
        assert exc_info.value.to_dict()["total_amount"] == "500.00"

    def test_zero_payment_with_no_allocation(self, due):
        assert validate_allocation(Decimal("0"), {}, due) == {}

    def test_errors_are_value_errors(self, due):
        with pytest.raises(ValueError):
            validate_allocation(Decimal("1"), {}, due)

class TestEditedPaymentCaps:
    """Caps for an edited payment come from the history without that payment."""

    AS_OF = date(2024, 4, 1)

    @pytest.fixture
    def invoice(self):
        return InvoiceRecord(
            invoice_id="INV-231200001",
            principal=Decimal("10000"),
            due_date=date(2024, 1, 1),
            interest_rate=Decimal("2"),
            compound_period=CompoundPeriod.MONTHLY,
        )

    def _history(self, principal, interest="0"):
        allocation = _alloc(principal, interest)
        return [PaymentRecord(1, allocation.total, {"INV-231200001": allocation})]

    def _caps(self, invoice, history, exclude_payment_id=None):
        figures = compute_due(invoice, history, self.AS_OF, exclude_payment_id=exclude_payment_id)
        return {invoice.invoice_id: figures}

    def test_edit_can_add_interest_after_principal_only_payment(self, invoice):
        history = self._history("4000")
        proposed = {"INV-231200001": _alloc("4000", "600")}

        caps = self._caps(invoice, history, exclude_payment_id=1)
        assert caps["INV-231200001"].interest_due == Decimal("612.08")
        assert validate_allocation(Decimal("4600"), proposed, caps) == proposed

    def test_caps_with_the_payment_still_counted_are_too_low(self, invoice):
        history = self._history("4000")
        proposed = {"INV-231200001": _alloc("4000", "600")}

        with pytest.raises(AllocationExceedsDue) as exc_info:
            validate_allocation(Decimal("4600"), proposed, self._caps(invoice, history))
        assert exc_info.value.max_allowed == Decimal("367.25")

    def test_edit_of_payment_that_cleared_principal(self, invoice):
        history = self._history("10000")
        proposed = {"INV-231200001": _alloc("10000", "612.08")}

        caps = self._caps(invoice, history, exclude_payment_id=1)
        assert validate_allocation(Decimal("10612.08"), proposed, caps) == proposed

    def test_unchanged_payment_is_accepted_again(self, invoice):
        history = self._history("4000", "200")
        proposed = {"INV-231200001": _alloc("4000", "200")}

        caps = self._caps(invoice, history, exclude_payment_id=1)
        assert validate_allocation(Decimal("4200"), proposed, caps) == proposed


class TestCleanAllocations:
    def test_entries_without_a_positive_share_are_dropped(self):
        cleaned = clean_allocations({"A": _alloc("100", "5"), "B": _alloc("-1", "-1"), "C": _alloc()})
        assert cleaned == {"A": _alloc("100", "5")}

    def test_negative_share_next_to_positive_one_is_rejected(self):
        with pytest.raises(NegativeAllocation) as exc_info:
            clean_allocations({"A": _alloc("100", "-5")})

        error = exc_info.value
        assert error.invoice_id == "A"
        assert error.component == "interest"
        assert error.to_dict() == {
            "error": "negative_allocation",
            "message": str(error),
            "invoice_id": "A",
            "component": "interest",
            "value": "-5.00",
        }

    def test_validator_reports_negative_share(self, due):
        with pytest.raises(NegativeAllocation):
            validate_allocation(Decimal("95"), {"INV-240700001": _alloc("-5", "100")}, due)
