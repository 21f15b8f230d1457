"""Unit tests for overdue interest accrual."""

from datetime import date
from decimal import Decimal

import pytest

from services.interest import compute_due, months_between, periods_elapsed, sum_paid
from services.records import Allocation, CompoundPeriod, InvoiceRecord, PaymentRecord


def _invoice(principal="10000", rate="2", period=CompoundPeriod.MONTHLY, due=date(2024, 1, 1)):
    return InvoiceRecord(
        invoice_id="INV-231200001",
        principal=Decimal(principal),
        due_date=due,
        interest_rate=Decimal(rate),
        compound_period=period,
    )


def _payment(payment_id, invoice_id="INV-231200001", principal="0", interest="0"):
    allocation = Allocation(Decimal(principal), Decimal(interest))
    return PaymentRecord(payment_id, allocation.total, {invoice_id: allocation})


class TestMonthsBetween:
    """Tests for calendar month counting."""

    @pytest.mark.parametrize(
        "start,end,expected",
        [
            (date(2024, 1, 1), date(2024, 4, 1), 3),
            (date(2024, 1, 1), date(2024, 3, 31), 2),
            (date(2024, 1, 31), date(2024, 2, 29), 0),
            (date(2024, 1, 31), date(2024, 3, 31), 2),
            (date(2023, 11, 15), date(2024, 2, 15), 3),
            (date(2024, 1, 1), date(2024, 1, 1), 0),
        ],
    )
    def test_whole_months(self, start, end, expected):
        assert months_between(start, end) == expected


class TestPeriodsElapsed:
    """Tests for compounding period counting."""

    def test_before_or_on_due_date_is_zero(self):
        assert periods_elapsed(date(2024, 1, 1), date(2023, 12, 1), CompoundPeriod.MONTHLY) == 0
        assert periods_elapsed(date(2024, 1, 1), date(2024, 1, 1), CompoundPeriod.MONTHLY) == 0

    @pytest.mark.parametrize(
        "period,as_of,expected",
        [
            (CompoundPeriod.MONTHLY, date(2024, 7, 15), 6),
            (CompoundPeriod.QUARTERLY, date(2024, 7, 15), 2),
            (CompoundPeriod.HALF_YEARLY, date(2024, 12, 31), 1),
            (CompoundPeriod.ANNUALLY, date(2025, 12, 31), 1),
            (CompoundPeriod.ANNUALLY, date(2026, 1, 1), 2),
        ],
    )
    def test_floor_of_months_over_period(self, period, as_of, expected):
        assert periods_elapsed(date(2024, 1, 1), as_of, period) == expected

    def test_accepts_period_value_string(self):
        assert periods_elapsed(date(2024, 1, 1), date(2024, 7, 1), "HalfYearly") == 1


class TestSumPaid:
    def test_ignores_other_invoices(self):
        payments = [
            _payment(1, principal="100", interest="10"),
            _payment(2, invoice_id="INV-231200002", principal="999"),
            _payment(3, principal="50"),
        ]
        assert sum_paid("INV-231200001", payments) == (Decimal("150"), Decimal("10"))


class TestComputeDue:
    """Tests for compute_due."""

    def test_three_months_overdue_no_payments(self):
        figures = compute_due(_invoice(), [], date(2024, 4, 1))

        assert figures.periods_elapsed == 3
        assert figures.principal_due == Decimal("10000")
        assert figures.interest_due == Decimal("612.08")
        assert figures.total_due == Decimal("10612.08")

    def test_principal_payment_reduces_interest_base(self):
        figures = compute_due(_invoice(), [_payment(1, principal="4000")], date(2024, 4, 1))

        assert figures.principal_paid == Decimal("4000")
        assert figures.principal_due == Decimal("6000")
        assert figures.interest_due == Decimal("367.25")

    def test_excluded_payment_is_left_out_of_history(self):
        payments = [_payment(1, principal="4000"), _payment(2, principal="1000", interest="50")]
        figures = compute_due(_invoice(), payments, date(2024, 4, 1), exclude_payment_id=1)

        assert figures.principal_paid == Decimal("1000")
        assert figures.interest_paid == Decimal("50")
        assert figures.principal_due == Decimal("9000")
        assert figures.interest_due == Decimal("500.87")

    def test_interest_payment_offsets_accrued_interest(self):
        figures = compute_due(_invoice(), [_payment(1, interest="100")], date(2024, 4, 1))

        assert figures.interest_paid == Decimal("100")
        assert figures.interest_due == Decimal("512.08")

    def test_interest_due_never_negative(self):
        figures = compute_due(_invoice(), [_payment(1, interest="1000")], date(2024, 4, 1))
        assert figures.interest_due == Decimal("0")

    def test_not_yet_due(self):
        figures = compute_due(_invoice(), [], date(2023, 12, 15))

        assert figures.interest_due == Decimal("0")
        assert figures.periods_elapsed == 0
        assert figures.principal_due == Decimal("10000")

    def test_partial_period_does_not_accrue(self):
        figures = compute_due(_invoice(), [], date(2024, 1, 31))
        assert figures.interest_due == Decimal("0")

    def test_fully_paid_reports_no_interest(self):
        payments = [_payment(1, principal="10000", interest="150")]
        figures = compute_due(_invoice(), payments, date(2025, 1, 1))

        assert figures.principal_due == Decimal("0")
        assert figures.interest_due == Decimal("0")
        assert figures.interest_paid == Decimal("150")
        assert figures.total_due == Decimal("0")

    def test_zero_rate(self):
        figures = compute_due(_invoice(rate="0"), [], date(2030, 1, 1))
        assert figures.interest_due == Decimal("0")

    @pytest.mark.parametrize(
        "period,rate,as_of,expected",
        [
            (CompoundPeriod.QUARTERLY, "3", date(2024, 7, 15), Decimal("609.00")),
            (CompoundPeriod.HALF_YEARLY, "5", date(2024, 12, 31), Decimal("500.00")),
            (CompoundPeriod.ANNUALLY, "12", date(2025, 12, 31), Decimal("1200.00")),
        ],
    )
    def test_compounding_periods(self, period, rate, as_of, expected):
        figures = compute_due(_invoice(rate=rate, period=period), [], as_of)
        assert figures.interest_due == expected

    def test_interest_is_monotonic_in_as_of(self):
        invoice = _invoice()
        payments = [_payment(1, principal="2500", interest="50")]
        dates = [date(2024, m, d) for m in range(1, 13) for d in (1, 15, 28)]

        dues = [compute_due(invoice, payments, as_of).interest_due for as_of in dates]

        assert dues == sorted(dues)

    def test_same_inputs_same_figures(self):
        payments = [_payment(1, principal="1234.56", interest="12.34")]
        first = compute_due(_invoice(), payments, date(2024, 9, 9))
        second = compute_due(_invoice(), list(payments), date(2024, 9, 9))
        assert first == second

    def test_as_dict_rounds_values(self):
        figures = compute_due(_invoice(principal="1000.005"), [], date(2023, 1, 1)).as_dict()

        assert figures["principal_due"] == Decimal("1000.01")
        assert figures["periods_elapsed"] == 0
