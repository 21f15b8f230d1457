"""Unit tests for line item pricing and invoice totals."""

from decimal import Decimal

import pytest

from services.pricing import (
    InvoiceTotals,
    LineItem,
    MakingChargeType,
    aggregate_totals,
    making_charge,
    price_line,
)


def _item(**kwargs) -> LineItem:
    defaults = dict(
        quantity=1,
        net_weight=Decimal("5"),
        rate=Decimal("6000"),
        making_charge_type=MakingChargeType.PERCENTAGE,
        making_charge_value=Decimal("10"),
        apply_tax=True,
    )
    defaults.update(kwargs)
    return LineItem(**defaults)


class TestPriceLine:
    """Tests for price_line."""

    def test_percentage_charge_applies_to_material_value(self):
        assert price_line(_item()) == Decimal("33000")

    def test_flat_charge_ignores_quantity_and_weight(self):
        item = _item(
            quantity=3,
            net_weight=Decimal("10"),
            rate=Decimal("100"),
            making_charge_type=MakingChargeType.FLAT,
            making_charge_value=Decimal("500"),
        )
        assert price_line(item) == Decimal("1500")

    def test_per_gram_charge_uses_net_weight(self):
        item = _item(
            net_weight=Decimal("2.5"),
            rate=Decimal("5000"),
            making_charge_type=MakingChargeType.PER_GRAM,
            making_charge_value=Decimal("300"),
        )
        assert price_line(item) == Decimal("13250")

    def test_per_item_charge_uses_quantity(self):
        item = _item(
            quantity=4,
            net_weight=Decimal("1"),
            rate=Decimal("1000"),
            making_charge_type=MakingChargeType.PER_ITEM,
            making_charge_value=Decimal("250"),
        )
        assert price_line(item) == Decimal("2000")

    @pytest.mark.parametrize("charge_type", list(MakingChargeType))
    def test_zero_charge_value_prices_material_only(self, charge_type):
        item = _item(making_charge_type=charge_type, making_charge_value=Decimal("0"), quantity=7)
        assert price_line(item) == Decimal("30000")

    def test_negative_charge_value_contributes_nothing(self):
        item = _item(making_charge_type=MakingChargeType.FLAT, making_charge_value=Decimal("-50"))
        assert making_charge(item) == Decimal("0")

    def test_labor_only_line_keeps_flat_and_per_item_charges(self):
        flat = _item(net_weight=Decimal("0"), making_charge_type=MakingChargeType.FLAT, making_charge_value=Decimal("800"))
        per_item = _item(
            quantity=2,
            net_weight=Decimal("0"),
            making_charge_type=MakingChargeType.PER_ITEM,
            making_charge_value=Decimal("150"),
        )
        per_gram = _item(net_weight=Decimal("0"), making_charge_type=MakingChargeType.PER_GRAM, making_charge_value=Decimal("300"))

        assert price_line(flat) == Decimal("800")
        assert price_line(per_item) == Decimal("300")
        assert price_line(per_gram) == Decimal("0")

    def test_unknown_charge_type_is_ignored(self):
        item = _item(making_charge_type="per_carat", making_charge_value=Decimal("100"))
        assert price_line(item) == Decimal("30000")

    def test_string_charge_type_is_accepted(self):
        item = _item(making_charge_type="per_item", making_charge_value=Decimal("100"), quantity=2)
        assert price_line(item) == Decimal("30200")

    def test_negative_weight_is_priced_literally(self):
        item = _item(net_weight=Decimal("-1"), rate=Decimal("100"), making_charge_value=Decimal("0"))
        assert price_line(item) == Decimal("-100")


class TestAggregateTotals:
    """Tests for aggregate_totals."""

    @pytest.fixture
    def lines(self):
        taxed = _item()
        untaxed = _item(
            net_weight=Decimal("10"),
            rate=Decimal("100"),
            making_charge_type=MakingChargeType.FLAT,
            making_charge_value=Decimal("500"),
            apply_tax=False,
        )
        return [taxed, untaxed]

    def test_tax_invoice_taxes_flagged_lines_only(self, lines):
        totals = aggregate_totals(lines, Decimal("500"), customer_has_tax_id=True)

        assert totals.subtotal == Decimal("34500")
        assert totals.cgst == Decimal("495")
        assert totals.sgst == Decimal("495")
        assert totals.tax == Decimal("990")
        assert totals.total == Decimal("34990")

    def test_cash_memo_never_carries_tax(self, lines):
        all_taxed = [_item(), _item(quantity=2)]
        totals = aggregate_totals(all_taxed, Decimal("0"), customer_has_tax_id=False)

        assert totals.tax == Decimal("0")
        assert totals.total == totals.subtotal == Decimal("66000")

    def test_total_is_not_clamped_when_discount_is_large(self, lines):
        totals = aggregate_totals(lines, Decimal("40000"), customer_has_tax_id=True)
        assert totals.total == Decimal("-4510")

    @pytest.mark.parametrize("has_tax_id", [True, False])
    @pytest.mark.parametrize("discount", ["0", "123.45", "99999"])
    def test_total_identity(self, lines, has_tax_id, discount):
        totals = aggregate_totals(lines, Decimal(discount), has_tax_id)
        assert totals.total == totals.subtotal + totals.cgst + totals.sgst - totals.discount

    def test_empty_invoice(self):
        totals = aggregate_totals([], Decimal("0"), True)
        assert totals == InvoiceTotals(Decimal("0"), Decimal("0"), Decimal("0"), Decimal("0"), Decimal("0"))

    def test_as_dict_rounds_for_display(self):
        item = _item(net_weight=Decimal("1.111"), rate=Decimal("1000"), making_charge_value=Decimal("0"))
        totals = aggregate_totals([item], Decimal("0"), True).as_dict()

        assert totals["subtotal"] == Decimal("1111.00")
        assert totals["cgst"] == Decimal("16.67")
        assert totals["total"] == Decimal("1144.33")
