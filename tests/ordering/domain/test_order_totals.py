"""Tests for order totals in minor units."""

from decimal import Decimal

import pytest
from protean.exceptions import ValidationError

from ordering.bundle.slots import SlotPick
from ordering.cart.lines import CustomBundleLine, PredefinedBundleLine, SimpleItemLine
from ordering.catalogue.port import BundleConfiguration
from ordering.order.totals import SHIPPING_METHODS, calculate_totals, line_total, shipping_method, tax_included


def _bundle_configuration(base_price=180):
    return BundleConfiguration(id="cfg-trio", name="Trio", total_slots=3, volume_ml=5, base_price=base_price)


def _item(price=50, quantity=1):
    return SimpleItemLine(id="item-1", variant_id="var-1", quantity=quantity, unit_price_minor=price, name="Item")


class TestCalculateTotals:
    def test_bundle_plus_items_plus_shipping(self):
        bundle = PredefinedBundleLine.for_configuration(_bundle_configuration(base_price=180))
        totals = calculate_totals([bundle, _item(price=50, quantity=2)], shipping_minor=20)

        assert totals.subtotal_minor == 280
        assert totals.shipping_minor == 20
        assert totals.total_minor == 300

    def test_empty_cart_totals_shipping_only(self):
        totals = calculate_totals([], shipping_minor=5000)
        assert totals.subtotal_minor == 0
        assert totals.total_minor == 5000

    def test_tax_is_not_added_to_total(self):
        totals = calculate_totals([_item(price=10000)], shipping_minor=5000, tax_rate=Decimal("0.15"))
        assert totals.total_minor == 15000
        assert totals.tax_included_minor == 1957

    def test_negative_shipping_rejected(self):
        with pytest.raises(ValidationError):
            calculate_totals([_item()], shipping_minor=-1)


class TestBundlePricing:
    def test_custom_bundle_priced_at_base_price_regardless_of_contents(self):
        configuration = _bundle_configuration(base_price=18000)
        cheap = CustomBundleLine.for_configuration(
            configuration, [SlotPick(slot_index=i, reference="cheap") for i in range(3)]
        )
        luxury = CustomBundleLine.for_configuration(
            configuration, [SlotPick(slot_index=i, reference="luxury") for i in range(3)]
        )
        assert line_total(cheap) == line_total(luxury) == 18000

    def test_predefined_bundle_line_total_scales_with_quantity(self):
        line = PredefinedBundleLine.for_configuration(_bundle_configuration(base_price=25000), quantity=3)
        assert line_total(line) == 75000


class TestTaxIncluded:
    @pytest.mark.parametrize(
        "total, expected",
        [
            (0, 0),
            (11500, 1500),
            (23000, 3000),
            (100, 13),
            (15000, 1957),
        ],
    )
    def test_tax_share_of_inclusive_total(self, total, expected):
        assert tax_included(total, Decimal("0.15")) == expected

    def test_zero_rate(self):
        assert tax_included(12345, Decimal("0")) == 0


class TestShippingMethods:
    def test_standard_method(self):
        method = shipping_method("standard")
        assert method.price_minor == 5000
        assert SHIPPING_METHODS["standard"] is method

    def test_unknown_method_rejected(self):
        with pytest.raises(ValidationError) as exc:
            shipping_method("drone")
        assert "shipping_method" in exc.value.messages
