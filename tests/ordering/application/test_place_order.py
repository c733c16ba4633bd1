"""Application tests for order placement via domain.process()."""

import json

import pytest
from protean import UnitOfWork, current_domain
from protean.exceptions import ValidationError

from ordering.bundle.slots import SlotPick
from ordering.cart.lines import CustomBundleLine, PredefinedBundleLine, SimpleItemLine, dump_lines
from ordering.exceptions import PersistenceError
from ordering.order.order import Order, OrderItemType
from ordering.order.placement import PlaceOrder, place_order

ADDRESS = {
    "first_name": "Ana",
    "last_name": "Popescu",
    "address": "Str. Stefan cel Mare 1",
    "city": "Chisinau",
    "postal_code": "MD-2001",
    "country": "MD",
    "phone": "+37369123456",
}


def _simple_line(quantity=1):
    return SimpleItemLine(
        id="item-oud",
        variant_id="var-oud-10",
        quantity=quantity,
        unit_price_minor=22000,
        name="Oud Wood",
        brand="Tom Ford",
        size_label="10ml",
    )


def _place(lines, **overrides):
    defaults = {
        "customer_name": "Ana Popescu",
        "customer_email": "ana@example.md",
        "customer_phone": "+37369123456",
        "shipping_address": json.dumps(ADDRESS),
        "shipping_method_id": "standard",
        "lines": dump_lines(lines) if isinstance(lines, list) else lines,
    }
    defaults.update(overrides)
    return place_order(PlaceOrder(**defaults))


class TestPlaceOrderFlow:
    def test_returns_id_of_stored_order(self, catalogue):
        order_id = _place([_simple_line()])

        order = current_domain.repository_for(Order).get(order_id)

        assert str(order.id) == order_id
        assert order.status == "pending"

    def test_totals_include_standard_shipping(self, catalogue, trio):
        lines = [
            _simple_line(quantity=2),
            CustomBundleLine.for_configuration(trio, [SlotPick(slot_index=i, reference="item-bleu") for i in range(3)]),
        ]

        order = current_domain.repository_for(Order).get(_place(lines))

        assert order.subtotal_minor == 2 * 22000 + 18000
        assert order.shipping_minor == 5000
        assert order.total_minor == 67000
        assert order.tax_included_minor == 8739
        assert order.currency == "MDL"

    def test_every_line_becomes_an_item(self, catalogue, trio, classics):
        lines = [
            _simple_line(),
            PredefinedBundleLine.for_configuration(classics),
            CustomBundleLine.for_configuration(
                trio,
                [
                    SlotPick(slot_index=0, reference="item-sauvage"),
                    SlotPick(slot_index=1, reference="ghost"),
                    SlotPick(slot_index=2, reference="var-oud-5"),
                ],
            ),
        ]

        order = current_domain.repository_for(Order).get(_place(lines))

        assert len(order.items) == 3
        predefined = order.items_of_type(OrderItemType.PREDEFINED_BUNDLE)[0]
        assert len(predefined.snapshot_data["items"]) == 3
        custom = order.items_of_type(OrderItemType.CUSTOM_BUNDLE)[0]
        assert [slot["status"] for slot in custom.snapshot_data["items"]] == ["resolved", "unresolved", "resolved"]

    def test_contact_and_address_recorded(self, catalogue):
        order = current_domain.repository_for(Order).get(_place([_simple_line()], customer_id="cust-001"))

        assert str(order.customer_id) == "cust-001"
        assert order.contact.name == "Ana Popescu"
        assert order.shipping_address.postal_code == "MD-2001"

    def test_degraded_catalogue_still_places_order(self, catalogue, trio):
        catalogue.configure(failing={"variants_by_ids", "variants_by_item_ids", "configuration"})
        line = CustomBundleLine.for_configuration(trio, [SlotPick(slot_index=0, reference="item-sauvage")])

        order = current_domain.repository_for(Order).get(_place([line]))

        snapshot = order.items[0].snapshot_data
        assert snapshot["config"] is None
        assert snapshot["product_name"] == "Discovery Trio"
        assert snapshot["items"][0]["status"] == "unresolved"


class TestPlaceOrderRejections:
    def test_empty_cart_rejected(self, catalogue):
        with pytest.raises(ValidationError) as exc:
            _place([])
        assert "lines" in exc.value.messages

    def test_malformed_lines_rejected(self, catalogue):
        with pytest.raises(ValidationError) as exc:
            _place('[{"kind": "gift_card"}]')
        assert "lines" in exc.value.messages

    def test_unknown_shipping_method_rejected(self, catalogue):
        with pytest.raises(ValidationError) as exc:
            _place([_simple_line()], shipping_method_id="drone")
        assert "shipping_method" in exc.value.messages

    def test_malformed_email_rejected(self, catalogue):
        with pytest.raises(ValidationError) as exc:
            _place([_simple_line()], customer_email="ana@example", customer_id="cust-001")

        assert "email" in exc.value.messages
        assert current_domain.repository_for(Order).for_customer("cust-001") == []

    def test_failed_commit_raises_persistence_error(self, catalogue, monkeypatch):
        def _commit(uow):
            raise ConnectionError("database went away")

        monkeypatch.setattr(UnitOfWork, "commit", _commit)

        with pytest.raises(PersistenceError) as exc:
            _place([_simple_line()], customer_id="cust-001")

        assert isinstance(exc.value.__cause__, ConnectionError)
        monkeypatch.undo()
        assert current_domain.repository_for(Order).for_customer("cust-001") == []
