"""Order aggregate — the immutable record of a checkout.

An Order and all of its OrderItems are created together by one factory call
and persisted by one repository `add`, so the header never exists without
its items. Totals are computed before creation and stored as-is; nothing in
this context updates an order afterwards.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from ordering.domain import ordering
from ordering.order.events import OrderPlaced
from ordering.shared.contact import validate_email, validate_phone


class OrderStatus(Enum):
    PENDING = "pending"


class OrderItemType(Enum):
    SIMPLE_ITEM = "simple_item"
    PREDEFINED_BUNDLE = "predefined_bundle"
    CUSTOM_BUNDLE = "custom_bundle"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ContactDetails:
    """Who placed the order, as typed into the checkout form."""

    name = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    phone = String(required=True, max_length=30)

    @invariant.post
    def email_must_be_well_formed(self):
        error = validate_email(self.email)
        if error:
            raise ValidationError({"email": [error]})

    @invariant.post
    def phone_must_be_well_formed(self):
        error = validate_phone(self.phone)
        if error:
            raise ValidationError({"phone": [error]})


@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Delivery address captured at checkout time.

    Once recorded on an Order the address is immutable, regardless of what the
    customer saves for later checkouts.
    """

    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    postal_code = String(max_length=20)
    country = String(required=True, max_length=2, default="MD")
    phone = String(required=True, max_length=30)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """One resolved cart line with its display snapshot frozen in JSON."""

    item_type = String(required=True, choices=OrderItemType)
    variant_id = Identifier()
    configuration_id = Identifier()
    quantity = Integer(required=True, min_value=1)
    unit_price_minor = Integer(required=True, min_value=0)
    line_total_minor = Integer(required=True, min_value=0)
    snapshot = Text(required=True)

    @property
    def snapshot_data(self) -> dict:
        return json.loads(self.snapshot)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_id = Identifier()  # Nullable for guest checkouts
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    currency = String(max_length=3, default="MDL")
    contact = ValueObject(ContactDetails)
    shipping_address = ValueObject(ShippingAddress)
    shipping_method = String(required=True, max_length=50)
    items = HasMany(OrderItem)
    subtotal_minor = Integer(required=True, min_value=0)
    shipping_minor = Integer(required=True, min_value=0)
    total_minor = Integer(required=True, min_value=0)
    tax_included_minor = Integer(default=0, min_value=0)
    created_at = DateTime()

    @invariant.post
    def total_must_be_subtotal_plus_shipping(self):
        if self.total_minor != self.subtotal_minor + self.shipping_minor:
            raise ValidationError({"total_minor": ["Total must equal subtotal plus shipping"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        contact,
        shipping_address,
        shipping_method,
        totals,
        resolved_lines,
        customer_id=None,
        currency="MDL",
    ):
        """Create an order from checkout data and resolved cart lines.

        Args:
            contact: Dict with name, email, phone.
            shipping_address: Dict with first_name, last_name, address, city,
                postal_code, country, phone.
            shipping_method: Shipping method id.
            totals: OrderTotals computed from the cart lines.
            resolved_lines: ResolvedLine payloads from the SnapshotResolver.
        """
        if not resolved_lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        from ordering.order.snapshot import dumps

        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            status=OrderStatus.PENDING.value,
            currency=currency,
            contact=ContactDetails(**contact),
            shipping_address=ShippingAddress(**shipping_address),
            shipping_method=shipping_method,
            subtotal_minor=totals.subtotal_minor,
            shipping_minor=totals.shipping_minor,
            total_minor=totals.total_minor,
            tax_included_minor=totals.tax_included_minor,
            created_at=now,
        )

        for line in resolved_lines:
            order.add_items(
                OrderItem(
                    item_type=line.item_type,
                    variant_id=line.variant_id,
                    configuration_id=line.configuration_id,
                    quantity=line.quantity,
                    unit_price_minor=line.unit_price_minor,
                    line_total_minor=line.line_total_minor,
                    snapshot=dumps(line.snapshot),
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_email=contact["email"],
                item_count=len(resolved_lines),
                total_minor=totals.total_minor,
                currency=currency,
                placed_at=now,
            )
        )
        return order

    def items_of_type(self, item_type: OrderItemType) -> list[OrderItem]:
        return [item for item in self.items if item.item_type == item_type.value]

    def detail(self) -> dict:
        """The order header with every item and its decoded snapshot."""
        return {
            "id": str(self.id),
            "customer_id": str(self.customer_id) if self.customer_id else None,
            "status": self.status,
            "currency": self.currency,
            "contact": self.contact.to_dict(),
            "shipping_address": self.shipping_address.to_dict(),
            "shipping_method": self.shipping_method,
            "subtotal_minor": self.subtotal_minor,
            "shipping_minor": self.shipping_minor,
            "total_minor": self.total_minor,
            "tax_included_minor": self.tax_included_minor,
            "created_at": self.created_at,
            "items": [
                {
                    "id": str(item.id),
                    "item_type": item.item_type,
                    "variant_id": item.variant_id,
                    "configuration_id": item.configuration_id,
                    "quantity": item.quantity,
                    "unit_price_minor": item.unit_price_minor,
                    "line_total_minor": item.line_total_minor,
                    "snapshot": item.snapshot_data,
                }
                for item in self.items
            ],
        }
