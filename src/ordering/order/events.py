"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A checkout produced a new order with all of its items."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_email = String(required=True)
    item_count = Integer(required=True)
    total_minor = Integer(required=True)
    currency = String(default="MDL")
    placed_at = DateTime(required=True)
