"""Order reads: a customer's order history and the full view of one order."""

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.repository(part_of=Order)
class OrderRepository:
    """Repository for the Order aggregate.

    Writes go through the standard `add`. Orders are never updated here.
    """

    def for_customer(self, customer_id) -> list[Order]:
        """Orders placed by a customer, newest first. Guests have no history."""
        if not customer_id:
            return []
        return self._dao.query.filter(customer_id=customer_id).order_by("-created_at").all().items

    def detail(self, order_id) -> dict:
        """Header plus items for one order. Raises ObjectNotFoundError for unknown ids."""
        return self.get(order_id).detail()
