"""Order placement — command, handler and the synchronous entry point.

The handler is the whole checkout pipeline behind the form: parse the cart
lines, price them, resolve their snapshots against the catalogue, and stage
the order with every item in the handler's unit of work. `place_order`
runs the command and reports a failed commit as PersistenceError.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from pydantic import ValidationError as SchemaError

from ordering.cart.lines import load_lines
from ordering.catalogue import get_catalogue
from ordering.config import get_settings
from ordering.domain import ordering
from ordering.exceptions import PersistenceError
from ordering.order.order import Order
from ordering.order.resolver import SnapshotResolver
from ordering.order.totals import calculate_totals, shipping_method
from ordering.utils.logging import add_context, clear_context, get_logger

logger = get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier()
    customer_name = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=254)
    customer_phone = String(required=True, max_length=30)
    shipping_address = Text(required=True)  # JSON: address dict
    shipping_method_id = String(required=True, max_length=50)
    lines = Text(required=True)  # JSON: serialized cart lines


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        try:
            lines = load_lines(command.lines)
        except SchemaError as exc:
            raise ValidationError({"lines": [f"Cart lines are malformed ({exc.error_count()} errors)"]}) from None
        if not lines:
            raise ValidationError({"lines": ["Cannot place an order for an empty cart"]})

        shipping_address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )
        method = shipping_method(command.shipping_method_id)
        settings = get_settings()

        add_context(customer_email=command.customer_email, line_count=len(lines))
        try:
            totals = calculate_totals(lines, method.price_minor, settings.tax_rate)
            resolved = SnapshotResolver(get_catalogue(), settings.resolver_max_workers).resolve_all(lines)

            order = Order.create(
                customer_id=command.customer_id,
                contact={
                    "name": command.customer_name,
                    "email": command.customer_email,
                    "phone": command.customer_phone,
                },
                shipping_address=shipping_address,
                shipping_method=method.id,
                totals=totals,
                resolved_lines=resolved,
                currency=settings.currency,
            )

            current_domain.repository_for(Order).add(order)

            logger.debug(
                "order_staged",
                order_id=str(order.id),
                item_count=len(resolved),
                total_minor=totals.total_minor,
            )
            return str(order.id)
        finally:
            clear_context()


def place_order(command: PlaceOrder) -> str:
    """Process PlaceOrder synchronously and return the new order's id.

    The handler's unit of work commits after the handler returns, so storage
    failures only become visible here. Anything other than a validation
    rejection is reported as PersistenceError; nothing was stored.
    """
    try:
        order_id = current_domain.process(command, asynchronous=False)
    except (ValidationError, PersistenceError):
        raise
    except Exception as exc:
        logger.error("order_persistence_failed", error_type=type(exc).__name__, error=str(exc))
        raise PersistenceError("Could not store the order") from exc

    logger.info("order_placed", order_id=order_id)
    return order_id
