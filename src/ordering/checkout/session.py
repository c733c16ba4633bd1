"""Checkout session — the submission state machine around PlaceOrder.

States:
    EDITING → SUBMITTING → SUCCEEDED (terminal)
                         → FAILED → EDITING

Entering SUBMITTING requires a valid form and a non-empty cart. While
SUBMITTING, another submit is rejected. A failure is recorded, the session
returns to EDITING and the error is re-raised for the caller to show.
Success clears the cart.
"""

import json
from collections.abc import Callable
from enum import Enum

from protean.exceptions import ValidationError

from ordering.cart.cart import Cart
from ordering.checkout.form import CheckoutForm
from ordering.order.placement import PlaceOrder, place_order
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutStatus(Enum):
    EDITING = "Editing"
    SUBMITTING = "Submitting"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


_VALID_TRANSITIONS = {
    CheckoutStatus.EDITING: {CheckoutStatus.SUBMITTING},
    CheckoutStatus.SUBMITTING: {CheckoutStatus.SUCCEEDED, CheckoutStatus.FAILED},
    CheckoutStatus.FAILED: {CheckoutStatus.EDITING},
    CheckoutStatus.SUCCEEDED: set(),  # Terminal
}


class CheckoutSession:
    def __init__(
        self,
        cart: Cart,
        customer_id: str | None = None,
        place_order: Callable[[PlaceOrder], str] = place_order,
    ):
        self.cart = cart
        self.customer_id = customer_id
        self._place_order = place_order
        self.status = CheckoutStatus.EDITING
        self.history: list[CheckoutStatus] = [CheckoutStatus.EDITING]
        self.field_errors: dict[str, list[str]] = {}
        self.error: Exception | None = None
        self.order_id: str | None = None

    @property
    def can_submit(self) -> bool:
        return self.status == CheckoutStatus.EDITING

    def submit(self, form: CheckoutForm) -> str:
        """Validate the form, place the order and return its id."""
        if self.status == CheckoutStatus.SUCCEEDED:
            raise ValidationError({"checkout": ["This checkout has already been completed"]})
        if self.status == CheckoutStatus.SUBMITTING:
            raise ValidationError({"checkout": ["The order is already being submitted"]})

        self.field_errors = form.errors()
        if self.field_errors:
            raise ValidationError(self.field_errors)
        if self.cart.is_empty:
            raise ValidationError({"cart": ["Your cart is empty"]})

        self._transition(CheckoutStatus.SUBMITTING)
        self.error = None

        command = PlaceOrder(
            customer_id=self.customer_id,
            customer_name=form.customer_name,
            customer_email=form.email,
            customer_phone=form.phone,
            shipping_address=json.dumps(form.shipping_address()),
            shipping_method_id=form.shipping_method_id,
            lines=self.cart.dumps(),
        )

        try:
            order_id = self._place_order(command)
        except Exception as exc:
            self.error = exc
            self._transition(CheckoutStatus.FAILED)
            logger.warning("checkout_failed", error_type=type(exc).__name__, error=str(exc))
            self._transition(CheckoutStatus.EDITING)
            raise

        self.order_id = order_id
        self._transition(CheckoutStatus.SUCCEEDED)
        self.cart.clear()
        logger.info("checkout_succeeded", order_id=order_id)
        return order_id

    def _transition(self, target: CheckoutStatus) -> None:
        if target not in _VALID_TRANSITIONS[self.status]:
            raise ValidationError({"status": [f"Cannot transition from {self.status.value} to {target.value}"]})
        self.status = target
        self.history.append(target)
