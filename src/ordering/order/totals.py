"""Order totals in integer minor units.

Bundle lines are priced at their configuration's flat base price, captured on
the line when it was added; what the customer put in the slots never changes
the price. Prices are tax-inclusive: the tax figure is for display and is
never added to the total.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from protean.exceptions import ValidationError

from ordering.cart.lines import CartLine
from ordering.config import get_settings
from ordering.shared.money import round_half_up


@dataclass(frozen=True)
class ShippingMethod:
    id: str
    name: str
    price_minor: int


SHIPPING_METHODS = {
    "standard": ShippingMethod(id="standard", name="Livrare", price_minor=5000),
}
DEFAULT_SHIPPING_METHOD = "standard"


@dataclass(frozen=True)
class OrderTotals:
    subtotal_minor: int
    shipping_minor: int
    total_minor: int
    tax_included_minor: int


def shipping_method(method_id: str) -> ShippingMethod:
    try:
        return SHIPPING_METHODS[method_id]
    except KeyError:
        raise ValidationError({"shipping_method": [f"Unknown shipping method: {method_id}"]}) from None


def line_total(line: CartLine) -> int:
    return line.unit_price_minor * line.quantity


def tax_included(total_minor: int, rate: Decimal) -> int:
    """Tax portion already contained in a tax-inclusive total."""
    return round_half_up(Decimal(total_minor) * rate / (1 + rate))


def calculate_totals(
    lines: Iterable[CartLine],
    shipping_minor: int,
    tax_rate: Decimal | None = None,
) -> OrderTotals:
    if shipping_minor < 0:
        raise ValidationError({"shipping": ["Shipping cost cannot be negative"]})

    rate = get_settings().tax_rate if tax_rate is None else tax_rate
    subtotal = sum(line_total(line) for line in lines)
    total = subtotal + shipping_minor
    return OrderTotals(
        subtotal_minor=subtotal,
        shipping_minor=shipping_minor,
        total_minor=total,
        tax_included_minor=tax_included(total, rate),
    )
