"""Minor-unit money helpers.

All amounts travel as integers in minor units (bani for MDL). Conversion to
major units happens only here, at the display boundary.
"""

from decimal import ROUND_HALF_UP, Decimal

MINOR_UNITS_PER_MAJOR = 100


def to_minor(major: Decimal | int | str) -> int:
    """Convert a major-unit amount (e.g. "50.00") to integer minor units."""
    amount = Decimal(str(major)) * MINOR_UNITS_PER_MAJOR
    return int(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def to_major(minor: int) -> Decimal:
    return (Decimal(minor) / MINOR_UNITS_PER_MAJOR).quantize(Decimal("0.01"))


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_price(minor: int) -> str:
    """Format an amount for checkout display, e.g. 5000 -> "50,00 L"."""
    major = to_major(minor)
    whole, _, fraction = f"{major:.2f}".partition(".")
    return f"{whole},{fraction} L"


def format_total(minor: int, currency: str = "MDL") -> str:
    """Format a grand total with its currency code, e.g. 50600 -> "MDL 506,00 L"."""
    return f"{currency} {format_price(minor)}"
