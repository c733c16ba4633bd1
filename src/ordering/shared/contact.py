"""Email and phone checks shared by the checkout form and the Order aggregate.

Each check returns the message to show for the value, or None when the
value is acceptable.
"""

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9+\-\s()]{8,}$")


def validate_email(email: str) -> str | None:
    if not email:
        return "Email is required"
    if not EMAIL_PATTERN.match(email):
        return "Email is invalid"
    return None


def validate_phone(phone: str) -> str | None:
    if not phone:
        return "Phone is required"
    if not PHONE_PATTERN.match(phone):
        return "Phone number is invalid"
    return None
