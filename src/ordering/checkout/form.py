"""Checkout form fields and client-side validation."""

from pydantic import BaseModel

from ordering.order.totals import DEFAULT_SHIPPING_METHOD
from ordering.shared.contact import validate_email, validate_phone

_REQUIRED_FIELDS = {
    "first_name": "First name is required",
    "last_name": "Last name is required",
    "address": "Address is required",
    "city": "City is required",
}


class CheckoutForm(BaseModel):
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    postal_code: str = ""
    city: str = ""
    phone: str = ""
    country: str = "MD"
    shipping_method_id: str = DEFAULT_SHIPPING_METHOD

    @property
    def customer_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def shipping_address(self) -> dict:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "address": self.address,
            "city": self.city,
            "postal_code": self.postal_code or None,
            "country": self.country,
            "phone": self.phone,
        }

    def errors(self) -> dict[str, list[str]]:
        """Validate every field at once; an empty dict means the form can be submitted."""
        errors: dict[str, list[str]] = {}

        email_error = validate_email(self.email)
        if email_error:
            errors["email"] = [email_error]

        phone_error = validate_phone(self.phone)
        if phone_error:
            errors["phone"] = [phone_error]

        for field, message in _REQUIRED_FIELDS.items():
            if not getattr(self, field).strip():
                errors[field] = [message]

        return errors

