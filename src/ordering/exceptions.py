"""Ordering-specific exceptions.

Validation problems reuse Protean's ValidationError so callers handle every
user-recoverable rejection the same way.
"""

from protean.exceptions import ValidationError


class BundleIncomplete(ValidationError):
    """A bundle was submitted before every slot was filled."""


class NoSlotsRemaining(ValidationError):
    """An item was auto-assigned to a bundle whose slots are all taken."""


class CatalogueUnavailable(Exception):
    """A catalogue lookup could not be completed (network or backend failure)."""


class PersistenceError(Exception):
    """The order could not be stored. Nothing was persisted; the customer may retry."""
