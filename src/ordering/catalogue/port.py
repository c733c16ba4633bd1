"""Catalogue lookup port (abstract interface).

Ordering never owns catalogue data. Bundle configurations, items and their
variants are read through this contract, which is implemented by the
in-memory adapter for development and tests and by a storage-backed adapter
in deployments.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ItemRecord:
    """A catalogue item (a fragrance), the parent of one or more variants."""

    id: str
    name: str
    brand: str
    image_url: str | None = None


@dataclass(frozen=True)
class VariantRecord:
    """A purchasable size of an item, joined to its parent item when available."""

    id: str
    item_id: str
    size_ml: int
    label: str
    price_minor: int = 0
    item: ItemRecord | None = None


@dataclass(frozen=True)
class ConfigurationSlot:
    """A fixed slot → variant association of a predefined bundle.

    `variant` is None when the association points at a variant the catalogue
    no longer has.
    """

    slot_index: int
    variant_id: str
    variant: VariantRecord | None = None


@dataclass(frozen=True)
class BundleConfiguration:
    """A bundle template: slot count, per-slot sample size and flat price."""

    id: str
    name: str
    total_slots: int
    volume_ml: int
    base_price: int
    is_customizable: bool = True
    is_active: bool = True
    image_url: str | None = None
    description: str | None = None
    slots: tuple[ConfigurationSlot, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.total_slots < 1:
            raise ValueError(f"Bundle configuration {self.id!r} must have at least one slot")
        if self.base_price < 0:
            raise ValueError(f"Bundle configuration {self.id!r} cannot have a negative base price")

    def summary(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "volume_ml": self.volume_ml,
            "total_slots": self.total_slots,
        }


class CatalogueLookup(ABC):
    """Abstract catalogue lookup interface.

    Every method may raise CatalogueUnavailable when the backend cannot be
    reached.
    """

    @abstractmethod
    def variants_by_ids(self, variant_ids: Sequence[str]) -> list[VariantRecord]:
        """Return the variants whose ids are in `variant_ids`, joined to their items."""
        ...

    @abstractmethod
    def variants_by_item_ids(self, item_ids: Sequence[str], size_ml: int) -> list[VariantRecord]:
        """Return the `size_ml` variants of the items in `item_ids`, joined to their items."""
        ...

    @abstractmethod
    def configuration(self, configuration_id: str) -> BundleConfiguration | None:
        """Return a bundle configuration with its fixed slot associations, or None."""
        ...
