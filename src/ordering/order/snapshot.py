"""Order item snapshots — denormalized display data frozen at checkout.

A snapshot must render the order item on its own, whatever happens to the
catalogue later. Bundle slots are a sum type: a slot either resolved to a
catalogue variant or kept only the raw reference the customer picked.
"""

import json
import re
from dataclasses import dataclass

from ordering.catalogue.port import BundleConfiguration, ItemRecord, VariantRecord


@dataclass(frozen=True)
class ProductDetail:
    id: str
    brand: str
    name: str
    image_url: str | None

    @classmethod
    def from_item(cls, item: ItemRecord) -> "ProductDetail":
        return cls(id=item.id, brand=item.brand, name=item.name, image_url=item.image_url)

    def to_dict(self) -> dict:
        return {"id": self.id, "brand": self.brand, "name": self.name, "image_url": self.image_url}


@dataclass(frozen=True)
class ResolvedSlot:
    slot_index: int
    variant_id: str
    size_ml: int
    label: str
    product: ProductDetail | None

    @classmethod
    def from_variant(cls, slot_index: int, variant: VariantRecord) -> "ResolvedSlot":
        return cls(
            slot_index=slot_index,
            variant_id=variant.id,
            size_ml=variant.size_ml,
            label=variant.label,
            product=ProductDetail.from_item(variant.item) if variant.item else None,
        )

    def to_dict(self) -> dict:
        return {
            "slot_index": self.slot_index,
            "status": "resolved",
            "sku_id": self.variant_id,
            "size_ml": self.size_ml,
            "label": self.label,
            "product": self.product.to_dict() if self.product else None,
        }

    def describe(self) -> str:
        if self.product is None:
            return f"Slot {self.slot_index + 1}: {self.label}"
        return f"Slot {self.slot_index + 1}: {self.product.brand} {self.product.name} ({self.label})"


@dataclass(frozen=True)
class UnresolvedSlot:
    slot_index: int
    raw_reference: str
    size_ml: int

    @property
    def label(self) -> str:
        return f"{self.size_ml}ml"

    def to_dict(self) -> dict:
        return {
            "slot_index": self.slot_index,
            "status": "unresolved",
            "reference": self.raw_reference,
            "sku_id": self.raw_reference,
            "size_ml": self.size_ml,
            "label": self.label,
            "product": None,
        }

    def describe(self) -> str:
        return f"Slot {self.slot_index + 1}: unknown item ({self.raw_reference})"


SlotOutcome = ResolvedSlot | UnresolvedSlot


def slot_from_dict(data: dict) -> SlotOutcome:
    """Rebuild a slot outcome from its stored snapshot form."""
    if data.get("status") == "unresolved":
        return UnresolvedSlot(
            slot_index=data["slot_index"],
            raw_reference=data.get("reference") or data["sku_id"],
            size_ml=data["size_ml"],
        )

    product = data.get("product")
    return ResolvedSlot(
        slot_index=data["slot_index"],
        variant_id=data["sku_id"],
        size_ml=data["size_ml"],
        label=data["label"],
        product=ProductDetail(**product) if product else None,
    )


@dataclass(frozen=True)
class ItemSnapshot:
    """Snapshot of a single-variant line, taken from the cart's cached fields."""

    product_name: str
    brand: str | None
    image_url: str | None
    size_label: str | None

    @property
    def size_ml(self) -> int | None:
        if not self.size_label:
            return None
        match = re.match(r"\s*(\d+)", self.size_label)
        return int(match.group(1)) if match else None

    def to_dict(self) -> dict:
        return {
            "product_name": self.product_name,
            "brand": self.brand,
            "image_url": self.image_url,
            "size_ml": self.size_ml,
            "size_label": self.size_label,
        }


@dataclass(frozen=True)
class BundleSnapshot:
    """Snapshot of a predefined or custom bundle, slots in ascending order."""

    product_name: str
    image_url: str | None
    configuration: BundleConfiguration | None
    slots: tuple[SlotOutcome, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "slots", tuple(sorted(self.slots, key=lambda slot: slot.slot_index)))

    @property
    def unresolved(self) -> tuple[UnresolvedSlot, ...]:
        return tuple(slot for slot in self.slots if isinstance(slot, UnresolvedSlot))

    def to_dict(self) -> dict:
        return {
            "product_name": self.product_name,
            "image_url": self.image_url,
            "config": self.configuration.summary() if self.configuration else None,
            "items": [slot.to_dict() for slot in self.slots],
        }


Snapshot = ItemSnapshot | BundleSnapshot


def dumps(snapshot: Snapshot) -> str:
    return json.dumps(snapshot.to_dict())


def describe_slots(snapshot_json: str) -> list[str]:
    """Display lines for the slots of a stored bundle snapshot."""
    data = json.loads(snapshot_json)
    return [slot_from_dict(item).describe() for item in data.get("items") or []]
