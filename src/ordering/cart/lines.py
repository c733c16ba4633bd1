"""Cart line models: the tagged union stored in the client-local cart.

A line is a single item variant, a predefined catalogue bundle, or a bundle
the customer composed slot by slot. Lines are pydantic models so the whole
cart round-trips through JSON unchanged.
"""

from collections.abc import Sequence
from typing import Annotated, Literal
from uuid import uuid4

from protean.exceptions import ValidationError
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from ordering.bundle.slots import SlotPick
from ordering.catalogue.port import BundleConfiguration, VariantRecord


class SimpleItemLine(BaseModel):
    """One variant of a catalogue item, with display fields cached at add time."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["simple_item"] = "simple_item"
    id: str = Field(min_length=1)  # catalogue item id
    variant_id: str = Field(min_length=1)
    quantity: int = Field(ge=1, default=1)
    unit_price_minor: int = Field(ge=0)
    name: str
    brand: str | None = None
    image: str | None = None
    size_label: str | None = None

    @classmethod
    def for_variant(cls, variant: VariantRecord, quantity: int = 1) -> "SimpleItemLine":
        """Build a line from a catalogue variant joined to its item."""
        if variant.item is None:
            raise ValidationError({"variant_id": [f"Variant {variant.id} has no catalogue item"]})
        return cls(
            id=variant.item.id,
            variant_id=variant.id,
            quantity=quantity,
            unit_price_minor=variant.price_minor,
            name=variant.item.name,
            brand=variant.item.brand,
            image=variant.item.image_url,
            size_label=variant.label,
        )


class PredefinedBundleLine(BaseModel):
    """A catalogue-defined bundle; its contents are resolved at order time."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["predefined_bundle"] = "predefined_bundle"
    id: str = Field(min_length=1)
    configuration_id: str = Field(min_length=1)
    quantity: int = Field(ge=1, default=1)
    unit_price_minor: int = Field(ge=0)
    name: str
    image: str | None = None
    size_label: str | None = None

    @property
    def variant_id(self) -> None:
        return None

    @classmethod
    def for_configuration(cls, configuration: BundleConfiguration, quantity: int = 1) -> "PredefinedBundleLine":
        if not configuration.is_active:
            raise ValidationError({"configuration": [f"Bundle configuration {configuration.id} is not active"]})
        return cls(
            id=str(uuid4()),
            configuration_id=configuration.id,
            quantity=quantity,
            unit_price_minor=configuration.base_price,
            name=configuration.name,
            image=configuration.image_url,
            size_label=f"{configuration.total_slots} x {configuration.volume_ml}ml",
        )


class CustomBundleLine(BaseModel):
    """A customer-composed bundle with the slot picks captured in the builder."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["custom_bundle"] = "custom_bundle"
    id: str = Field(min_length=1)
    configuration_id: str = Field(min_length=1)
    selections: tuple[SlotPick, ...] = ()
    quantity: int = Field(ge=1, default=1)
    unit_price_minor: int = Field(ge=0)
    name: str
    image: str | None = None
    size_label: str | None = None

    @field_validator("selections")
    @classmethod
    def one_pick_per_slot(cls, selections: tuple[SlotPick, ...]) -> tuple[SlotPick, ...]:
        seen = set()
        for pick in selections:
            if pick.slot_index in seen:
                raise ValueError(f"Slot {pick.slot_index} is picked more than once")
            seen.add(pick.slot_index)
        return selections

    @property
    def variant_id(self) -> None:
        return None

    @classmethod
    def for_configuration(
        cls,
        configuration: BundleConfiguration,
        selections: Sequence[SlotPick],
        quantity: int = 1,
    ) -> "CustomBundleLine":
        return cls(
            id=str(uuid4()),
            configuration_id=configuration.id,
            selections=tuple(selections),
            quantity=quantity,
            unit_price_minor=configuration.base_price,
            name=configuration.name,
            image=configuration.image_url,
            size_label=f"{configuration.total_slots} samples",
        )


CartLine = Annotated[
    SimpleItemLine | PredefinedBundleLine | CustomBundleLine,
    Field(discriminator="kind"),
]

_lines_adapter = TypeAdapter(list[CartLine])


def line_key(line: CartLine) -> tuple[str, str | None, str]:
    """Identity used to coalesce repeated adds of the same line."""
    return (line.id, line.variant_id, line.kind)


def dump_lines(lines: list[CartLine]) -> str:
    return _lines_adapter.dump_json(lines).decode("utf-8")


def load_lines(payload: str | bytes) -> list[CartLine]:
    """Parse a serialized cart. Raises pydantic.ValidationError on malformed payloads."""
    return _lines_adapter.validate_json(payload)
