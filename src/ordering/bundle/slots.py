"""Slot assignment for customisable discovery bundles.

A bundle configuration defines a fixed number of slots, each filled with one
sample of `volume_ml`. The assignment is a fixed-size arena indexed by slot
index; it lives only while the customer is composing the bundle and turns
into a custom-bundle cart line once every slot is filled.
"""

from enum import Enum

from protean.exceptions import ValidationError
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ordering.catalogue.port import BundleConfiguration
from ordering.exceptions import BundleIncomplete, NoSlotsRemaining


class ReferenceKind(Enum):
    """What a slot reference points at in the catalogue."""

    VARIANT = "variant"
    ITEM = "item"


class ItemReference(BaseModel):
    """The catalogue object a customer picked for a slot.

    `kind` is captured from the UI path that produced the pick. Picks coming
    from older stored carts have no kind.
    """

    model_config = ConfigDict(frozen=True)

    value: str = Field(min_length=1)
    kind: ReferenceKind | None = None

    @classmethod
    def variant(cls, variant_id: str) -> "ItemReference":
        return cls(value=variant_id, kind=ReferenceKind.VARIANT)

    @classmethod
    def item(cls, item_id: str) -> "ItemReference":
        return cls(value=item_id, kind=ReferenceKind.ITEM)


class SlotPick(BaseModel):
    """One filled slot as stored on a custom-bundle cart line."""

    model_config = ConfigDict(frozen=True)

    slot_index: int = Field(ge=0)
    # Carts written before references were tagged stored the value as `sku_id`
    reference: str = Field(min_length=1, validation_alias=AliasChoices("reference", "sku_id"))
    kind: ReferenceKind | None = None


class SlotAssignment:
    """Customer's in-progress slot selection for one bundle configuration."""

    def __init__(self, configuration: BundleConfiguration):
        if not configuration.is_active:
            raise ValidationError({"configuration": [f"Bundle configuration {configuration.id} is not active"]})
        if not configuration.is_customizable:
            raise ValidationError({"configuration": [f"Bundle configuration {configuration.id} is not customizable"]})

        self.configuration = configuration
        self._slots: list[ItemReference | None] = [None] * configuration.total_slots

    @property
    def total_slots(self) -> int:
        return len(self._slots)

    @property
    def filled_count(self) -> int:
        return sum(1 for occupant in self._slots if occupant is not None)

    def occupant(self, slot_index: int) -> ItemReference | None:
        self._check_index(slot_index)
        return self._slots[slot_index]

    def empty_slots(self) -> list[int]:
        return [index for index, occupant in enumerate(self._slots) if occupant is None]

    def assign(self, slot_index: int, item: ItemReference) -> None:
        """Put `item` in `slot_index`, replacing whatever was there."""
        self._check_index(slot_index)
        self._slots[slot_index] = item

    def auto_assign(self, item: ItemReference) -> int:
        """Put `item` in the lowest-indexed empty slot and return that index."""
        empty = self.empty_slots()
        if not empty:
            raise NoSlotsRemaining({"slots": [f"All {self.total_slots} slots are already filled"]})
        self._slots[empty[0]] = item
        return empty[0]

    def remove(self, slot_index: int) -> None:
        self._check_index(slot_index)
        self._slots[slot_index] = None

    def clear(self) -> None:
        self._slots = [None] * self.total_slots

    def is_complete(self) -> bool:
        return self.filled_count == self.total_slots

    def selections(self) -> list[SlotPick]:
        """Filled slots in ascending slot order."""
        return [
            SlotPick(slot_index=index, reference=occupant.value, kind=occupant.kind)
            for index, occupant in enumerate(self._slots)
            if occupant is not None
        ]

    def to_cart_line(self, quantity: int = 1):
        """Build the custom-bundle cart line for this selection.

        Raises BundleIncomplete unless every slot is filled.
        """
        if not self.is_complete():
            raise BundleIncomplete(
                {"slots": [f"Bundle incomplete: {self.filled_count} of {self.total_slots} slots filled"]}
            )

        from ordering.cart.lines import CustomBundleLine

        return CustomBundleLine.for_configuration(self.configuration, self.selections(), quantity=quantity)

    def _check_index(self, slot_index: int) -> None:
        if not 0 <= slot_index < self.total_slots:
            raise ValidationError(
                {"slot_index": [f"Slot index {slot_index} is outside 0..{self.total_slots - 1}"]}
            )
