"""Slot reference resolution for custom bundles.

A slot pick carries a reference that is either a variant id or the id of the
parent item, depending on which builder screen produced it. Tagged picks are
looked up in the table their tag names. Untagged picks, written by carts
that predate tagging, cannot be told apart by the shape of the id, so both
interpretations are tried in two batched lookups:

1. every candidate as a variant id;
2. every candidate as an item id, keeping the variant whose size matches the
   bundle's per-slot volume.

Per pick, a variant-id hit wins over an item-id hit.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from ordering.bundle.slots import ReferenceKind, SlotPick
from ordering.catalogue.port import CatalogueLookup, VariantRecord
from ordering.exceptions import CatalogueUnavailable
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


class ResolutionPhase(Enum):
    VARIANT_ID = "variant_id"
    ITEM_ID = "item_id"


@dataclass(frozen=True)
class ReferenceResolution:
    pick: SlotPick
    variant: VariantRecord | None = None
    phase: ResolutionPhase | None = None

    @property
    def resolved(self) -> bool:
        return self.variant is not None


class ReferenceResolver:
    def __init__(self, catalogue: CatalogueLookup):
        self.catalogue = catalogue

    def resolve(self, picks: Sequence[SlotPick], volume_ml: int) -> dict[SlotPick, ReferenceResolution]:
        """Resolve every pick, returning one resolution per pick (resolved or not)."""
        variant_candidates = _unique(p.reference for p in picks if p.kind is not ReferenceKind.ITEM)
        item_candidates = _unique(p.reference for p in picks if p.kind is not ReferenceKind.VARIANT)

        by_variant_id = self._variants_by_id(variant_candidates)
        by_item_id = self._variants_by_item_id(item_candidates, volume_ml)

        resolutions = {}
        for pick in picks:
            if pick.kind is not ReferenceKind.ITEM and pick.reference in by_variant_id:
                resolution = ReferenceResolution(pick, by_variant_id[pick.reference], ResolutionPhase.VARIANT_ID)
            elif pick.kind is not ReferenceKind.VARIANT and pick.reference in by_item_id:
                resolution = ReferenceResolution(pick, by_item_id[pick.reference], ResolutionPhase.ITEM_ID)
            else:
                resolution = ReferenceResolution(pick)
            resolutions[pick] = resolution
        return resolutions

    def _variants_by_id(self, variant_ids: list[str]) -> dict[str, VariantRecord]:
        if not variant_ids:
            return {}
        try:
            variants = self.catalogue.variants_by_ids(variant_ids)
        except CatalogueUnavailable as exc:
            logger.warning("variant_lookup_failed", reference_count=len(variant_ids), error=str(exc))
            return {}
        return {variant.id: variant for variant in variants}

    def _variants_by_item_id(self, item_ids: list[str], volume_ml: int) -> dict[str, VariantRecord]:
        if not item_ids:
            return {}
        try:
            variants = self.catalogue.variants_by_item_ids(item_ids, volume_ml)
        except CatalogueUnavailable as exc:
            logger.warning("item_variant_lookup_failed", reference_count=len(item_ids), error=str(exc))
            return {}

        matched: dict[str, VariantRecord] = {}
        for variant in variants:
            if variant.size_ml == volume_ml:
                matched.setdefault(variant.item_id, variant)
        return matched


def _unique(references) -> list[str]:
    return list(dict.fromkeys(references))
