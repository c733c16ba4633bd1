"""Configurable in-memory catalogue for development and testing.

Holds items, variants and bundle configurations in dictionaries and answers
the three lookups the resolver needs. Individual lookups can be switched to
fail with CatalogueUnavailable, which is how tests exercise the degraded
checkout paths.
"""

from collections.abc import Iterable, Sequence
from dataclasses import replace

from ordering.catalogue.port import (
    BundleConfiguration,
    CatalogueLookup,
    ConfigurationSlot,
    ItemRecord,
    VariantRecord,
)
from ordering.exceptions import CatalogueUnavailable

LOOKUPS = frozenset({"variants_by_ids", "variants_by_item_ids", "configuration"})


class InMemoryCatalogue(CatalogueLookup):
    """Dictionary-backed catalogue lookup."""

    def __init__(self) -> None:
        self._items: dict[str, ItemRecord] = {}
        self._variants: dict[str, VariantRecord] = {}
        self._configurations: dict[str, BundleConfiguration] = {}
        self._slot_variants: dict[str, dict[int, str]] = {}
        self.failing: set[str] = set()
        self.calls: list[dict] = []

    # -------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------
    def add_item(self, item: ItemRecord, variants: Iterable[VariantRecord] = ()) -> None:
        self._items[item.id] = item
        for variant in variants:
            self.add_variant(variant)

    def add_variant(self, variant: VariantRecord) -> None:
        self._variants[variant.id] = replace(variant, item=None)

    def remove_variant(self, variant_id: str) -> None:
        self._variants.pop(variant_id, None)

    def add_configuration(
        self,
        configuration: BundleConfiguration,
        slot_variants: dict[int, str] | None = None,
    ) -> None:
        """Register a configuration; `slot_variants` maps slot index → variant id for predefined bundles."""
        self._configurations[configuration.id] = replace(configuration, slots=())
        self._slot_variants[configuration.id] = dict(slot_variants or {})

    def configure(self, failing: Iterable[str] = ()) -> None:
        """Make the named lookups raise CatalogueUnavailable."""
        unknown = set(failing) - LOOKUPS
        if unknown:
            raise ValueError(f"Unknown catalogue lookups: {sorted(unknown)}")
        self.failing = set(failing)

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def variants_by_ids(self, variant_ids: Sequence[str]) -> list[VariantRecord]:
        self._record("variants_by_ids", variant_ids=list(variant_ids))
        return [self._joined(self._variants[vid]) for vid in dict.fromkeys(variant_ids) if vid in self._variants]

    def variants_by_item_ids(self, item_ids: Sequence[str], size_ml: int) -> list[VariantRecord]:
        self._record("variants_by_item_ids", item_ids=list(item_ids), size_ml=size_ml)
        wanted = set(item_ids)
        return [
            self._joined(variant)
            for variant in self._variants.values()
            if variant.item_id in wanted and variant.size_ml == size_ml
        ]

    def configuration(self, configuration_id: str) -> BundleConfiguration | None:
        self._record("configuration", configuration_id=configuration_id)
        configuration = self._configurations.get(configuration_id)
        if configuration is None:
            return None

        slots = tuple(
            ConfigurationSlot(
                slot_index=slot_index,
                variant_id=variant_id,
                variant=self._joined(self._variants[variant_id]) if variant_id in self._variants else None,
            )
            for slot_index, variant_id in sorted(self._slot_variants[configuration_id].items())
        )
        return replace(configuration, slots=slots)

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _record(self, method: str, **arguments) -> None:
        self.calls.append({"method": method, **arguments})
        if method in self.failing:
            raise CatalogueUnavailable(f"Catalogue lookup {method} is unavailable")

    def _joined(self, variant: VariantRecord) -> VariantRecord:
        return replace(variant, item=self._items.get(variant.item_id))

    def calls_to(self, method: str) -> list[dict]:
        return [call for call in self.calls if call["method"] == method]
