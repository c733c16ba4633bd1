"""Snapshot resolution — turns cart lines into order item payloads.

Runs once per checkout. Each line is expanded into the data of one order
item: type, catalogue references, pricing and an immutable display
snapshot. Missing or unreachable catalogue data never aborts the checkout:
predefined bundles drop the broken slot, custom bundles keep the slot as
unresolved, and a missing configuration falls back to the line's cached
display fields.
"""

import contextvars
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from ordering.bundle.slots import SlotPick
from ordering.cart.lines import CartLine, CustomBundleLine, PredefinedBundleLine, SimpleItemLine
from ordering.catalogue.port import BundleConfiguration, CatalogueLookup
from ordering.config import get_settings
from ordering.exceptions import CatalogueUnavailable
from ordering.order.references import ReferenceResolver
from ordering.order.snapshot import BundleSnapshot, ItemSnapshot, ResolvedSlot, Snapshot, UnresolvedSlot
from ordering.order.totals import line_total
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResolvedLine:
    """Everything needed to persist one order item."""

    item_type: str
    quantity: int
    unit_price_minor: int
    line_total_minor: int
    snapshot: Snapshot
    variant_id: str | None = None
    configuration_id: str | None = None


class SnapshotResolver:
    def __init__(self, catalogue: CatalogueLookup, max_workers: int | None = None):
        self.catalogue = catalogue
        self.references = ReferenceResolver(catalogue)
        self.max_workers = max_workers or get_settings().resolver_max_workers

    def resolve_all(self, lines: Sequence[CartLine]) -> list[ResolvedLine]:
        """Resolve lines concurrently on a bounded pool; results keep the input order.

        Each worker runs in a copy of the caller's context so bound log context
        reaches warnings raised off the calling thread.
        """
        if len(lines) <= 1 or self.max_workers == 1:
            return [self.resolve(line) for line in lines]

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(lines))) as pool:
            futures = [pool.submit(contextvars.copy_context().run, self.resolve, line) for line in lines]
            return [future.result() for future in futures]

    def resolve(self, line: CartLine) -> ResolvedLine:
        if isinstance(line, SimpleItemLine):
            snapshot = self._simple_item_snapshot(line)
        elif isinstance(line, PredefinedBundleLine):
            snapshot = self._predefined_bundle_snapshot(line)
        elif isinstance(line, CustomBundleLine):
            snapshot = self._custom_bundle_snapshot(line)
        else:
            raise TypeError(f"Unknown cart line type: {type(line).__name__}")

        return ResolvedLine(
            item_type=line.kind,
            quantity=line.quantity,
            unit_price_minor=line.unit_price_minor,
            line_total_minor=line_total(line),
            snapshot=snapshot,
            variant_id=line.variant_id,
            configuration_id=getattr(line, "configuration_id", None),
        )

    # -------------------------------------------------------------------
    # Per-type snapshots
    # -------------------------------------------------------------------
    def _simple_item_snapshot(self, line: SimpleItemLine) -> ItemSnapshot:
        return ItemSnapshot(
            product_name=line.name,
            brand=line.brand,
            image_url=line.image,
            size_label=line.size_label,
        )

    def _predefined_bundle_snapshot(self, line: PredefinedBundleLine) -> BundleSnapshot:
        configuration = self._configuration(line)
        if configuration is None:
            return BundleSnapshot(product_name=line.name, image_url=line.image, configuration=None)

        slots = []
        for association in configuration.slots:
            if association.variant is None:
                logger.warning(
                    "bundle_slot_variant_missing",
                    configuration_id=configuration.id,
                    slot_index=association.slot_index,
                    variant_id=association.variant_id,
                )
                continue
            slots.append(ResolvedSlot.from_variant(association.slot_index, association.variant))

        return BundleSnapshot(
            product_name=configuration.name,
            image_url=configuration.image_url,
            configuration=configuration,
            slots=tuple(slots),
        )

    def _custom_bundle_snapshot(self, line: CustomBundleLine) -> BundleSnapshot:
        configuration = self._configuration(line)
        product_name = configuration.name if configuration else line.name
        image_url = configuration.image_url if configuration else line.image

        if not line.selections:
            return BundleSnapshot(product_name=product_name, image_url=image_url, configuration=configuration)

        picks = [pick for pick in line.selections if self._within_configuration(line, pick, configuration)]
        volume_ml = configuration.volume_ml if configuration else get_settings().default_volume_ml
        resolutions = self.references.resolve(picks, volume_ml)

        slots = []
        for pick in picks:
            resolution = resolutions[pick]
            if resolution.resolved:
                slots.append(ResolvedSlot.from_variant(pick.slot_index, resolution.variant))
            else:
                logger.warning(
                    "bundle_slot_unresolved",
                    line_id=line.id,
                    configuration_id=line.configuration_id,
                    slot_index=pick.slot_index,
                    reference=pick.reference,
                )
                slots.append(
                    UnresolvedSlot(slot_index=pick.slot_index, raw_reference=pick.reference, size_ml=volume_ml)
                )

        return BundleSnapshot(
            product_name=product_name,
            image_url=image_url,
            configuration=configuration,
            slots=tuple(slots),
        )

    def _configuration(self, line: PredefinedBundleLine | CustomBundleLine) -> BundleConfiguration | None:
        try:
            configuration = self.catalogue.configuration(line.configuration_id)
        except CatalogueUnavailable as exc:
            logger.warning("configuration_lookup_failed", configuration_id=line.configuration_id, error=str(exc))
            return None

        if configuration is None:
            logger.warning("configuration_not_found", configuration_id=line.configuration_id, line_id=line.id)
        return configuration

    @staticmethod
    def _within_configuration(
        line: CustomBundleLine, pick: SlotPick, configuration: BundleConfiguration | None
    ) -> bool:
        if configuration is None or pick.slot_index < configuration.total_slots:
            return True
        logger.warning(
            "bundle_slot_out_of_range",
            line_id=line.id,
            configuration_id=configuration.id,
            slot_index=pick.slot_index,
            total_slots=configuration.total_slots,
        )
        return False
