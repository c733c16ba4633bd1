"""Tests for the in-memory catalogue lookup and its provider."""

import pytest

from ordering.catalogue import get_catalogue, reset_catalogue, set_catalogue
from ordering.catalogue.fake_adapter import InMemoryCatalogue
from ordering.catalogue.port import BundleConfiguration
from ordering.exceptions import CatalogueUnavailable


class TestLookups:
    def test_variants_by_ids_joins_items(self, catalogue):
        variants = catalogue.variants_by_ids(["var-bleu-5", "missing"])

        assert [v.id for v in variants] == ["var-bleu-5"]
        assert variants[0].item.name == "Bleu de Chanel"

    def test_variants_by_item_ids_filters_size(self, catalogue):
        variants = catalogue.variants_by_item_ids(["item-sauvage", "item-bleu"], size_ml=10)
        assert [v.id for v in variants] == ["var-sauvage-10"]

    def test_configuration_slots_in_order(self, catalogue):
        configuration = catalogue.configuration("cfg-classics")
        assert [slot.slot_index for slot in configuration.slots] == [0, 1, 2]
        assert configuration.slots[2].variant.item.brand == "Tom Ford"

    def test_unknown_configuration(self, catalogue):
        assert catalogue.configuration("cfg-missing") is None

    def test_removed_variant_leaves_empty_slot(self, catalogue):
        catalogue.remove_variant("var-oud-5")
        slot = catalogue.configuration("cfg-classics").slots[2]
        assert slot.variant_id == "var-oud-5"
        assert slot.variant is None

    def test_calls_are_recorded(self, catalogue):
        catalogue.variants_by_item_ids(["item-oud"], size_ml=5)
        assert catalogue.calls_to("variants_by_item_ids") == [
            {"method": "variants_by_item_ids", "item_ids": ["item-oud"], "size_ml": 5}
        ]


class TestFailureInjection:
    def test_failing_lookup_raises(self, catalogue):
        catalogue.configure(failing={"configuration"})
        with pytest.raises(CatalogueUnavailable):
            catalogue.configuration("cfg-trio")

    def test_unknown_lookup_name_rejected(self, catalogue):
        with pytest.raises(ValueError):
            catalogue.configure(failing={"prices"})


class TestBundleConfiguration:
    def test_needs_at_least_one_slot(self):
        with pytest.raises(ValueError):
            BundleConfiguration(id="cfg", name="Empty", total_slots=0, volume_ml=5, base_price=100)

    def test_summary(self, trio):
        assert trio.summary() == {"id": "cfg-trio", "name": "Discovery Trio", "volume_ml": 5, "total_slots": 3}


class TestProvider:
    def test_default_is_in_memory(self):
        reset_catalogue()
        assert isinstance(get_catalogue(), InMemoryCatalogue)

    def test_set_catalogue(self):
        custom = InMemoryCatalogue()
        set_catalogue(custom)
        try:
            assert get_catalogue() is custom
        finally:
            reset_catalogue()
