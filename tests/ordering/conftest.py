import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from ordering.catalogue import reset_catalogue, set_catalogue
from ordering.catalogue.fake_adapter import InMemoryCatalogue
from ordering.catalogue.port import BundleConfiguration, ItemRecord, VariantRecord


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()


# ---------------------------------------------------------------------------
# Catalogue data
# ---------------------------------------------------------------------------
SAUVAGE = ItemRecord(id="item-sauvage", name="Sauvage", brand="Dior", image_url="/img/sauvage.png")
BLEU = ItemRecord(id="item-bleu", name="Bleu de Chanel", brand="Chanel", image_url="/img/bleu.png")
OUD = ItemRecord(id="item-oud", name="Oud Wood", brand="Tom Ford", image_url="/img/oud.png")

VARIANTS = [
    VariantRecord(id="var-sauvage-5", item_id="item-sauvage", size_ml=5, label="5ml", price_minor=9000),
    VariantRecord(id="var-sauvage-10", item_id="item-sauvage", size_ml=10, label="10ml", price_minor=16000),
    VariantRecord(id="var-sauvage-100", item_id="item-sauvage", size_ml=100, label="100ml", price_minor=210000),
    VariantRecord(id="var-bleu-5", item_id="item-bleu", size_ml=5, label="5ml", price_minor=9500),
    VariantRecord(id="var-bleu-50", item_id="item-bleu", size_ml=50, label="50ml", price_minor=150000),
    VariantRecord(id="var-oud-5", item_id="item-oud", size_ml=5, label="5ml", price_minor=12000),
    VariantRecord(id="var-oud-10", item_id="item-oud", size_ml=10, label="10ml", price_minor=22000),
]

TRIO = BundleConfiguration(
    id="cfg-trio",
    name="Discovery Trio",
    total_slots=3,
    volume_ml=5,
    base_price=18000,
    image_url="/img/trio.png",
)
DUO_10 = BundleConfiguration(
    id="cfg-duo-10",
    name="Duo 10ml",
    total_slots=2,
    volume_ml=10,
    base_price=30000,
)
CLASSICS = BundleConfiguration(
    id="cfg-classics",
    name="Classics Set",
    total_slots=3,
    volume_ml=5,
    base_price=25000,
    is_customizable=False,
    image_url="/img/classics.png",
)


@pytest.fixture
def catalogue():
    catalogue = InMemoryCatalogue()
    for item in (SAUVAGE, BLEU, OUD):
        catalogue.add_item(item, [v for v in VARIANTS if v.item_id == item.id])
    catalogue.add_configuration(TRIO)
    catalogue.add_configuration(DUO_10)
    catalogue.add_configuration(CLASSICS, {0: "var-sauvage-5", 1: "var-bleu-5", 2: "var-oud-5"})

    set_catalogue(catalogue)
    yield catalogue
    reset_catalogue()


@pytest.fixture
def trio():
    return TRIO


@pytest.fixture
def duo_10():
    return DUO_10


@pytest.fixture
def classics():
    return CLASSICS
