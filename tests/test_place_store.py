import pytest

from places.models import Place, RESTAURANT_NAMES, seed_places
from places.store import PlaceStore


@pytest.fixture
def store(tmp_path):
    return PlaceStore(str(tmp_path / "places.csv"))


def test_empty_store_loads_nothing(store):
    assert store.load_all() == []


def test_save_and_load_keeps_optional_fields(store):
    thumbnail = b"\x89PNG\r\n\x1a\nfake"
    store.save(Place.new("Bonsai", address="Moscow", category="Restaurant", thumbnail=thumbnail))
    store.save(Place.new("Шок"))

    places = store.load_all()

    assert places[0] == Place("Bonsai", "Moscow", "Restaurant", thumbnail)
    assert places[1] == Place("Шок", None, None, None)


def test_save_replaces_by_name(store):
    store.save(Place.new("Kitchen", address="Moscow"))
    store.save(Place.new("Kitchen", address="Kazan"))

    places = store.load_all()
    assert len(places) == 1
    assert places[0].address == "Kazan"


def test_seed_only_fills_empty_store(store):
    assert store.seed() == len(RESTAURANT_NAMES)
    assert store.seed() == 0

    names = [p.name for p in store.load_all()]
    assert names == RESTAURANT_NAMES


def test_seed_places_defaults():
    places = seed_places()
    assert all(p.address == "Moscow" and p.category == "Restaurant" for p in places)
    assert all(p.thumbnail is None for p in places)


def test_place_requires_name():
    with pytest.raises(ValueError):
        Place.new("   ")
