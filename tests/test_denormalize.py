from geodata_denormalize import (
    country_context,
    denormalize_city,
    has_coordinates,
    state_detail_context,
    state_search_entry,
)


def test_has_coordinates_needs_both_values():
    assert has_coordinates({"latitude": "1.0", "longitude": "2.0"})
    assert not has_coordinates({"latitude": "1.0", "longitude": ""})
    assert not has_coordinates({"latitude": None, "longitude": "2.0"})
    assert not has_coordinates({})


def test_city_gets_parent_fields(cities, store):
    city = cities[0]
    enriched = denormalize_city(city, store.state(10), store.country(1))
    assert enriched["state_name"] == "Prov"
    assert enriched["state_type"] == "province"
    assert enriched["country_name"] == "Afneq"
    assert enriched["country_iso2"] == "AF"
    assert enriched["country_iso3"] == "AFG"
    assert enriched["has_coordinates"] is True
    assert enriched["has_wikidata"] is True
    assert enriched["has_timezone"] is True


def test_missing_parents_omit_fields_instead_of_nulling(cities):
    lost = cities[3]
    enriched = denormalize_city(lost, None, None)
    assert "state_type" not in enriched
    assert "country_iso2" not in enriched
    assert "country_iso3" not in enriched
    # the city's own copies stay when the parent is unknown
    assert enriched["state_name"] == "Lostland"
    assert enriched["country_name"] == "Borduria"
    assert enriched["has_coordinates"] is False


def test_denormalize_does_not_mutate_input(cities, store):
    city = cities[0]
    snapshot = dict(city)
    denormalize_city(city, store.state(10), store.country(1))
    assert city == snapshot


def test_parent_name_wins_over_stale_copy(cities, store):
    # the record's own country_name may drift from the canonical country; the
    # parent record is what the batch files publish
    city = dict(cities[0], country_name="Old Afneq")
    assert denormalize_city(city, None, store.country(1))["country_name"] == "Afneq"


def test_state_detail_context(states, store):
    context = state_detail_context(states[0], store.country(1))
    assert context == {
        "country_name": "Afneq",
        "country_iso2": "AF",
        "country_iso3": "AFG",
        "has_coordinates": True,
        "has_timezone": True,
    }
    orphan = state_detail_context(states[3], None)
    assert orphan == {"has_coordinates": False, "has_timezone": False}


def test_state_search_entry_exposes_country_iso2(states, store):
    entry = state_search_entry(states[0], store.country(1))
    assert entry["country_name"] == "Afneq"
    assert entry["country_iso2"] == "AF"
    assert "country_iso2" not in state_search_entry(states[3], None)


def test_country_context_prefix(store):
    assert country_context(store.country(2)) == {
        "country_name": "Borduria", "country_iso2": "BD", "country_iso3": "BDR",
    }
    assert country_context(None) == {}
