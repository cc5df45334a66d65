import random

import pytest

from geodata_batching import batch_index_entry, batch_lookup, find_batch, partition_batches


def make_cities(ids):
    return [{"id": city_id, "name": f"City {city_id}", "state_id": 1, "country_id": 1} for city_id in ids]


def test_batches_are_named_by_actual_id_range():
    ids = list(range(1, 251))
    random.Random(7).shuffle(ids)
    batches = partition_batches(make_cities(ids), batch_size=100)

    assert [(b.start_id, b.end_id, b.count) for b in batches] == [(1, 100, 100), (101, 200, 100), (201, 250, 50)]
    assert batches[0].filename == "batch-1-100.json"
    assert batches[2].path == "cities/batch/batch-201-250.json"


def test_batches_cover_every_city_once_with_gaps():
    ids = [3, 4, 9, 10, 11, 40, 41, 100, 101, 102, 500]
    batches = partition_batches(make_cities(reversed(ids)), batch_size=4)
    index = [batch_index_entry(b) for b in batches]

    assert sum(entry["count"] for entry in index) == len(ids)
    seen = [city["id"] for b in batches for city in b.cities]
    assert seen == sorted(ids)
    for entry in index:
        assert entry["start_id"] <= entry["end_id"]
    for previous, following in zip(index, index[1:]):
        assert following["start_id"] > previous["end_id"]
    for city_id in ids:
        entry = find_batch(index, city_id)
        assert entry["start_id"] <= city_id <= entry["end_id"]


def test_find_batch_outside_ranges():
    index = [batch_index_entry(b) for b in partition_batches(make_cities([5, 6, 20, 21]), batch_size=2)]
    assert find_batch(index, 1) is None
    assert find_batch(index, 10) is None
    assert find_batch(index, 99) is None
    assert find_batch(index, 20)["filename"] == "cities/batch/batch-20-21.json"


def test_empty_collection_has_no_batches():
    assert partition_batches([], batch_size=100) == []


def test_batch_size_must_be_positive():
    with pytest.raises(ValueError):
        partition_batches(make_cities([1]), batch_size=0)


def test_batch_lookup_is_keyed_by_string_id(cities, store):
    [batch] = partition_batches(cities, batch_size=100)
    lookup = batch_lookup(batch, store.states_by_id, store.countries_by_id)

    assert list(lookup) == ["100", "101", "105", "250"]
    assert lookup["100"]["state_type"] == "province"
    assert lookup["100"]["country_iso2"] == "AF"
    assert "state_type" not in lookup["250"]
    assert lookup["250"]["country_iso2"] == "BD"


def test_cities_without_id_are_left_out_of_batches():
    cities = make_cities([7, 3]) + [{"name": "No id"}, {"id": None, "name": "Null id"}]
    [batch] = partition_batches(cities, batch_size=10)
    assert (batch.start_id, batch.end_id, batch.count) == (3, 7, 2)
    assert list(batch_lookup(batch, {}, {})) == ["3", "7"]
