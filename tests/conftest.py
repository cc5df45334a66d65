import copy
import json

import pytest

from geodata_config import GeneratorSettings
from geodata_context import GenerationContext
from geodata_store import RecordStore

COUNTRIES = [
    {
        "id": 1, "name": "Afneq", "iso2": "AF", "iso3": "AFG", "phonecode": "93",
        "capital": "Kabul", "currency": "AFN", "region": "Asia", "region_id": 3,
        "subregion": "Southern Asia", "subregion_id": 14, "emoji": "🇦🇫",
        "timezones": [{"zoneName": "Asia/Kabul"}], "translations": {"de": "Afneq-DE"},
    },
    {
        "id": 2, "name": "Borduria", "iso2": "BD", "iso3": "BDR", "phonecode": "99",
        "currency": "BDD", "region": "Europe", "region_id": 4, "subregion": "Eastern Europe",
    },
    {
        "id": 3, "name": "Atlantis", "iso2": "", "iso3": "ATL", "region": "", "subregion": None,
    },
]

STATES = [
    {
        "id": 10, "name": "Prov", "country_id": 1, "country_code": "AF", "country_name": "Afneq",
        "iso2": "PR", "iso3166_2": "AF-PR", "type": "province", "timezone": "Asia/Kabul",
        "latitude": "34.512345678901", "longitude": "69.1",
    },
    {
        "id": 11, "name": "Alpha", "country_id": 1, "country_code": "AF", "country_name": "Afneq",
        "iso2": "AL", "iso3166_2": "AF-AL", "type": "province", "timezone": "Asia/Kabul",
    },
    {
        "id": 20, "name": "Zentrum", "country_id": 2, "country_code": "BD", "country_name": "Borduria",
        "iso2": "ZE", "iso3166_2": "BD-ZE", "type": "region", "timezone": "Europe/Szohod",
        "latitude": None, "longitude": "",
    },
    {
        "id": 30, "name": "Orphan", "country_id": 99, "country_code": "XX", "country_name": "Nowhere",
        "iso2": "OR", "iso3166_2": "", "type": "undefined", "timezone": "",
    },
]

CITIES = [
    {
        "id": 100, "name": "Town", "state_id": 10, "state_code": "PR", "state_name": "Prov",
        "country_id": 1, "country_code": "AF", "country_name": "Afneq",
        "latitude": "34.5", "longitude": "69.2", "wikiDataId": "Q1", "timezone": "Asia/Kabul",
    },
    {
        "id": 101, "name": "Abad", "state_id": 11, "state_code": "AL", "state_name": "Alpha",
        "country_id": 1, "country_code": "AF", "country_name": "Afneq",
        "latitude": "35.0", "longitude": "70.0", "timezone": "Asia/Kabul",
    },
    {
        "id": 105, "name": "Szohod", "state_id": 20, "state_code": "ZE", "state_name": "Zentrum",
        "country_id": 2, "country_code": "BD", "country_name": "Borduria",
        "latitude": "", "longitude": "", "timezone": "Europe/Szohod",
    },
    {
        "id": 250, "name": "Lost", "state_id": 77, "state_code": "LO", "state_name": "Lostland",
        "country_id": 2, "country_code": "BD", "country_name": "Borduria",
    },
]


@pytest.fixture
def countries():
    return copy.deepcopy(COUNTRIES)


@pytest.fixture
def states():
    return copy.deepcopy(STATES)


@pytest.fixture
def cities():
    return copy.deepcopy(CITIES)


@pytest.fixture
def store(countries, states, cities):
    return RecordStore(countries, states, cities)


@pytest.fixture
def write_source():
    """Write countries/states/cities JSON files into a folder."""
    def _write(folder, countries, states, cities):
        folder.mkdir(parents=True, exist_ok=True)
        for name, records in (("countries", countries), ("states", states), ("cities", cities)):
            (folder / f"{name}.json").write_text(json.dumps(records), encoding="utf-8")
        return folder
    return _write


@pytest.fixture
def settings(tmp_path):
    return GeneratorSettings(
        input_dir=tmp_path / "db",
        output_dir=tmp_path / "out",
        output_format="pretty",
    )


@pytest.fixture
def ctx(settings):
    return GenerationContext(settings)


@pytest.fixture
def read_output(settings):
    """Load a generated document by its path relative to the output folder."""
    def _read(rel_path):
        return json.loads((settings.output_dir / rel_path).read_text(encoding="utf-8"))
    return _read
