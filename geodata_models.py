"""
Record shapes and list-view projections for the geo-data API.

Source records are plain dicts loaded from JSON. The TypedDicts below document
the fields the generators rely on, and the *Entry classes define which fields
each list view publishes. Projection field tuples are derived from the class
annotations so a typo in a view is a typo in a class body, not in a loose list.
"""

from typing import Any, Dict, Iterable, List, Tuple, TypedDict


class Country(TypedDict, total=False):
    id: int
    name: str
    iso2: str
    iso3: str
    numeric_code: str
    phonecode: str
    capital: str
    currency: str
    currency_name: str
    currency_symbol: str
    native: str
    region: str
    region_id: int
    subregion: str
    subregion_id: int
    emoji: str
    emojiU: str
    latitude: str
    longitude: str
    timezones: List[Dict[str, Any]]
    translations: Dict[str, str]


class State(TypedDict, total=False):
    id: int
    name: str
    country_id: int
    country_code: str
    country_name: str
    iso2: str
    iso3166_2: str
    type: str
    timezone: str
    latitude: str
    longitude: str


class City(TypedDict, total=False):
    id: int
    name: str
    state_id: int
    state_code: str
    state_name: str
    country_id: int
    country_code: str
    country_name: str
    latitude: str
    longitude: str
    timezone: str
    wikiDataId: str


# ============================================
# LIST VIEW PROJECTIONS
# ============================================

class CountryListEntry(TypedDict, total=False):
    id: int
    name: str
    iso2: str
    phonecode: str


class CountryRegionEntry(TypedDict, total=False):
    id: int
    name: str
    iso2: str
    iso3: str
    capital: str
    currency: str
    currency_symbol: str
    subregion: str
    emoji: str
    emojiU: str


class CountrySubregionEntry(TypedDict, total=False):
    id: int
    name: str
    iso2: str
    iso3: str
    capital: str
    currency: str
    region: str
    emoji: str
    emojiU: str


class StateListEntry(TypedDict, total=False):
    id: int
    name: str
    iso2: str
    iso3166_2: str


class StateTypeEntry(TypedDict, total=False):
    id: int
    name: str
    country_id: int
    country_code: str
    country_name: str
    iso2: str
    latitude: str
    longitude: str
    timezone: str


class StateTimezoneEntry(TypedDict, total=False):
    id: int
    name: str
    country_id: int
    country_code: str
    country_name: str
    type: str
    latitude: str
    longitude: str


class CityListEntry(TypedDict, total=False):
    id: int
    name: str
    latitude: str
    longitude: str
    wikiDataId: str


class CityTimezoneEntry(TypedDict, total=False):
    id: int
    name: str
    state_name: str
    country_name: str
    latitude: str
    longitude: str
    wikiDataId: str


class CountrySearchEntry(TypedDict, total=False):
    id: int
    name: str
    iso2: str
    iso3: str
    native: str
    capital: str
    currency: str
    currency_name: str
    region: str
    subregion: str
    emoji: str


class CitySearchEntry(TypedDict, total=False):
    id: int
    name: str
    state_id: int
    state_name: str
    country_id: int
    country_name: str


def fields_of(view: type) -> Tuple[str, ...]:
    """Field names of a projection class, in declaration order."""
    return tuple(view.__annotations__)


def project(record: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    """
    Copy the given fields from a record into a new dict.

    Fields the record does not carry are left out rather than set to None,
    so a list entry never claims a value the source never had.
    """
    return {field: record[field] for field in fields if field in record}


def project_all(records: Iterable[Dict[str, Any]], fields: Iterable[str]) -> List[Dict[str, Any]]:
    fields = tuple(fields)
    return [project(record, fields) for record in records]
