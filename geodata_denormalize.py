"""
Denormalization: copy parent fields onto child records so clients never need
a second request. Inputs are never mutated. When a parent is unknown the
parent-derived keys are left out entirely; consumers read absence as
"unknown".
"""

from typing import Any, Dict, Optional


def has_coordinates(record: Dict[str, Any]) -> bool:
    return bool(record.get("latitude") and record.get("longitude"))


def _copy_present(target: Dict[str, Any], source: Optional[Dict[str, Any]], mapping: Dict[str, str]):
    if source is None:
        return
    for target_key, source_key in mapping.items():
        if source.get(source_key) is not None:
            target[target_key] = source[source_key]


def denormalize_city(city: Dict[str, Any],
                     state: Optional[Dict[str, Any]],
                     country: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Full city record for a batch file.

    Parent names win over the city's own copies when the parent is known;
    otherwise the city's own state_name/country_name stay as loaded.
    """
    enriched = dict(city)
    _copy_present(enriched, state, {"state_name": "name", "state_type": "type"})
    _copy_present(enriched, country, {
        "country_name": "name",
        "country_iso2": "iso2",
        "country_iso3": "iso3",
    })
    enriched["has_coordinates"] = has_coordinates(city)
    enriched["has_wikidata"] = bool(city.get("wikiDataId"))
    enriched["has_timezone"] = bool(city.get("timezone"))
    return enriched


def state_detail_context(state: Dict[str, Any], country: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Extra meta for states/{code}.json."""
    context = {}
    _copy_present(context, country, {
        "country_name": "name",
        "country_iso2": "iso2",
        "country_iso3": "iso3",
    })
    context["has_coordinates"] = has_coordinates(state)
    context["has_timezone"] = bool(state.get("timezone"))
    return context


def state_search_entry(state: Dict[str, Any], country: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    entry = {
        "id": state.get("id"),
        "name": state.get("name"),
        "iso2": state.get("iso2") or None,
        "country_id": state.get("country_id"),
    }
    if "country_name" in state:
        entry["country_name"] = state["country_name"]
    _copy_present(entry, country, {"country_iso2": "iso2"})
    return entry


def country_context(country: Optional[Dict[str, Any]], prefix: str = "country") -> Dict[str, Any]:
    """name/iso2/iso3 of a country as prefixed meta keys, empty when unknown."""
    context = {}
    _copy_present(context, country, {
        f"{prefix}_name": "name",
        f"{prefix}_iso2": "iso2",
        f"{prefix}_iso3": "iso3",
    })
    return context
