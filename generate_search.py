"""
Search phase: flat indexes clients filter on their own side.
"""

import logging

from geodata_config import COMBINED_SEARCH_CITY_LIMIT, COMBINED_SEARCH_STATE_LIMIT, SEARCH_FIELDS
from geodata_denormalize import state_search_entry
from geodata_models import CitySearchEntry, CountrySearchEntry, fields_of, project, project_all

logger = logging.getLogger(__name__)


def countries_search(countries):
    fields = fields_of(CountrySearchEntry)
    entries = []
    for country in countries:
        entry = project(country, fields)
        entry["translations"] = list((country.get("translations") or {}).values())
        entries.append(entry)
    return entries


def combined_search(store):
    return {
        "countries": [
            {"type": "country", **project(c, ("id", "name", "iso2", "emoji"))}
            for c in store.countries
        ],
        "states": [
            {"type": "state", **project(s, ("id", "name", "country_name"))}
            for s in store.states[:COMBINED_SEARCH_STATE_LIMIT]
        ],
        "cities": [
            {"type": "city", **project(c, ("id", "name", "state_name", "country_name"))}
            for c in store.cities[:COMBINED_SEARCH_CITY_LIMIT]
        ],
    }


def generate(store, ctx):
    """Write search/countries.json, states.json, cities.json and combined.json."""
    with ctx.phase("search") as result:
        logger.info("Generating search endpoints...")

        countries = countries_search(store.countries)
        ctx.write("search/countries.json", ctx.envelope(
            countries, "countries_search",
            searchable_fields=SEARCH_FIELDS["countries"],
            usage="Filter client-side using any of the searchable fields",
            total_countries=len(countries),
        ))

        states = [state_search_entry(s, store.country(s.get("country_id"))) for s in store.states]
        ctx.write("search/states.json", ctx.envelope(
            states, "states_search",
            searchable_fields=SEARCH_FIELDS["states"],
            usage="Filter client-side using name, iso2, or country_name fields",
            total_states=len(states),
        ))

        cities = project_all(store.cities, fields_of(CitySearchEntry))
        ctx.write("search/cities.json", ctx.envelope(
            cities, "cities_search",
            searchable_fields=SEARCH_FIELDS["cities"],
            usage="Filter client-side using name, state_name, or country_name fields",
            note="Large dataset - consider implementing client-side pagination or filtering",
            total_cities=len(cities),
        ))

        ctx.write("search/combined.json", ctx.envelope(
            combined_search(store), "combined_search",
            usage="Quick search across all entity types",
            limitations={
                "states": f"Limited to first {COMBINED_SEARCH_STATE_LIMIT} states",
                "cities": f"Limited to first {COMBINED_SEARCH_CITY_LIMIT} cities",
            },
            note="For complete search, use individual search endpoints",
        ))

        ctx.processed(len(store.countries) + len(store.states) + len(store.cities))
    return result
