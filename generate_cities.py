"""
Cities phase: cities by country, state and timezone, and the id batches with
their index (cities/batches.json).
"""

import logging
from typing import Any, Dict, List

from geodata_analyzer import country_extents
from geodata_batching import batch_index_entry, batch_lookup, partition_batches
from geodata_denormalize import has_coordinates
from geodata_filenames import code_filename, sanitize_timezone
from geodata_grouping import count_distinct, group_by, sort_by_name, unique
from geodata_models import CityTimezoneEntry, fields_of, project_all

logger = logging.getLogger(__name__)


def coverage(cities: List[Dict[str, Any]]) -> Dict[str, int]:
    return {
        "cities_with_wikidata": sum(1 for c in cities if c.get("wikiDataId")),
        "cities_with_coordinates": sum(1 for c in cities if has_coordinates(c)),
    }


def write_cities_by_country(store, ctx):
    fields = ctx.settings.city_list_fields
    extents = country_extents(store.cities)

    def write_country_cities(item):
        country_id, cities = item
        country = store.country(country_id)
        listing = project_all(sort_by_name(cities), fields)
        document = ctx.envelope(
            listing, "cities",
            country_id=country_id,
            country_name=country.get("name") if country else None,
            country_iso2=country.get("iso2") if country else None,
            country_code=cities[0].get("country_code"),
            total_cities=len(listing),
            default_view=extents.get(country_id),
            summary={
                "states": count_distinct(c.get("state_name") for c in cities),
                **coverage(cities),
            },
        )
        iso2 = country.get("iso2") if country else None
        return ctx.write(f"cities/country/{code_filename(iso2, country_id)}.json", document)

    ctx.map_parallel(write_country_cities, group_by(store.cities, "country_id").items())


def write_cities_by_state(store, ctx):
    fields = ctx.settings.city_list_fields

    def write_state_cities(item):
        state_id, cities = item
        state = store.state(state_id)
        first = cities[0]
        listing = project_all(sort_by_name(cities), fields)
        document = ctx.envelope(
            listing, "cities",
            state_id=state_id,
            state_name=state.get("name") if state else None,
            state_code=first.get("state_code"),
            country_id=first.get("country_id"),
            country_name=first.get("country_name"),
            country_code=first.get("country_code"),
            total_cities=len(listing),
            **coverage(cities),
        )
        code = state.get("iso3166_2") if state else None
        return ctx.write(f"cities/state/{code_filename(code, state_id)}.json", document)

    ctx.map_parallel(write_state_cities, group_by(store.cities, "state_id").items())


def write_cities_by_timezone(cities: List[Dict[str, Any]], ctx):
    fields = fields_of(CityTimezoneEntry)

    def write_timezone(item):
        tz, members = item
        listing = project_all(sort_by_name(members), fields)
        return ctx.write(f"cities/timezone/{sanitize_timezone(tz, 'unknown')}.json", ctx.envelope(
            listing, "cities_by_timezone",
            timezone=tz,
            total_cities=len(listing),
            countries=unique((c.get("country_name") for c in members), sort=True),
            states=count_distinct(c.get("state_name") for c in members),
        ))

    ctx.map_parallel(write_timezone, group_by(cities, "timezone").items())


def write_city_batches(store, ctx) -> List[Dict[str, Any]]:
    """Write the id batches, then the index describing them in id order."""
    batch_size = ctx.settings.batch_size
    batches = partition_batches(store.cities, batch_size)
    logger.info(f"Generating {len(batches)} city batch files")

    def write_batch(batch):
        document = ctx.envelope(
            batch_lookup(batch, store.states_by_id, store.countries_by_id), "cities_batch",
            batch_range=f"{batch.start_id}-{batch.end_id}",
            cities_count=batch.count,
            usage="Access city by ID: data[city_id]",
        )
        return ctx.write(batch.path, document)

    ctx.map_parallel(write_batch, batches)

    index = [batch_index_entry(batch) for batch in batches]
    ctx.write("cities/batches.json", ctx.envelope(
        index, "batch_index",
        total_batches=len(index),
        cities_per_batch=batch_size,
        total_cities=sum(entry["count"] for entry in index),
        usage="Use start_id/end_id to find which batch contains a specific city ID",
    ))
    logger.info(f"✓ Generated {len(batches)} city batch files and index")
    return index


def generate(store, ctx):
    """Write every cities endpoint."""
    with ctx.phase("cities") as result:
        logger.info(f"Generating cities endpoints for {len(store.cities)} cities...")

        write_cities_by_country(store, ctx)
        write_cities_by_state(store, ctx)
        write_cities_by_timezone(store.cities, ctx)
        write_city_batches(store, ctx)

        ctx.processed(len(store.cities))
    return result
