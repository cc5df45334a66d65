"""
States phase: states grouped by country, type and timezone, one file per
state, the type and timezone indexes, and states/all.json.
"""

import logging
from typing import Any, Dict, List

from geodata_denormalize import country_context, state_detail_context
from geodata_filenames import code_filename, sanitize, sanitize_timezone
from geodata_grouping import count_distinct, group_by, sort_by_name, unique
from geodata_models import StateTimezoneEntry, StateTypeEntry, fields_of, project_all

logger = logging.getLogger(__name__)


def type_endpoint(state_type: str) -> str:
    return f"states/type/{sanitize(state_type, 'unknown')}.json"


def timezone_endpoint(tz: str) -> str:
    return f"states/timezone/{sanitize_timezone(tz, 'unknown')}.json"


def write_states_by_country(store, ctx):
    fields = ctx.settings.state_list_fields

    def write_country_states(item):
        country_id, states = item
        country = store.country(country_id)
        if country is None:
            logger.debug(f"Country {country_id} not found; states file keyed by id")

        listing = project_all(sort_by_name(states), fields)
        document = ctx.envelope(
            listing, "states",
            country_id=country_id,
            **country_context(country),
            country_code=states[0].get("country_code"),
            total_states=len(listing),
            types=unique(s.get("type") for s in states),
            timezones=unique(s.get("timezone") for s in states),
        )
        iso2 = country.get("iso2") if country else None
        return ctx.write(f"states/country/{code_filename(iso2, country_id)}.json", document)

    ctx.map_parallel(write_country_states, group_by(store.states, "country_id").items())


def write_individual_states(store, ctx):
    def write_state(state):
        country = store.country(state.get("country_id"))
        document = ctx.envelope(state, "state", **state_detail_context(state, country))
        return ctx.write(f"states/{code_filename(state.get('iso3166_2'), state.get('id'))}.json", document)

    written = ctx.map_parallel(write_state, store.states)
    logger.info(f"✓ Generated {sum(1 for ok in written if ok)} individual state files")


def write_states_by_type(states: List[Dict[str, Any]], ctx):
    by_type = group_by(states, "type")
    fields = fields_of(StateTypeEntry)

    def write_type(item):
        state_type, members = item
        listing = project_all(sort_by_name(members), fields)
        return ctx.write(type_endpoint(state_type), ctx.envelope(
            listing, "states_by_type",
            state_type=state_type,
            total_states=len(listing),
            countries=unique((s.get("country_name") for s in members), sort=True),
            timezones=unique((s.get("timezone") for s in members), sort=True),
        ))

    ctx.map_parallel(write_type, by_type.items())

    index = [
        {
            "type": state_type,
            "state_count": len(members),
            "country_count": count_distinct(s.get("country_id") for s in members),
            "endpoint": type_endpoint(state_type),
        }
        for state_type, members in by_type.items()
    ]
    index.sort(key=lambda entry: entry["state_count"], reverse=True)
    ctx.write("states/types.json", ctx.envelope(index, "state_types_index"))


def write_states_by_timezone(states: List[Dict[str, Any]], ctx):
    by_timezone = group_by(states, "timezone")
    fields = fields_of(StateTimezoneEntry)

    def write_timezone(item):
        tz, members = item
        listing = project_all(sort_by_name(members), fields)
        return ctx.write(timezone_endpoint(tz), ctx.envelope(
            listing, "states_by_timezone",
            timezone=tz,
            total_states=len(listing),
            countries=unique((s.get("country_name") for s in members), sort=True),
            types=unique((s.get("type") for s in members), sort=True),
        ))

    ctx.map_parallel(write_timezone, by_timezone.items())

    index = [
        {
            "timezone": tz,
            "state_count": len(members),
            "country_count": count_distinct(s.get("country_id") for s in members),
            "endpoint": timezone_endpoint(tz),
        }
        for tz, members in sorted(by_timezone.items(), key=lambda item: str(item[0]))
    ]
    ctx.write("states/timezones.json", ctx.envelope(index, "state_timezones_index"))


def write_all_states(states: List[Dict[str, Any]], ctx):
    listing = project_all(sort_by_name(states), ctx.settings.state_list_fields)
    ctx.write("states/all.json", ctx.envelope(
        listing, "all_states",
        total_states=len(listing),
        countries=count_distinct(s.get("country_name") for s in states),
        types=unique(s.get("type") for s in states),
        timezones=count_distinct(s.get("timezone") for s in states),
    ))


def generate(store, ctx):
    """Write every states endpoint."""
    with ctx.phase("states") as result:
        logger.info(f"Generating states endpoints for {len(store.states)} states...")

        write_states_by_country(store, ctx)
        write_individual_states(store, ctx)
        write_states_by_type(store.states, ctx)
        write_states_by_timezone(store.states, ctx)
        write_all_states(store.states, ctx)

        ctx.processed(len(store.states))
    return result
