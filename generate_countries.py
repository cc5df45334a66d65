"""
Countries phase: countries.json, one file per country, and the region and
subregion groupings.
"""

import logging
from typing import Any, Dict, List

from geodata_filenames import code_filename, sanitize
from geodata_grouping import group_by, sort_by_name
from geodata_models import CountryRegionEntry, CountrySubregionEntry, fields_of, project_all

logger = logging.getLogger(__name__)


def write_countries_list(countries: List[Dict[str, Any]], ctx):
    fields = ctx.settings.country_list_fields
    listing = project_all(sort_by_name(countries), fields)
    ctx.write("countries.json", ctx.envelope(
        listing, "countries",
        total_countries=len(listing),
        fields_included=list(fields),
    ))


def write_country(country: Dict[str, Any], ctx) -> bool:
    document = ctx.envelope(
        country, "country",
        country_id=country.get("id"),
        country_name=country.get("name"),
        has_timezones=bool(country.get("timezones")),
        has_translations=bool(country.get("translations")),
    )
    return ctx.write(f"countries/{code_filename(country.get('iso2'), country.get('id'))}.json", document)


def region_endpoint(region: str) -> str:
    return f"countries/region/{sanitize(region, 'unknown')}.json"


def write_regions(countries: List[Dict[str, Any]], ctx):
    by_region = group_by(countries, "region")
    fields = fields_of(CountryRegionEntry)

    def write_region(item):
        region, members = item
        listing = project_all(sort_by_name(members), fields)
        return ctx.write(region_endpoint(region), ctx.envelope(
            listing, "countries_by_region",
            region=region,
            region_id=members[0].get("region_id"),
            total_countries=len(listing),
        ))

    ctx.map_parallel(write_region, by_region.items())

    index = []
    for region, members in by_region.items():
        entry = {"region": region}
        if members[0].get("region_id") is not None:
            entry["region_id"] = members[0]["region_id"]
        entry["country_count"] = len(members)
        entry["endpoint"] = region_endpoint(region)
        index.append(entry)
    ctx.write("countries/regions.json", ctx.envelope(index, "regions_index"))


def write_subregions(countries: List[Dict[str, Any]], ctx):
    fields = fields_of(CountrySubregionEntry)

    def write_subregion(item):
        subregion, members = item
        listing = project_all(sort_by_name(members), fields)
        return ctx.write(f"countries/subregion/{sanitize(subregion, 'unknown')}.json", ctx.envelope(
            listing, "countries_by_subregion",
            subregion=subregion,
            subregion_id=members[0].get("subregion_id"),
            region=members[0].get("region"),
            total_countries=len(listing),
        ))

    ctx.map_parallel(write_subregion, group_by(countries, "subregion").items())


def generate(store, ctx):
    """Write every countries endpoint."""
    with ctx.phase("countries") as result:
        countries = store.countries
        logger.info(f"Generating countries endpoints for {len(countries)} countries...")

        write_countries_list(countries, ctx)
        written = ctx.map_parallel(lambda country: write_country(country, ctx), countries)
        logger.info(f"✓ Generated {sum(1 for ok in written if ok)} individual country files")
        write_regions(countries, ctx)
        write_subregions(countries, ctx)

        ctx.processed(len(countries))
    return result
