"""
Read-only statistics over the loaded collections, used for the run log and
the api-info.json summary. Nothing here changes what the phases emit, except
the per-country default view that cities/country/*.json carries in its meta.
"""

import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Tuple

from shapely.geometry import MultiPoint, Point, box

from geodata_denormalize import has_coordinates
from geodata_grouping import group_by, unique

logger = logging.getLogger(__name__)

TOP_N = 5

WORLD_BOUNDS = box(-180, -90, 180, 90)


def percentage(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


def top_groups(records: Iterable[Dict[str, Any]], key: str, n: int = TOP_N) -> List[Tuple[Any, int]]:
    """The n most common values of a field, ties in first-seen order."""
    counts = Counter(record.get(key) for record in records)
    return counts.most_common(n)


def parse_point(record: Dict[str, Any]) -> Optional[Point]:
    """Point(lon, lat) for a record with parseable, in-range coordinates."""
    if not has_coordinates(record):
        return None
    try:
        point = Point(float(record["longitude"]), float(record["latitude"]))
    except (TypeError, ValueError):
        return None
    return point if WORLD_BOUNDS.covers(point) else None


def zoom_for_extent(width: float, height: float) -> int:
    """Rough web-map zoom level that fits an extent given in degrees."""
    max_dimension = max(width, height)
    thresholds = [(100, 2), (50, 3), (20, 4), (10, 5), (5, 6), (2, 7), (1, 8), (0.5, 9)]
    for limit, zoom in thresholds:
        if max_dimension > limit:
            return zoom
    return 10


def country_extents(cities: Iterable[Dict[str, Any]]) -> Dict[Any, Dict[str, Any]]:
    """
    Map country_id -> {"center": [lon, lat], "zoom": z} from city coordinates.

    Countries whose cities carry no usable coordinates are left out.
    """
    extents = {}
    for country_id, members in group_by(cities, "country_id").items():
        points = [point for point in (parse_point(city) for city in members) if point is not None]
        if not points:
            continue
        cloud = MultiPoint(points)
        centroid = cloud.centroid
        minx, miny, maxx, maxy = cloud.bounds
        extents[country_id] = {
            "center": [round(centroid.x, 4), round(centroid.y, 4)],
            "zoom": zoom_for_extent(maxx - minx, maxy - miny),
        }
    return extents


def analyze(countries: List[Dict[str, Any]], states: List[Dict[str, Any]], cities: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Counts, distinct values, coverage and distribution of the three collections."""
    logger.info("Analyzing data...")

    regions = unique(c.get("region") for c in countries)
    subregions = unique(c.get("subregion") for c in countries)
    currencies = unique(c.get("currency") for c in countries)

    state_types = unique(s.get("type") for s in states)
    state_timezones = unique(s.get("timezone") for s in states)
    states_with_coords = sum(1 for s in states if has_coordinates(s))

    cities_with_wikidata = sum(1 for c in cities if c.get("wikiDataId"))
    cities_with_coords = sum(1 for c in cities if has_coordinates(c))
    cities_with_bad_coords = sum(1 for c in cities if has_coordinates(c) and parse_point(c) is None)
    city_timezones = unique(c.get("timezone") for c in cities)

    analysis = {
        "countries": {
            "total": len(countries),
            "regions": len(regions),
            "subregions": len(subregions),
            "currencies": len(currencies),
        },
        "states": {
            "total": len(states),
            "types": state_types,
            "timezones": len(state_timezones),
            "with_coordinates": states_with_coords,
            "coordinates_coverage": percentage(states_with_coords, len(states)),
        },
        "cities": {
            "total": len(cities),
            "countries": len(unique(c.get("country_id") for c in cities)),
            "with_wikidata": cities_with_wikidata,
            "wikidata_coverage": percentage(cities_with_wikidata, len(cities)),
            "with_coordinates": cities_with_coords,
            "coordinates_coverage": percentage(cities_with_coords, len(cities)),
            "invalid_coordinates": cities_with_bad_coords,
            "timezones": len(city_timezones),
        },
        "distribution": {
            "top_countries_by_cities": top_groups(cities, "country_name"),
            "top_countries_by_states": top_groups(states, "country_name"),
        },
    }

    logger.info(f"📊 Countries: {len(countries)} ({len(regions)} regions, "
                f"{len(subregions)} subregions, {len(currencies)} currencies)")
    logger.info(f"📊 States: {len(states)} ({len(state_types)} types, {len(state_timezones)} timezones, "
                f"{analysis['states']['coordinates_coverage']}% with coordinates)")
    logger.info(f"📊 Cities: {len(cities)} ({analysis['cities']['wikidata_coverage']}% with WikiData, "
                f"{analysis['cities']['coordinates_coverage']}% with coordinates, "
                f"{len(city_timezones)} timezones)")
    if cities_with_bad_coords:
        logger.warning(f"⚠️  {cities_with_bad_coords} cities have unparseable or out-of-range coordinates")

    top_cities = ", ".join(f"{name} ({count})" for name, count in analysis["distribution"]["top_countries_by_cities"])
    logger.info(f"📊 Top countries by cities: {top_cities}")
    return analysis
