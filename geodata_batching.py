"""
City batches: a static host cannot answer "city by id", so cities are cut into
fixed-size, id-sorted files plus an index of id ranges. A client looks the id
up in cities/batches.json, fetches one batch file and reads data[str(id)].
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from geodata_denormalize import denormalize_city
from geodata_grouping import sort_by_id

BATCH_DIR = "cities/batch"


@dataclass(frozen=True)
class CityBatch:
    start_id: int
    end_id: int
    cities: Sequence[Dict[str, Any]]

    @property
    def count(self) -> int:
        return len(self.cities)

    @property
    def filename(self) -> str:
        return f"batch-{self.start_id}-{self.end_id}.json"

    @property
    def path(self) -> str:
        return f"{BATCH_DIR}/{self.filename}"


def partition_batches(cities: Iterable[Dict[str, Any]], batch_size: int = 100) -> List[CityBatch]:
    """
    Sort cities by id and cut them into contiguous runs of batch_size.

    Each batch is named after the smallest and largest id it actually holds,
    so gaps in the id sequence simply widen a range. The last batch may be
    shorter. Cities without an id cannot be addressed and are left out.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    ordered = sort_by_id(city for city in cities if city.get("id") is not None)
    batches = []
    for offset in range(0, len(ordered), batch_size):
        chunk = ordered[offset:offset + batch_size]
        batches.append(CityBatch(start_id=chunk[0]["id"], end_id=chunk[-1]["id"], cities=chunk))
    return batches


def batch_lookup(batch: CityBatch,
                 states_by_id: Dict[int, Dict[str, Any]],
                 countries_by_id: Dict[int, Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Keyed lookup object for one batch file: {"<id>": denormalized city}."""
    return {
        str(city["id"]): denormalize_city(
            city,
            states_by_id.get(city.get("state_id")),
            countries_by_id.get(city.get("country_id")),
        )
        for city in batch.cities
        if city.get("id") is not None
    }


def batch_index_entry(batch: CityBatch) -> Dict[str, Any]:
    return {
        "filename": batch.path,
        "start_id": batch.start_id,
        "end_id": batch.end_id,
        "count": batch.count,
    }


def find_batch(index: Sequence[Dict[str, Any]], city_id: int) -> Optional[Dict[str, Any]]:
    """
    Resolve a city id to its batch index entry by binary search on start_id.

    Returns None when the id falls outside every range. An id inside a range
    may still be absent from the batch (ranges span id gaps).
    """
    starts = [entry["start_id"] for entry in index]
    position = bisect_right(starts, city_id) - 1
    if position < 0:
        return None
    entry = index[position]
    return entry if entry["start_id"] <= city_id <= entry["end_id"] else None
