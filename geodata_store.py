"""
Record store: the three source collections and the id indexes used for parent
lookups. Loaded once per run and treated as read-only.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

SOURCE_FILES = ("countries.json", "states.json", "cities.json")


class LoadError(Exception):
    """Input snapshot missing or unreadable; the run cannot continue."""


def build_index(records: Iterable[Dict[str, Any]]) -> Dict[Any, Dict[str, Any]]:
    """Map id -> record. Later duplicates replace earlier ones."""
    return {record["id"]: record for record in records if "id" in record}


def read_records(path: Path) -> List[Dict[str, Any]]:
    """Read one JSON array of objects, raising LoadError on any problem."""
    path = Path(path)
    if not path.exists():
        raise LoadError(f"Input file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise LoadError(f"JSON parse error in {path}: {e}") from e
    except OSError as e:
        raise LoadError(f"Error reading {path}: {e}") from e

    if not isinstance(data, list):
        raise LoadError(f"{path} must contain a JSON array, got {type(data).__name__}")
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise LoadError(f"{path}: item at index {index} is not an object")
    return data


class RecordStore:
    def __init__(self, countries: List[Dict[str, Any]], states: List[Dict[str, Any]], cities: List[Dict[str, Any]]):
        self.countries = countries
        self.states = states
        self.cities = cities
        self.countries_by_id = build_index(countries)
        self.states_by_id = build_index(states)

    def country(self, country_id: Any) -> Optional[Dict[str, Any]]:
        return self.countries_by_id.get(country_id)

    def state(self, state_id: Any) -> Optional[Dict[str, Any]]:
        return self.states_by_id.get(state_id)

    def replace(self, countries=None, states=None, cities=None) -> "RecordStore":
        """A new store over (possibly filtered) collections, with fresh indexes."""
        return RecordStore(
            self.countries if countries is None else countries,
            self.states if states is None else states,
            self.cities if cities is None else cities,
        )

    def release_indexes(self):
        """Drop the parent indexes once no later phase denormalizes."""
        self.countries_by_id = {}
        self.states_by_id = {}

    def release(self):
        self.release_indexes()
        self.countries = []
        self.states = []
        self.cities = []

    def __repr__(self):
        return (f"RecordStore(countries={len(self.countries)}, "
                f"states={len(self.states)}, cities={len(self.cities)})")


def load_records(input_dir: Path) -> RecordStore:
    """Load countries.json, states.json and cities.json from input_dir."""
    input_dir = Path(input_dir)
    logger.info(f"Loading source data from {input_dir}...")

    countries, states, cities = (read_records(input_dir / name) for name in SOURCE_FILES)

    logger.info(f"✓ Loaded {len(countries)} countries")
    logger.info(f"✓ Loaded {len(states)} states")
    logger.info(f"✓ Loaded {len(cities)} cities")
    return RecordStore(countries, states, cities)
