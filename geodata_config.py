"""
Geo-Data API Configuration

Module-level defaults for the generator, plus the GeneratorSettings object the
pipeline actually reads. The CLI builds a GeneratorSettings from these defaults
and its own flags.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from geodata_models import (
    CityListEntry,
    CountryListEntry,
    StateListEntry,
    fields_of,
)

# ============================================
# CONFIGURATION
# ============================================

# Input directory holding countries.json, states.json and cities.json
INPUT_DIR = Path("./db")

# Output directory for the generated API tree
OUTPUT_DIR = Path("./dist/api/v1")

API_VERSION = "v1"

# Public location of the generated tree (referenced from api-info.json)
CDN_BASE_URL = "https://cdn.jsdelivr.net/npm/geo-data-api@latest/dist/api/v1"

# Output format: 'compact' (minified), 'pretty' (indented) or 'auto'
# ('auto' pretty-prints documents with at most PRETTY_JSON_THRESHOLD records)
OUTPUT_FORMAT = "compact"
PRETTY_JSON_THRESHOLD = 100

# Strip null / empty-string values when writing compact output
OPTIMIZE_JSON = True

# Decimal places kept for latitude/longitude in compact output
COORDINATE_PRECISION = 8

# Cities per batch file (cities/batch/batch-{start}-{end}.json)
CITIES_PER_BATCH = 100

# Parallel file writes per phase (be gentle with file descriptors)
MAX_CONCURRENT_FILES = 5

# Error handling: 'strict' aborts, 'warn' records and continues, 'ignore' is silent
ERROR_HANDLING_MODE = "warn"

# Combined search index limits
COMBINED_SEARCH_STATE_LIMIT = 1000
COMBINED_SEARCH_CITY_LIMIT = 5000

# Fields a record must carry to take part in generation
REQUIRED_FIELDS = {
    "countries": ("id", "name"),
    "states": ("id", "name", "country_id"),
    "cities": ("id", "name", "state_id", "country_id"),
}

# Fields advertised as searchable in search/*.json
SEARCH_FIELDS = {
    "countries": ["name", "iso2", "iso3", "native", "capital", "currency", "region", "subregion"],
    "states": ["name", "iso2", "country_name", "country_code", "type", "timezone"],
    "cities": ["name", "state_name", "country_name", "state_code", "country_code", "wikiDataId"],
}

OUTPUT_FORMATS = ("compact", "pretty", "auto")
ERROR_MODES = ("strict", "warn", "ignore")


@dataclass
class GeneratorSettings:
    input_dir: Path = INPUT_DIR
    output_dir: Path = OUTPUT_DIR
    api_version: str = API_VERSION
    base_url: str = CDN_BASE_URL
    output_format: str = OUTPUT_FORMAT
    pretty_threshold: int = PRETTY_JSON_THRESHOLD
    optimize_json: bool = OPTIMIZE_JSON
    coordinate_precision: int = COORDINATE_PRECISION
    batch_size: int = CITIES_PER_BATCH
    max_concurrency: int = MAX_CONCURRENT_FILES
    error_mode: str = ERROR_HANDLING_MODE
    clean_output: bool = True
    release_memory: bool = True
    country_list_fields: Tuple[str, ...] = field(default_factory=lambda: fields_of(CountryListEntry))
    state_list_fields: Tuple[str, ...] = field(default_factory=lambda: fields_of(StateListEntry))
    city_list_fields: Tuple[str, ...] = field(default_factory=lambda: fields_of(CityListEntry))

    def __post_init__(self):
        self.input_dir = Path(self.input_dir)
        self.output_dir = Path(self.output_dir)
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format '{self.output_format}' (expected one of {OUTPUT_FORMATS})")
        if self.error_mode not in ERROR_MODES:
            raise ValueError(f"Unknown error mode '{self.error_mode}' (expected one of {ERROR_MODES})")
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        if self.coordinate_precision < 0:
            raise ValueError("coordinate_precision cannot be negative")

    @property
    def strict(self) -> bool:
        return self.error_mode == "strict"
