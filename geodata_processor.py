#!/usr/bin/env python3
"""
============================================
PURPOSE: Generate the static geo-data JSON API
INPUT: countries.json, states.json, cities.json (see geodata_downloader.py)
OUTPUT: A tree of pre-computed JSON documents ready for a CDN
RUN IN: Terminal / Command Prompt
============================================

This script:
1. Loads the three source collections
2. Checks referential integrity and drops records missing required fields
3. Generates countries, states, cities and search endpoints, in that order
4. Writes api-info.json with statistics and the endpoint catalogue

Upload the output folder with upload_to_r2.py when done.
"""

import argparse
import logging
import shutil
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import generate_cities
import generate_countries
import generate_search
import generate_states
from geodata_analyzer import analyze
from geodata_config import (
    ERROR_MODES,
    OUTPUT_FORMATS,
    REQUIRED_FIELDS,
    GeneratorSettings,
)
from geodata_context import GenerationContext, GenerationError
from geodata_store import LoadError, RecordStore, load_records
from geodata_validator import IntegrityReport, ValidationError, check_referential_integrity, validate_records

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Generation phases, run strictly in this order
PHASES = [
    ("countries", generate_countries.generate),
    ("states", generate_states.generate),
    ("cities", generate_cities.generate),
    ("search", generate_search.generate),
]

ENDPOINTS = {
    "countries": {
        "list": "countries.json",
        "individual": "countries/{iso2}.json",
        "by_region": "countries/region/{region-name}.json",
        "by_subregion": "countries/subregion/{subregion-name}.json",
        "regions_index": "countries/regions.json",
    },
    "states": {
        "all": "states/all.json",
        "by_country": "states/country/{country_iso2}.json",
        "by_type": "states/type/{type-name}.json",
        "by_timezone": "states/timezone/{timezone-name}.json",
        "individual": "states/{iso3166_2}.json",
        "types_index": "states/types.json",
        "timezones_index": "states/timezones.json",
    },
    "cities": {
        "by_country": "cities/country/{country_iso2}.json",
        "by_state": "cities/state/{state_iso3166_2}.json",
        "by_timezone": "cities/timezone/{timezone-name}.json",
        "batch": "cities/batch/batch-{start_id}-{end_id}.json",
        "batch_index": "cities/batches.json",
    },
    "search": {
        "countries": "search/countries.json",
        "states": "search/states.json",
        "cities": "search/cities.json",
        "combined": "search/combined.json",
    },
}


def validate_store(store: RecordStore, ctx) -> RecordStore:
    """Drop (or, in strict mode, reject) records missing required fields."""
    with ctx.phase("validation") as result:
        countries = validate_records(store.countries, REQUIRED_FIELDS["countries"], "Countries validation", ctx)
        states = validate_records(store.states, REQUIRED_FIELDS["states"], "States validation", ctx)
        cities = validate_records(store.cities, REQUIRED_FIELDS["cities"], "Cities validation", ctx)
        result.records_processed = len(store.countries) + len(store.states) + len(store.cities)
    return store.replace(countries=countries, states=states, cities=cities)


def clean_output(output_dir: Path, input_dir: Optional[Path] = None):
    """Remove the previous API tree, refusing any folder that holds the input snapshot."""
    output_dir = Path(output_dir)
    target = output_dir.resolve()
    if target == Path(output_dir.anchor).resolve() or target == Path.cwd().resolve():
        raise ValueError(f"Refusing to clean {output_dir}")
    if input_dir is not None:
        source = Path(input_dir).resolve()
        if source == target or target in source.parents:
            raise ValueError(f"Refusing to clean {output_dir}: it contains the input folder {input_dir}")
    if output_dir.exists():
        shutil.rmtree(output_dir)
        logger.info(f"✓ Cleaned output folder: {output_dir}")


def write_api_info(store: RecordStore, ctx, analysis: Dict[str, Any], integrity: IntegrityReport):
    with ctx.phase("summary"):
        info = {
            "api_version": ctx.settings.api_version,
            "base_url": ctx.settings.base_url,
            "statistics": {
                "total_countries": len(store.countries),
                "total_states": len(store.states),
                "total_cities": len(store.cities),
                "regions": analysis["countries"]["regions"],
                "subregions": analysis["countries"]["subregions"],
                "state_types": analysis["states"]["types"],
                "cities_with_wikidata": analysis["cities"]["with_wikidata"],
                "states_with_coordinates": analysis["states"]["with_coordinates"],
                "cities_with_coordinates": analysis["cities"]["with_coordinates"],
            },
            "data_analysis": analysis,
            "integrity": integrity.summary(),
            "endpoints": ENDPOINTS,
            "generation": [result.summary() for result in ctx.results],
        }
        ctx.write("api-info.json", ctx.envelope(info, "api_info"))


def run(settings: GeneratorSettings) -> GenerationContext:
    """
    Run the whole pipeline. Raises LoadError, ValidationError,
    GenerationError (or the underlying OSError in strict mode) on abort.
    """
    ctx = GenerationContext(settings)

    with ctx.measure("data_loading"):
        store = load_records(settings.input_dir)

    with ctx.measure("validation"):
        integrity = check_referential_integrity(store.countries, store.states, store.cities)
        store = validate_store(store, ctx)

    analysis = analyze(store.countries, store.states, store.cities)

    if settings.clean_output:
        with ctx.measure("clean_output"):
            clean_output(settings.output_dir, settings.input_dir)

    logger.info("Starting API generation...")
    for name, generate in PHASES:
        generate(store, ctx)

    write_api_info(store, ctx, analysis, integrity)

    if settings.release_memory:
        store.release()

    logger.info("✅ API generation completed successfully!")
    logger.info(f"📁 Generated files are in: {settings.output_dir}")
    ctx.log_report()
    return ctx


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate the static geo-data JSON API")
    parser.add_argument("--input", dest="input_dir", type=Path, default=GeneratorSettings.input_dir,
                        help="Folder with countries.json, states.json and cities.json")
    parser.add_argument("--output", dest="output_dir", type=Path, default=GeneratorSettings.output_dir,
                        help="Folder to write the API tree into")
    parser.add_argument("--format", dest="output_format", choices=OUTPUT_FORMATS,
                        default=GeneratorSettings.output_format,
                        help="compact (minified), pretty (indented) or auto (pretty for small documents)")
    parser.add_argument("--pretty", dest="output_format", action="store_const", const="pretty",
                        help="Shorthand for --format pretty")
    parser.add_argument("--precision", dest="coordinate_precision", type=int,
                        default=GeneratorSettings.coordinate_precision,
                        help="Decimal places for latitude/longitude in compact output")
    parser.add_argument("--batch-size", type=int, default=GeneratorSettings.batch_size,
                        help="Cities per batch file")
    parser.add_argument("--workers", dest="max_concurrency", type=int,
                        default=GeneratorSettings.max_concurrency,
                        help="Parallel file writes per phase")
    parser.add_argument("--error-mode", choices=ERROR_MODES, default=GeneratorSettings.error_mode,
                        help="strict aborts on the first error, warn records and continues, ignore is silent")
    parser.add_argument("--no-clean", dest="clean_output", action="store_false",
                        help="Keep existing files in the output folder")
    parser.add_argument("--no-optimize", dest="optimize_json", action="store_false",
                        help="Keep null and empty values in compact output")
    parser.add_argument("--verbose", action="store_true", help="Log every generated file")
    return parser


def settings_from_args(argv: Optional[List[str]] = None) -> GeneratorSettings:
    args = vars(build_parser().parse_args(argv))
    if args.pop("verbose"):
        logging.getLogger().setLevel(logging.DEBUG)
    return GeneratorSettings(**args)


def main(argv: Optional[List[str]] = None) -> int:
    print("""
    ╔══════════════════════════════════════════════════════════════╗
    ║           GEO-DATA STATIC API GENERATOR                      ║
    ║                                                              ║
    ║  Countries, states and cities as CDN-ready JSON              ║
    ╚══════════════════════════════════════════════════════════════╝
    """)

    try:
        settings = settings_from_args(argv)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    logger.info(f"📄 JSON formatting: {settings.output_format}, error mode: {settings.error_mode}")

    try:
        run(settings)
    except LoadError as e:
        logger.error(f"Error loading data: {e}")
        logger.error("Make sure countries.json, states.json, and cities.json exist in the input folder")
        return 1
    except (ValidationError, GenerationError) as e:
        logger.error(f"❌ Generation aborted: {e}")
        return 1
    except Exception as e:
        logger.exception(f"❌ Fatal error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
