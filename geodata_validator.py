"""
Validation over the loaded collections.

Referential-integrity problems are only ever reported: a city with a dangling
state_id is still emitted, just without the state-derived fields. Records
missing required fields are handled according to the error mode.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 3


class ValidationError(Exception):
    """A record failed validation while running in strict mode."""


@dataclass
class IntegrityReport:
    states_missing_country: List[Dict[str, Any]] = field(default_factory=list)
    cities_missing_state: List[Dict[str, Any]] = field(default_factory=list)
    cities_missing_country: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (self.states_missing_country or self.cities_missing_state or self.cities_missing_country)

    def summary(self) -> Dict[str, int]:
        return {
            "states_with_invalid_country": len(self.states_missing_country),
            "cities_with_invalid_state": len(self.cities_missing_state),
            "cities_with_invalid_country": len(self.cities_missing_country),
        }


def _sample(records: Sequence[Dict[str, Any]], key: str) -> str:
    return ", ".join(f"{r.get('name')} ({key}: {r.get(key)})" for r in records[:SAMPLE_SIZE])


def check_referential_integrity(countries, states, cities) -> IntegrityReport:
    """Find states and cities whose parent ids point at nothing."""
    logger.info("Validating data relationships...")

    country_ids = {c.get("id") for c in countries}
    state_ids = {s.get("id") for s in states}

    report = IntegrityReport(
        states_missing_country=[s for s in states if s.get("country_id") not in country_ids],
        cities_missing_state=[c for c in cities if c.get("state_id") not in state_ids],
        cities_missing_country=[c for c in cities if c.get("country_id") not in country_ids],
    )

    checks = [
        ("states", "country", "country_id", report.states_missing_country),
        ("cities", "state", "state_id", report.cities_missing_state),
        ("cities", "country", "country_id", report.cities_missing_country),
    ]
    for children, parent, key, dangling in checks:
        if dangling:
            logger.warning(f"⚠️  Found {len(dangling)} {children} with invalid {key} references")
            logger.warning(f"  Sample invalid {children}: {_sample(dangling, key)}")
        else:
            logger.info(f"✓ All {children} have valid {parent} references")

    return report


def missing_fields(record: Dict[str, Any], required_fields: Sequence[str]) -> List[str]:
    missing = []
    for name in required_fields:
        value = record.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def validate_records(records: List[Dict[str, Any]], required_fields: Sequence[str], label: str, ctx) -> List[Dict[str, Any]]:
    """
    Keep the records that carry every required field.

    strict: raise ValidationError at the first invalid record.
    warn:   drop invalid records, record one warning, log a few samples.
    ignore: return the records unchanged without checking.
    """
    mode = ctx.settings.error_mode
    if mode == "ignore":
        return records

    valid = []
    invalid = []
    for index, record in enumerate(records):
        missing = missing_fields(record, required_fields)
        if not missing:
            valid.append(record)
            continue
        if mode == "strict":
            raise ValidationError(
                f"{label}: record {record.get('id', index)} missing required fields: {', '.join(missing)}"
            )
        invalid.append({"index": index, "id": record.get("id"), "missing_fields": missing})

    if invalid:
        ctx.record_warning(
            f"{label}: found {len(invalid)} invalid records with missing fields",
            invalid_records=len(invalid),
        )
        for entry in invalid[:SAMPLE_SIZE]:
            logger.warning(f"  Invalid record {entry['id']}: missing {', '.join(entry['missing_fields'])}")

    return valid
