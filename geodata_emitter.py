"""
Document emitter: the {data, meta} envelope every API file uses, and the
serializer that writes it either indented or compacted.

Compacted output drops null and empty-string values and rounds any
latitude/longitude field to the configured precision.
"""

import json
import logging
import math
import re
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

COORDINATE_FIELDS = ("latitude", "longitude")

# Index documents worth an INFO line when written; everything else logs at DEBUG
IMPORTANT_FILES = [
    re.compile(r'^countries\.json$'),
    re.compile(r'^countries/regions\.json$'),
    re.compile(r'^states/all\.json$'),
    re.compile(r'^states/types\.json$'),
    re.compile(r'^states/timezones\.json$'),
    re.compile(r'^cities/batches\.json$'),
    re.compile(r'^search/'),
    re.compile(r'^api-info\.json$'),
]


def timestamp() -> str:
    """UTC timestamp with millisecond precision, e.g. 2024-01-01T12:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def envelope(data: Any, doc_type: str, api_version: str, **extra: Any) -> Dict[str, Any]:
    """
    Wrap a payload in the standard envelope.

    meta.count is the list length for list payloads and 1 for anything else.
    Extra context fields follow the standard ones; extras that are None are
    left out.
    """
    meta = {
        "type": doc_type,
        "count": len(data) if isinstance(data, list) else 1,
        "generated_at": timestamp(),
        "api_version": api_version,
    }
    meta.update({key: value for key, value in extra.items() if value is not None})
    return {"data": data, "meta": meta}


def record_count(document: Any) -> int:
    if isinstance(document, dict) and isinstance(document.get("data"), list):
        return len(document["data"])
    if isinstance(document, list):
        return len(document)
    return 1


def strip_empty(value: Any) -> Any:
    """Recursive copy without object keys whose value is None or ""."""
    if isinstance(value, dict):
        return {key: strip_empty(item) for key, item in value.items() if item is not None and item != ""}
    if isinstance(value, list):
        return [strip_empty(item) for item in value]
    return value


def _round(value: Any, precision: int) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return value
    elif isinstance(value, (int, float)):
        number = float(value)
    else:
        return value
    if not math.isfinite(number):
        return value
    return round(number, precision)


def round_coordinates(value: Any, precision: int) -> Any:
    """Recursive copy with latitude/longitude rounded to `precision` digits, as numbers."""
    if isinstance(value, dict):
        return {
            key: _round(item, precision) if key in COORDINATE_FIELDS else round_coordinates(item, precision)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [round_coordinates(item, precision) for item in value]
    return value


def use_pretty(document: Any, settings) -> bool:
    if settings.output_format == "pretty":
        return True
    if settings.output_format == "compact":
        return False
    return record_count(document) <= settings.pretty_threshold


def serialize(document: Any, settings, pretty: Optional[bool] = None) -> str:
    if pretty is None:
        pretty = use_pretty(document, settings)
    if pretty:
        return json.dumps(document, indent=2, ensure_ascii=False)

    if settings.optimize_json:
        document = strip_empty(document)
    document = round_coordinates(document, settings.coordinate_precision)
    return json.dumps(document, ensure_ascii=False, separators=(',', ':'))


def is_important(rel_path: str) -> bool:
    return any(pattern.search(rel_path) for pattern in IMPORTANT_FILES)


def write_document(output_dir: Path, rel_path: str, document: Any, settings) -> Path:
    """Serialize a document to output_dir/rel_path, creating directories as needed."""
    pretty = use_pretty(document, settings)
    text = serialize(document, settings, pretty=pretty)

    path = Path(output_dir) / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)

    # Each writer gets its own .part file; two documents sanitized to the same
    # path replace each other whole instead of interleaving
    partial = path.with_name(f"{path.name}.{threading.get_ident()}.part")
    try:
        with open(partial, 'w', encoding='utf-8') as f:
            f.write(text)
        partial.replace(path)
    finally:
        if partial.exists():
            partial.unlink()

    suffix = "" if pretty else " (minified)"
    if is_important(rel_path):
        logger.info(f"✓ Generated: {rel_path}{suffix}")
    else:
        logger.debug(f"✓ Generated: {rel_path}{suffix}")
    return path
