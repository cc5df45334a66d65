"""
Filesystem-safe path segments for group and entity keys.

Two rules are in use and they are intentionally not interchangeable:
sanitize() for codes, regions and types (lower-cased, collapsed), and
sanitize_timezone() for IANA timezone names (case kept, nothing collapsed).
"""

import re
from typing import Any

_UNSAFE = re.compile(r'[^a-z0-9-]')
_DASH_RUN = re.compile(r'-+')
_TZ_UNSAFE = re.compile(r'[^a-zA-Z0-9]')


def sanitize(raw: Any, fallback: str) -> str:
    """
    Turn a key such as "Northern America" or "US-CA" into a path segment.

    Lower-cases, replaces anything outside [a-z0-9-] with '-', collapses
    dash runs and trims dashes at both ends. Empty, non-string, or inputs
    that sanitize to nothing return the fallback (usually the record id).
    """
    if not raw or not isinstance(raw, str):
        return fallback
    cleaned = _UNSAFE.sub('-', raw.lower())
    cleaned = _DASH_RUN.sub('-', cleaned).strip('-')
    return cleaned or fallback


def sanitize_timezone(raw: Any, fallback: str) -> str:
    """Replace every non-alphanumeric character with '-' ("Asia/Kabul" -> "Asia-Kabul")."""
    if not raw or not isinstance(raw, str):
        return fallback
    return _TZ_UNSAFE.sub('-', raw)


def code_filename(code: Any, record_id: Any) -> str:
    """Filename stem for an entity keyed by an ISO code, falling back to its id."""
    return sanitize(code, str(record_id))
