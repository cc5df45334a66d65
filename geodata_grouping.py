"""
Grouping helpers shared by the generation phases.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, Hashable, Iterable, List, Union

KeyFunc = Union[str, Callable[[Dict[str, Any]], Any]]


def is_group_key(key: Any) -> bool:
    """Missing, empty and literal "undefined" keys mean "belongs to no group"."""
    return key is not None and key != "" and key != "undefined"


def group_by(records: Iterable[Dict[str, Any]], key: KeyFunc) -> Dict[Hashable, List[Dict[str, Any]]]:
    """
    Partition records by a field name or key function.

    Records whose key is missing, empty or the literal "undefined" are left
    out of every group. Groups keep first-seen order; the records inside a
    group keep input order (callers sort before emitting).
    """
    key_func = (lambda record: record.get(key)) if isinstance(key, str) else key
    groups = defaultdict(list)
    for record in records:
        group_key = key_func(record)
        if is_group_key(group_key):
            groups[group_key].append(record)
    return dict(groups)


def _name_key(record: Dict[str, Any]):
    name = record.get("name")
    if name is None:
        return (1, "")
    return (0, str(name))


def sort_by_name(records: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Stable ascending sort by name, code point order; nameless records go last."""
    return sorted(records, key=_name_key)


def sort_by_id(records: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(records, key=lambda record: record["id"])


def unique(values: Iterable[Any], sort: bool = False) -> List[Any]:
    """Distinct truthy values in first-seen order, or sorted."""
    seen = {}
    for value in values:
        if value and value not in seen:
            seen[value] = True
    result = list(seen)
    return sorted(result) if sort else result


def count_distinct(values: Iterable[Any]) -> int:
    return len(unique(values))
