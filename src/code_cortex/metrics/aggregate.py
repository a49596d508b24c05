"""Shape-dispatched merging of metric records into running aggregates.

Records are schema-less, so each incoming value picks its merge rule by
shape:

    number          sum
    list / tuple    concatenate (order kept, duplicates kept)
    set             union
    mapping         shallow update, last write wins per key
    string          first meaningful value wins ("" and "unknown" are not)
    anything else   first write wins (booleans, None)

A value whose shape does not match the one already aggregated under its key
(say a number arriving where a string was stored) is dropped, so a malformed
record cannot abort a scan.

Sums, concatenations and unions do not depend on merge order. The last three
rules do: the final value depends on which file was merged last (mappings)
or first (strings, scalars), so callers needing reproducible output must fix
the order in which records are merged.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Optional

from .record import MetricRecord

UNSET_STRINGS = ("", "unknown")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def merge_metrics(aggregate: MetricRecord, record: Mapping[str, Any]) -> MetricRecord:
    """Fold ``record`` into ``aggregate`` in place and return the aggregate.

    Mismatched shapes keep the existing value.
    """
    for key, value in record.items():
        current = aggregate.get(key)

        # bool is a subclass of int; flags must not be summed
        if isinstance(value, bool) or value is None:
            if key not in aggregate:
                aggregate[key] = value
        elif _is_number(value):
            if current is None:
                aggregate[key] = value
            elif _is_number(current):
                aggregate[key] = current + value
        elif isinstance(value, (list, tuple)):
            if current is None:
                aggregate[key] = list(value)
            elif isinstance(current, (list, tuple)):
                aggregate[key] = list(current) + list(value)
        elif isinstance(value, (set, frozenset)):
            if current is None:
                aggregate[key] = set(value)
            elif isinstance(current, (set, frozenset)):
                if not isinstance(current, set):
                    current = aggregate[key] = set(current)
                current.update(value)
        elif isinstance(value, Mapping):
            if current is None:
                aggregate[key] = dict(value)
            elif isinstance(current, dict):
                current.update(value)
        elif isinstance(value, str):
            if current is None or (isinstance(current, str) and current in UNSET_STRINGS):
                aggregate[key] = value
        elif key not in aggregate:
            aggregate[key] = value

    return aggregate


def merge_all(
    records: Iterable[Mapping[str, Any]], initial: Optional[MetricRecord] = None
) -> MetricRecord:
    """Merge ``records`` in order into ``initial`` (or a new aggregate)."""
    aggregate: MetricRecord = initial if initial is not None else {}
    for record in records:
        merge_metrics(aggregate, record)
    return aggregate


def combine(*aggregates: Mapping[str, Any]) -> MetricRecord:
    """Merge independently built aggregates (e.g. per-worker shards).

    Uses the same rules as per-file merging, so shard order carries the same
    caveats as file order.
    """
    return merge_all(aggregates)
