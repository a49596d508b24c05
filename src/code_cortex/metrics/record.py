"""Metric records: the per-file output of a driver.

A record is a plain dict from metric name to value. Values are counts,
sets of strings, lists of findings, nested flag mappings, strings or
scalar sentinels such as ``parseError``.
"""

from typing import Any, Dict

MetricRecord = Dict[str, Any]

LINE_FIELDS = ("loc", "cloc", "ncloc", "lloc")


def base_metrics() -> MetricRecord:
    """Initial shape of a per-driver aggregate."""
    return {
        "files": 0,
        "loc": 0,
        "cloc": 0,
        "ncloc": 0,
        "lloc": 0,
    }


def error_record() -> MetricRecord:
    """Record returned for content a driver cannot interpret."""
    return {
        "loc": 0,
        "cloc": 0,
        "ncloc": 0,
        "lloc": 0,
        "files": 0,
        "parseError": True,
    }


def is_error_record(record: MetricRecord) -> bool:
    return record.get("parseError") is True


def to_serializable(value: Any) -> Any:
    """Convert a record or aggregate into JSON-compatible data.

    Sets become sorted lists; tuples become lists; mappings and lists are
    converted recursively.
    """
    if isinstance(value, (set, frozenset)):
        return sorted(to_serializable(v) for v in value)
    if isinstance(value, dict):
        return {str(k): to_serializable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_serializable(v) for v in value]
    return value
