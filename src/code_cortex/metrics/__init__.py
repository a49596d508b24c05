"""Metric records and the aggregation rules that combine them."""

from .aggregate import combine, merge_all, merge_metrics
from .record import (
    LINE_FIELDS,
    MetricRecord,
    base_metrics,
    error_record,
    is_error_record,
    to_serializable,
)

__all__ = [
    "MetricRecord",
    "LINE_FIELDS",
    "base_metrics",
    "error_record",
    "is_error_record",
    "to_serializable",
    "merge_metrics",
    "merge_all",
    "combine",
]
