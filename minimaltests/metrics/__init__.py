"""Metric tree file access."""

from minimaltests.metrics.exceptions import (
    MetricTreeError,
    MetricTreeReadError,
    MetricTreeValidationError,
)
from minimaltests.metrics.io import read_metric_json, read_metric_tree

__all__ = [
    "MetricTreeError",
    "MetricTreeReadError",
    "MetricTreeValidationError",
    "read_metric_json",
    "read_metric_tree",
]
