"""Metric tree loading exceptions."""


class MetricTreeError(Exception):
    """Base class for metric tree input errors."""


class MetricTreeReadError(MetricTreeError):
    """Metric file is missing, unreadable or not valid JSON."""


class MetricTreeValidationError(MetricTreeError):
    """Metric JSON does not have the expected space shape."""
