"""Core models for metric trees and traversal jobs."""

from minimaltests.core.models import JobItem, JobOutcome, JobStatus, MetricTree

__all__ = [
    "JobItem",
    "JobOutcome",
    "JobStatus",
    "MetricTree",
]
