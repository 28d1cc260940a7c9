"""Diff interpretation: structural comparison, noise filtering, region grouping."""

from minimaltests.diff.aggregate import aggregate_diffs
from minimaltests.diff.engine import compare_trees
from minimaltests.diff.models import (
    GROUPING_POLICIES,
    DiffEntry,
    FileDiffResult,
    GroupingPolicy,
    IndexSegment,
    KeySegment,
    LineRange,
    PathSegment,
    RawDifference,
    StructuralPath,
)
from minimaltests.diff.noise import NOISE_FIELD_MARKERS, is_noise, relevant_entries
from minimaltests.diff.paths import is_global_path, parse_structural_path
from minimaltests.diff.pipeline import diff_metric_files, diff_metric_trees
from minimaltests.diff.resolver import UnresolvablePathError, resolve_line_range, resolve_node

__all__ = [
    "GROUPING_POLICIES",
    "NOISE_FIELD_MARKERS",
    "DiffEntry",
    "FileDiffResult",
    "GroupingPolicy",
    "IndexSegment",
    "KeySegment",
    "LineRange",
    "PathSegment",
    "RawDifference",
    "StructuralPath",
    "UnresolvablePathError",
    "aggregate_diffs",
    "compare_trees",
    "diff_metric_files",
    "diff_metric_trees",
    "is_global_path",
    "is_noise",
    "parse_structural_path",
    "relevant_entries",
    "resolve_line_range",
    "resolve_node",
]
