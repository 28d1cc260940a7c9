"""Metric tree diff pipeline: compare, filter noise, group by region."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from minimaltests.core.models import MetricTree
from minimaltests.diff.aggregate import aggregate_diffs
from minimaltests.diff.engine import compare_trees
from minimaltests.diff.models import FileDiffResult, GroupingPolicy
from minimaltests.diff.noise import NOISE_FIELD_MARKERS, relevant_entries
from minimaltests.metrics.io import read_metric_tree
from minimaltests.plugins import (
    DiffEndEvent,
    DiffStartEvent,
    NO_PLUGINS,
    PluginManager,
)


def diff_metric_trees(
    old_tree: MetricTree,
    new_tree: MetricTree,
    *,
    policy: GroupingPolicy = "additive",
    noise_markers: Iterable[str] = NOISE_FIELD_MARKERS,
) -> FileDiffResult | None:
    """Return the relevant diffs between two trees, or None if there are none."""
    differences = compare_trees(old_tree.to_dict(), new_tree.to_dict())
    if not differences:
        return None

    entries = relevant_entries(differences, markers=noise_markers)
    if not entries:
        return None

    result = aggregate_diffs(new_tree, entries, policy=policy)
    if result.is_empty:
        return None
    return result


def diff_metric_files(
    path_old: str | Path,
    path_new: str | Path,
    *,
    policy: GroupingPolicy = "additive",
    noise_markers: Iterable[str] = NOISE_FIELD_MARKERS,
    plugin_manager: PluginManager | None = None,
) -> FileDiffResult | None:
    """Load two metric files and diff them.

    Raises `MetricTreeError` when either file cannot be loaded.
    """
    manager = plugin_manager if plugin_manager is not None else NO_PLUGINS
    manager.on_diff_start(
        DiffStartEvent(path_old=str(path_old), path_new=str(path_new), policy=policy)
    )

    try:
        old_tree = read_metric_tree(path_old, named_root=False)
        new_tree = read_metric_tree(path_new)
        result = diff_metric_trees(
            old_tree,
            new_tree,
            policy=policy,
            noise_markers=noise_markers,
        )
    except Exception as error:
        manager.on_diff_end(
            DiffEndEvent(
                path_old=str(path_old),
                path_new=str(path_new),
                status="error",
                error_type=error.__class__.__name__,
                error_message=str(error),
            )
        )
        raise

    if result is None:
        manager.on_diff_end(
            DiffEndEvent(
                path_old=str(path_old),
                path_new=str(path_new),
                status="identical",
                source_filename=new_tree.name,
            )
        )
        return None

    manager.on_diff_end(
        DiffEndEvent(
            path_old=str(path_old),
            path_new=str(path_new),
            status="changed",
            source_filename=result.source_filename,
            global_diff_count=len(result.global_diffs),
            region_count=len(result.region_diffs),
        )
    )
    return result
