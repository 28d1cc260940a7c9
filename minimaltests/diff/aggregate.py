"""Group relevant diffs by the source region they belong to."""

from __future__ import annotations

import logging
from typing import Iterable

from minimaltests.core.models import MetricTree
from minimaltests.diff.models import (
    GROUPING_POLICIES,
    DiffEntry,
    FileDiffResult,
    GroupingPolicy,
    LineRange,
)
from minimaltests.diff.paths import is_global_path, parse_structural_path
from minimaltests.diff.resolver import UnresolvablePathError, line_range_of, resolve_line_range

logger = logging.getLogger(__name__)


def aggregate_diffs(
    new_tree: MetricTree,
    entries: Iterable[DiffEntry],
    *,
    policy: GroupingPolicy = "additive",
) -> FileDiffResult:
    """Split entries into file-level diffs and diffs grouped by line range.

    With the `additive` policy every entry resolving to a range joins that
    range's group. With `first_seen` only the first entry for a range is
    kept and later ones are discarded, even if their content differs.
    Entries whose space no longer exists in the new tree are dropped. When
    the new tree has no spaces at all, file-level entries are moved into a
    single region spanning the whole file.
    """
    if policy not in GROUPING_POLICIES:
        raise ValueError(f"Unsupported grouping policy: {policy!r}")
    if new_tree.name is None:
        raise ValueError("The new metric tree has no source file name")

    result = FileDiffResult(source_filename=new_tree.name)

    for entry in entries:
        path = parse_structural_path(entry.field_path)
        if is_global_path(path):
            result.global_diffs.append(entry)
            continue

        try:
            line_range = resolve_line_range(new_tree, path)
        except UnresolvablePathError as error:
            logger.debug("dropping %s in %s: %s", entry.field_path, new_tree.name, error)
            continue

        _add_to_group(result.region_diffs, line_range, entry, policy=policy)

    if not new_tree.has_spaces and result.global_diffs:
        # The whole file is the only region.
        whole_file = line_range_of(new_tree)
        for entry in result.global_diffs:
            _add_to_group(result.region_diffs, whole_file, entry, policy=policy)
        result.global_diffs.clear()

    return result


def _add_to_group(
    groups: dict[LineRange, list[DiffEntry]],
    line_range: LineRange,
    entry: DiffEntry,
    *,
    policy: GroupingPolicy,
) -> None:
    group = groups.get(line_range)
    if group is None:
        groups[line_range] = [entry]
        return
    if policy == "first_seen":
        return
    if entry not in group:
        group.append(entry)
