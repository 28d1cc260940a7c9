"""Relevance filtering for raw metric differences."""

from __future__ import annotations

import json
from typing import Any, Iterable

from minimaltests.diff.models import DiffEntry, RawDifference

# Fields that change as a side effect of edits elsewhere: region
# boundaries, node identity and derived/aggregate metrics.
NOISE_FIELD_MARKERS: tuple[str, ...] = (
    "start_line",
    "end_line",
    "name",
    "kind",
    "halstead.length",
    "halstead.volume",
    "halstead.vocabulary",
    "halstead.purity_ratio",
    "halstead.level",
    "halstead.estimated_program_length",
    "halstead.time",
    "halstead.bugs",
    "halstead.difficulty",
    "halstead.effort",
    "metrics.mi",
    "average",
)


def is_noise(field_path: str, markers: Iterable[str] = NOISE_FIELD_MARKERS) -> bool:
    """Return True when the path contains any noise marker."""
    return any(marker in field_path for marker in markers)


def relevant_entries(
    differences: Iterable[RawDifference],
    *,
    markers: Iterable[str] = NOISE_FIELD_MARKERS,
) -> list[DiffEntry]:
    """Drop noise and one-sided records, converting the rest to entries."""
    markers = tuple(markers)
    entries: list[DiffEntry] = []
    for difference in differences:
        # Spaces present on one side only may come from a grammar change.
        if difference.status != "changed":
            continue
        if is_noise(difference.path, markers):
            continue
        entries.append(
            DiffEntry(
                field_path=difference.path,
                old_value=render_value(difference.old),
                new_value=render_value(difference.new),
            )
        )
    return entries


def render_value(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True)
