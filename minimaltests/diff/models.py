"""Data models for structural metric diffs and region grouping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Union

DifferenceStatus = Literal["changed", "missing_old", "missing_new"]
GroupingPolicy = Literal["additive", "first_seen"]

GROUPING_POLICIES: tuple[GroupingPolicy, ...] = ("additive", "first_seen")


@dataclass(frozen=True, slots=True)
class IndexSegment:
    """Position inside a `spaces` array."""

    index: int


@dataclass(frozen=True, slots=True)
class KeySegment:
    """Member name inside a JSON object."""

    key: str


PathSegment = Union[IndexSegment, KeySegment]
StructuralPath = tuple[PathSegment, ...]


@dataclass(frozen=True, slots=True)
class RawDifference:
    """A single value delta emitted by the structural comparator."""

    path: str
    old: Any
    new: Any
    status: DifferenceStatus = "changed"


@dataclass(frozen=True, slots=True)
class DiffEntry:
    """A semantically relevant discrepancy between two metric trees."""

    field_path: str
    old_value: str
    new_value: str

    def to_dict(self) -> dict[str, str]:
        return {
            "field_path": self.field_path,
            "old_value": self.old_value,
            "new_value": self.new_value,
        }


@dataclass(frozen=True, slots=True)
class LineRange:
    """Source region in the new file: 0-based start, exclusive end."""

    start_line: int
    end_line: int

    @property
    def line_count(self) -> int:
        return max(0, self.end_line - self.start_line)

    def display(self) -> tuple[int, int]:
        """1-based inclusive bounds, as printed in reports."""
        return self.start_line + 1, self.end_line


@dataclass(slots=True)
class FileDiffResult:
    """Relevant diffs of one file pair, split into global and per-region groups."""

    source_filename: str
    global_diffs: list[DiffEntry] = field(default_factory=list)
    region_diffs: dict[LineRange, list[DiffEntry]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.global_diffs and not self.region_diffs

    def sorted_regions(self) -> list[tuple[LineRange, list[DiffEntry]]]:
        return sorted(
            self.region_diffs.items(),
            key=lambda item: (item[0].start_line, item[0].end_line),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_filename": self.source_filename,
            "global_diffs": [entry.to_dict() for entry in self.global_diffs],
            "region_diffs": [
                {
                    "start_line": line_range.start_line,
                    "end_line": line_range.end_line,
                    "diffs": [entry.to_dict() for entry in entries],
                }
                for line_range, entries in self.sorted_regions()
            ],
        }
