"""Core data models for metric trees and file-pair jobs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

_TREE_KEYS = frozenset({"name", "kind", "start_line", "end_line", "metrics", "spaces"})


@dataclass(slots=True)
class MetricTree:
    """One code space (unit, function, class, ...) with its metrics and children.

    The root space is named after the analysed source file. Nested spaces
    may be anonymous (`"name": null`).
    """

    name: str | None
    kind: str
    start_line: int
    end_line: int
    metrics: dict[str, Any] = field(default_factory=dict)
    spaces: list["MetricTree"] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.start_line < 1:
            raise ValueError(f"start_line must be >= 1, got {self.start_line}")
        if self.end_line < self.start_line:
            raise ValueError(
                f"end_line {self.end_line} precedes start_line {self.start_line}"
            )

    @property
    def has_spaces(self) -> bool:
        return bool(self.spaces)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.extra,
            "name": self.name,
            "kind": self.kind,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "metrics": self.metrics,
            "spaces": [space.to_dict() for space in self.spaces],
        }

    @classmethod
    def from_dict(cls, raw: Any, *, named_root: bool = True) -> "MetricTree":
        tree = cls._from_space(raw)
        if named_root and tree.name is None:
            raise ValueError("Root metric space 'name' must be the source file path")
        return tree

    @classmethod
    def _from_space(cls, raw: Any) -> "MetricTree":
        if not isinstance(raw, dict):
            raise ValueError(f"Metric space must be a JSON object, got {type(raw).__name__}")

        name = raw.get("name")
        if name is not None and not isinstance(name, str):
            raise ValueError("Metric space 'name' must be a string or null")

        start_line = _line_number(raw, "start_line")
        end_line = _line_number(raw, "end_line")

        kind = raw.get("kind", "")
        if not isinstance(kind, str):
            raise ValueError(f"Metric space 'kind' must be a string ({name})")

        metrics = raw.get("metrics", {})
        if not isinstance(metrics, dict):
            raise ValueError(f"Metric space 'metrics' must be a JSON object ({name})")

        spaces = raw.get("spaces", [])
        if not isinstance(spaces, list):
            raise ValueError(f"Metric space 'spaces' must be a JSON array ({name})")

        return cls(
            name=name,
            kind=kind,
            start_line=start_line,
            end_line=end_line,
            metrics=dict(metrics),
            spaces=[cls._from_space(space) for space in spaces],
            extra={key: value for key, value in raw.items() if key not in _TREE_KEYS},
        )


@dataclass(frozen=True, slots=True)
class JobItem:
    """A pair of metric files to compare and where the report should go."""

    path_old: Path
    path_new: Path
    output_path: Path | None = None


def _line_number(raw: dict[str, Any], key: str) -> int:
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Metric space '{key}' must be an integer ({raw.get('name')})")
    return value


JobStatus = Literal["reported", "skipped", "failed"]


@dataclass(frozen=True, slots=True)
class JobOutcome:
    """Terminal state of one job."""

    job: JobItem
    status: JobStatus
    report_path: Path | None = None
    error_type: str | None = None
    error_message: str | None = None
