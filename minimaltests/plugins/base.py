"""Versioned plugin interface and lifecycle event payloads."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

PLUGIN_API_VERSION = "1.0"
PLUGIN_CONFIG_VERSION = 1
PLUGIN_CONFIG_ENV_VAR = "MINIMALTESTS_PLUGIN_CONFIG"
LIFECYCLE_HOOKS = ("on_diff_start", "on_diff_end", "on_job_start", "on_job_end")

DiffEndStatus = Literal["changed", "identical", "error"]
JobEndStatus = Literal["reported", "skipped", "failed"]


@dataclass(frozen=True, slots=True)
class DiffStartEvent:
    path_old: str
    path_new: str
    policy: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class DiffEndEvent:
    path_old: str
    path_new: str
    status: DiffEndStatus
    source_filename: str | None = None
    global_diff_count: int = 0
    region_count: int = 0
    error_type: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class JobStartEvent:
    path_old: str
    path_new: str
    worker: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class JobEndEvent:
    path_old: str
    path_new: str
    worker: str
    status: JobEndStatus
    report_path: str | None = None
    error_type: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class LifecyclePlugin:
    """Base no-op lifecycle plugin interface (API v1.x)."""

    api_version = PLUGIN_API_VERSION
    name = "lifecycle-plugin"

    def on_diff_start(self, event: DiffStartEvent) -> None:
        return None

    def on_diff_end(self, event: DiffEndEvent) -> None:
        return None

    def on_job_start(self, event: JobStartEvent) -> None:
        return None

    def on_job_end(self, event: JobEndEvent) -> None:
        return None
