"""Reference tracing plugin that appends lifecycle hooks to NDJSON."""

from __future__ import annotations

from dataclasses import asdict, dataclass
import json
from pathlib import Path

from minimaltests.plugins.base import (
    DiffEndEvent,
    DiffStartEvent,
    JobEndEvent,
    JobStartEvent,
    LifecyclePlugin,
)


@dataclass(slots=True)
class LifecycleTracePlugin(LifecyclePlugin):
    output_path: str = "minimaltests-trace.ndjson"
    name: str = "lifecycle-trace"

    def on_diff_start(self, event: DiffStartEvent) -> None:
        self._append("on_diff_start", event)

    def on_diff_end(self, event: DiffEndEvent) -> None:
        self._append("on_diff_end", event)

    def on_job_start(self, event: JobStartEvent) -> None:
        self._append("on_job_start", event)

    def on_job_end(self, event: JobEndEvent) -> None:
        self._append("on_job_end", event)

    def _append(self, hook: str, event: object) -> None:
        path = Path(self.output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        record = {"hook": hook, "plugin": self.name, "event": asdict(event)}
        with path.open("a", encoding="utf-8") as handle:
            handle.write(
                json.dumps(record, ensure_ascii=True, sort_keys=True, separators=(",", ":"))
                + "\n"
            )
