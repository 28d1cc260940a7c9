"""Plugin manager with fault-isolated, thread-safe hook dispatch."""

from __future__ import annotations

from dataclasses import dataclass, field
import threading
import warnings

from minimaltests.plugins.base import DiffEndEvent, DiffStartEvent, JobEndEvent, JobStartEvent


@dataclass(frozen=True, slots=True)
class PluginDiagnostic:
    plugin_name: str
    hook: str
    error_type: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {
            "plugin_name": self.plugin_name,
            "hook": self.hook,
            "error_type": self.error_type,
            "message": self.message,
        }


@dataclass(slots=True)
class PluginManager:
    """Executes lifecycle hooks and records plugin failures.

    Hooks are called from worker threads; dispatch is serialized so plugins
    do not need their own locking.
    """

    plugins: tuple[object, ...] = ()
    diagnostics: list[PluginDiagnostic] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def enabled(self) -> bool:
        return bool(self.plugins)

    def plugin_names(self) -> list[str]:
        return [_plugin_name(plugin) for plugin in self.plugins]

    def clear_diagnostics(self) -> None:
        self.diagnostics.clear()

    def on_diff_start(self, event: DiffStartEvent) -> None:
        self._dispatch("on_diff_start", event)

    def on_diff_end(self, event: DiffEndEvent) -> None:
        self._dispatch("on_diff_end", event)

    def on_job_start(self, event: JobStartEvent) -> None:
        self._dispatch("on_job_start", event)

    def on_job_end(self, event: JobEndEvent) -> None:
        self._dispatch("on_job_end", event)

    def _dispatch(self, hook: str, event: object) -> None:
        if not self.plugins:
            return
        with self._lock:
            for plugin in self.plugins:
                callback = getattr(plugin, hook, None)
                if callback is None:
                    continue
                try:
                    callback(event)
                except Exception as error:
                    diagnostic = PluginDiagnostic(
                        plugin_name=_plugin_name(plugin),
                        hook=hook,
                        error_type=error.__class__.__name__,
                        message=str(error),
                    )
                    self.diagnostics.append(diagnostic)
                    warnings.warn(
                        (
                            f"minimaltests plugin failure: plugin={diagnostic.plugin_name} "
                            f"hook={diagnostic.hook} "
                            f"error={diagnostic.error_type}: {diagnostic.message}"
                        ),
                        RuntimeWarning,
                        stacklevel=2,
                    )


def _plugin_name(plugin: object) -> str:
    return str(getattr(plugin, "name", plugin.__class__.__name__))
