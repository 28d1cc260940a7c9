"""Tracing plugin config files.

A config names the plugins to attach to a run::

    {"config_version": 1,
     "plugins": [{"entrypoint": "pkg.module:Plugin", "options": {...}}]}

Each entrypoint is imported, called with its options when it is a factory,
and must expose at least one lifecycle hook.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import importlib
import json
from pathlib import Path
from typing import Any

from minimaltests.plugins.base import (
    LIFECYCLE_HOOKS,
    PLUGIN_API_VERSION,
    PLUGIN_CONFIG_VERSION,
)
from minimaltests.plugins.exceptions import PluginConfigError, PluginLoadError
from minimaltests.plugins.manager import PluginManager

_ENTRY_KEYS = frozenset({"entrypoint", "options", "enabled"})


@dataclass(frozen=True, slots=True)
class PluginEntry:
    """One validated item of the `plugins` array."""

    position: int
    module: str
    attribute: str
    options: dict[str, Any] = field(default_factory=dict)
    enabled: bool = True

    @property
    def entrypoint(self) -> str:
        return f"{self.module}:{self.attribute}"

    @classmethod
    def parse(cls, raw: Any, *, position: int) -> "PluginEntry":
        where = f"plugins[{position}]"
        if not isinstance(raw, dict):
            raise PluginConfigError(f"{where} must be a JSON object")

        extra = sorted(set(raw) - _ENTRY_KEYS)
        if extra:
            raise PluginConfigError(f"{where} has unsupported keys: {', '.join(extra)}")

        entrypoint = raw.get("entrypoint")
        if not isinstance(entrypoint, str):
            raise PluginConfigError(f"{where}.entrypoint must be a string")
        module, _, attribute = entrypoint.partition(":")
        if not module or not attribute:
            raise PluginConfigError(
                f"{where}.entrypoint must look like 'module:attribute', got {entrypoint!r}"
            )

        options = raw.get("options", {})
        if not isinstance(options, dict):
            raise PluginConfigError(f"{where}.options must be a JSON object")

        enabled = raw.get("enabled", True)
        if not isinstance(enabled, bool):
            raise PluginConfigError(f"{where}.enabled must be true or false")

        return cls(
            position=position,
            module=module,
            attribute=attribute,
            options=options,
            enabled=enabled,
        )

    def instantiate(self) -> object:
        try:
            module = importlib.import_module(self.module)
        except Exception as error:
            raise PluginLoadError(
                f"{self.entrypoint}: failed to import module {self.module!r}: {error}"
            ) from error

        target = getattr(module, self.attribute, None)
        if target is None:
            raise PluginLoadError(f"{self.entrypoint}: {self.module!r} has no {self.attribute!r}")

        if isinstance(target, type) or (callable(target) and not _has_hooks(target)):
            try:
                plugin = target(**self.options)
            except Exception as error:
                raise PluginLoadError(f"{self.entrypoint}: construction failed: {error}") from error
        elif self.options:
            raise PluginLoadError(f"{self.entrypoint}: options given for a plugin instance")
        else:
            plugin = target

        if not _has_hooks(plugin):
            raise PluginLoadError(
                f"{self.entrypoint}: defines none of {', '.join(LIFECYCLE_HOOKS)}"
            )
        _check_api_version(plugin, self.entrypoint)
        return plugin


def read_plugin_entries(path: str | Path) -> list[PluginEntry]:
    """Parse and validate a config file without importing anything.

    A missing file raises `FileNotFoundError` unchanged.
    """
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
        raise PluginConfigError(f"Cannot read plugin config {config_path}: {error}") from error

    if not isinstance(raw, dict):
        raise PluginConfigError(f"Plugin config {config_path} must be a JSON object")
    if raw.get("config_version") != PLUGIN_CONFIG_VERSION:
        raise PluginConfigError(
            f"Unsupported plugin config version {raw.get('config_version')!r} "
            f"in {config_path}; expected {PLUGIN_CONFIG_VERSION}"
        )

    items = raw.get("plugins")
    if not isinstance(items, list):
        raise PluginConfigError(f"Plugin config {config_path}: 'plugins' must be a JSON array")
    return [PluginEntry.parse(item, position=position) for position, item in enumerate(items)]


def load_plugin_manager_from_file(path: str | Path) -> PluginManager:
    entries = read_plugin_entries(path)
    return PluginManager(
        plugins=tuple(entry.instantiate() for entry in entries if entry.enabled)
    )


def _has_hooks(candidate: object) -> bool:
    return any(callable(getattr(candidate, hook, None)) for hook in LIFECYCLE_HOOKS)


def _check_api_version(plugin: object, entrypoint: str) -> None:
    declared = str(getattr(plugin, "api_version", PLUGIN_API_VERSION))
    supported_major = PLUGIN_API_VERSION.partition(".")[0]
    if declared.partition(".")[0] != supported_major:
        raise PluginLoadError(
            f"{entrypoint}: api_version {declared!r} is not supported "
            f"(need {supported_major}.x)"
        )
