"""Injectable lifecycle tracing hooks. No-op unless plugins are configured."""

from minimaltests.plugins.base import (
    PLUGIN_API_VERSION,
    PLUGIN_CONFIG_ENV_VAR,
    PLUGIN_CONFIG_VERSION,
    LIFECYCLE_HOOKS,
    DiffEndEvent,
    DiffStartEvent,
    JobEndEvent,
    JobStartEvent,
    LifecyclePlugin,
)
from minimaltests.plugins.exceptions import PluginConfigError, PluginError, PluginLoadError
from minimaltests.plugins.loader import (
    PluginEntry,
    load_plugin_manager_from_file,
    read_plugin_entries,
)
from minimaltests.plugins.manager import PluginDiagnostic, PluginManager
from minimaltests.plugins.reference import LifecycleTracePlugin
from minimaltests.plugins.runtime import NO_PLUGINS, resolve_plugin_manager

__all__ = [
    "PLUGIN_API_VERSION",
    "PLUGIN_CONFIG_VERSION",
    "PLUGIN_CONFIG_ENV_VAR",
    "LIFECYCLE_HOOKS",
    "NO_PLUGINS",
    "PluginError",
    "PluginConfigError",
    "PluginLoadError",
    "DiffStartEvent",
    "DiffEndEvent",
    "JobStartEvent",
    "JobEndEvent",
    "LifecyclePlugin",
    "PluginDiagnostic",
    "PluginManager",
    "LifecycleTracePlugin",
    "PluginEntry",
    "read_plugin_entries",
    "load_plugin_manager_from_file",
    "resolve_plugin_manager",
]
