"""Pick the plugin manager a run dispatches its hooks to."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from minimaltests.plugins.base import PLUGIN_CONFIG_ENV_VAR
from minimaltests.plugins.loader import load_plugin_manager_from_file
from minimaltests.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

NO_PLUGINS = PluginManager(plugins=())


def resolve_plugin_manager(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> PluginManager:
    """Load the manager for one run.

    An explicit config path wins over `MINIMALTESTS_PLUGIN_CONFIG`. With
    neither, `NO_PLUGINS` is returned and every hook is a no-op. The result
    is meant to be resolved once on the calling thread and passed down to
    the worker pool, which never looks at the environment itself.
    """
    if config_path is None:
        env = os.environ if environ is None else environ
        config_path = env.get(PLUGIN_CONFIG_ENV_VAR, "").strip() or None
    if config_path is None:
        return NO_PLUGINS

    manager = load_plugin_manager_from_file(config_path)
    logger.debug(
        "loaded %d tracing plugin(s) from %s: %s",
        len(manager.plugins),
        config_path,
        ", ".join(manager.plugin_names()) or "-",
    )
    return manager
