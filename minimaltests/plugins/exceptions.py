"""Tracing plugin exceptions."""


class PluginError(Exception):
    """Base class for plugin errors."""


class PluginConfigError(PluginError):
    """Raised when a plugin config file is malformed."""


class PluginLoadError(PluginError):
    """Raised when a plugin entrypoint cannot be imported or instantiated."""
