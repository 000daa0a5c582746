"""Prowl error hierarchy.

All prowl-specific errors inherit from ProwlError for easy catching.
"""


class ProwlError(Exception):
    """Base error for all prowl operations."""


class ConfigError(ProwlError):
    """Invalid or unreadable configuration."""


class BuildFailure(ProwlError):
    """The site-generation engine reported a runtime error."""


class SyncFailure(ProwlError):
    """A filesystem operation failed while copying or removing output files."""


class ServerError(ProwlError):
    """The preview server could not be started."""
