"""Exception types for the mirror host.

Most failures during a bootstrap run are logged and absorbed; these
types cover the cases that are raised to a caller.
"""


class MirrorError(Exception):
    """Base class for all mirror host errors."""


class ConfigError(MirrorError):
    """The configuration file could not be used."""


class ResourceError(MirrorError):
    """A resource could not be handled by the file loader."""

    def __init__(self, path: str, message: str = ""):
        self.path = path
        super().__init__(message or f"Cannot load resource: {path}")


class UnsupportedResourceError(ResourceError):
    """The resource has an extension the loader has no handler for."""

    def __init__(self, path: str):
        super().__init__(path, f"Unsupported resource type: {path}")


class LoadCancelledError(MirrorError):
    """The bootstrap run was cancelled."""
