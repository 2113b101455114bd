"""Exceptions raised by node drivers and the lab configuration layer."""


class LabDriverError(Exception):
    """Base class for labdriver errors."""


class ConfigReadError(LabDriverError, OSError):
    """Startup configuration source could not be read."""

    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"failed to read startup config {self.path}: {reason}")


class ConfigRenderError(LabDriverError):
    """Startup configuration rendering failed and rendering is strict."""


class LifecycleError(LabDriverError):
    """A driver operation was called out of lifecycle order."""


class KindRegistrationError(LabDriverError):
    """A node kind was registered twice."""


class UnknownKindError(LabDriverError):
    """No driver is registered for the requested kind."""


class LabConfigError(LabDriverError):
    """Lab file is missing or invalid."""
