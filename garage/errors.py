"""Exception taxonomy for the garage model."""
from typing import Optional


class GarageError(Exception):
    """Base class for garage errors."""
    pass


class ValidationError(GarageError, ValueError):
    """Constructor input is invalid. ``field`` names the offending attribute."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class StorageError(GarageError):
    """A storage backend could not read or write a key."""
    pass


class StorageQuotaExceeded(StorageError):
    """The value does not fit in the storage quota."""
    pass


class CorruptedStoreError(GarageError):
    """The persisted blob is not a list of vehicles."""
    pass


class ConfigurationError(GarageError):
    """The settings file is malformed."""
    pass
