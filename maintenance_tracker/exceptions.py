"""Error taxonomy for the maintenance tracker."""


class MaintenanceTrackerError(Exception):
    """Base class for all tracker errors."""


class InvalidInput(MaintenanceTrackerError, ValueError):
    """Missing or malformed argument; callers must not use partial results."""


class StaleReference(MaintenanceTrackerError, LookupError):
    """A record refers to a vehicle or log entry that does not exist."""


class PersistenceFailure(MaintenanceTrackerError):
    """Reading or writing persisted state failed."""

    def __init__(self, key: str, message: str):
        super().__init__(f"{key}: {message}")
        self.key = key


class CatalogError(MaintenanceTrackerError):
    """Catalog data files could not be read or are malformed."""
