"""
Garagem Inteligente - vehicle fleet and maintenance tracking.

This package provides the garage domain model:
- MaintenanceRecord: One service event tied to a vehicle
- Vehicle, SportsCar, Truck: Vehicles with engine/speed state and history
- ActionResult / Outcome: Classified results of vehicle operations
- Garage: Aggregate owning the vehicles, persistence and upcoming-maintenance query
- ReminderScheduler: Daily-deduplicated reminders for maintenance due soon
- Storage backends and notification sinks used by the garage
"""

from .errors import (
    GarageError,
    ValidationError,
    StorageError,
    StorageQuotaExceeded,
    CorruptedStoreError,
    ConfigurationError,
)
from .outcome import Outcome, ActionResult
from .maintenance_record import MaintenanceRecord
from .vehicle import Vehicle, VEHICLE_TYPES, register_vehicle_type
from .sports_car import SportsCar
from .truck import Truck
from .storage import Storage, MemoryStorage, FileStorage
from .notifications import Severity, Notification, NotificationLog, log_notifier, PERSISTENT
from .garage import (
    Garage,
    LoadReport,
    LoadStatus,
    UpcomingMaintenance,
    DEFAULT_STORAGE_KEY,
    AMOUNT_ACTIONS,
)
from .reminders import ReminderScheduler
from .config import Settings, ActionDefaults, load_settings

__all__ = [
    "GarageError",
    "ValidationError",
    "StorageError",
    "StorageQuotaExceeded",
    "CorruptedStoreError",
    "ConfigurationError",
    "Outcome",
    "ActionResult",
    "MaintenanceRecord",
    "Vehicle",
    "VEHICLE_TYPES",
    "register_vehicle_type",
    "SportsCar",
    "Truck",
    "Storage",
    "MemoryStorage",
    "FileStorage",
    "Severity",
    "Notification",
    "NotificationLog",
    "log_notifier",
    "PERSISTENT",
    "Garage",
    "LoadReport",
    "LoadStatus",
    "UpcomingMaintenance",
    "DEFAULT_STORAGE_KEY",
    "AMOUNT_ACTIONS",
    "ReminderScheduler",
    "Settings",
    "ActionDefaults",
    "load_settings",
]
