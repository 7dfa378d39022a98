"""Garage - the aggregate owning every vehicle and its persistence."""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional

from .errors import CorruptedStoreError, StorageError, StorageQuotaExceeded
from .maintenance_record import MaintenanceRecord
from .notifications import PERSISTENT, Notifier, Severity, log_notifier
from .outcome import ActionResult
from .storage import Storage
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "garagemInteligente_v4"

# Actions whose callable takes an amount
AMOUNT_ACTIONS = ("accelerate", "brake", "load", "unload")


class LoadStatus(Enum):
    EMPTY = "empty"  # Nothing stored under the key
    OK = "ok"
    CORRUPTED = "corrupted"  # Stored value was not a list; it was cleared
    FAILED = "failed"  # Could not read or parse; garage reset


@dataclass
class LoadReport:
    status: LoadStatus
    loaded: int = 0
    discarded: int = 0
    discarded_records: int = 0


@dataclass
class UpcomingMaintenance:
    """A maintenance record dated now or later, with the vehicle it belongs to."""

    vehicle: Vehicle
    record: MaintenanceRecord

    @property
    def when(self) -> Optional[datetime]:
        return self.record.parsed_date

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vehicleId": self.vehicle.id,
            "model": self.vehicle.model,
            "maintenance": self.record.to_dict(),
        }


def _upcoming_sort_key(item: UpcomingMaintenance):
    when = item.when
    return (when is None, when or datetime.min, item.record.id)


class Garage:
    """Collection of vehicles, persisted as a JSON list under one storage key."""

    def __init__(
        self,
        storage: Storage,
        notify: Notifier = log_notifier,
        storage_key: str = DEFAULT_STORAGE_KEY,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.storage = storage
        self.notify = notify
        self.storage_key = storage_key
        self.clock = clock
        self._vehicles: List[Vehicle] = []
        logger.debug("Garage using storage key %s", storage_key)

    def __len__(self) -> int:
        return len(self._vehicles)

    def __iter__(self) -> Iterator[Vehicle]:
        return iter(list(self._vehicles))

    def __contains__(self, vehicle_id: object) -> bool:
        return self.find_vehicle(vehicle_id) is not None

    # -------------------------------------------------------------------------
    # Collection
    # -------------------------------------------------------------------------

    def add_vehicle(self, vehicle: Vehicle) -> bool:
        """Add a vehicle and save. False (nothing saved) if invalid or the id is taken."""
        if not isinstance(vehicle, Vehicle):
            logger.error("Refusing to add %r: not a Vehicle", vehicle)
            self.notify("Internal error: invalid object type for the garage.", Severity.ERROR, 5000)
            return False
        if self.find_vehicle(vehicle.id) is not None:
            logger.warning("Vehicle %s (%s) already in the garage, ignored", vehicle.id, vehicle.model)
            self.notify(
                f"Vehicle {vehicle.model} (ID: {vehicle.id}) is already in the garage!",
                Severity.WARNING,
                5000,
            )
            return False
        self._vehicles.append(vehicle)
        logger.info("Vehicle added: %s (%s, %s)", vehicle.model, vehicle.variant_tag, vehicle.id)
        self.save()
        return True

    def remove_vehicle(self, vehicle_id: str) -> bool:
        vehicle = self.find_vehicle(vehicle_id)
        if vehicle is None:
            logger.warning("Cannot remove vehicle %s: not found", vehicle_id)
            return False
        self._vehicles.remove(vehicle)
        logger.info("Vehicle removed: %s (%s)", vehicle.model, vehicle_id)
        self.save()
        return True

    def find_vehicle(self, vehicle_id: object) -> Optional[Vehicle]:
        for vehicle in self._vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        return None

    def list_vehicles(self) -> List[Vehicle]:
        """A new list of the vehicles; changing it does not change the garage."""
        return list(self._vehicles)

    def clear(self) -> bool:
        """Remove every vehicle and delete the stored data."""
        self._vehicles = []
        try:
            self.storage.remove(self.storage_key)
        except StorageError as e:
            logger.error("Could not clear stored garage: %s", e)
            self.notify("Error clearing the stored garage data.", Severity.ERROR, PERSISTENT)
            return False
        logger.info("Garage cleared (%s)", self.storage_key)
        return True

    # -------------------------------------------------------------------------
    # Vehicle operations through the garage (persisted)
    # -------------------------------------------------------------------------

    def operate(self, vehicle_id: str, action: str, amount: Any = None) -> ActionResult:
        """
        Run a vehicle operation by name and save when it changed state.

        Actions: turn_on, turn_off, accelerate, brake, plus engage_turbo and
        disengage_turbo for sports cars and load/unload for trucks. The
        amount-taking actions (accelerate, brake, load, unload) need an
        explicit amount.
        """
        vehicle = self.find_vehicle(vehicle_id)
        if vehicle is None:
            return ActionResult.rejected(f"Vehicle {vehicle_id} not found.")
        operation = vehicle.actions().get(action)
        if operation is None:
            return ActionResult.rejected(f"{vehicle.model} cannot {action.replace('_', ' ')}.")
        if action in AMOUNT_ACTIONS:
            result = operation(amount)
        else:
            result = operation()
        if result.changed:
            self.save()
        return result

    def add_maintenance(self, vehicle_id: str, record: MaintenanceRecord) -> bool:
        vehicle = self.find_vehicle(vehicle_id)
        if vehicle is None:
            logger.warning("Cannot add maintenance to %s: vehicle not found", vehicle_id)
            return False
        if not vehicle.add_maintenance_record(record):
            return False
        self.save()
        return True

    def remove_maintenance(self, vehicle_id: str, record_id: str) -> bool:
        vehicle = self.find_vehicle(vehicle_id)
        if vehicle is None or not vehicle.remove_maintenance_record(record_id):
            return False
        self.save()
        return True

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_upcoming_maintenance(self, now: Optional[datetime] = None) -> List[UpcomingMaintenance]:
        """Maintenance dated at or after ``now`` across all vehicles, soonest first."""
        if now is None:
            now = self.clock()
        upcoming = []
        for vehicle in self._vehicles:
            for record in vehicle.maintenance_history:
                if record.is_upcoming(now):
                    upcoming.append(UpcomingMaintenance(vehicle, record))
        upcoming.sort(key=_upcoming_sort_key)
        return upcoming

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def save(self) -> bool:
        """
        Write every vehicle to storage.

        Vehicles that fail to serialize are skipped and reported. A storage
        failure is reported with a persistent notification and False is
        returned; the in-memory garage stays as it is.
        """
        payload = []
        for vehicle in self._vehicles:
            try:
                payload.append(vehicle.to_dict())
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning("Skipping vehicle %s while saving: %s", getattr(vehicle, "id", "?"), e)
        try:
            self.storage.set(self.storage_key, json.dumps(payload, ensure_ascii=False))
        except StorageError as e:
            logger.error("Could not save the garage under %s: %s", self.storage_key, e)
            message = "Critical error: could not save the garage data."
            if isinstance(e, StorageQuotaExceeded):
                message += " Storage is full. Remove some vehicles or free up space."
            self.notify(message, Severity.ERROR, PERSISTENT)
            return False
        logger.debug("Saved %d vehicles under %s", len(payload), self.storage_key)
        return True

    def load(self) -> LoadReport:
        """
        Replace the garage contents with what is stored under the key.

        - nothing stored: empty garage
        - stored value not a list: empty garage, stored value removed
        - individual vehicles that cannot be rebuilt are dropped and counted
        - unreadable or unparseable data: empty garage
        """
        logger.info("Loading garage from %s", self.storage_key)
        self._vehicles = []
        try:
            text = self.storage.get(self.storage_key)
            if not text:
                logger.info("No saved garage under %s, starting empty", self.storage_key)
                return LoadReport(LoadStatus.EMPTY)
            data = json.loads(text)
            if not isinstance(data, list):
                raise CorruptedStoreError(
                    f"Expected a list of vehicles, found {type(data).__name__}"
                )
            report = self._rebuild(data)
        except CorruptedStoreError as e:
            logger.error("Corrupted garage data under %s: %s", self.storage_key, e)
            self._discard_corrupted()
            return LoadReport(LoadStatus.CORRUPTED)
        except Exception:
            logger.exception("Failed to load the garage from %s", self.storage_key)
            self._vehicles = []
            self.notify(
                "Serious error loading the saved garage. It was reset to an empty state.",
                Severity.ERROR,
                PERSISTENT,
            )
            return LoadReport(LoadStatus.FAILED)
        logger.info("%d vehicles loaded from %s", report.loaded, self.storage_key)
        return report

    def _rebuild(self, data: List[Any]) -> LoadReport:
        vehicles: List[Vehicle] = []
        seen = set()
        for raw in data:
            vehicle = Vehicle.from_dict(raw)
            if vehicle is None:
                continue
            if vehicle.id in seen:
                logger.warning("Duplicate stored vehicle id %s dropped", vehicle.id)
                continue
            seen.add(vehicle.id)
            vehicles.append(vehicle)
        self._vehicles = vehicles

        discarded = len(data) - len(vehicles)
        discarded_records = sum(v.discarded_records for v in vehicles)
        if discarded:
            logger.warning("%d stored vehicle(s) discarded while loading", discarded)
            self.notify(
                f"{discarded} saved vehicle record(s) were invalid and ignored while loading.",
                Severity.WARNING,
                8000,
            )
        if discarded_records:
            self.notify(
                f"{discarded_records} saved maintenance record(s) were invalid and ignored.",
                Severity.WARNING,
                8000,
            )
        return LoadReport(LoadStatus.OK, len(vehicles), discarded, discarded_records)

    def _discard_corrupted(self) -> None:
        self._vehicles = []
        try:
            self.storage.remove(self.storage_key)
        except StorageError as e:
            logger.error("Could not remove corrupted data under %s: %s", self.storage_key, e)
            self.notify(
                "Saved garage data is corrupted and could not be cleared automatically. "
                "Consider clearing it manually.",
                Severity.ERROR,
                PERSISTENT,
            )
            return
        self.notify(
            "Saved garage data was corrupted and has been removed. The garage was reset.",
            Severity.ERROR,
            PERSISTENT,
        )
