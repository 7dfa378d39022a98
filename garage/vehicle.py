"""Vehicle class - the base of the vehicle hierarchy and its variant registry."""

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from .errors import ValidationError
from .formatting import format_speed
from .maintenance_record import MaintenanceRecord
from .numbers import to_number, to_positive_number
from .outcome import ActionResult

logger = logging.getLogger(__name__)

# Stored "_type" value -> class used to rebuild it
VEHICLE_TYPES: Dict[str, Type["Vehicle"]] = {}


def register_vehicle_type(cls: Type["Vehicle"]) -> Type["Vehicle"]:
    """Class decorator registering a variant under its VARIANT tag."""
    VEHICLE_TYPES[cls.VARIANT] = cls
    return cls


def new_vehicle_id() -> str:
    return f"veh_{uuid.uuid4().hex}"


def sort_history(records: List[MaintenanceRecord]) -> List[MaintenanceRecord]:
    """Most recent first; records whose date does not parse go last."""
    dated = [r for r in records if r.parsed_date is not None]
    undated = [r for r in records if r.parsed_date is None]
    dated.sort(key=lambda r: r.parsed_date, reverse=True)
    return dated + undated


def _require_text(value: Any, field: str, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Vehicle {label} is required.", field=field)
    return value.strip()


@register_vehicle_type
class Vehicle:
    """A vehicle with an engine, a speed and a maintenance history."""

    VARIANT = "Vehicle"

    def __init__(self, model: str, color: str, id: Optional[str] = None):
        self._model = _require_text(model, "model", "model")
        self._color = _require_text(color, "color", "color")
        self._id = str(id) if id else new_vehicle_id()
        self.variant_tag = self.VARIANT
        self.discarded_records = 0
        self._engine_on = False
        self._speed = 0.0
        self._history: List[MaintenanceRecord] = []

    @property
    def id(self) -> str:
        return self._id

    @property
    def model(self) -> str:
        return self._model

    @property
    def color(self) -> str:
        return self._color

    @property
    def engine_on(self) -> bool:
        return self._engine_on

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def maintenance_history(self) -> Tuple[MaintenanceRecord, ...]:
        """Maintenance records, most recent first."""
        return tuple(self._history)

    # -------------------------------------------------------------------------
    # Engine and speed
    # -------------------------------------------------------------------------

    def turn_on(self) -> ActionResult:
        if self._engine_on:
            return ActionResult.info(f"{self.model} is already on.")
        self._engine_on = True
        return ActionResult.ok(f"{self.model} turned on.")

    def turn_off(self) -> ActionResult:
        if not self._engine_on:
            return ActionResult.info(f"{self.model} is already off.")
        if self._speed > 0:
            return ActionResult.rejected(
                f"{self.model} must come to a complete stop (speed 0) before turning off."
            )
        self._engine_on = False
        return ActionResult.ok(f"{self.model} turned off.")

    def accelerate(self, amount: Any) -> ActionResult:
        increment = to_positive_number(amount)
        if increment is None:
            logger.warning("Rejected acceleration of %s by %r", self.id, amount)
            return ActionResult.rejected(
                f"{self.model} - invalid acceleration {amount!r}. Must be a positive number."
            )
        if not self._engine_on:
            return ActionResult.rejected(f"{self.model} must be on to accelerate.")
        self._speed += increment
        return ActionResult.ok(f"{self.model} accelerated to {format_speed(self._speed)}.")

    def brake(self, amount: Any) -> ActionResult:
        decrement = to_positive_number(amount)
        if decrement is None:
            logger.warning("Rejected braking of %s by %r", self.id, amount)
            return ActionResult.rejected(
                f"{self.model} - invalid braking {amount!r}. Must be a positive number."
            )
        if self._speed == 0:
            return ActionResult.info(f"{self.model} is already stopped.")
        self._speed = max(0.0, self._speed - decrement)
        return ActionResult.ok(f"{self.model} slowed to {format_speed(self._speed)}.")

    # -------------------------------------------------------------------------
    # Maintenance history
    # -------------------------------------------------------------------------

    def add_maintenance_record(self, record: MaintenanceRecord) -> bool:
        """Add a record to the history, stamping it with this vehicle's id."""
        if not isinstance(record, MaintenanceRecord):
            logger.error("Refusing to add %r to %s: not a MaintenanceRecord", record, self.id)
            return False
        if record.vehicle_id != self.id:
            if record.vehicle_id:
                logger.warning(
                    "Maintenance %s belonged to vehicle %s, reassigning to %s",
                    record.id,
                    record.vehicle_id,
                    self.id,
                )
            record = record.with_vehicle_id(self.id)
        self._history = sort_history(self._history + [record])
        logger.debug("Maintenance added to %s: %s", self.model, record.service_type)
        return True

    def remove_maintenance_record(self, record_id: str) -> bool:
        remaining = [r for r in self._history if r.id != record_id]
        if len(remaining) == len(self._history):
            return False
        self._history = remaining
        return True

    def get_maintenance_record(self, record_id: str) -> Optional[MaintenanceRecord]:
        for record in self._history:
            if record.id == record_id:
                return record
        return None

    def upcoming_maintenance(self, now: datetime) -> List[MaintenanceRecord]:
        """Records dated at or after ``now``, soonest first."""
        return sorted(
            (r for r in self._history if r.is_upcoming(now)),
            key=lambda r: r.parsed_date,
        )

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def describe_base(self) -> str:
        return (
            f"Type: {self.variant_tag}, ID: {self.id}, Model: {self.model}, "
            f"Color: {self.color}, Engine: {'on' if self._engine_on else 'off'}, "
            f"Speed: {format_speed(self._speed)}"
        )

    def describe(self) -> str:
        return self.describe_base()

    def interact(self) -> str:
        return f"Interacting with {self.variant_tag.lower()}: {self.model}."

    def actions(self) -> Dict[str, Callable[..., ActionResult]]:
        """Operations available on this vehicle, keyed by action name."""
        return {
            "turn_on": self.turn_on,
            "turn_off": self.turn_off,
            "accelerate": self.accelerate,
            "brake": self.brake,
        }

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the storage dict format (camelCase keys)."""
        return {
            "id": self.id,
            "model": self.model,
            "color": self.color,
            "engineOn": self._engine_on,
            "speed": self._speed,
            "maintenanceHistory": [r.to_dict() for r in self._history],
            "_type": self.variant_tag,
        }

    @classmethod
    def _create(cls, raw: Dict[str, Any]) -> "Vehicle":
        """Construct the variant from stored data (constructor arguments only)."""
        return cls(raw.get("model"), raw.get("color"), raw.get("id"))

    def _restore_state(self, raw: Dict[str, Any]) -> None:
        """Apply stored operational state. Raises ValidationError on bad values."""
        engine_on = raw.get("engineOn", False)
        if not isinstance(engine_on, bool):
            raise ValidationError(f"engineOn must be a boolean, got {engine_on!r}", "engineOn")
        speed = to_number(raw.get("speed", 0))
        if speed is None or speed < 0:
            raise ValidationError(f"Invalid stored speed {raw.get('speed')!r}", "speed")
        if not engine_on and speed > 0:
            logger.warning("Vehicle %s stored off while moving, speed reset to 0", self.id)
            speed = 0.0
        self._engine_on = engine_on
        self._speed = speed

    def _restore_history(self, raw_history: Any) -> None:
        if raw_history is None:
            raw_history = []
        if not isinstance(raw_history, list):
            logger.warning("Vehicle %s has a malformed maintenance history", self.id)
            raw_history = []
        records = []
        for raw_record in raw_history:
            record = MaintenanceRecord.from_dict(raw_record)
            if record is None:
                continue
            if record.vehicle_id != self.id:
                record = record.with_vehicle_id(self.id)
            records.append(record)
        self.discarded_records = len(raw_history) - len(records)
        if self.discarded_records:
            logger.warning(
                "%d maintenance record(s) of vehicle %s could not be rebuilt",
                self.discarded_records,
                self.id,
            )
        self._history = sort_history(records)

    @staticmethod
    def from_dict(raw: Any) -> Optional["Vehicle"]:
        """
        Rebuild a vehicle from its stored dict.

        The "_type" tag selects the variant class. Unknown tags fall back to
        the base Vehicle while keeping the stored tag in ``variant_tag``.
        Returns None when the dict has no tag or fails validation; history
        entries that cannot be rebuilt are dropped and counted in
        ``discarded_records``.
        """
        if not isinstance(raw, dict) or not isinstance(raw.get("_type"), str) or not raw["_type"]:
            logger.warning("Discarding stored vehicle without a type tag: %r", raw)
            return None
        tag = raw["_type"]
        cls = VEHICLE_TYPES.get(tag)
        if cls is None:
            logger.warning(
                "Unknown vehicle type %r for %s, rebuilding as base Vehicle", tag, raw.get("id")
            )
            cls = Vehicle
        try:
            vehicle = cls._create(raw)
            vehicle.variant_tag = str(tag)
            vehicle._restore_state(raw)
        except ValidationError as e:
            logger.warning("Discarding stored vehicle %s: %s", raw.get("id"), e)
            return None
        vehicle._restore_history(raw.get("maintenanceHistory"))
        return vehicle

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r}, {self.model!r}, {self.color!r})"
