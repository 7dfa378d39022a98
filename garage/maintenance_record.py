"""MaintenanceRecord class for service events."""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from .dates import DateLike, parse_instant, to_date_string
from .errors import ValidationError
from .formatting import format_cost, format_date
from .numbers import to_number

logger = logging.getLogger(__name__)

RECORD_TYPE = "MaintenanceRecord"


def new_record_id() -> str:
    return f"man_{uuid.uuid4().hex}"


class MaintenanceRecord:
    """A maintenance event, completed or scheduled, for one vehicle."""

    def __init__(
            self,
            date: DateLike,
            service_type: str,
            cost: Any,
            description: Optional[str] = "",
            vehicle_id: Optional[str] = "",
    ):
        if parse_instant(date) is None:
            raise ValidationError(
                f"Invalid date {date!r}. Use YYYY-MM-DD or YYYY-MM-DDTHH:MM.",
                field="date",
            )
        if not isinstance(service_type, str) or not service_type.strip():
            raise ValidationError("Service type cannot be empty.", field="service_type")
        cost_value = to_number(cost)
        if cost_value is None or cost_value < 0:
            raise ValidationError(
                f"Invalid cost {cost!r}. Must be a non-negative number.", field="cost"
            )
        if description is not None and not isinstance(description, str):
            raise ValidationError("Description must be text.", field="description")

        self._id = new_record_id()
        self._date = to_date_string(date)
        self._service_type = service_type.strip()
        self._cost = cost_value
        self._description = (description or "").strip()
        self._vehicle_id = vehicle_id or ""

    @property
    def id(self) -> str:
        return self._id

    @property
    def date(self) -> str:
        return self._date

    @property
    def service_type(self) -> str:
        return self._service_type

    @property
    def cost(self) -> float:
        return self._cost

    @property
    def description(self) -> str:
        return self._description

    @property
    def vehicle_id(self) -> str:
        return self._vehicle_id

    @property
    def parsed_date(self) -> Optional[datetime]:
        """The date as a naive local datetime."""
        return parse_instant(self._date)

    def is_upcoming(self, now: datetime) -> bool:
        """True when the record is dated at or after ``now``."""
        when = self.parsed_date
        return when is not None and when >= now

    def with_vehicle_id(self, vehicle_id: str) -> "MaintenanceRecord":
        """Copy of this record (same id) stamped with another vehicle id."""
        copy = MaintenanceRecord(
            self._date, self._service_type, self._cost, self._description, vehicle_id
        )
        copy._id = self._id
        return copy

    def format(self) -> str:
        """Human-readable summary, e.g. 'Oil change em 01/06/2025 10:00 - R$ 150,00'."""
        try:
            when = self.parsed_date
            date_text = format_date(when) if when is not None else self._date
            text = f"{self._service_type} em {date_text} - {format_cost(self._cost)}"
            if self._description:
                text += f" ({self._description})"
            return text
        except Exception:
            logger.exception("Could not format maintenance record %s", self._id)
            return f"[maintenance record {self._id} could not be formatted]"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the storage dict format (camelCase keys)."""
        return {
            "id": self._id,
            "date": self._date,
            "serviceType": self._service_type,
            "cost": self._cost,
            "description": self._description,
            "vehicleId": self._vehicle_id,
            "_type": RECORD_TYPE,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["MaintenanceRecord"]:
        """
        Rebuild a record from its stored dict.

        Returns None when the dict is not a maintenance record or does not
        pass constructor validation. The stored id is kept.
        """
        if not isinstance(raw, dict):
            logger.warning("Discarding maintenance record: not a mapping (%r)", raw)
            return None
        if raw.get("_type") != RECORD_TYPE:
            logger.warning(
                "Discarding maintenance record %s: unexpected type %r",
                raw.get("id"),
                raw.get("_type"),
            )
            return None
        try:
            record = cls(
                raw.get("date"),
                raw.get("serviceType"),
                raw.get("cost"),
                raw.get("description"),
                raw.get("vehicleId"),
            )
        except ValidationError as e:
            logger.warning("Discarding maintenance record %s: %s", raw.get("id"), e)
            return None
        if raw.get("id"):
            record._id = str(raw["id"])
        return record

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MaintenanceRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"MaintenanceRecord({self._id!r}, {self._date!r}, {self._service_type!r})"
