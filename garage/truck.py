"""Truck - a vehicle that carries cargo up to a fixed capacity."""

import logging
from typing import Any, Callable, Dict

from .errors import ValidationError
from .formatting import format_weight
from .numbers import to_number, to_positive_number
from .outcome import ActionResult, Outcome
from .vehicle import Vehicle, register_vehicle_type

logger = logging.getLogger(__name__)


@register_vehicle_type
class Truck(Vehicle):
    """A truck with a cargo capacity in kg."""

    VARIANT = "Truck"

    def __init__(self, model: str, color: str, cargo_capacity: Any, id=None):
        super().__init__(model, color, id)
        capacity = to_number(cargo_capacity)
        if capacity is None or capacity < 0:
            raise ValidationError(
                f"Invalid cargo capacity {cargo_capacity!r}. Must be a non-negative number.",
                field="cargo_capacity",
            )
        self._cargo_capacity = capacity
        self._current_cargo = 0.0

    @property
    def cargo_capacity(self) -> float:
        return self._cargo_capacity

    @property
    def current_cargo(self) -> float:
        return self._current_cargo

    @property
    def free_capacity(self) -> float:
        return self._cargo_capacity - self._current_cargo

    def _load_summary(self) -> str:
        return (
            f"Current load: {self._current_cargo:.1f}/"
            f"{format_weight(self._cargo_capacity)}."
        )

    def load_cargo(self, amount: Any) -> ActionResult:
        """
        Load cargo, clamping to the remaining room.

        Loading more than fits fills the truck and returns a WARNING marked
        as clamped; a full truck returns INFO without change.
        """
        quantity = to_positive_number(amount)
        if quantity is None:
            return ActionResult.rejected(
                f"Invalid quantity to load {amount!r}. Must be a positive number."
            )
        room = self.free_capacity
        if room <= 0:
            return ActionResult.info(
                f"{self.model} is already at maximum capacity "
                f"({format_weight(self._cargo_capacity)})."
            )
        loaded = min(quantity, room)
        self._current_cargo += loaded
        if loaded < quantity:
            return ActionResult(
                Outcome.WARNING,
                f"Maximum capacity ({format_weight(self._cargo_capacity)}) exceeded. "
                f"Loaded the remaining {format_weight(loaded)}. {self._load_summary()}",
                changed=True,
                clamped=True,
            )
        return ActionResult.ok(
            f"{self.model} loaded with {format_weight(loaded)}. {self._load_summary()}"
        )

    def unload_cargo(self, amount: Any) -> ActionResult:
        quantity = to_positive_number(amount)
        if quantity is None:
            return ActionResult.rejected(
                f"Invalid quantity to unload {amount!r}. Must be a positive number."
            )
        if self._current_cargo <= 0:
            return ActionResult.info(f"{self.model} is empty, nothing to unload.")
        unloaded = min(quantity, self._current_cargo)
        self._current_cargo -= unloaded
        return ActionResult.ok(
            f"{self.model} unloaded {format_weight(unloaded)}. {self._load_summary()}",
            clamped=unloaded < quantity,
        )

    def describe(self) -> str:
        return (
            f"{self.describe_base()}, Capacity: {format_weight(self._cargo_capacity)}, "
            f"Current load: {format_weight(self._current_cargo)}"
        )

    def interact(self) -> str:
        return f"Hauling {format_weight(self._current_cargo)} of cargo with the truck {self.model}."

    def actions(self) -> Dict[str, Callable[..., ActionResult]]:
        actions = super().actions()
        actions["load"] = self.load_cargo
        actions["unload"] = self.unload_cargo
        return actions

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["cargoCapacity"] = self._cargo_capacity
        data["currentCargo"] = self._current_cargo
        return data

    @classmethod
    def _create(cls, raw: Dict[str, Any]) -> "Truck":
        return cls(raw.get("model"), raw.get("color"), raw.get("cargoCapacity"), raw.get("id"))

    def _restore_state(self, raw: Dict[str, Any]) -> None:
        super()._restore_state(raw)
        cargo = to_number(raw.get("currentCargo", 0))
        if cargo is None:
            raise ValidationError(
                f"Invalid stored cargo {raw.get('currentCargo')!r}", "currentCargo"
            )
        clamped = min(max(cargo, 0.0), self._cargo_capacity)
        if clamped != cargo:
            logger.warning(
                "Vehicle %s stored cargo %s outside [0, %s], clamped",
                self.id,
                cargo,
                self._cargo_capacity,
            )
        self._current_cargo = clamped
