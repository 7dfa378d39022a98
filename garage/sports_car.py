"""SportsCar - a vehicle with a turbo."""

import logging
from typing import Any, Callable, Dict

from .outcome import ActionResult
from .vehicle import Vehicle, register_vehicle_type

logger = logging.getLogger(__name__)


@register_vehicle_type
class SportsCar(Vehicle):
    """A car whose turbo can be engaged while the engine runs."""

    VARIANT = "SportsCar"

    def __init__(self, model: str, color: str, id=None):
        super().__init__(model, color, id)
        self._turbo_engaged = False

    @property
    def turbo_engaged(self) -> bool:
        return self._turbo_engaged

    def engage_turbo(self) -> ActionResult:
        if not self.engine_on:
            return ActionResult.rejected(f"{self.model} must be on to engage the turbo.")
        if self._turbo_engaged:
            return ActionResult.info(f"{self.model} turbo is already engaged.")
        self._turbo_engaged = True
        return ActionResult.ok(f"{self.model}: turbo engaged!")

    def disengage_turbo(self) -> ActionResult:
        if not self._turbo_engaged:
            return ActionResult.info(f"{self.model} turbo is already disengaged.")
        self._turbo_engaged = False
        return ActionResult.ok(f"{self.model}: turbo disengaged.")

    def turn_off(self) -> ActionResult:
        result = super().turn_off()
        if result.changed and self._turbo_engaged:
            self._turbo_engaged = False
            result.message += " Turbo disengaged too."
        return result

    def describe(self) -> str:
        turbo = "engaged" if self._turbo_engaged else "disengaged"
        return f"{self.describe_base()}, Turbo: {turbo}"

    def interact(self) -> str:
        suffix = " with the turbo ON!" if self._turbo_engaged else ""
        return f"Revving the {self.color} {self.model}{suffix}. Vroom!"

    def actions(self) -> Dict[str, Callable[..., ActionResult]]:
        actions = super().actions()
        actions["engage_turbo"] = self.engage_turbo
        actions["disengage_turbo"] = self.disengage_turbo
        return actions

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["turboEngaged"] = self._turbo_engaged
        return data

    def _restore_state(self, raw: Dict[str, Any]) -> None:
        super()._restore_state(raw)
        turbo = raw.get("turboEngaged", False)
        if not isinstance(turbo, bool):
            logger.warning("Vehicle %s has a malformed turbo flag %r", self.id, turbo)
            turbo = False
        if turbo and not self.engine_on:
            logger.warning("Vehicle %s stored with turbo on and engine off", self.id)
            turbo = False
        self._turbo_engaged = turbo
