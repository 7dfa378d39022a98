"""Outcome classification for vehicle operations."""

from dataclasses import dataclass
from enum import Enum


class Outcome(Enum):
    """How a caller should treat the result of an operation."""

    SUCCESS = 1
    INFO = 2  # Nothing to do (already in the requested state)
    WARNING = 3  # Rejected, or only partially applied


@dataclass
class ActionResult:
    """Human-readable result of a vehicle operation."""

    outcome: Outcome
    message: str
    changed: bool = False
    clamped: bool = False

    @classmethod
    def ok(cls, message: str, clamped: bool = False) -> "ActionResult":
        return cls(Outcome.SUCCESS, message, changed=True, clamped=clamped)

    @classmethod
    def info(cls, message: str) -> "ActionResult":
        return cls(Outcome.INFO, message)

    @classmethod
    def rejected(cls, message: str) -> "ActionResult":
        return cls(Outcome.WARNING, message)

    @property
    def is_rejected(self) -> bool:
        return self.outcome == Outcome.WARNING and not self.changed

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome.name.lower(),
            "message": self.message,
            "changed": self.changed,
            "clamped": self.clamped,
        }
