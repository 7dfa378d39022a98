"""User-visible notifications emitted by the garage."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List

logger = logging.getLogger(__name__)

# A duration of 0 keeps the notification visible until acknowledged
PERSISTENT = 0
DEFAULT_DURATION_MS = 5000


class Severity(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


# notify(message, severity, duration_ms)
Notifier = Callable[[str, Severity, int], None]

_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass
class Notification:
    message: str
    severity: Severity
    duration_ms: int = DEFAULT_DURATION_MS

    @property
    def is_persistent(self) -> bool:
        return self.duration_ms == PERSISTENT

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "severity": self.severity.value,
            "durationMs": self.duration_ms,
            "persistent": self.is_persistent,
        }


def log_notifier(message: str, severity: Severity, duration_ms: int = DEFAULT_DURATION_MS) -> None:
    """Default sink: send notifications to the log."""
    logger.log(_LOG_LEVELS[severity], "[%s] %s", severity.value, message)


class NotificationLog:
    """Sink that keeps every notification until it is drained."""

    def __init__(self):
        self.items: List[Notification] = []

    def __call__(self, message: str, severity: Severity, duration_ms: int = DEFAULT_DURATION_MS) -> None:
        self.items.append(Notification(message, severity, duration_ms))

    def drain(self) -> List[Notification]:
        """Return and forget the collected notifications."""
        items, self.items = self.items, []
        return items

    @property
    def persistent(self) -> List[Notification]:
        return [n for n in self.items if n.is_persistent]

    def __len__(self) -> int:
        return len(self.items)
