"""Periodic reminders for maintenance due today or tomorrow."""

import logging
import time
from datetime import date, datetime
from typing import Callable, List, Optional, Set

from .formatting import format_date
from .garage import Garage, UpcomingMaintenance
from .dates import end_of_day
from .notifications import Notifier, Severity

logger = logging.getLogger(__name__)

REMINDER_DURATION_MS = 15000


class ReminderScheduler:
    """
    Announces maintenance falling between now and the end of the lookahead
    window, at most once per record per calendar day.

    The set of already-announced record ids is reset whenever the clock
    reaches a new day.
    """

    def __init__(
        self,
        garage: Garage,
        notify: Notifier,
        clock: Callable[[], datetime] = datetime.now,
        lookahead_days: int = 1,
    ):
        self.garage = garage
        self.notify = notify
        self.clock = clock
        self.lookahead_days = lookahead_days
        self._day: Optional[date] = None
        self._alerted: Set[str] = set()

    @property
    def alerted_today(self) -> Set[str]:
        return set(self._alerted)

    def reset(self) -> None:
        self._day = None
        self._alerted = set()

    def _roll_day(self, today: date) -> None:
        if self._day != today:
            if self._day is not None:
                logger.info("New day, resetting daily reminders")
            self._day = today
            self._alerted = set()

    def due_soon(self, now: datetime) -> List[UpcomingMaintenance]:
        """Upcoming maintenance between ``now`` and the end of the window."""
        limit = end_of_day(now, self.lookahead_days)
        return [
            item for item in self.garage.list_upcoming_maintenance(now)
            if item.when is not None and item.when <= limit
        ]

    def _day_label(self, when: datetime, now: datetime) -> str:
        delta = (when.date() - now.date()).days
        if delta == 0:
            return "TODAY"
        if delta == 1:
            return "TOMORROW"
        return format_date(when, with_time=False)

    def check(self) -> List[UpcomingMaintenance]:
        """Run one pass and return the maintenance announced in it."""
        now = self.clock()
        self._roll_day(now.date())
        announced = []
        for item in self.due_soon(now):
            if item.record.id in self._alerted:
                continue
            self.notify(
                f"Reminder ({self._day_label(item.when, now)}): {item.vehicle.model} - "
                f"\"{item.record.service_type}\" at {format_date(item.when, with_time=True)}!",
                Severity.WARNING,
                REMINDER_DURATION_MS,
            )
            self._alerted.add(item.record.id)
            announced.append(item)
        if announced:
            logger.debug("%d reminder(s) shown", len(announced))
        return announced

    def run(
        self,
        interval_seconds: float,
        max_checks: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> int:
        """Call check() every ``interval_seconds``. Returns the number of reminders shown."""
        logger.info("Reminder checks every %s seconds", interval_seconds)
        checks = 0
        shown = 0
        while max_checks is None or checks < max_checks:
            shown += len(self.check())
            checks += 1
            if max_checks is not None and checks >= max_checks:
                break
            sleep(interval_seconds)
        return shown
