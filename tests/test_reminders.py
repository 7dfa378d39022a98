#!/usr/bin/env python3
"""Tests for ReminderScheduler."""

from datetime import datetime

import pytest

from garage import MaintenanceRecord, NotificationLog, ReminderScheduler, Severity, Vehicle
from garage.reminders import REMINDER_DURATION_MS


@pytest.fixture
def reminders():
    return NotificationLog()


@pytest.fixture
def scheduler(garage, reminders, clock):
    garage.add_vehicle(Vehicle("Civic", "Silver", id="veh_civic"))
    return ReminderScheduler(garage, reminders, clock=clock)


def schedule(garage, date, service_type="Oil change"):
    record = MaintenanceRecord(date, service_type, 150)
    garage.add_maintenance("veh_civic", record)
    return record


class TestWindow:
    """Which maintenance falls inside the reminder window."""

    def test_today_and_tomorrow_are_announced(self, garage, scheduler, reminders):
        schedule(garage, "2025-06-01T15:00", "Today")
        schedule(garage, "2025-06-02T23:30", "Tomorrow")
        announced = scheduler.check()
        assert [i.record.service_type for i in announced] == ["Today", "Tomorrow"]
        assert len(reminders) == 2

    def test_later_and_past_are_not(self, garage, scheduler, reminders):
        schedule(garage, "2025-06-03T00:00", "Too late")
        schedule(garage, "2025-06-01T08:59", "Already past")
        assert scheduler.check() == []
        assert len(reminders) == 0

    def test_longer_lookahead(self, garage, reminders, clock):
        garage.add_vehicle(Vehicle("Civic", "Silver", id="veh_civic"))
        schedule(garage, "2025-06-04T10:00")
        scheduler = ReminderScheduler(garage, reminders, clock=clock, lookahead_days=3)
        assert len(scheduler.check()) == 1


class TestMessages:
    def test_today_message(self, garage, scheduler, reminders):
        schedule(garage, "2025-06-01T15:00", "Oil change")
        scheduler.check()
        [note] = reminders.items
        assert note.message == 'Reminder (TODAY): Civic - "Oil change" at 01/06/2025 15:00!'
        assert note.severity == Severity.WARNING
        assert note.duration_ms == REMINDER_DURATION_MS

    def test_tomorrow_message(self, garage, scheduler, reminders):
        schedule(garage, "2025-06-02", "Tires")
        scheduler.check()
        assert reminders.items[0].message.startswith("Reminder (TOMORROW): Civic")
        assert "02/06/2025 00:00" in reminders.items[0].message


class TestDeduplication:
    """Each record is announced at most once per day."""

    def test_second_check_same_day_is_silent(self, garage, scheduler, reminders, clock):
        record = schedule(garage, "2025-06-01T15:00")
        scheduler.check()
        clock.now = datetime(2025, 6, 1, 12, 0)
        assert scheduler.check() == []
        assert len(reminders) == 1
        assert scheduler.alerted_today == {record.id}

    def test_new_record_is_announced(self, garage, scheduler, reminders):
        schedule(garage, "2025-06-01T15:00", "First")
        scheduler.check()
        schedule(garage, "2025-06-01T16:00", "Second")
        announced = scheduler.check()
        assert [i.record.service_type for i in announced] == ["Second"]

    def test_next_day_announces_again(self, garage, scheduler, reminders, clock):
        """A record due tomorrow is announced today and again tomorrow."""
        schedule(garage, "2025-06-02T10:00")
        scheduler.check()
        clock.now = datetime(2025, 6, 2, 8, 0)
        announced = scheduler.check()
        assert len(announced) == 1
        assert reminders.items[-1].message.startswith("Reminder (TODAY)")

    def test_reset(self, garage, scheduler, reminders):
        schedule(garage, "2025-06-01T15:00")
        scheduler.check()
        scheduler.reset()
        assert len(scheduler.check()) == 1


class TestRun:
    """Tests for the periodic loop."""

    def test_run_sleeps_between_checks(self, garage, scheduler, clock):
        schedule(garage, "2025-06-01T15:00")
        sleeps = []

        def fake_sleep(seconds):
            sleeps.append(seconds)
            clock.now = datetime(2025, 6, 2, 9, 0)

        shown = scheduler.run(300, max_checks=2, sleep=fake_sleep)
        # Announced on the first day only; it is in the past on the second
        assert shown == 1
        assert sleeps == [300]

    def test_run_zero_checks(self, scheduler):
        assert scheduler.run(60, max_checks=0, sleep=lambda s: None) == 0
