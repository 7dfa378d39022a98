"""Shared fixtures: in-memory storage, a notification log and a fixed clock."""

from datetime import datetime

import pytest

from garage import Garage, MemoryStorage, NotificationLog


class CountingStorage(MemoryStorage):
    """MemoryStorage that records how many writes happened."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.writes = 0
        self.removals = 0

    def set(self, key, text):
        self.writes += 1
        super().set(key, text)

    def remove(self, key):
        self.removals += 1
        super().remove(key)


class FixedClock:
    """Callable clock whose time the test moves by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def storage():
    return CountingStorage()


@pytest.fixture
def notifications():
    return NotificationLog()


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 6, 1, 9, 0))


@pytest.fixture
def garage(storage, notifications, clock):
    return Garage(storage, notifications, storage_key="test_garage", clock=clock)
