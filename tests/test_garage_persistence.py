#!/usr/bin/env python3
"""Tests for Garage save / load."""

import json

from garage import (
    PERSISTENT,
    Garage,
    LoadStatus,
    MaintenanceRecord,
    Severity,
    SportsCar,
    StorageError,
    Truck,
    Vehicle,
)

from conftest import CountingStorage


class BrokenRemoveStorage(CountingStorage):
    def remove(self, key):
        raise StorageError("disk on fire")


def build_fleet(garage):
    car = Vehicle("Civic", "Silver", id="veh_civic")
    ferrari = SportsCar("F40", "Red", id="veh_f40")
    truck = Truck("Actros", "White", 1000, id="veh_actros")
    for vehicle in (car, ferrari, truck):
        garage.add_vehicle(vehicle)
    garage.operate("veh_f40", "turn_on")
    garage.operate("veh_f40", "engage_turbo")
    garage.operate("veh_f40", "accelerate", 120)
    garage.operate("veh_actros", "load", 640)
    garage.add_maintenance(
        "veh_civic", MaintenanceRecord("2025-06-15T10:00", "Oil change", 150, "synthetic")
    )
    garage.add_maintenance("veh_civic", MaintenanceRecord("2024-12-01", "Tires", 900))


class TestRoundTrip:
    """Saving and loading gives back the same garage."""

    def test_round_trip(self, garage, storage, notifications, clock):
        build_fleet(garage)
        before = [v.to_dict() for v in garage]

        fresh = Garage(storage, notifications, storage_key="test_garage", clock=clock)
        report = fresh.load()

        assert report.status == LoadStatus.OK
        assert report.loaded == 3
        assert report.discarded == 0
        assert [v.to_dict() for v in fresh] == before
        assert isinstance(fresh.find_vehicle("veh_f40"), SportsCar)
        assert fresh.find_vehicle("veh_f40").turbo_engaged
        assert fresh.find_vehicle("veh_actros").current_cargo == 640

    def test_unicode_is_stored_as_is(self, garage, storage):
        garage.add_vehicle(Vehicle("Fusca", "Azul-celeste é", id="veh_fusca"))
        assert "é" in storage.data["test_garage"]

    def test_unknown_variant_survives_round_trip(self, storage, notifications):
        raw = Vehicle("Ninja", "Green", id="veh_ninja").to_dict()
        raw["_type"] = "Motorcycle"
        storage.data["test_garage"] = json.dumps([raw])
        garage = Garage(storage, notifications, storage_key="test_garage")
        garage.load()
        garage.save()
        assert json.loads(storage.data["test_garage"])[0]["_type"] == "Motorcycle"


class TestLoad:
    """Tests for loading edge cases."""

    def test_nothing_stored(self, garage):
        report = garage.load()
        assert report.status == LoadStatus.EMPTY
        assert len(garage) == 0

    def test_load_replaces_contents(self, garage, storage):
        garage.add_vehicle(Vehicle("Civic", "Silver", id="veh_civic"))
        storage.data["test_garage"] = "[]"
        garage.load()
        assert len(garage) == 0

    def test_stored_object_is_corrupted(self, garage, storage, notifications):
        """Scenario: a JSON object instead of a list clears the key."""
        storage.data["test_garage"] = json.dumps({"veh_civic": {"model": "Civic"}})
        report = garage.load()
        assert report.status == LoadStatus.CORRUPTED
        assert len(garage) == 0
        assert "test_garage" not in storage.data
        [note] = notifications.items
        assert note.severity == Severity.ERROR
        assert note.duration_ms == PERSISTENT
        assert note.is_persistent

    def test_corrupted_and_cannot_clear(self, notifications):
        storage = BrokenRemoveStorage({"test_garage": '"just a string"'})
        garage = Garage(storage, notifications, storage_key="test_garage")
        report = garage.load()
        assert report.status == LoadStatus.CORRUPTED
        assert "manually" in notifications.items[0].message

    def test_invalid_json_fails(self, garage, storage, notifications):
        storage.data["test_garage"] = "[{not json"
        report = garage.load()
        assert report.status == LoadStatus.FAILED
        assert len(garage) == 0
        assert notifications.persistent

    def test_invalid_vehicles_are_discarded(self, garage, storage, notifications):
        good = Vehicle("Civic", "Silver", id="veh_civic").to_dict()
        no_type = dict(good, id="veh_untyped")
        del no_type["_type"]
        bad_model = dict(good, id="veh_bad", model="")
        storage.data["test_garage"] = json.dumps([good, no_type, bad_model, 42])

        report = garage.load()
        assert report.status == LoadStatus.OK
        assert report.loaded == 1
        assert report.discarded == 3
        assert [n.severity for n in notifications.items] == [Severity.WARNING]
        assert "3" in notifications.items[0].message

    def test_non_string_type_tag_is_discarded(self, garage, storage):
        good = Vehicle("Civic", "Silver", id="veh_civic").to_dict()
        bad = dict(good, id="veh_bad", _type=["Truck"])
        storage.data["test_garage"] = json.dumps([good, bad])

        report = garage.load()
        assert report.status == LoadStatus.OK
        assert report.loaded == 1
        assert report.discarded == 1
        assert garage.find_vehicle("veh_civic") is not None

    def test_out_of_range_aware_date_is_discarded(self, garage, storage):
        """A date that overflows on timezone conversion drops only its record."""
        good = Vehicle("Civic", "Silver", id="veh_civic").to_dict()
        other = Vehicle("Corolla", "Black", id="veh_corolla").to_dict()
        record = MaintenanceRecord("2025-06-01", "Tires", 10).to_dict()
        other["maintenanceHistory"] = [
            record,
            dict(record, id="man_edge", date="0001-01-01T00:00+05:00"),
        ]
        storage.data["test_garage"] = json.dumps([good, other])

        report = garage.load()
        assert report.status == LoadStatus.OK
        assert report.loaded == 2
        assert report.discarded_records == 1
        assert len(garage.find_vehicle("veh_corolla").maintenance_history) == 1

    def test_truck_without_capacity_is_discarded(self, garage, storage):
        truck = Truck("Actros", "White", 1000, id="veh_actros").to_dict()
        del truck["cargoCapacity"]
        storage.data["test_garage"] = json.dumps([truck])
        report = garage.load()
        assert report.loaded == 0
        assert report.discarded == 1

    def test_duplicate_ids_keep_first(self, garage, storage):
        first = Vehicle("Civic", "Silver", id="veh_same").to_dict()
        second = Vehicle("Corolla", "Black", id="veh_same").to_dict()
        storage.data["test_garage"] = json.dumps([first, second])
        report = garage.load()
        assert report.loaded == 1
        assert report.discarded == 1
        assert garage.find_vehicle("veh_same").model == "Civic"

    def test_discarded_records_are_reported(self, garage, storage, notifications):
        raw = Vehicle("Civic", "Silver", id="veh_civic").to_dict()
        raw["maintenanceHistory"] = [
            MaintenanceRecord("2025-06-01", "Tires", 10).to_dict(),
            {"_type": "MaintenanceRecord", "date": "garbage", "serviceType": "X", "cost": 1},
        ]
        storage.data["test_garage"] = json.dumps([raw])
        report = garage.load()
        assert report.discarded_records == 1
        assert len(garage.find_vehicle("veh_civic").maintenance_history) == 1
        assert "maintenance record" in notifications.items[0].message


class TestSaveFailures:
    """Tests for storage failures while saving."""

    def test_quota_exceeded(self, notifications):
        storage = CountingStorage(quota_bytes=40)
        garage = Garage(storage, notifications, storage_key="test_garage")
        assert garage.add_vehicle(Vehicle("Civic", "Silver", id="veh_civic"))

        [note] = notifications.items
        assert note.severity == Severity.ERROR
        assert note.is_persistent
        assert "Storage is full" in note.message
        # The garage in memory keeps working
        assert garage.find_vehicle("veh_civic") is not None
        assert garage.operate("veh_civic", "turn_on").changed

    def test_save_returns_false(self, notifications):
        storage = CountingStorage(quota_bytes=1)
        garage = Garage(storage, notifications, storage_key="test_garage")
        assert garage.save() is False

    def test_clear_failure(self, notifications):
        garage = Garage(BrokenRemoveStorage(), notifications, storage_key="test_garage")
        assert garage.clear() is False
        assert notifications.persistent
