#!/usr/bin/env python3
"""Tests for SportsCar class."""

import pytest

from garage import Outcome, SportsCar, Vehicle


@pytest.fixture
def ferrari():
    return SportsCar("F40", "Red", id="veh_f40")


class TestTurbo:
    """Tests for engage_turbo / disengage_turbo."""

    def test_engage_requires_engine(self, ferrari):
        result = ferrari.engage_turbo()
        assert result.is_rejected
        assert "must be on" in result.message
        assert not ferrari.turbo_engaged

    def test_engage(self, ferrari):
        ferrari.turn_on()
        result = ferrari.engage_turbo()
        assert result.outcome == Outcome.SUCCESS
        assert ferrari.turbo_engaged

    def test_engage_twice_is_info(self, ferrari):
        ferrari.turn_on()
        ferrari.engage_turbo()
        result = ferrari.engage_turbo()
        assert result.outcome == Outcome.INFO
        assert ferrari.turbo_engaged

    def test_disengage_when_off_is_info(self, ferrari):
        result = ferrari.disengage_turbo()
        assert result.outcome == Outcome.INFO

    def test_disengage(self, ferrari):
        ferrari.turn_on()
        ferrari.engage_turbo()
        assert ferrari.disengage_turbo().outcome == Outcome.SUCCESS
        assert not ferrari.turbo_engaged

    def test_turn_off_disengages_turbo(self, ferrari):
        ferrari.turn_on()
        ferrari.engage_turbo()
        result = ferrari.turn_off()
        assert result.outcome == Outcome.SUCCESS
        assert result.message.endswith("Turbo disengaged too.")
        assert not ferrari.engine_on
        assert not ferrari.turbo_engaged

    def test_rejected_turn_off_keeps_turbo(self, ferrari):
        ferrari.turn_on()
        ferrari.engage_turbo()
        ferrari.accelerate(50)
        assert ferrari.turn_off().is_rejected
        assert ferrari.turbo_engaged


class TestDisplay:
    def test_describe(self, ferrari):
        assert ferrari.describe().endswith("Turbo: disengaged")

    def test_interact_mentions_turbo(self, ferrari):
        ferrari.turn_on()
        ferrari.engage_turbo()
        assert "turbo ON" in ferrari.interact()

    def test_actions(self, ferrari):
        assert {"engage_turbo", "disengage_turbo", "accelerate"} <= set(ferrari.actions())


class TestSerialization:
    """Tests for SportsCar to_dict / from_dict."""

    def test_round_trip(self, ferrari):
        ferrari.turn_on()
        ferrari.engage_turbo()
        ferrari.accelerate(80)
        data = ferrari.to_dict()
        assert data["_type"] == "SportsCar"
        assert data["turboEngaged"] is True
        rebuilt = Vehicle.from_dict(data)
        assert isinstance(rebuilt, SportsCar)
        assert rebuilt.turbo_engaged
        assert rebuilt.speed == 80

    def test_turbo_with_engine_off_is_normalised(self, ferrari):
        data = ferrari.to_dict()
        data["turboEngaged"] = True
        rebuilt = Vehicle.from_dict(data)
        assert not rebuilt.turbo_engaged

    def test_malformed_turbo_flag_becomes_false(self, ferrari):
        ferrari.turn_on()
        data = ferrari.to_dict()
        data["turboEngaged"] = "on"
        assert Vehicle.from_dict(data).turbo_engaged is False
