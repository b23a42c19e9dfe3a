#!/usr/bin/env python3
"""Tests for Vehicle aggregate."""
from datetime import datetime, timezone

import pytest

from models import (
    FuelLog,
    ServiceDefinition,
    ServiceLog,
    Status,
    UnitSystem,
    Vehicle,
    VehicleSettings,
)


@pytest.fixture
def vehicle():
    return Vehicle(
        VehicleSettings("Mazda", "3", "2019", current_odometer=45100),
        [
            ServiceDefinition("oil", "Oil change", 5000, 6),
            ServiceDefinition("tires", "Tire rotation", 10000, 6),
        ],
        [
            ServiceLog("a", "oil", "Oil change", "2024-09-21", 39200, cost=170),
            ServiceLog("b", "oil", "Oil change", "2025-03-10", 44100, cost=185),
            ServiceLog("c", "tires", "Tire rotation", "2024-11-02", 40050, cost=60),
        ],
    )


class TestVehicleLookups:
    """Tests for Vehicle lookup methods."""

    def test_current_odometer(self, vehicle):
        assert vehicle.current_odometer == 45100

    def test_get_definition(self, vehicle):
        assert vehicle.get_definition("tires").name == "Tire rotation"
        assert vehicle.get_definition("nope") is None

    def test_get_logs_for_service(self, vehicle):
        assert [log.id for log in vehicle.get_logs_for_service("oil")] == ["b", "a"]

    def test_get_last_log(self, vehicle):
        assert vehicle.get_last_log("oil").odometer == 44100
        assert vehicle.get_last_log("nope") is None

    def test_last_service(self, vehicle):
        assert vehicle.last_service.id == "b"

    def test_last_service_empty(self):
        assert Vehicle(VehicleSettings(), []).last_service is None

    def test_total_service_cost(self, vehicle):
        assert vehicle.total_service_cost == 415


class TestVehicleLogsSorted:
    """Tests for Vehicle.get_logs_sorted."""

    def test_by_date_newest_first(self, vehicle):
        assert [log.id for log in vehicle.get_logs_sorted()] == ["b", "c", "a"]

    def test_by_date_ascending(self, vehicle):
        logs = vehicle.get_logs_sorted(reverse=False)
        assert [log.id for log in logs] == ["a", "c", "b"]

    def test_by_odometer(self, vehicle):
        logs = vehicle.get_logs_sorted(sort_by="odometer")
        assert [log.id for log in logs] == ["b", "c", "a"]

    def test_by_service(self, vehicle):
        logs = vehicle.get_logs_sorted(sort_by="service", reverse=False)
        assert [log.id for log in logs] == ["a", "b", "c"]


class TestVehicleServiceStatus:
    """Tests for Vehicle.get_all_service_status."""

    def test_delegates_to_calculator(self, vehicle):
        now = datetime(2025, 4, 1, tzinfo=timezone.utc)
        summary = vehicle.get_all_service_status(now)
        assert [s.service_id for s in summary.statuses] == ["oil", "tires"]
        tires = summary.statuses[1]
        # Last rotation 2024-11-02 + 6 months -> 2025-05-02
        assert tires.days_left == 31
        assert tires.km_left == 4950
        assert tires.status == Status.OK
        assert summary.statuses[0].km_left == 4000


class TestVehicleFuel:
    """Tests for Vehicle fuel statistics."""

    @pytest.fixture
    def fuel_vehicle(self, vehicle):
        vehicle.settings.unit_system = UnitSystem.LITER_100KM
        vehicle.fuel_logs = [
            FuelLog("f2", "2025-03-01", 45100, 36, 1.5, 54),
            FuelLog("f1", "2025-02-01", 44500, 40, 1.5, 60),
        ]
        return vehicle

    def test_fuel_efficiency_uses_unit_system(self, fuel_vehicle):
        # 36 L over 600 km
        assert fuel_vehicle.fuel_efficiency() == 6.0

    def test_fuel_efficiency_without_fuel_logs(self, vehicle):
        assert vehicle.fuel_efficiency() is None

    def test_fuel_stats_range(self, fuel_vehicle):
        stats = fuel_vehicle.fuel_stats(since=datetime(2025, 1, 1, tzinfo=timezone.utc))
        assert stats.fuel_visits == 2
        assert stats.service_visits == 1
        assert stats.total_fuel_cost == 114
        assert stats.distance == 1000
