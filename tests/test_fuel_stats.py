#!/usr/bin/env python3
"""Tests for fuel economy and spending statistics."""
from datetime import datetime, timezone

import pytest

from models import (
    FuelLog,
    ServiceLog,
    UnitSystem,
    calc_efficiency,
    calc_fuel_efficiency,
    calc_fuel_stats,
)


def fill(odometer, volume, full=True, date="2025-02-01", cost=None):
    return FuelLog(
        f"f{odometer}", date, odometer, volume, 1.5,
        cost if cost is not None else volume * 1.5, is_full_tank=full,
    )


class TestCalcEfficiency:
    """Tests for calc_efficiency."""

    def test_distance_per_volume(self):
        assert calc_efficiency(500, 40, UnitSystem.KM_LITER) == 12.5
        assert calc_efficiency(500, 40, UnitSystem.KM_GAL) == 12.5

    def test_liters_per_100km_is_inverted(self):
        assert calc_efficiency(500, 40, UnitSystem.LITER_100KM) == 8.0

    def test_undefined(self):
        assert calc_efficiency(500, 0, UnitSystem.KM_LITER) is None
        assert calc_efficiency(0, 40, UnitSystem.LITER_100KM) is None


class TestCalcFuelEfficiency:
    """Tests for calc_fuel_efficiency (consecutive full-tank pairs)."""

    def test_needs_two_fill_ups(self):
        assert calc_fuel_efficiency([], UnitSystem.KM_LITER) is None
        assert calc_fuel_efficiency([fill(1000, 40)], UnitSystem.KM_LITER) is None

    def test_full_tank_pair(self):
        logs = [fill(1500, 40), fill(1000, 35)]
        # Uses the later fill-up's volume: 500 km on 40 L
        assert calc_fuel_efficiency(logs, UnitSystem.KM_LITER) == 12.5

    def test_partial_fill_breaks_pairs(self):
        """Pairs touching a partial fill-up are skipped."""
        logs = [
            fill(1000, 40),
            fill(1400, 30),
            fill(1700, 20, full=False),
            fill(2100, 35),
            fill(2600, 40),
        ]
        # Counted: 1000->1400 (400 km, 30 L) and 2100->2600 (500 km, 40 L)
        assert calc_fuel_efficiency(logs, UnitSystem.KM_LITER) == round(900 / 70, 1)

    def test_only_partial_pairs(self):
        logs = [fill(1000, 40, full=False), fill(1500, 40)]
        assert calc_fuel_efficiency(logs, UnitSystem.KM_LITER) is None

    def test_liters_per_100km(self):
        logs = [fill(1000, 40), fill(1500, 40)]
        assert calc_fuel_efficiency(logs, UnitSystem.LITER_100KM) == 8.0


class TestCalcFuelStats:
    """Tests for calc_fuel_stats."""

    @pytest.fixture
    def fuel_logs(self):
        return [
            fill(12000, 40, date="2025-03-01", cost=60),
            fill(11500, 40, date="2025-02-01", cost=56),
            fill(11000, 30, date="2025-01-01", cost=45),
        ]

    @pytest.fixture
    def service_logs(self):
        return [
            ServiceLog("s1", "oil", "Oil", "2025-02-15", 11700, cost=120),
            ServiceLog("s2", "tires", "Tires", "2024-06-01", 8000, cost=60),
        ]

    def test_totals(self, fuel_logs, service_logs):
        stats = calc_fuel_stats(fuel_logs, service_logs, UnitSystem.KM_LITER)
        assert stats.fuel_visits == 3
        assert stats.service_visits == 2
        assert stats.total_volume == 110
        assert stats.total_fuel_cost == 161
        assert stats.total_service_cost == 180
        assert stats.avg_cost_per_refuel == 53.67
        assert stats.avg_cost_per_service == 90
        assert stats.distance == 4000
        assert stats.efficiency == round(4000 / 110, 2)

    def test_date_range(self, fuel_logs, service_logs):
        stats = calc_fuel_stats(
            fuel_logs,
            service_logs,
            UnitSystem.LITER_100KM,
            since=datetime(2025, 2, 1, tzinfo=timezone.utc),
            until=datetime(2025, 2, 28, tzinfo=timezone.utc),
        )
        assert stats.fuel_visits == 1
        assert stats.service_visits == 1
        # 11500 -> 11700 on 40 L
        assert stats.distance == 200
        assert stats.efficiency == 20.0

    def test_empty(self):
        stats = calc_fuel_stats([], [], UnitSystem.KM_GAL)
        assert stats.fuel_visits == 0
        assert stats.avg_cost_per_refuel == 0
        assert stats.avg_cost_per_service == 0
        assert stats.distance == 0
        assert stats.efficiency == 0

    def test_to_dict(self, fuel_logs, service_logs):
        data = calc_fuel_stats(fuel_logs, service_logs, UnitSystem.KM_LITER).to_dict()
        assert data["fuelVisits"] == 3
        assert data["totalServiceCost"] == 180
        assert data["avgCostPerRefuel"] == 53.67
