#!/usr/bin/env python3
"""Tests for ServiceDefinition class."""
from models import ServiceDefinition


class TestServiceDefinition:
    """Tests for ServiceDefinition class."""

    def test_attributes(self):
        definition = ServiceDefinition(
            "coolant", "Coolant flush", 40000, 24, "OEM coolant", 60000
        )
        assert definition.id == "coolant"
        assert definition.name == "Coolant flush"
        assert definition.interval_km == 40000
        assert definition.interval_months == 24
        assert definition.notes == "OEM coolant"
        assert definition.next_due_odometer == 60000

    def test_missing_intervals_default_to_zero(self):
        """Missing intervals disable the trigger instead of failing."""
        definition = ServiceDefinition("x", "X", None, None)
        assert definition.interval_km == 0
        assert definition.interval_months == 0
        assert not definition.has_km_trigger
        assert not definition.has_time_trigger

    def test_interval_label(self):
        assert ServiceDefinition("a", "A", 5000, 6).interval_label == "5,000 km / 6 mo"
        assert ServiceDefinition("b", "B", 10000).interval_label == "10,000 km"
        assert ServiceDefinition("c", "C", 0, 12).interval_label == "12 mo"
        assert ServiceDefinition("d", "D").interval_label == "-"
