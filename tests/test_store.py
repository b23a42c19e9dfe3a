#!/usr/bin/env python3
"""Tests for the reactive MaintenanceStore."""
from datetime import datetime, timedelta, timezone

import pytest

from models import (
    FuelLog,
    MaintenanceStore,
    MemoryTimestampStore,
    NotFoundError,
    NotificationTrigger,
    PREDEFINED_SERVICES,
    ServiceDefinition,
    ServiceLog,
    Status,
    Vehicle,
    VehicleSettings,
)

NOW = datetime(2025, 3, 15, tzinfo=timezone.utc)


class Clock:
    """Manually advanced clock."""

    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def vehicle():
    return Vehicle(
        VehicleSettings("Mazda", "3", "2019", current_odometer=12000),
        [
            ServiceDefinition("oil", "Oil change", 5000, 6),
            ServiceDefinition("tires", "Tire rotation", 10000, 6),
        ],
        [
            ServiceLog("l1", "oil", "Oil change", "2025-01-10", 10000),
            ServiceLog("l2", "oil", "Oil change", "2024-07-10", 5000),
            ServiceLog("l3", "tires", "Tire rotation", "2024-12-01", 8000),
        ],
    )


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def store(vehicle, clock):
    return MaintenanceStore(vehicle, clock=clock)


class TestInitialState:
    """Tests for the summary computed on construction."""

    def test_summary_available(self, store):
        assert [s.service_id for s in store.statuses] == ["oil", "tires"]
        assert store.status_for("oil").km_left == 3000
        assert store.urgent_count == 0
        assert store.upcoming_count == 0

    def test_status_for_unknown(self, store):
        assert store.status_for("nope") is None

    def test_logs_for_service_highest_odometer_first(self, store):
        assert [log.id for log in store.logs_for_service("oil")] == ["l1", "l2"]


class TestSubscriptions:
    """Tests for publish/subscribe behaviour."""

    def test_subscriber_receives_recomputed_summary(self, store):
        received = []
        store.subscribe(received.append)

        store.set_current_odometer(15200)

        assert len(received) == 1
        assert received[0] is store.summary
        assert received[0].urgent_count == 1

    def test_unsubscribe(self, store):
        received = []
        unsubscribe = store.subscribe(received.append)
        unsubscribe()
        store.set_current_odometer(15200)
        assert received == []

    def test_unchanged_odometer_does_not_recompute(self, store):
        received = []
        store.subscribe(received.append)
        store.set_current_odometer(12000)
        assert received == []


class TestOdometer:
    """Tests for odometer updates."""

    def test_negative_rejected(self, store):
        with pytest.raises(ValueError):
            store.set_current_odometer(-1)

    def test_explicit_update_may_decrease(self, store):
        store.set_current_odometer(11000)
        assert store.vehicle.current_odometer == 11000

    def test_update_vehicle_recomputes_on_odometer_change(self, store):
        received = []
        store.subscribe(received.append)
        store.update_vehicle(VehicleSettings("Mazda", "3", current_odometer=12000))
        assert received == []
        store.update_vehicle(VehicleSettings("Mazda", "3", current_odometer=16000))
        assert len(received) == 1
        assert store.status_for("oil").status == Status.DANGER


class TestServiceLogs:
    """Tests for service log operations."""

    def test_add_log_advances_odometer(self, store):
        store.add_service_log(ServiceLog("l4", "oil", "Oil change", "2025-03-01", 15000))
        assert store.vehicle.current_odometer == 15000
        assert store.status_for("oil").next_due_odometer == 20000

    def test_add_log_never_decreases_odometer(self, store):
        store.add_service_log(ServiceLog("l4", "tires", "Tire rotation", "2025-03-01", 11000))
        assert store.vehicle.current_odometer == 12000
        assert store.status_for("tires").last_performed_odometer == 11000

    def test_logs_kept_newest_first(self, store):
        store.add_service_log(ServiceLog("l4", "tires", "Tire rotation", "2024-01-01", 3000))
        assert [log.id for log in store.vehicle.service_logs] == ["l1", "l3", "l2", "l4"]

    def test_update_log(self, store):
        store.update_service_log(ServiceLog("l1", "oil", "Oil change", "2025-01-10", 11000))
        assert store.status_for("oil").next_due_odometer == 16000

    def test_update_unknown_log(self, store):
        with pytest.raises(KeyError):
            store.update_service_log(ServiceLog("zz", "oil", "Oil", "2025-01-10", 1))

    def test_delete_log(self, store):
        store.delete_service_log("l1")
        assert store.status_for("oil").last_performed_odometer == 5000

    def test_delete_unknown_log(self, store):
        with pytest.raises(KeyError):
            store.delete_service_log("zz")

    def test_earlier_lists_are_not_mutated(self, store):
        before = store.vehicle.service_logs
        store.delete_service_log("l1")
        assert [log.id for log in before] == ["l1", "l2", "l3"]


class TestFuelLogs:
    """Tests for fuel log operations."""

    def test_add_fuel_log_advances_odometer(self, store):
        received = []
        store.subscribe(received.append)
        store.add_fuel_log(FuelLog("f1", "2025-03-10", 14800, 10, 4.5, 45))
        assert store.vehicle.current_odometer == 14800
        assert store.status_for("oil").status == Status.WARNING
        assert len(received) == 1

    def test_lower_fuel_log_does_not_recompute(self, store):
        received = []
        store.subscribe(received.append)
        store.add_fuel_log(FuelLog("f1", "2025-03-10", 9000, 10, 4.5, 45))
        assert store.vehicle.current_odometer == 12000
        assert received == []

    def test_update_and_delete_fuel_log(self, store):
        store.add_fuel_log(FuelLog("f1", "2025-03-10", 9000, 10, 4.5, 45))
        store.update_fuel_log(FuelLog("f1", "2025-03-10", 9000, 12, 4.5, 54))
        assert store.vehicle.fuel_logs[0].volume == 12
        store.delete_fuel_log("f1")
        assert store.vehicle.fuel_logs == []
        with pytest.raises(KeyError):
            store.delete_fuel_log("f1")


class TestDefinitions:
    """Tests for service definition operations."""

    def test_add_definition(self, store):
        store.add_definition(ServiceDefinition("coolant", "Coolant", 40000, 24, next_due_odometer=20000))
        assert store.status_for("coolant").km_left == 8000

    def test_add_duplicate_definition(self, store):
        with pytest.raises(ValueError):
            store.add_definition(ServiceDefinition("oil", "Oil again", 5000))

    def test_update_definition(self, store):
        store.update_definition(ServiceDefinition("oil", "Oil change", 3000, 6))
        status = store.status_for("oil")
        assert status.next_due_odometer == 13000
        assert status.status == Status.OK

    def test_update_unknown_definition(self, store):
        with pytest.raises(KeyError):
            store.update_definition(ServiceDefinition("nope", "Nope", 1000))

    def test_delete_cascades_to_logs(self, store):
        """Deleting a definition removes every log that references it."""
        removed = store.delete_definition("oil")
        assert removed == 2
        assert all(log.service_id != "oil" for log in store.vehicle.service_logs)
        assert store.status_for("oil") is None
        assert store.vehicle.get_definition("oil") is None

    def test_delete_unknown_definition(self, store):
        with pytest.raises(KeyError):
            store.delete_definition("nope")

    def test_log_name_survives_rename(self, store):
        """Log names are snapshots, not re-derived from the definition."""
        store.update_definition(ServiceDefinition("oil", "Synthetic oil", 5000, 6))
        assert store.vehicle.service_logs[0].service_name == "Oil change"
        assert store.status_for("oil").name == "Synthetic oil"

    def test_reset_services_to_default(self, store):
        store.reset_services_to_default()
        assert [d.id for d in store.vehicle.definitions] == [
            p[0] for p in PREDEFINED_SERVICES
        ]
        assert len(store.statuses) == len(PREDEFINED_SERVICES)

    def test_reset_all_keeps_theme(self, store):
        store.vehicle.settings.theme = "light"
        store.reset_all()
        assert store.vehicle.settings.theme == "light"
        assert store.vehicle.current_odometer == 0
        assert store.vehicle.service_logs == []
        assert len(store.vehicle.definitions) == len(PREDEFINED_SERVICES)


class TestNotificationIntegration:
    """Tests for the notification side effect of recomputation."""

    @pytest.fixture
    def sent(self):
        return []

    @pytest.fixture
    def notifying_store(self, vehicle, clock, sent):
        trigger = NotificationTrigger(sent.append, MemoryTimestampStore())
        return MaintenanceStore(vehicle, notifier=trigger, clock=clock)

    def test_construction_does_not_notify(self, notifying_store, sent):
        notifying_store.set_current_odometer(12500)
        assert sent == []

    def test_notifies_once_per_window(self, notifying_store, clock, sent):
        notifying_store.set_current_odometer(15200)
        notifying_store.set_current_odometer(15300)
        assert len(sent) == 1
        assert sent[0].title == "Attention! 1 overdue service"

        clock.now = NOW + timedelta(hours=13)
        notifying_store.set_current_odometer(15400)
        assert len(sent) == 2

    def test_failing_sender_does_not_undo_change(self, vehicle, clock):
        def broken_sender(notification):
            raise RuntimeError("no display")

        trigger = NotificationTrigger(broken_sender, MemoryTimestampStore())
        store = MaintenanceStore(vehicle, notifier=trigger, clock=clock)
        store.set_current_odometer(15200)
        assert store.vehicle.current_odometer == 15200
        assert store.urgent_count == 1


class TestNotFound:
    """Unknown ids raise NotFoundError, a KeyError."""

    def test_not_found_error(self, store):
        with pytest.raises(NotFoundError, match="zz"):
            store.delete_service_log("zz")
        assert issubclass(NotFoundError, KeyError)
