"""Seed service definitions and id generation."""

import uuid
from typing import List

from .service_definition import ServiceDefinition

# (id, name, interval_km, interval_months)
PREDEFINED_SERVICES = [
    ("oil_engine", "Engine oil and filter change", 5000, 6),
    ("filter_air", "Air filter", 10000, 12),
    ("filter_fuel", "Fuel filter", 20000, 24),
    ("spark_plugs", "Spark plugs", 30000, 24),
    ("brakes_check", "Brake inspection", 10000, 12),
    ("tires_rotate", "Tire rotation", 10000, 6),
    ("battery", "Battery check (12V)", 15000, 12),
]


def default_definitions() -> List[ServiceDefinition]:
    """Fresh copies of the predefined service definitions."""
    return [
        ServiceDefinition(service_id, name, interval_km, interval_months)
        for service_id, name, interval_km, interval_months in PREDEFINED_SERVICES
    ]


def generate_id() -> str:
    """Short random identifier for new logs and definitions."""
    return uuid.uuid4().hex[:9]
