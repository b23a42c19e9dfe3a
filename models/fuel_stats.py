"""
Fuel economy and spending statistics.

Efficiency is reported in the vehicle's unit system: distance per volume
for km/gal and km/l, volume per 100 km for l/100km.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from .fuel_log import FuelLog
from .service_log import ServiceLog, parse_iso
from .vehicle_settings import UnitSystem


@dataclass
class FuelStats:
    fuel_visits: int = 0
    service_visits: int = 0
    total_volume: float = 0
    total_fuel_cost: float = 0
    total_service_cost: float = 0
    avg_cost_per_refuel: float = 0
    avg_cost_per_service: float = 0
    distance: int = 0
    efficiency: float = 0

    def to_dict(self) -> dict:
        return {
            "fuelVisits": self.fuel_visits,
            "serviceVisits": self.service_visits,
            "totalVolume": self.total_volume,
            "totalFuelCost": self.total_fuel_cost,
            "totalServiceCost": self.total_service_cost,
            "avgCostPerRefuel": self.avg_cost_per_refuel,
            "avgCostPerService": self.avg_cost_per_service,
            "distance": self.distance,
            "efficiency": self.efficiency,
        }


def calc_efficiency(
    distance: float, volume: float, unit_system: UnitSystem
) -> Optional[float]:
    """Convert distance and volume to the unit system's efficiency figure."""
    if unit_system == UnitSystem.LITER_100KM:
        return volume * 100 / distance if distance > 0 else None
    return distance / volume if volume > 0 else None


def calc_fuel_efficiency(
    fuel_logs: Iterable[FuelLog], unit_system: UnitSystem
) -> Optional[float]:
    """
    Average efficiency over consecutive full-tank fill-ups.

    A pair counts only when both fill-ups were full tanks: the distance
    between them was driven on exactly the volume of the later one.
    Returns None when no such pair exists.
    """
    ordered = sorted(fuel_logs, key=lambda log: log.odometer)
    total_distance = 0
    total_volume = 0.0
    for previous, current in zip(ordered, ordered[1:]):
        if previous.is_full_tank and current.is_full_tank:
            total_distance += current.odometer - previous.odometer
            total_volume += current.volume

    efficiency = calc_efficiency(total_distance, total_volume, unit_system)
    return round(efficiency, 1) if efficiency is not None else None


def _in_range(date: str, since: Optional[datetime], until: Optional[datetime]) -> bool:
    parsed = parse_iso(date)
    if since is not None and parsed < since:
        return False
    if until is not None and parsed > until:
        return False
    return True


def calc_fuel_stats(
    fuel_logs: Iterable[FuelLog],
    service_logs: Iterable[ServiceLog],
    unit_system: UnitSystem,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
) -> FuelStats:
    """
    Spending, volume and distance totals for logs dated within a range.

    Distance is the spread between the lowest and highest odometer reading
    of all logs in the range, and efficiency uses that distance against the
    total volume. Averages are 0 when there is nothing to average.
    """
    fuel: List[FuelLog] = [
        log for log in fuel_logs if _in_range(log.date, since, until)
    ]
    services: List[ServiceLog] = [
        log for log in service_logs if _in_range(log.date, since, until)
    ]

    total_volume = round(sum(log.volume or 0 for log in fuel), 2)
    total_fuel_cost = round(sum(log.total_cost or 0 for log in fuel), 2)
    total_service_cost = round(sum(log.cost or 0 for log in services), 2)

    odometers = sorted(
        log.odometer for log in [*fuel, *services] if log.odometer is not None
    )
    distance = odometers[-1] - odometers[0] if len(odometers) > 1 else 0
    efficiency = calc_efficiency(distance, total_volume, unit_system)

    return FuelStats(
        fuel_visits=len(fuel),
        service_visits=len(services),
        total_volume=total_volume,
        total_fuel_cost=total_fuel_cost,
        total_service_cost=total_service_cost,
        avg_cost_per_refuel=round(total_fuel_cost / len(fuel), 2) if fuel else 0,
        avg_cost_per_service=(
            round(total_service_cost / len(services), 2) if services else 0
        ),
        distance=distance,
        efficiency=round(efficiency, 2) if efficiency is not None else 0,
    )
