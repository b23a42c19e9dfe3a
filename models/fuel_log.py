"""FuelLog class for fill-up records."""
from typing import Optional


class FuelLog:
    """A fuel fill-up. Only its odometer reading matters for maintenance."""

    def __init__(
            self,
            id: str,
            date: str,
            odometer: int,
            volume: float,
            price_per_unit: float,
            total_cost: float,
            fuel_type: Optional[str] = None,
            is_full_tank: bool = True,
            receipt_photo: Optional[str] = None,
    ):
        self.id = id
        self.date = date
        self.odometer = odometer
        self.volume = volume
        self.price_per_unit = price_per_unit
        self.total_cost = total_cost
        self.fuel_type = fuel_type
        self.is_full_tank = is_full_tank
        self.receipt_photo = receipt_photo
