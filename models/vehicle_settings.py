"""VehicleSettings class for vehicle identification and odometer."""

from enum import Enum
from typing import Optional


class UnitSystem(Enum):
    KM_GAL = "km/gal"
    KM_LITER = "km/l"
    LITER_100KM = "l/100km"

    @property
    def volume_label(self) -> str:
        return "gal" if self == UnitSystem.KM_GAL else "L"


class VehicleSettings:
    """Vehicle identification and current odometer reading."""

    def __init__(
        self,
        brand: str = "",
        model: str = "",
        year: str = "",
        plate: str = "",
        current_odometer: int = 0,
        fuel_type: str = "Gasoline",
        oil_type_engine: str = "",
        oil_type_transmission: str = "",
        unit_system: UnitSystem = UnitSystem.KM_GAL,
        theme: str = "dark",
        photo_url: Optional[str] = None,
    ):
        self.brand = brand
        self.model = model
        self.year = year
        self.plate = plate
        self.current_odometer = current_odometer or 0
        self.fuel_type = fuel_type
        self.oil_type_engine = oil_type_engine
        self.oil_type_transmission = oil_type_transmission
        self.unit_system = unit_system
        self.theme = theme
        self.photo_url = photo_url

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        base = " ".join(str(p) for p in (self.year, self.brand, self.model) if p)
        if not base:
            base = "My vehicle"
        return f"{base} ({self.plate})" if self.plate else base
