"""
Household Settings

Static description of a dwelling used by the probabilistic bill model.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional

BUILDING_TYPES = ("Apartment", "House", "Townhouse")
HEATING_TYPES = ("Electric", "Gas", "Oil", "Heat Pump")


@dataclass(frozen=True)
class HouseholdSettings:
    """Dwelling and usage profile."""
    area: float  # m²
    occupants: int
    building_type: str = "Apartment"
    construction_year: int = 2000
    heating_type: str = "Electric"
    insulation_rating: float = 6.0  # 1-10 scale
    appliance_usage: Dict[str, float] = field(default_factory=dict)  # hours per day
    ev_daily_km: float = 0.0
    ev_battery_capacity: float = 0.0  # kWh

    def __post_init__(self):
        if self.area <= 0:
            raise ValueError(f"area must be positive, got {self.area}")
        if self.occupants < 1:
            raise ValueError(f"occupants must be at least 1, got {self.occupants}")
        if not 1.0 <= self.insulation_rating <= 10.0:
            raise ValueError(f"insulation_rating must be within 1-10, got {self.insulation_rating}")
        if self.building_type not in BUILDING_TYPES:
            raise ValueError(f"Unknown building type: {self.building_type}. Valid: {', '.join(BUILDING_TYPES)}")
        if self.heating_type not in HEATING_TYPES:
            raise ValueError(f"Unknown heating type: {self.heating_type}. Valid: {', '.join(HEATING_TYPES)}")

    @property
    def has_ev(self) -> bool:
        return self.ev_battery_capacity > 0

    def age(self, reference_year: Optional[int] = None) -> int:
        return (reference_year or date.today().year) - self.construction_year

    def efficiency_factor(self, reference_year: Optional[int] = None) -> float:
        """
        Base energy multiplier (lower is more efficient).

        Combines building type, construction age and insulation rating.
        """
        factor = 1.0

        if self.building_type == "Apartment":
            factor *= 0.8
        elif self.building_type == "House":
            factor *= 1.2

        age = self.age(reference_year)
        if age < 10:
            factor *= 0.7
        elif age < 20:
            factor *= 0.85
        elif age >= 30:
            factor *= 1.2

        # Rating 10 gives 0.1x, rating 1 gives 1.0x
        factor *= (11.0 - self.insulation_rating) / 10.0

        return factor
