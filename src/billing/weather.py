"""
Weather Profiles

Monthly heating/cooling demand multipliers for a cold-temperate
(Baltic) climate.
"""

from dataclasses import dataclass
from datetime import date

# 0.0 means no demand; 2.0 is a very cold (or very hot) month
HEATING_MULTIPLIERS = {
    1: 2.0, 2: 1.9, 3: 1.5, 4: 1.0, 5: 0.5, 6: 0.0,
    7: 0.0, 8: 0.0, 9: 0.3, 10: 0.8, 11: 1.3, 12: 1.8,
}

COOLING_MULTIPLIERS = {
    1: 0.0, 2: 0.0, 3: 0.0, 4: 0.0, 5: 0.2, 6: 0.8,
    7: 1.5, 8: 1.3, 9: 0.4, 10: 0.0, 11: 0.0, 12: 0.0,
}


@dataclass(frozen=True)
class WeatherProfile:
    """Demand multipliers for one month."""
    month: date
    heating_degree_multiplier: float
    cooling_degree_multiplier: float

    @classmethod
    def typical(cls, month: date) -> "WeatherProfile":
        return cls(
            month=month,
            heating_degree_multiplier=HEATING_MULTIPLIERS.get(month.month, 0.5),
            cooling_degree_multiplier=COOLING_MULTIPLIERS.get(month.month, 0.0),
        )

    @classmethod
    def uncertain(cls, month: date) -> "WeatherProfile":
        """
        Typical profile shifted by up to ±20%.

        The shift is derived from the date, so the same month always yields
        the same profile.
        """
        typical = cls.typical(month)
        ordinal = month.toordinal()
        heating_variation = 1.0 + 0.4 * (0.5 - (ordinal % 100) / 100.0)
        cooling_variation = 1.0 + 0.4 * (0.5 - ((ordinal + 50) % 100) / 100.0)
        return cls(
            month=month,
            heating_degree_multiplier=typical.heating_degree_multiplier * heating_variation,
            cooling_degree_multiplier=typical.cooling_degree_multiplier * cooling_variation,
        )
