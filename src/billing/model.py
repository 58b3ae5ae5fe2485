"""
Probabilistic Bill Model

Builds an uncertain monthly kWh figure per appliance category and reduces
them to expectations and confidence intervals.

Sources of uncertainty modelled:
- weather variations affecting heating/cooling
- occupancy patterns and behavioural changes
- appliance usage variability
- seasonal effects
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional

from src.billing.household import HouseholdSettings
from src.billing.weather import WeatherProfile
from src.config import config
from src.uncertain import Uncertain, normal, point, uniform

logger = logging.getLogger(__name__)

WEEKS_PER_MONTH = 4.3


def _is_winter(month: date) -> bool:
    return month.month >= 11 or month.month <= 3


def _non_negative(x: float) -> bool:
    return x >= 0


# =============================================================================
# Realised bill
# =============================================================================

@dataclass
class ApplianceConsumptionUncertain:
    """Realised statistics for one appliance, plus its full distribution."""
    name: str
    kwh: float
    kwh_lower: float
    kwh_upper: float
    amount: float
    uncertain_kwh: Uncertain = field(repr=False)

    @property
    def uncertainty_range(self) -> float:
        return self.kwh_upper - self.kwh_lower

    @property
    def uncertainty_percent(self) -> float:
        if self.kwh == 0:
            return 0.0
        return self.uncertainty_range / self.kwh * 100.0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "kwh": round(self.kwh, 3),
            "kwh_lower": round(self.kwh_lower, 3),
            "kwh_upper": round(self.kwh_upper, 3),
            "amount": round(self.amount, 2),
        }


@dataclass
class ProbabilisticBill:
    """A monthly bill with confidence bounds."""
    id: str
    month: date
    total_kwh: float
    total_kwh_lower: float
    total_kwh_upper: float
    total_amount: float
    confidence: float
    breakdown: Dict[str, ApplianceConsumptionUncertain]
    total_uncertain_kwh: Uncertain = field(repr=False)
    weather_profile: WeatherProfile

    def confidence_that_exceeds(self, threshold_kwh: float, sample_count: int = 1000) -> float:
        """Fraction of draws in which total consumption exceeds `threshold_kwh`."""
        samples = self.total_uncertain_kwh.take(sample_count)
        return sum(1 for x in samples if x > threshold_kwh) / sample_count

    def exceeds_with_confidence(self, threshold_kwh: float, confidence: float = 0.9) -> bool:
        """SPRT decision: is P(total > threshold) at least `confidence`?"""
        return (self.total_uncertain_kwh > threshold_kwh).probability(exceeds=confidence)

    def percentile(self, sample_count: int = 1000) -> float:
        """Where the expected total sits within its own distribution."""
        return self.total_uncertain_kwh.cdf(self.total_kwh, sample_count=sample_count)

    def summary(self) -> str:
        spread = self.total_kwh_upper - self.total_kwh_lower
        spread_percent = spread / self.total_kwh * 100.0 if self.total_kwh else 0.0
        level = round(self.confidence * 100)
        return (
            f"Expected: {self.total_kwh:.1f} kWh\n"
            f"{level}% CI: [{self.total_kwh_lower:.1f}, {self.total_kwh_upper:.1f}] kWh\n"
            f"Uncertainty: ±{spread_percent:.1f}%\n"
            f"Cost: €{self.total_amount:.2f}"
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "month": self.month.isoformat(),
            "total_kwh": round(self.total_kwh, 3),
            "total_kwh_lower": round(self.total_kwh_lower, 3),
            "total_kwh_upper": round(self.total_kwh_upper, 3),
            "total_amount": round(self.total_amount, 2),
            "confidence": self.confidence,
            "breakdown": [item.to_dict() for item in self.breakdown.values()],
        }


# =============================================================================
# Model
# =============================================================================

class ProbabilisticBillModel:
    """Per-appliance consumption model for one household and month."""

    def __init__(
        self,
        settings: HouseholdSettings,
        month: date,
        weather_profile: Optional[WeatherProfile] = None,
        reference_year: Optional[int] = None,
    ):
        self.settings = settings
        self.month = month
        self.weather_profile = weather_profile or WeatherProfile.typical(month)
        self.reference_year = reference_year or date.today().year

    def uncertain_consumption(self) -> Dict[str, Uncertain]:
        """Appliance name -> uncertain monthly kWh."""
        consumption = {
            "Heating": self._heating(),
            "Cooling": self._cooling(),
            "Water Heater": self._water_heater(),
            "Refrigerator": self._refrigerator(),
            "Washing Machine": self._washing_machine(),
            "Dishwasher": self._dishwasher(),
            "Lighting": self._lighting(),
            "Electronics": self._electronics(),
        }
        if self.settings.has_ev:
            consumption["EV Charging"] = self._ev_charging()
        consumption["Other"] = self._other()
        return consumption

    def generate_bill(self, sample_count: Optional[int] = None, confidence: Optional[float] = None) -> ProbabilisticBill:
        """Reduce every appliance and the total to mean and confidence interval."""
        sample_count = sample_count or config.billing.sample_count
        confidence = confidence or config.billing.confidence
        price = config.billing.price_per_kwh

        consumption = self.uncertain_consumption()
        total = sum(consumption.values(), point(0.0))

        breakdown = {}
        for name, uncertain_kwh in consumption.items():
            stats = uncertain_kwh.summarize(confidence=confidence, sample_count=sample_count)
            breakdown[name] = ApplianceConsumptionUncertain(
                name=name,
                kwh=stats.mean,
                kwh_lower=stats.ci_low,
                kwh_upper=stats.ci_high,
                amount=stats.mean * price,
                uncertain_kwh=uncertain_kwh,
            )

        total_stats = total.summarize(confidence=confidence, sample_count=sample_count)
        logger.debug(
            f"Generated bill for {self.month:%Y-%m}: {total_stats.mean:.1f} kWh "
            f"[{total_stats.ci_low:.1f}, {total_stats.ci_high:.1f}] from {sample_count} samples"
        )

        return ProbabilisticBill(
            id=f"bill_{self.month:%Y_%m}",
            month=self.month,
            total_kwh=total_stats.mean,
            total_kwh_lower=total_stats.ci_low,
            total_kwh_upper=total_stats.ci_high,
            total_amount=total_stats.mean * price,
            confidence=confidence,
            breakdown=breakdown,
            total_uncertain_kwh=total,
            weather_profile=self.weather_profile,
        )

    # =========================================================================
    # Appliance models
    # =========================================================================

    def _heating(self) -> Uncertain:
        if self.settings.heating_type in ("Gas", "Oil"):
            return point(0.0)

        kwh_per_m2 = 15.0 if self.settings.heating_type == "Heat Pump" else 35.0
        base = self.settings.area * kwh_per_m2 * self.settings.efficiency_factor(self.reference_year)

        occupancy = normal(mean=1.0, standard_deviation=0.15)
        thermostat = normal(mean=1.0, standard_deviation=0.20)

        monthly = point(base * self.weather_profile.heating_degree_multiplier) * occupancy * thermostat
        return monthly.filter(_non_negative)

    def _cooling(self) -> Uncertain:
        if not 5 <= self.month.month <= 9:
            return point(0.0)
        if "Air Conditioner" not in self.settings.appliance_usage:
            return point(0.0)

        base = self.settings.area * 8.0 * self.settings.efficiency_factor(self.reference_year)
        # Usually only ~70% of the space is cooled
        usage = normal(mean=0.7, standard_deviation=0.15)

        monthly = point(base * self.weather_profile.cooling_degree_multiplier) * usage
        return monthly.filter(_non_negative)

    def _water_heater(self) -> Uncertain:
        per_person = normal(mean=45.0, standard_deviation=5.0)
        occupants = point(float(self.settings.occupants))
        winter_boost = 1.2 if _is_winter(self.month) else 1.0
        efficiency = 0.4 if self.settings.heating_type == "Heat Pump" else 1.0
        return per_person * occupants * winter_boost * efficiency

    def _refrigerator(self) -> Uncertain:
        old = self.settings.age(self.reference_year) > 15
        mean = 95.0 if old else 40.0
        std = 15.0 if old else 5.0
        summer_penalty = 1.15 if 6 <= self.month.month <= 8 else 1.0
        return normal(mean=mean * summer_penalty, standard_deviation=std)

    def _washing_machine(self) -> Uncertain:
        occupants = self.settings.occupants
        loads_per_week = normal(mean=occupants * 1.5, standard_deviation=occupants * 0.3)
        kwh_per_load = normal(mean=1.0, standard_deviation=0.2)
        return loads_per_week * kwh_per_load * WEEKS_PER_MONTH

    def _dishwasher(self) -> Uncertain:
        if "Dishwasher" not in self.settings.appliance_usage:
            return point(0.0)
        occupants = self.settings.occupants
        loads_per_week = normal(mean=occupants * 1.0, standard_deviation=occupants * 0.25)
        kwh_per_load = normal(mean=1.5, standard_deviation=0.3)
        return loads_per_week * kwh_per_load * WEEKS_PER_MONTH

    def _lighting(self) -> Uncertain:
        # Longer nights in winter
        season = 1.4 if _is_winter(self.month) else 0.8
        per_person = normal(mean=7.5 * season, standard_deviation=1.5)
        return per_person * self.settings.occupants

    def _electronics(self) -> Uncertain:
        per_person = normal(mean=25.0, standard_deviation=5.0)
        work_from_home = uniform(min=1.0, max=1.3)
        return per_person * self.settings.occupants * work_from_home

    def _ev_charging(self) -> Uncertain:
        if self.settings.ev_daily_km == 0:
            return point(0.0)

        kwh_per_100km = normal(mean=17.5, standard_deviation=1.5)
        daily_km = normal(mean=self.settings.ev_daily_km, standard_deviation=self.settings.ev_daily_km * 0.3)
        winter_penalty = 1.25 if _is_winter(self.month) else 1.0
        days = calendar.monthrange(self.month.year, self.month.month)[1]

        monthly = daily_km * kwh_per_100km / 100.0 * days * winter_penalty
        return monthly.filter(_non_negative)

    def _other(self) -> Uncertain:
        per_person = normal(mean=10.0, standard_deviation=3.0)
        return per_person * self.settings.occupants
