"""
Billing Module

Household energy-bill model built on uncertain values.
"""

from .household import HouseholdSettings
from .model import ApplianceConsumptionUncertain, ProbabilisticBill, ProbabilisticBillModel
from .weather import WeatherProfile

__all__ = [
    "HouseholdSettings",
    "WeatherProfile",
    "ProbabilisticBillModel",
    "ProbabilisticBill",
    "ApplianceConsumptionUncertain",
]
