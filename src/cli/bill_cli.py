"""
Bill CLI Subcommands

Thin wrapper over ProbabilisticBillModel.
No modelling logic here, only option parsing and output formatting.

Usage:
    uncertain bill estimate --month 2025-01 --area 80 --occupants 3
    uncertain bill risk --month 2025-01 --area 80 --occupants 3 --threshold 900
"""

import json as json_lib
from datetime import date, datetime
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.billing import HouseholdSettings, ProbabilisticBillModel, WeatherProfile
from src.config import config
from src.uncertain.primitives import reseed
from src.uncertain.sprt import sequential_test

bill_app = typer.Typer(
    name="bill",
    help="Estimate probabilistic household energy bills",
    no_args_is_help=True,
)

console = Console()


# =============================================================================
# Shared option handling
# =============================================================================

def _parse_month(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        console.print(f"[red]Invalid month: {value} (expected YYYY-MM)[/red]")
        raise typer.Exit(1)


def _build_model(
    month: str,
    area: float,
    occupants: int,
    building: str,
    heating: str,
    construction_year: int,
    insulation: float,
    appliances: List[str],
    ev_km: float,
    ev_battery: float,
    uncertain_weather: bool,
) -> ProbabilisticBillModel:
    month_date = _parse_month(month)
    try:
        settings = HouseholdSettings(
            area=area,
            occupants=occupants,
            building_type=building,
            construction_year=construction_year,
            heating_type=heating,
            insulation_rating=insulation,
            appliance_usage={name: 1.0 for name in appliances},
            ev_daily_km=ev_km,
            ev_battery_capacity=ev_battery,
        )
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    weather = WeatherProfile.uncertain(month_date) if uncertain_weather else WeatherProfile.typical(month_date)
    return ProbabilisticBillModel(settings=settings, month=month_date, weather_profile=weather)


# Options repeated by every bill command
MONTH_OPTION = typer.Option(..., "--month", "-m", help="Billing month (YYYY-MM)")
AREA_OPTION = typer.Option(..., "--area", "-a", help="Heated floor area in m²")
OCCUPANTS_OPTION = typer.Option(..., "--occupants", "-o", help="Number of occupants")
BUILDING_OPTION = typer.Option("Apartment", "--building", help="Apartment, House or Townhouse")
HEATING_OPTION = typer.Option("Electric", "--heating", help="Electric, Gas, Oil or Heat Pump")
YEAR_OPTION = typer.Option(2000, "--construction-year", help="Year the building was completed")
INSULATION_OPTION = typer.Option(6.0, "--insulation", help="Insulation rating 1-10")
APPLIANCE_OPTION = typer.Option([], "--appliance", help="Extra appliance (repeatable), e.g. Dishwasher")
EV_KM_OPTION = typer.Option(0.0, "--ev-km", help="Electric vehicle km per day")
EV_BATTERY_OPTION = typer.Option(0.0, "--ev-battery", help="Electric vehicle battery capacity in kWh")
WEATHER_OPTION = typer.Option(False, "--uncertain-weather", help="Perturb the typical weather profile")
SEED_OPTION = typer.Option(None, "--seed", help="Seed the shared random generator")


# =============================================================================
# Estimate Command
# =============================================================================

@bill_app.command("estimate")
def estimate_bill(
    month: str = MONTH_OPTION,
    area: float = AREA_OPTION,
    occupants: int = OCCUPANTS_OPTION,
    building: str = BUILDING_OPTION,
    heating: str = HEATING_OPTION,
    construction_year: int = YEAR_OPTION,
    insulation: float = INSULATION_OPTION,
    appliance: List[str] = APPLIANCE_OPTION,
    ev_km: float = EV_KM_OPTION,
    ev_battery: float = EV_BATTERY_OPTION,
    uncertain_weather: bool = WEATHER_OPTION,
    samples: Optional[int] = typer.Option(
        None,
        "--samples", "-n",
        help=f"Samples per estimate (default {config.billing.sample_count})",
    ),
    confidence: Optional[float] = typer.Option(
        None,
        "--confidence", "-c",
        help=f"Interval confidence level (default {config.billing.confidence})",
    ),
    seed: Optional[int] = SEED_OPTION,
    json: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON",
    ),
):
    """Estimate a monthly bill with per-appliance confidence intervals."""
    if samples is not None and samples < 1:
        console.print(f"[red]--samples must be at least 1, got {samples}[/red]")
        raise typer.Exit(1)
    if confidence is not None and not 0.0 < confidence < 1.0:
        console.print(f"[red]--confidence must be between 0 and 1, got {confidence}[/red]")
        raise typer.Exit(1)
    if seed is not None:
        reseed(seed)

    model = _build_model(
        month, area, occupants, building, heating, construction_year,
        insulation, appliance, ev_km, ev_battery, uncertain_weather,
    )
    bill = model.generate_bill(sample_count=samples, confidence=confidence)

    if json:
        print(json_lib.dumps(bill.to_dict(), indent=2, default=str))
        return

    level = round(bill.confidence * 100)
    table = Table(title=f"Probabilistic bill {bill.month:%Y-%m}")
    table.add_column("Appliance", style="cyan")
    table.add_column("Expected kWh", justify="right")
    table.add_column(f"{level}% CI (kWh)", justify="right")
    table.add_column("Cost (€)", justify="right", style="green")

    for item in bill.breakdown.values():
        table.add_row(
            item.name,
            f"{item.kwh:.1f}",
            f"[{item.kwh_lower:.1f}, {item.kwh_upper:.1f}]",
            f"{item.amount:.2f}",
        )

    console.print(table)
    console.print(Panel(bill.summary(), title="Total", border_style="blue"))


# =============================================================================
# Risk Command
# =============================================================================

@bill_app.command("risk")
def bill_risk(
    month: str = MONTH_OPTION,
    area: float = AREA_OPTION,
    occupants: int = OCCUPANTS_OPTION,
    threshold: float = typer.Option(..., "--threshold", "-t", help="Consumption threshold in kWh"),
    confidence: float = typer.Option(0.9, "--confidence", "-c", help="Required probability of exceeding"),
    building: str = BUILDING_OPTION,
    heating: str = HEATING_OPTION,
    construction_year: int = YEAR_OPTION,
    insulation: float = INSULATION_OPTION,
    appliance: List[str] = APPLIANCE_OPTION,
    ev_km: float = EV_KM_OPTION,
    ev_battery: float = EV_BATTERY_OPTION,
    uncertain_weather: bool = WEATHER_OPTION,
    seed: Optional[int] = SEED_OPTION,
    json: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON",
    ),
):
    """Decide (SPRT) whether consumption exceeds a threshold with the given probability."""
    if not 0.0 < confidence < 1.0:
        console.print(f"[red]--confidence must be between 0 and 1, got {confidence}[/red]")
        raise typer.Exit(1)
    if seed is not None:
        reseed(seed)

    model = _build_model(
        month, area, occupants, building, heating, construction_year,
        insulation, appliance, ev_km, ev_battery, uncertain_weather,
    )
    consumption = model.uncertain_consumption()
    total = sum(consumption.values())

    result = sequential_test((total > threshold).sample, exceeds=confidence)

    if json:
        output = {"threshold_kwh": threshold, "confidence": confidence, **result.to_dict()}
        print(json_lib.dumps(output, indent=2))
        return

    verdict = "[red]LIKELY EXCEEDED[/red]" if result.accepted else "[green]NOT LIKELY EXCEEDED[/green]"
    console.print(
        f"P(consumption > {threshold:.0f} kWh) >= {confidence:.2f}: {verdict} "
        f"({result.decision.value} after {result.trials} samples, observed rate {result.observed_rate:.3f})"
    )
