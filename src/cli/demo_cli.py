"""
Demo CLI

Walkthrough of the uncertain library: distributions, estimators,
correlation through the computation graph, and SPRT conditionals.

Usage:
    uncertain demo
    uncertain demo --samples 5000 --seed 7 --json
"""

import json as json_lib
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from src.uncertain import (
    binomial,
    categorical,
    exponential,
    mixture,
    normal,
    point,
    uniform,
)
from src.uncertain.primitives import reseed

console = Console()


def _collect(samples: int) -> List[Dict[str, object]]:
    """Run every demo scenario and return one row per reported figure."""
    rows: List[Dict[str, object]] = []

    def add(section: str, label: str, value) -> None:
        rows.append({"section": section, "label": label, "value": value})

    temperature = normal(mean=20.0, standard_deviation=2.0)
    ci = temperature.confidence_interval(confidence=0.95, sample_count=samples)
    add("normal(20, 2)", "expected value", round(temperature.expected_value(samples), 3))
    add("normal(20, 2)", "standard deviation", round(temperature.standard_deviation(samples), 3))
    add("normal(20, 2)", "95% CI", f"[{ci.lower:.2f}, {ci.upper:.2f}]")

    speed = normal(mean=5.0, standard_deviation=2.0)
    is_fast = speed > 4.0
    add("speed > 4", "P >= 0.9 (SPRT)", is_fast.probability(exceeds=0.9))
    add("speed > 4", "more likely than not", is_fast.implicit_conditional())

    x = uniform(min=0.0, max=1.0)
    x_independent = uniform(min=0.0, max=1.0)
    add("correlation", "Var[x + x]", round((x + x).variance(samples), 4))
    add("correlation", "Var[x + x']", round((x + x_independent).variance(samples), 4))
    add("correlation", "x - x", (x - x).sample())

    die = categorical({face: 1.0 for face in range(1, 7)})
    add("fair die", "mode", die.mode(samples))
    add("fair die", "entropy (bits)", round(die.entropy(samples), 3))

    coin_flips = binomial(trials=100, probability=0.5)
    add("binomial(100, 0.5)", "expected heads", round(coin_flips.expected_value(samples), 2))

    positive = normal(mean=0.0, standard_deviation=1.0).filter(lambda v: v > 0)
    add("normal | x > 0", "expected value", round(positive.expected_value(samples), 3))

    demand = mixture(
        [normal(mean=100.0, standard_deviation=5.0), normal(mean=50.0, standard_deviation=10.0)],
        weights=[0.3, 0.7],
    )
    add("demand mixture", "expected value", round(demand.expected_value(samples), 2))

    waits = exponential(rate=0.5)
    add("exponential(0.5)", "skewness", round(waits.skewness(samples), 3))
    add("exponential(0.5)", "excess kurtosis", round(waits.kurtosis(samples), 3))

    heights = normal(mean=170.0, standard_deviation=10.0)
    add("heights", "25th percentile", round(heights.quantile(0.25, samples), 2))
    add("heights", "median", round(heights.median(samples), 2))

    project = (
        normal(mean=50000.0, standard_deviation=5000.0)
        + normal(mean=30000.0, standard_deviation=3000.0)
        + point(10000.0)
    )
    add("project cost", "expected", round(project.expected_value(samples), 2))
    add("project cost", "over 100k budget", (project > 100000.0).implicit_conditional())

    return rows


def run_demo(
    samples: int = typer.Option(
        2000,
        "--samples", "-n",
        help="Samples per estimate",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed the shared random generator",
    ),
    json: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON",
    ),
):
    """Run the library walkthrough."""
    if samples < 1:
        console.print(f"[red]--samples must be at least 1, got {samples}[/red]")
        raise typer.Exit(1)
    if seed is not None:
        reseed(seed)

    rows = _collect(samples)

    if json:
        print(json_lib.dumps(rows, indent=2, default=str))
        return

    table = Table(title=f"Uncertain walkthrough ({samples} samples per estimate)")
    table.add_column("Scenario", style="cyan")
    table.add_column("Figure", style="magenta")
    table.add_column("Value", justify="right", style="green")
    for row in rows:
        table.add_row(row["section"], row["label"], str(row["value"]))
    console.print(table)
