"""
Uncertain CLI: Main Entry Point

Usage:
    uncertain demo --samples 2000
    uncertain bill estimate --month 2025-01 --area 80 --occupants 3
    uncertain bill risk --month 2025-01 --area 80 --occupants 3 --threshold 900
"""

import typer
from rich.console import Console

from src.cli.bill_cli import bill_app
from src.cli.demo_cli import run_demo
from src.config import config
from src.utils.logging_setup import setup_logging

__version__ = "1.0.0"

# Create main app
app = typer.Typer(
    name="uncertain",
    help="Probabilistic values with uncertainty-aware conditionals",
    no_args_is_help=True,
)

# Register subcommands
app.add_typer(bill_app, name="bill", help="Estimate probabilistic household energy bills")
app.command("demo")(run_demo)

# Console for output
console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Uncertain: probabilistic values with SPRT conditionals."""
    setup_logging("DEBUG" if verbose else config.log_level)


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]Uncertain[/bold] v{__version__}")
    console.print("Probabilistic values with uncertainty-aware conditionals")


if __name__ == "__main__":
    app()
