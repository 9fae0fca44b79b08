"""
Arrest Calculator

Calculates sentence ranges, fines, points, impound/suspension and bail for a
report of selected charges against the published legal code.

Usage:
    arrest-calculator report.json                       # Legal code from CONTENT_DELIVERY_NETWORK
    arrest-calculator report.json --legal-code code.json
    arrest-calculator report.json --parole              # Apply the parole-violation addition
    arrest-calculator report.json --json                # Print the raw JSON response

The report file holds either a list of selected charges or an object
``{"report": [...], "isParoleViolator": true}``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from arrest_calculator.api.main import calculate_from_request
from arrest_calculator.api.schemas import ArrestCalculationRequest, ArrestCalculationResponse
from arrest_calculator.config import get_settings
from arrest_calculator.core.formatting import format_currency, format_days, format_minutes, half_up
from arrest_calculator.data.legal_code import LegalCodeError, load_additions, load_legal_code, read_json

console = Console()

BAIL_LABELS = {True: "Auto", False: "No bail", 2: "Discretionary", None: "N/A"}


def setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def build_request(data, parole: bool) -> ArrestCalculationRequest:
    if isinstance(data, list):
        data = {"report": data}
    if parole:
        data = {**data, "isParoleViolator": True}
    return ArrestCalculationRequest.model_validate(data)


def print_charges(response: ArrestCalculationResponse):
    table = Table(title=f"Charges ({len(response.calculation_results)})")
    table.add_column("Charge", style="cyan")
    table.add_column("Class")
    table.add_column("Offence")
    table.add_column("Additions", style="yellow")
    table.add_column("Min", style="green")
    table.add_column("Max", style="green")
    table.add_column("Points")
    table.add_column("Fine")
    table.add_column("Impound")
    table.add_column("Suspension")
    table.add_column("Bail")

    for result in response.calculation_results:
        details = result.charge_details
        row = result.row
        offence = row.offense or "1"
        if details.drug_categories and row.category:
            offence = f"Cat. {row.category}"
        table.add_row(
            f"{details.type}{row.charge_class or ''} {details.id}. {details.name}",
            row.charge_class or "-",
            offence,
            ", ".join(a.name for a in result.applied_additions) or "-",
            format_minutes(result.modified.min_time),
            format_minutes(result.modified.max_time),
            f"{half_up(result.modified.points)}",
            format_currency(result.fine),
            format_days(result.impound),
            format_days(result.suspension),
            BAIL_LABELS.get(result.bail_auto, "N/A"),
        )
    console.print(table)


def print_summary(response: ArrestCalculationResponse):
    totals = response.totals
    table = Table(title="Summary")
    table.add_column("Min time", style="green")
    table.add_column("Max time", style="green")
    table.add_column("Points")
    table.add_column("Fine")
    table.add_column("Impound")
    table.add_column("Suspension")
    table.add_column("Bail status", style="magenta")
    table.add_column("Bail cost")
    table.add_row(
        format_minutes(response.min_time_capped),
        format_minutes(response.max_time_capped),
        f"{half_up(totals.modified.points)}",
        format_currency(totals.fine),
        format_days(response.impound_capped),
        format_days(response.suspension_capped),
        response.bail_status,
        format_currency(totals.total_bail_cost),
    )
    console.print(table)

    settings = get_settings()
    if response.is_capped:
        console.print(f"[yellow]Sentence capped at {settings.max_sentence_days:g} days.[/]")
    if response.is_impound_capped:
        console.print(f"[yellow]Impound capped at {settings.max_impound_days:g} days.[/]")
    if response.is_suspension_capped:
        console.print(f"[yellow]Suspension capped at {settings.max_suspension_days:g} days.[/]")
    if response.is_streets_eligible:
        console.print("[bold red]STREETS Act may apply to this report.[/]")


def print_extras(response: ArrestCalculationResponse):
    if not response.extras:
        return
    console.print("\n[bold]Stipulations[/]")
    for extra in response.extras:
        console.print(f"  [cyan]{extra.title}[/]")
        console.print(f"    {extra.extra}")


def print_warnings(response: ArrestCalculationResponse):
    if not response.warnings:
        return
    console.print("\n[yellow]Warnings:[/]")
    for warning in response.warnings:
        console.print(f"  - {warning}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Calculate an arrest report against the legal code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("report", help="Path to the report JSON file")
    parser.add_argument(
        "--legal-code",
        help="Path or URL of the legal-code JSON (default: LEGAL_CODE_PATH or the CDN)",
    )
    parser.add_argument(
        "--parole",
        action="store_true",
        help="Treat the suspect as a parole violator",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the calculation as JSON instead of tables",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    settings = get_settings()

    try:
        req = build_request(read_json(args.report), args.parole)
        table = load_legal_code(settings, args.legal_code)
        catalog = load_additions(settings)
    except ValidationError as e:
        console.print(f"[red]Invalid report:[/] {e}")
        return 2
    except LegalCodeError as e:
        console.print(f"[red]{e}[/]")
        return 1

    response = calculate_from_request(req, table, catalog, settings)

    if args.json:
        print(json.dumps(response.model_dump(mode="json", by_alias=True), indent=2))
        return 0

    console.print("[bold]Arrest Calculator[/]")
    console.print("=" * 45)
    print_charges(response)
    print_summary(response)
    print_extras(response)
    print_warnings(response)
    return 0


if __name__ == "__main__":
    sys.exit(main())
