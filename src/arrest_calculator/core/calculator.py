"""Arrest calculation orchestration."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .aggregation import aggregate
from .rules import evaluate_charge
from .stipulations import extract_stipulations
from .streets import is_streets_eligible
from .types import (
    AdditionCatalog,
    ArrestCalculation,
    ChargeDefinition,
    LegalCodeTable,
    Limits,
    SelectedCharge,
    StackingPolicy,
)

StreetsPredicate = Callable[[Sequence[SelectedCharge], Sequence[ChargeDefinition]], bool]


def _charge_label(row: SelectedCharge, charge: ChargeDefinition | None) -> str:
    if charge is None:
        return f"Row {row.unique_id}"
    return f"{charge.id}. {charge.name}"


def build_warnings(
    charges: Sequence[SelectedCharge],
    table: LegalCodeTable | None,
    catalog: AdditionCatalog,
) -> list[str]:
    warnings: list[str] = []

    for row in charges:
        if not row.charge_id:
            warnings.append(f"Row {row.unique_id}: no charge selected; excluded from totals.")
            continue

        charge = table.get(row.charge_id) if table else None
        if charge is None:
            warnings.append(
                f"Row {row.unique_id}: charge {row.charge_id!r} not found in the legal code; excluded from totals."
            )
            continue

        label = _charge_label(row, charge)
        if not row.charge_class:
            warnings.append(f"{label}: no class selected; points counted as 0.")
        elif not charge.allows_class(row.charge_class):
            warnings.append(f"{label}: class {row.charge_class} is not available; points counted as 0.")

        if not row.offense:
            warnings.append(f"{label}: no offence count selected; first offence assumed.")
        elif not charge.allows_offence(row.offense):
            warnings.append(f"{label}: offence #{row.offense} is not available for this charge.")

        if not row.addition:
            warnings.append(f"{label}: no addition selected; Offender assumed.")
        elif catalog.find(row.addition) is None:
            warnings.append(f"{label}: unknown addition {row.addition!r} ignored.")

        if charge.is_drug_charge:
            if not row.category:
                warnings.append(f"{label}: drug charge has no category selected.")
            elif not charge.allows_category(row.category):
                warnings.append(f"{label}: category {row.category!r} is not listed for this charge.")

    return warnings


def calculate_arrest(
    charges: Sequence[SelectedCharge],
    is_parole_violator: bool,
    table: LegalCodeTable | None,
    catalog: AdditionCatalog,
    limits: Limits,
    streets_predicate: StreetsPredicate = is_streets_eligible,
    policy: StackingPolicy = StackingPolicy.MULTIPLY,
) -> ArrestCalculation:
    evaluated = [evaluate_charge(row, table, catalog, is_parole_violator, policy) for row in charges]
    results = [r for r in evaluated if not r.unresolved]
    unresolved = tuple(r.row.unique_id for r in evaluated if r.unresolved)

    extras = extract_stipulations(results)
    report = aggregate(results, limits)

    streets = streets_predicate(
        [r.row for r in results],
        [r.charge_details for r in results],
    )

    return ArrestCalculation(
        calculation_results=tuple(results),
        extras=extras,
        totals=report.totals,
        min_time_capped=report.min_time_capped,
        max_time_capped=report.max_time_capped,
        is_capped=report.is_capped,
        impound_capped=report.impound_capped,
        is_impound_capped=report.is_impound_capped,
        suspension_capped=report.suspension_capped,
        is_suspension_capped=report.is_suspension_capped,
        bail_status=report.bail_status,
        is_streets_eligible=bool(streets),
        unresolved=unresolved,
        warnings=tuple(build_warnings(charges, table, catalog)),
    )
