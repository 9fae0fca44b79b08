"""Per-charge sentencing rules over the legal-code table."""

from __future__ import annotations

import logging
from math import prod

from .types import (
    DEFAULT_OFFENCE,
    Addition,
    AdditionCatalog,
    BailAuto,
    CategoryKey,
    ChargeDefinition,
    ChargeResult,
    LegalCodeTable,
    LookupKey,
    OffenceKey,
    SelectedCharge,
    SentenceFigures,
    StackingPolicy,
)

logger = logging.getLogger(__name__)


def resolve_lookup_key(row: SelectedCharge, charge: ChargeDefinition) -> LookupKey:
    if charge.is_drug_charge and row.category:
        return CategoryKey(row.category)
    return OffenceKey(row.offense or DEFAULT_OFFENCE)


def is_legal_key(charge: ChargeDefinition, key: LookupKey) -> bool:
    if isinstance(key, CategoryKey):
        return charge.allows_category(key.category)
    return charge.allows_offence(key.offence)


def sentence_range(charge: ChargeDefinition, key: LookupKey) -> tuple[float, float]:
    """Return (min, max) minutes for the key, raising max to min when inverted."""
    if not is_legal_key(charge, key):
        return 0.0, 0.0

    min_time = charge.min_time.resolve(key).minutes
    max_time = charge.max_time.resolve(key).minutes
    if max_time < min_time:
        max_time = min_time
    return min_time, max_time


def class_points(charge: ChargeDefinition, charge_class: str | None) -> float:
    if not charge.allows_class(charge_class):
        return 0.0
    return charge.points_by_class.get(charge_class, 0.0)


def fine_amount(charge: ChargeDefinition, key: LookupKey) -> float:
    if not is_legal_key(charge, key):
        return 0.0
    return charge.fine.resolve(key)


def offence_penalty(charge: ChargeDefinition, table: dict[str, float], offence: str | None) -> float:
    """Impound and suspension are always keyed by offence count, never by category."""
    offence = offence or DEFAULT_OFFENCE
    if not charge.allows_offence(offence):
        return 0.0
    return table.get(offence, 0.0)


def bail_terms(charge: ChargeDefinition, category: str | None) -> tuple[BailAuto | None, float]:
    bail = charge.bail
    by_category = charge.is_drug_charge

    if by_category and bail.auto_by_category is not None:
        auto = bail.auto_by_category.get(category) if category else None
    else:
        auto = bail.auto

    if auto is BailAuto.NOT_ELIGIBLE:
        return auto, 0.0

    if by_category and bail.cost_by_category is not None:
        cost = bail.cost_by_category.get(category, 0.0) if category else 0.0
    else:
        cost = bail.cost
    return auto, cost


def _unique_by_name(additions: list[Addition]) -> tuple[Addition, ...]:
    seen: set[str] = set()
    unique: list[Addition] = []
    for addition in additions:
        if addition.name in seen:
            continue
        seen.add(addition.name)
        unique.append(addition)
    return tuple(unique)


def applied_additions(
    row: SelectedCharge,
    catalog: AdditionCatalog,
    is_parole_violator: bool,
    policy: StackingPolicy = StackingPolicy.MULTIPLY,
) -> tuple[tuple[Addition, ...], tuple[Addition, ...]]:
    """Return (listed, multiplied) additions for a row.

    ``listed`` is what the report shows; ``multiplied`` is what scales the
    sentence and points. They only differ under ``DISPLAY_ONLY``.
    """
    chosen = catalog.find(row.addition) if row.addition else catalog.offender
    listed: list[Addition] = [chosen] if chosen else []
    multiplied = list(listed)

    parole = catalog.parole_violation if is_parole_violator else None
    if parole is not None:
        if policy is StackingPolicy.REPLACE:
            listed = [parole]
            multiplied = [parole]
        elif policy is StackingPolicy.DISPLAY_ONLY:
            listed.append(parole)
        else:
            listed.append(parole)
            multiplied.append(parole)

    return _unique_by_name(listed), _unique_by_name(multiplied)


def unresolved_result(row: SelectedCharge) -> ChargeResult:
    return ChargeResult(row=row, charge_details=None)


def evaluate_charge(
    row: SelectedCharge,
    table: LegalCodeTable | None,
    catalog: AdditionCatalog,
    is_parole_violator: bool,
    policy: StackingPolicy = StackingPolicy.MULTIPLY,
) -> ChargeResult:
    charge = table.get(row.charge_id) if table and row.charge_id else None
    if charge is None:
        logger.debug(f"Row {row.unique_id} has no resolvable charge ({row.charge_id!r})")
        return unresolved_result(row)

    key = resolve_lookup_key(row, charge)
    min_time, max_time = sentence_range(charge, key)
    points = class_points(charge, row.charge_class)

    listed, multiplied = applied_additions(row, catalog, is_parole_violator, policy)
    sentence_multiplier = prod(a.sentence_multiplier for a in multiplied)
    points_multiplier = prod(a.points_multiplier for a in multiplied)

    bail_auto, bail_cost = bail_terms(charge, row.category)

    return ChargeResult(
        row=row,
        charge_details=charge,
        original=SentenceFigures(min_time=min_time, max_time=max_time, points=points),
        modified=SentenceFigures(
            min_time=min_time * sentence_multiplier,
            max_time=max_time * sentence_multiplier,
            points=points * points_multiplier,
        ),
        applied_additions=listed,
        sentence_multiplier=sentence_multiplier,
        points_multiplier=points_multiplier,
        is_modified=sentence_multiplier != 1 or points_multiplier != 1,
        fine=fine_amount(charge, key),
        impound=offence_penalty(charge, charge.impound_by_offence, row.offense),
        suspension=offence_penalty(charge, charge.suspension_by_offence, row.offense),
        bail_auto=bail_auto,
        bail_cost=bail_cost,
    )
