"""Report-level totals, statutory caps and bail classification."""

from __future__ import annotations

from collections.abc import Iterable

from .types import (
    BailAuto,
    BailStatus,
    CalculationTotals,
    ChargeResult,
    Limits,
    PenaltyTotals,
    ReportAggregate,
)


def bail_status(results: Iterable[ChargeResult]) -> BailStatus:
    """First matching rule wins: one non-bailable charge makes the whole report non-bailable."""
    statuses = {r.bail_auto for r in results if not r.unresolved}

    if BailAuto.NOT_ELIGIBLE in statuses:
        return "NOT ELIGIBLE"
    if BailAuto.DISCRETIONARY in statuses:
        return "DISCRETIONARY"
    if BailAuto.ELIGIBLE in statuses:
        return "ELIGIBLE"
    return "N/A"


def cap(total: float, limit: float) -> tuple[float, bool]:
    return min(total, limit), total > limit


def sum_totals(results: Iterable[ChargeResult]) -> CalculationTotals:
    original = {"min_time": 0.0, "max_time": 0.0, "points": 0.0, "impound": 0.0, "suspension": 0.0}
    modified = dict(original)
    fine = 0.0
    total_bail_cost = 0.0
    highest_bail = 0.0

    for result in results:
        if result.unresolved:
            continue

        original["min_time"] += result.original.min_time
        original["max_time"] += result.original.max_time
        original["points"] += result.original.points
        original["impound"] += result.impound
        original["suspension"] += result.suspension

        modified["min_time"] += result.modified.min_time
        modified["max_time"] += result.modified.max_time
        modified["points"] += result.modified.points
        modified["impound"] += result.impound * result.sentence_multiplier
        modified["suspension"] += result.suspension * result.sentence_multiplier

        fine += result.fine

        if result.bail_auto is not BailAuto.NOT_ELIGIBLE:
            total_bail_cost += result.bail_cost
            highest_bail = max(highest_bail, result.bail_cost)

    return CalculationTotals(
        original=PenaltyTotals(**original),
        modified=PenaltyTotals(**modified),
        fine=fine,
        total_bail_cost=total_bail_cost,
        highest_bail=highest_bail,
    )


def aggregate(results: list[ChargeResult], limits: Limits) -> ReportAggregate:
    totals = sum_totals(results)
    modified = totals.modified

    min_time_capped, min_over = cap(modified.min_time, limits.max_sentence_minutes)
    max_time_capped, max_over = cap(modified.max_time, limits.max_sentence_minutes)
    impound_capped, is_impound_capped = cap(modified.impound, limits.max_impound_days)
    suspension_capped, is_suspension_capped = cap(modified.suspension, limits.max_suspension_days)

    return ReportAggregate(
        totals=totals,
        min_time_capped=min_time_capped,
        max_time_capped=max_time_capped,
        is_capped=min_over or max_over,
        impound_capped=impound_capped,
        is_impound_capped=is_impound_capped,
        suspension_capped=suspension_capped,
        is_suspension_capped=is_suspension_capped,
        bail_status=bail_status(results),
    )
