"""STREETS code-enhancement eligibility."""

from __future__ import annotations

from collections.abc import Sequence

from .types import ChargeDefinition, SelectedCharge

STREETS_ENHANCEMENT = "STREETS"


def has_enough_count(row: SelectedCharge, charge: ChargeDefinition) -> bool:
    if not charge.code_enhancement_count:
        return True
    if not row.offense or not row.offense.isdigit():
        return False
    return int(row.offense) >= charge.code_enhancement_count


def is_streets_eligible(
    charges: Sequence[SelectedCharge],
    details: Sequence[ChargeDefinition | None],
) -> bool:
    return any(
        charge is not None
        and charge.code_enhancement == STREETS_ENHANCEMENT
        and has_enough_count(row, charge)
        for row, charge in zip(charges, details)
    )
