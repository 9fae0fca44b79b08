"""Free-text statutory notes ("extras") attached to charges."""

from __future__ import annotations

from collections.abc import Iterable

from .types import DEFAULT_OFFENCE, ChargeResult, Stipulation

NO_STIPULATION = "N/A"


def stipulation_title(result: ChargeResult) -> str:
    charge = result.charge_details
    row = result.row
    title = f"{charge.type.value}{row.charge_class or ''} {charge.id}. {charge.name}"

    if charge.is_drug_charge and row.category:
        return f"{title} (Category {row.category})"
    offence = row.offense or DEFAULT_OFFENCE
    if offence != DEFAULT_OFFENCE:
        return f"{title} (Offence #{offence})"
    return title


def extract_stipulations(results: Iterable[ChargeResult]) -> tuple[Stipulation, ...]:
    extras: list[Stipulation] = []
    for result in results:
        if result.unresolved:
            continue
        text = result.charge_details.stipulation_text
        if not text or text == NO_STIPULATION:
            continue
        extras.append(Stipulation(title=stipulation_title(result), extra=text))
    return tuple(extras)
