from arrest_calculator.core.types import (
    Addition,
    AdditionCatalog,
    BailAuto,
    BailTerms,
    ChargeDefinition,
    ChargeType,
    Duration,
    FlatDuration,
    Limits,
    OffenceFines,
    SelectedCharge,
)

CATALOG = AdditionCatalog(
    additions=(
        Addition("Offender", 1.0, 1.0),
        Addition("Attempt", 0.5, 0.5),
        Addition("Accomplice", 1.0, 1.0),
        Addition("Parole Violation", 1.5, 2.0),
    ),
    parole_violation_name="Parole Violation",
)

LIMITS = Limits(max_sentence_days=365, max_impound_days=30, max_suspension_days=60)


def make_charge(**overrides):
    base = {
        "id": "101",
        "name": "Assault",
        "type": ChargeType.MISDEMEANOR,
        "min_time": FlatDuration(Duration(hours=1)),
        "max_time": FlatDuration(Duration(hours=2)),
        "points_by_class": {"A": 5.0},
        "fine": OffenceFines({"1": 500.0}),
        "bail": BailTerms(auto=BailAuto.ELIGIBLE, cost=1000.0),
    }
    base.update(overrides)
    return ChargeDefinition(**base)


def make_row(**overrides):
    base = {
        "unique_id": 1,
        "charge_id": "101",
        "charge_class": "A",
        "offense": "1",
        "addition": "Offender",
        "category": None,
    }
    base.update(overrides)
    return SelectedCharge(**base)


def make_table(*charges):
    return {charge.id: charge for charge in charges}
