import pytest

from arrest_calculator.core.rules import applied_additions, evaluate_charge, resolve_lookup_key
from arrest_calculator.core.types import (
    AdditionCatalog,
    BailAuto,
    BailTerms,
    CategoryDurations,
    CategoryFines,
    CategoryKey,
    Duration,
    FlatDuration,
    OffenceFines,
    OffenceKey,
    StackingPolicy,
)

from helpers import CATALOG, make_charge, make_row, make_table

DRUGS = {"1": "Cannabis", "2": "Cocaine"}


def make_drug_charge(**overrides):
    base = {
        "id": "303",
        "name": "Possession",
        "drug_categories": DRUGS,
        "min_time": CategoryDurations({"Cannabis": Duration(min=30), "Cocaine": Duration(days=1)}),
        "max_time": CategoryDurations({"Cannabis": Duration(hours=1), "Cocaine": Duration(days=2)}),
        "fine": CategoryFines({"Cannabis": 250.0, "Cocaine": 5000.0}),
        "impound_by_offence": {"1": 0.0, "2": 3.0},
        "suspension_by_offence": {"1": 0.0, "2": 5.0},
        "bail": BailTerms(
            auto_by_category={"Cannabis": BailAuto.ELIGIBLE, "Cocaine": BailAuto.DISCRETIONARY},
            cost_by_category={"Cannabis": 500.0, "Cocaine": 7500.0},
        ),
    }
    base.update(overrides)
    return make_charge(**base)


def test_single_charge_scenario():
    result = evaluate_charge(make_row(), make_table(make_charge()), CATALOG, False)

    assert result.unresolved is False
    assert result.original.min_time == 60
    assert result.original.max_time == 120
    assert result.modified.min_time == 60
    assert result.modified.max_time == 120
    assert result.modified.points == 5
    assert result.fine == 500
    assert result.bail_auto is BailAuto.ELIGIBLE
    assert result.bail_cost == 1000
    assert result.is_modified is False
    assert [a.name for a in result.applied_additions] == ["Offender"]


def test_inverted_range_is_clamped_to_min():
    charge = make_charge(
        min_time=FlatDuration(Duration(days=30)),
        max_time=FlatDuration(Duration(days=20)),
    )
    result = evaluate_charge(make_row(), make_table(charge), CATALOG, False)

    assert result.original.min_time == 30 * 1440
    assert result.original.max_time == result.original.min_time
    assert result.modified.max_time >= result.modified.min_time


def test_unknown_charge_is_unresolved():
    result = evaluate_charge(make_row(charge_id="999"), make_table(make_charge()), CATALOG, False)

    assert result.unresolved is True
    assert result.original.min_time == 0
    assert result.fine == 0
    assert result.bail_auto is None


def test_missing_table_treats_every_charge_as_unresolved():
    assert evaluate_charge(make_row(), None, CATALOG, False).unresolved is True
    assert evaluate_charge(make_row(charge_id=None), make_table(make_charge()), CATALOG, False).unresolved is True


def test_drug_charge_uses_category_for_time_and_fine_but_offence_for_impound():
    charge = make_drug_charge()
    row = make_row(charge_id="303", offense="2", category="Cannabis")
    result = evaluate_charge(row, make_table(charge), CATALOG, False)

    assert result.original.min_time == 30
    assert result.original.max_time == 60
    assert result.fine == 250
    assert result.impound == 3
    assert result.suspension == 5
    assert result.bail_auto is BailAuto.ELIGIBLE
    assert result.bail_cost == 500


def test_drug_charge_category_bail_is_discretionary():
    row = make_row(charge_id="303", category="Cocaine")
    result = evaluate_charge(row, make_table(make_drug_charge()), CATALOG, False)

    assert result.bail_auto is BailAuto.DISCRETIONARY
    assert result.bail_cost == 7500
    assert result.original.min_time == 1440


def test_drug_charge_without_category_contributes_no_time_or_fine():
    row = make_row(charge_id="303", category=None)
    result = evaluate_charge(row, make_table(make_drug_charge()), CATALOG, False)

    assert result.original.min_time == 0
    assert result.original.max_time == 0
    assert result.fine == 0
    assert result.bail_auto is None


def test_unlisted_category_degrades_to_zero():
    row = make_row(charge_id="303", category="Heroin")
    result = evaluate_charge(row, make_table(make_drug_charge()), CATALOG, False)

    assert result.original.min_time == 0
    assert result.fine == 0


def test_lookup_key_prefers_category_for_drug_charges():
    assert resolve_lookup_key(make_row(category="Cannabis"), make_drug_charge()) == CategoryKey("Cannabis")
    assert resolve_lookup_key(make_row(category="Cannabis"), make_charge()) == OffenceKey("1")
    assert resolve_lookup_key(make_row(offense=None), make_charge()) == OffenceKey("1")


def test_illegal_class_gives_zero_points():
    charge = make_charge(class_flags={"A": False, "B": True, "C": False}, points_by_class={"A": 5.0, "B": 3.0})
    table = make_table(charge)

    assert evaluate_charge(make_row(charge_class="A"), table, CATALOG, False).original.points == 0
    assert evaluate_charge(make_row(charge_class="B"), table, CATALOG, False).original.points == 3
    assert evaluate_charge(make_row(charge_class=None), table, CATALOG, False).original.points == 0


def test_illegal_offence_gives_zero_time_fine_and_impound():
    charge = make_charge(
        offence_flags={"1": True, "2": False, "3": False, "4": False, "5": False},
        fine=OffenceFines({"2": 1000.0}),
        impound_by_offence={"2": 14.0},
    )
    result = evaluate_charge(make_row(offense="2"), make_table(charge), CATALOG, False)

    assert result.original.min_time == 0
    assert result.fine == 0
    assert result.impound == 0


def test_fine_by_offence_count():
    charge = make_charge(fine=OffenceFines({"1": 500.0, "2": 1000.0}))
    result = evaluate_charge(make_row(offense="2"), make_table(charge), CATALOG, False)
    assert result.fine == 1000


def test_non_bailable_charge_has_no_bail_cost():
    charge = make_charge(bail=BailTerms(auto=BailAuto.NOT_ELIGIBLE, cost=50000.0))
    result = evaluate_charge(make_row(), make_table(charge), CATALOG, False)

    assert result.bail_auto is BailAuto.NOT_ELIGIBLE
    assert result.bail_cost == 0


def test_attempt_addition_scales_sentence_and_points():
    result = evaluate_charge(make_row(addition="Attempt"), make_table(make_charge()), CATALOG, False)

    assert result.modified.min_time == 30
    assert result.modified.max_time == 60
    assert result.modified.points == pytest.approx(2.5)
    assert result.original.points == 5
    assert result.is_modified is True


def test_unset_addition_defaults_to_offender():
    result = evaluate_charge(make_row(addition=None), make_table(make_charge()), CATALOG, False)

    assert [a.name for a in result.applied_additions] == ["Offender"]
    assert result.is_modified is False


def test_offender_default_when_catalog_lacks_it():
    result = evaluate_charge(make_row(addition=None), make_table(make_charge()), AdditionCatalog(), False)

    assert [a.name for a in result.applied_additions] == ["Offender"]
    assert result.sentence_multiplier == 1


def test_unknown_addition_is_identity():
    result = evaluate_charge(make_row(addition="Mastermind"), make_table(make_charge()), CATALOG, False)

    assert result.applied_additions == ()
    assert result.modified.min_time == 60
    assert result.is_modified is False


def test_parole_violation_multiplies_by_default():
    row = make_row(addition="Attempt")
    result = evaluate_charge(row, make_table(make_charge()), CATALOG, True)

    assert [a.name for a in result.applied_additions] == ["Attempt", "Parole Violation"]
    assert result.sentence_multiplier == pytest.approx(0.75)
    assert result.points_multiplier == pytest.approx(1.0)
    assert result.modified.min_time == pytest.approx(45)
    assert result.is_modified is True


def test_parole_violation_replace_policy():
    row = make_row(addition="Attempt")
    result = evaluate_charge(row, make_table(make_charge()), CATALOG, True, StackingPolicy.REPLACE)

    assert [a.name for a in result.applied_additions] == ["Parole Violation"]
    assert result.sentence_multiplier == pytest.approx(1.5)
    assert result.modified.max_time == pytest.approx(180)


def test_parole_violation_display_only_policy():
    row = make_row(addition="Attempt")
    result = evaluate_charge(row, make_table(make_charge()), CATALOG, True, StackingPolicy.DISPLAY_ONLY)

    assert [a.name for a in result.applied_additions] == ["Attempt", "Parole Violation"]
    assert result.sentence_multiplier == pytest.approx(0.5)
    assert result.modified.min_time == pytest.approx(30)


def test_parole_addition_is_not_duplicated():
    listed, multiplied = applied_additions(make_row(addition="Parole Violation"), CATALOG, True)

    assert [a.name for a in listed] == ["Parole Violation"]
    assert [a.name for a in multiplied] == ["Parole Violation"]


def test_parole_flag_without_catalog_entry_is_ignored():
    catalog = AdditionCatalog(additions=CATALOG.additions, parole_violation_name="Missing")
    result = evaluate_charge(make_row(), make_table(make_charge()), catalog, True)

    assert [a.name for a in result.applied_additions] == ["Offender"]
    assert result.is_modified is False
