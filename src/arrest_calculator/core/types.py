"""Core types shared by the evaluator, aggregator and API."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

BailStatus = Literal["N/A", "NOT ELIGIBLE", "DISCRETIONARY", "ELIGIBLE"]

OFFENCE_COUNTS: tuple[str, ...] = ("1", "2", "3", "4", "5")
CHARGE_CLASSES: tuple[str, ...] = ("A", "B", "C")
DEFAULT_OFFENCE = "1"
MINUTES_PER_DAY = 1440


class ChargeType(str, Enum):
    FELONY = "F"
    MISDEMEANOR = "M"
    INFRACTION = "I"
    UNKNOWN = "?"


class BailAuto(Enum):
    """Automatic bail eligibility as published in the legal code (false / true / 2)."""

    NOT_ELIGIBLE = False
    ELIGIBLE = True
    DISCRETIONARY = 2


class StackingPolicy(str, Enum):
    """How the parole-violation addition combines with the row's own addition."""

    MULTIPLY = "multiply"
    REPLACE = "replace"
    DISPLAY_ONLY = "display_only"


@dataclass(frozen=True, slots=True)
class Duration:
    days: float = 0
    hours: float = 0
    min: float = 0

    @property
    def minutes(self) -> float:
        return self.days * MINUTES_PER_DAY + self.hours * 60 + self.min


ZERO_DURATION = Duration()


@dataclass(frozen=True, slots=True)
class OffenceKey:
    offence: str


@dataclass(frozen=True, slots=True)
class CategoryKey:
    category: str


LookupKey = OffenceKey | CategoryKey


@dataclass(frozen=True, slots=True)
class FlatDuration:
    """A single duration shared by every offence count and category."""

    duration: Duration = ZERO_DURATION

    def resolve(self, key: LookupKey) -> Duration:
        return self.duration


@dataclass(frozen=True, slots=True)
class CategoryDurations:
    """Durations keyed by drug category."""

    durations: dict[str, Duration] = field(default_factory=dict)

    def resolve(self, key: LookupKey) -> Duration:
        if isinstance(key, CategoryKey):
            return self.durations.get(key.category, ZERO_DURATION)
        return ZERO_DURATION


DurationField = FlatDuration | CategoryDurations


@dataclass(frozen=True, slots=True)
class OffenceFines:
    amounts: dict[str, float] = field(default_factory=dict)

    def resolve(self, key: LookupKey) -> float:
        if isinstance(key, OffenceKey):
            return self.amounts.get(key.offence, 0.0)
        return 0.0


@dataclass(frozen=True, slots=True)
class CategoryFines:
    amounts: dict[str, float] = field(default_factory=dict)

    def resolve(self, key: LookupKey) -> float:
        if isinstance(key, CategoryKey):
            return self.amounts.get(key.category, 0.0)
        return 0.0


FineField = OffenceFines | CategoryFines


@dataclass(frozen=True, slots=True)
class BailTerms:
    """Bail terms for a charge.

    ``auto``/``cost`` hold the scalar variants; the ``*_by_category`` maps are
    set instead when the legal code publishes per-drug-category bail.
    """

    auto: BailAuto | None = None
    cost: float = 0.0
    auto_by_category: dict[str, BailAuto | None] | None = None
    cost_by_category: dict[str, float] | None = None


@dataclass(frozen=True, slots=True)
class ChargeDefinition:
    id: str
    name: str
    type: ChargeType = ChargeType.UNKNOWN
    class_flags: dict[str, bool] = field(default_factory=lambda: dict.fromkeys(CHARGE_CLASSES, True))
    offence_flags: dict[str, bool] = field(default_factory=lambda: dict.fromkeys(OFFENCE_COUNTS, True))
    min_time: DurationField = field(default_factory=FlatDuration)
    max_time: DurationField = field(default_factory=FlatDuration)
    points_by_class: dict[str, float] = field(default_factory=dict)
    fine: FineField = field(default_factory=OffenceFines)
    impound_by_offence: dict[str, float] = field(default_factory=dict)
    suspension_by_offence: dict[str, float] = field(default_factory=dict)
    bail: BailTerms = field(default_factory=BailTerms)
    drug_categories: dict[str, str] | None = None  # index -> label
    stipulation_text: str | None = None
    definition: str | None = None
    code_enhancement: str | None = None
    code_enhancement_count: int | None = None

    @property
    def is_drug_charge(self) -> bool:
        return bool(self.drug_categories)

    def allows_class(self, charge_class: str | None) -> bool:
        return bool(charge_class) and self.class_flags.get(charge_class, False)

    def allows_offence(self, offence: str | None) -> bool:
        return bool(offence) and self.offence_flags.get(offence, False)

    def allows_category(self, category: str | None) -> bool:
        return bool(category) and category in (self.drug_categories or {}).values()


LegalCodeTable = dict[str, ChargeDefinition]


@dataclass(frozen=True, slots=True)
class Addition:
    name: str
    sentence_multiplier: float = 1.0
    points_multiplier: float = 1.0

    @property
    def is_identity(self) -> bool:
        return self.sentence_multiplier == 1 and self.points_multiplier == 1


OFFENDER = Addition(name="Offender")


@dataclass(frozen=True, slots=True)
class AdditionCatalog:
    additions: tuple[Addition, ...] = ()
    parole_violation_name: str = "Parole Violation"

    def find(self, name: str | None) -> Addition | None:
        if not name:
            return None
        for addition in self.additions:
            if addition.name == name:
                return addition
        return None

    @property
    def parole_violation(self) -> Addition | None:
        return self.find(self.parole_violation_name)

    @property
    def offender(self) -> Addition:
        return self.find(OFFENDER.name) or OFFENDER


@dataclass(frozen=True, slots=True)
class SelectedCharge:
    unique_id: int
    charge_id: str | None = None
    charge_class: str | None = None
    offense: str | None = None
    addition: str | None = None
    category: str | None = None


@dataclass(frozen=True, slots=True)
class SentenceFigures:
    min_time: float = 0.0
    max_time: float = 0.0
    points: float = 0.0


@dataclass(frozen=True, slots=True)
class ChargeResult:
    row: SelectedCharge
    charge_details: ChargeDefinition | None
    original: SentenceFigures = SentenceFigures()
    modified: SentenceFigures = SentenceFigures()
    applied_additions: tuple[Addition, ...] = ()
    sentence_multiplier: float = 1.0
    points_multiplier: float = 1.0
    is_modified: bool = False
    fine: float = 0.0
    impound: float = 0.0
    suspension: float = 0.0
    bail_auto: BailAuto | None = None
    bail_cost: float = 0.0

    @property
    def unresolved(self) -> bool:
        return self.charge_details is None


@dataclass(frozen=True, slots=True)
class Limits:
    max_sentence_days: float
    max_impound_days: float
    max_suspension_days: float

    @property
    def max_sentence_minutes(self) -> float:
        return self.max_sentence_days * MINUTES_PER_DAY


@dataclass(frozen=True, slots=True)
class PenaltyTotals:
    min_time: float = 0.0
    max_time: float = 0.0
    points: float = 0.0
    impound: float = 0.0
    suspension: float = 0.0


@dataclass(frozen=True, slots=True)
class CalculationTotals:
    original: PenaltyTotals = PenaltyTotals()
    modified: PenaltyTotals = PenaltyTotals()
    fine: float = 0.0
    total_bail_cost: float = 0.0
    highest_bail: float = 0.0


@dataclass(frozen=True, slots=True)
class ReportAggregate:
    totals: CalculationTotals
    min_time_capped: float
    max_time_capped: float
    is_capped: bool
    impound_capped: float
    is_impound_capped: bool
    suspension_capped: float
    is_suspension_capped: bool
    bail_status: BailStatus


@dataclass(frozen=True, slots=True)
class Stipulation:
    title: str
    extra: str


@dataclass(frozen=True, slots=True)
class ArrestCalculation:
    calculation_results: tuple[ChargeResult, ...]
    extras: tuple[Stipulation, ...]
    totals: CalculationTotals
    min_time_capped: float
    max_time_capped: float
    is_capped: bool
    impound_capped: float
    is_impound_capped: bool
    suspension_capped: float
    is_suspension_capped: bool
    bail_status: BailStatus
    is_streets_eligible: bool
    unresolved: tuple[int, ...] = ()
    warnings: tuple[str, ...] = ()
