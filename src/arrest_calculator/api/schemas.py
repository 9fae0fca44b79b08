"""Pydantic API schemas."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

BailStatus = Literal["N/A", "NOT ELIGIBLE", "DISCRETIONARY", "ELIGIBLE"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SelectedChargeIn(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    unique_id: int
    charge_id: str | None = None
    charge_class: str | None = Field(default=None, alias="class")
    offense: str | None = None
    addition: str | None = None
    category: str | None = None

    @field_validator("charge_id", "charge_class", "offense", "addition", "category", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            value = str(int(value)) if float(value).is_integer() else str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ArrestCalculationRequest(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    report: list[SelectedChargeIn]
    is_parole_violator: bool = False


class DurationOut(BaseModel):
    days: int
    hours: int
    min: int


class SentenceFiguresOut(CamelModel):
    min_time: float
    max_time: float
    points: float


class SentenceDisplayOut(CamelModel):
    original_min_time: DurationOut
    original_max_time: DurationOut
    modified_min_time: DurationOut
    modified_max_time: DurationOut


class AdditionOut(CamelModel):
    name: str
    sentence_multiplier: float
    points_multiplier: float


class ChargeDetailsOut(CamelModel):
    id: str
    name: str
    type: str
    definition: str | None = None
    drug_categories: dict[str, str] | None = None
    stipulation_text: str | None = None
    code_enhancement: str | None = None


class SelectedChargeOut(CamelModel):
    unique_id: int
    charge_id: str | None
    charge_class: str | None = Field(alias="class")
    offense: str | None
    addition: str | None
    category: str | None


class ChargeResultOut(CamelModel):
    row: SelectedChargeOut
    charge_details: ChargeDetailsOut
    original: SentenceFiguresOut
    modified: SentenceFiguresOut
    applied_additions: list[AdditionOut]
    sentence_multiplier: float
    points_multiplier: float
    is_modified: bool
    fine: float
    impound: float
    suspension: float
    bail_auto: bool | int | None
    bail_cost: float
    display: SentenceDisplayOut


class PenaltyTotalsOut(CamelModel):
    min_time: float
    max_time: float
    points: float
    impound: float
    suspension: float


class CalculationTotalsOut(CamelModel):
    original: PenaltyTotalsOut
    modified: PenaltyTotalsOut
    fine: float
    total_bail_cost: float
    highest_bail: float


class StipulationOut(BaseModel):
    title: str
    extra: str


class ArrestCalculationResponse(CamelModel):
    calculation_results: list[ChargeResultOut]
    extras: list[StipulationOut]
    totals: CalculationTotalsOut
    min_time_capped: float
    max_time_capped: float
    is_capped: bool
    impound_capped: float
    is_impound_capped: bool
    suspension_capped: float
    is_suspension_capped: bool
    bail_status: BailStatus
    is_streets_eligible: bool
    unresolved: list[int] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class AdditionsResponse(CamelModel):
    additions: list[AdditionOut]
    parole_violation: AdditionOut | None = None
