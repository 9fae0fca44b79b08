"""FastAPI entrypoint for the arrest calculator."""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException

from arrest_calculator.api.schemas import (
    AdditionOut,
    AdditionsResponse,
    ArrestCalculationRequest,
    ArrestCalculationResponse,
    CalculationTotalsOut,
    ChargeDetailsOut,
    ChargeResultOut,
    DurationOut,
    PenaltyTotalsOut,
    SelectedChargeOut,
    SentenceDisplayOut,
    SentenceFiguresOut,
    StipulationOut,
)
from arrest_calculator.config import Settings, get_settings
from arrest_calculator.core.calculator import calculate_arrest
from arrest_calculator.core.formatting import split_minutes
from arrest_calculator.core.types import (
    Addition,
    AdditionCatalog,
    ArrestCalculation,
    ChargeResult,
    LegalCodeTable,
    PenaltyTotals,
    SelectedCharge,
)
from arrest_calculator.data.legal_code import (
    LegalCodeError,
    load_additions,
    load_legal_code,
    selectable_additions,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Arrest Calculator API", version="0.1.0")


@lru_cache
def get_legal_code() -> LegalCodeTable:
    return load_legal_code(get_settings())


@lru_cache
def get_addition_catalog() -> AdditionCatalog:
    return load_additions(get_settings())


def legal_code_dependency() -> LegalCodeTable:
    try:
        return get_legal_code()
    except LegalCodeError as exc:
        logger.error(f"Legal code unavailable: {exc}")
        raise HTTPException(status_code=503, detail="Legal code is currently unavailable") from exc


def additions_dependency() -> AdditionCatalog:
    try:
        return get_addition_catalog()
    except LegalCodeError as exc:
        logger.error(f"Additions unavailable: {exc}")
        raise HTTPException(status_code=503, detail="Additions are currently unavailable") from exc


def to_selected_charges(req: ArrestCalculationRequest) -> list[SelectedCharge]:
    return [
        SelectedCharge(
            unique_id=row.unique_id,
            charge_id=row.charge_id,
            charge_class=row.charge_class,
            offense=row.offense,
            addition=row.addition,
            category=row.category,
        )
        for row in req.report
    ]


def to_duration_out(minutes: float) -> DurationOut:
    duration = split_minutes(minutes)
    return DurationOut(days=duration.days, hours=duration.hours, min=duration.min)


def to_addition_out(addition: Addition) -> AdditionOut:
    return AdditionOut(
        name=addition.name,
        sentence_multiplier=addition.sentence_multiplier,
        points_multiplier=addition.points_multiplier,
    )


def to_penalty_totals_out(totals: PenaltyTotals) -> PenaltyTotalsOut:
    return PenaltyTotalsOut(
        min_time=totals.min_time,
        max_time=totals.max_time,
        points=totals.points,
        impound=totals.impound,
        suspension=totals.suspension,
    )


def to_charge_result_out(result: ChargeResult) -> ChargeResultOut:
    row = result.row
    charge = result.charge_details
    return ChargeResultOut(
        row=SelectedChargeOut(
            unique_id=row.unique_id,
            charge_id=row.charge_id,
            charge_class=row.charge_class,
            offense=row.offense,
            addition=row.addition,
            category=row.category,
        ),
        charge_details=ChargeDetailsOut(
            id=charge.id,
            name=charge.name,
            type=charge.type.value,
            definition=charge.definition,
            drug_categories=charge.drug_categories,
            stipulation_text=charge.stipulation_text,
            code_enhancement=charge.code_enhancement,
        ),
        original=SentenceFiguresOut(
            min_time=result.original.min_time,
            max_time=result.original.max_time,
            points=result.original.points,
        ),
        modified=SentenceFiguresOut(
            min_time=result.modified.min_time,
            max_time=result.modified.max_time,
            points=result.modified.points,
        ),
        applied_additions=[to_addition_out(a) for a in result.applied_additions],
        sentence_multiplier=result.sentence_multiplier,
        points_multiplier=result.points_multiplier,
        is_modified=result.is_modified,
        fine=result.fine,
        impound=result.impound,
        suspension=result.suspension,
        bail_auto=result.bail_auto.value if result.bail_auto is not None else None,
        bail_cost=result.bail_cost,
        display=SentenceDisplayOut(
            original_min_time=to_duration_out(result.original.min_time),
            original_max_time=to_duration_out(result.original.max_time),
            modified_min_time=to_duration_out(result.modified.min_time),
            modified_max_time=to_duration_out(result.modified.max_time),
        ),
    )


def to_response_payload(result: ArrestCalculation) -> ArrestCalculationResponse:
    totals = result.totals
    return ArrestCalculationResponse(
        calculation_results=[to_charge_result_out(r) for r in result.calculation_results],
        extras=[StipulationOut(title=e.title, extra=e.extra) for e in result.extras],
        totals=CalculationTotalsOut(
            original=to_penalty_totals_out(totals.original),
            modified=to_penalty_totals_out(totals.modified),
            fine=totals.fine,
            total_bail_cost=totals.total_bail_cost,
            highest_bail=totals.highest_bail,
        ),
        min_time_capped=result.min_time_capped,
        max_time_capped=result.max_time_capped,
        is_capped=result.is_capped,
        impound_capped=result.impound_capped,
        is_impound_capped=result.is_impound_capped,
        suspension_capped=result.suspension_capped,
        is_suspension_capped=result.is_suspension_capped,
        bail_status=result.bail_status,
        is_streets_eligible=result.is_streets_eligible,
        unresolved=list(result.unresolved),
        warnings=list(result.warnings),
    )


def calculate_from_request(
    req: ArrestCalculationRequest,
    table: LegalCodeTable,
    catalog: AdditionCatalog,
    settings: Settings,
) -> ArrestCalculationResponse:
    result = calculate_arrest(
        to_selected_charges(req),
        req.is_parole_violator,
        table,
        catalog,
        settings.limits(),
        policy=settings.parole_stacking_policy,
    )
    return to_response_payload(result)


@app.get("/v1/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/v1/arrest_calculator", response_model=ArrestCalculationResponse)
def arrest_calculator_endpoint(
    req: ArrestCalculationRequest,
    table: LegalCodeTable = Depends(legal_code_dependency),
    catalog: AdditionCatalog = Depends(additions_dependency),
    settings: Settings = Depends(get_settings),
) -> ArrestCalculationResponse:
    return calculate_from_request(req, table, catalog, settings)


@app.get("/v1/additions", response_model=AdditionsResponse)
def additions_endpoint(catalog: AdditionCatalog = Depends(additions_dependency)) -> AdditionsResponse:
    parole = catalog.parole_violation
    return AdditionsResponse(
        additions=[to_addition_out(a) for a in selectable_additions(catalog)],
        parole_violation=to_addition_out(parole) if parole else None,
    )
