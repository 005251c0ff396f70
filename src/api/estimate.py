"""Refund estimate API endpoints.

Request and response bodies use the wizard's camelCase field names. Requests
are mapped onto the engine's frozen records, validated field by field, and
computed synchronously; nothing is stored.
"""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from src.core.logging import get_logger, tax_year_ctx
from src.estimator import (
    CalculationResult,
    CalculatorInput,
    DegreeType,
    Form106Entry,
    InputValidationError,
    QuestionnaireAnswers,
    ResidencyAnswer,
    YesNo,
    calculate,
    ensure_valid,
)
from src.estimator.messages import CONFIDENCE_LABELS, DISCLAIMER
from src.estimator.questions import select_questions
from src.tax.year_config import (
    TAX_YEAR_PARAMETERS,
    UnsupportedTaxYearError,
    YearParameters,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["estimate"])


class CamelModel(BaseModel):
    """Base model accepting both camelCase aliases and field names."""

    model_config = ConfigDict(populate_by_name=True)


class Form106Payload(CamelModel):
    """One Form 106 as entered in the wizard."""

    taxable_income: Decimal = Field(alias="taxableIncome")
    income_tax_withheld: Decimal = Field(alias="incomeTaxWithheld")
    credit_points_granted: Decimal = Field(
        default=Decimal("0"), alias="creditPointsGranted"
    )
    has_complexity_flags: bool = Field(default=False, alias="hasComplexityFlags")


class QuestionnairePayload(CamelModel):
    """Optional refinement answers; omitted fields mean "not stated"."""

    is_israeli_resident_full_year: ResidencyAnswer | None = Field(
        default=None, alias="isIsraeliResidentFullYear"
    )
    gender_for_credit: YesNo | None = Field(default=None, alias="genderForCredit")
    children_birth_years: list[int] | None = Field(
        default=None, alias="childrenBirthYears"
    )
    degree_type: DegreeType | None = Field(default=None, alias="degreeType")
    graduation_year: int | None = Field(default=None, alias="graduationYear")
    lived_12_months_consecutive: bool | None = Field(
        default=None, alias="lived12MonthsConsecutive"
    )
    donations_46_total: Decimal | None = Field(default=None, alias="donations46Total")
    has_additional_income_not_in_106: bool | None = Field(
        default=None, alias="hasAdditionalIncomeNotIn106"
    )


class EstimateRequest(CamelModel):
    """Payload for a refund estimate."""

    year: int
    forms: list[Form106Payload]
    questionnaire: QuestionnairePayload | None = None


class TotalsResponse(CamelModel):
    """Aggregated totals."""

    taxable_income_total: float = Field(alias="taxableIncomeTotal")
    withheld_total: float = Field(alias="withheldTotal")
    gross_tax: float = Field(alias="grossTax")
    credit_points_value: float = Field(alias="creditPointsValue")
    liability: float


class BreakdownItemResponse(CamelModel):
    """Single breakdown line."""

    key: str
    title: str
    amount: float
    explanation: str


class EstimateResponse(CamelModel):
    """Refund estimate result."""

    result_summary: str = Field(alias="resultSummary")
    refund_estimate: float = Field(alias="refundEstimate")
    underpayment_estimate: float = Field(alias="underpaymentEstimate")
    totals: TotalsResponse
    breakdown_items: list[BreakdownItemResponse] = Field(
        alias="breakdownItems"
    )
    assumptions: list[str]
    warnings: list[str]
    confidence: str
    confidence_label: str = Field(alias="confidenceLabel")
    disclaimer: str


class TaxBracketResponse(CamelModel):
    """Bracket band; upperLimit is null for the top band."""

    upper_limit: float | None = Field(alias="upperLimit")
    rate: float


class TaxYearResponse(CamelModel):
    """Published parameters for one tax year."""

    year: int
    brackets: list[TaxBracketResponse]
    surtax_threshold: float = Field(alias="surtaxThreshold")
    surtax_rate: float = Field(alias="surtaxRate")
    credit_point_value_annual: float = Field(
        alias="creditPointValueAnnual"
    )


class TaxYearListResponse(CamelModel):
    """All supported tax years."""

    items: list[TaxYearResponse]


class QuestionsRequest(CamelModel):
    """Forms entered so far, used to adapt the questionnaire wording."""

    forms: list[Form106Payload]


class QuestionResponse(CamelModel):
    """Single questionnaire prompt."""

    key: str
    label: str
    optional: bool


class QuestionListResponse(CamelModel):
    """Questionnaire prompts in display order."""

    items: list[QuestionResponse]


def _to_form_entries(forms: list[Form106Payload]) -> tuple[Form106Entry, ...]:
    """Map wizard form payloads onto engine entries."""
    return tuple(
        Form106Entry(
            taxable_income=form.taxable_income,
            income_tax_withheld=form.income_tax_withheld,
            credit_points_granted=form.credit_points_granted,
            has_complexity_flags=form.has_complexity_flags,
        )
        for form in forms
    )


def _to_calculator_input(payload: EstimateRequest) -> CalculatorInput:
    """Map the request body onto the engine's input record.

    An empty questionnaire object is treated as no questionnaire at all.
    """
    questionnaire = None
    if payload.questionnaire is not None and payload.questionnaire.model_fields_set:
        answers = payload.questionnaire
        questionnaire = QuestionnaireAnswers(
            is_israeli_resident_full_year=answers.is_israeli_resident_full_year,
            gender_for_credit=answers.gender_for_credit,
            children_birth_years=(
                tuple(answers.children_birth_years)
                if answers.children_birth_years is not None
                else None
            ),
            degree_type=answers.degree_type,
            graduation_year=answers.graduation_year,
            lived_12_months_consecutive=answers.lived_12_months_consecutive,
            donations_46_total=answers.donations_46_total,
            has_additional_income_not_in_106=answers.has_additional_income_not_in_106,
        )

    return CalculatorInput(
        year=payload.year,
        forms=_to_form_entries(payload.forms),
        questionnaire=questionnaire,
    )


def _to_estimate_response(result: CalculationResult) -> EstimateResponse:
    """Map the engine result to the response model."""
    totals = result.totals
    return EstimateResponse(
        result_summary=result.result_summary,
        refund_estimate=float(result.refund_estimate),
        underpayment_estimate=float(result.underpayment_estimate),
        totals=TotalsResponse(
            taxable_income_total=float(totals.taxable_income_total),
            withheld_total=float(totals.withheld_total),
            gross_tax=float(totals.gross_tax),
            credit_points_value=float(totals.credit_points_value),
            liability=float(totals.liability),
        ),
        breakdown_items=[
            BreakdownItemResponse(
                key=item.key,
                title=item.title,
                amount=float(item.amount),
                explanation=item.explanation,
            )
            for item in result.breakdown_items
        ],
        assumptions=list(result.assumptions),
        warnings=list(result.warnings),
        confidence=result.confidence.value,
        confidence_label=CONFIDENCE_LABELS[result.confidence],
        disclaimer=DISCLAIMER,
    )


def _to_tax_year_response(params: YearParameters, year: int) -> TaxYearResponse:
    """Map year parameters to the response model."""
    return TaxYearResponse(
        year=year,
        brackets=[
            TaxBracketResponse(
                upper_limit=(
                    float(bracket.upper_limit)
                    if bracket.upper_limit is not None
                    else None
                ),
                rate=float(bracket.rate),
            )
            for bracket in params.brackets
        ],
        surtax_threshold=float(params.surtax_threshold),
        surtax_rate=float(params.surtax_rate),
        credit_point_value_annual=float(params.credit_point_value_annual),
    )


@router.get("/tax-years", response_model=TaxYearListResponse)
async def list_tax_years() -> TaxYearListResponse:
    """List supported tax years and their parameters."""
    return TaxYearListResponse(
        items=[
            _to_tax_year_response(params, year)
            for year, params in sorted(TAX_YEAR_PARAMETERS.items())
        ]
    )


@router.post("/questions", response_model=QuestionListResponse)
async def list_questions(payload: QuestionsRequest) -> QuestionListResponse:
    """Questionnaire prompts adapted to the forms entered so far."""
    questions = select_questions(_to_form_entries(payload.forms))
    return QuestionListResponse(
        items=[
            QuestionResponse(key=q.key, label=q.label, optional=q.optional)
            for q in questions
        ]
    )


@router.post("/estimate", response_model=EstimateResponse)
async def create_estimate(payload: EstimateRequest) -> EstimateResponse:
    """Estimate the refund or underpayment for the submitted forms."""
    tax_year_ctx.set(payload.year)
    data = _to_calculator_input(payload)

    try:
        ensure_valid(data)
        result = calculate(data)
    except InputValidationError as exc:
        logger.info("estimate_rejected", fields=sorted(exc.errors))
        raise HTTPException(
            status_code=422,
            detail={"errors": exc.errors},
        ) from exc
    except UnsupportedTaxYearError as exc:
        raise HTTPException(
            status_code=422,
            detail={"errors": {"year": str(exc)}, "availableYears": exc.available},
        ) from exc

    logger.info(
        "estimate_completed",
        form_count=len(data.forms),
        confidence=result.confidence.value,
    )
    return _to_estimate_response(result)
