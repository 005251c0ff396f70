"""Refund estimate calculation for Form 106 wage earners.

This module provides pure functions for computing:
- Progressive bracket tax and the flat surtax
- Credit points from employer forms or questionnaire answers
- Section 46 donation credit
- Liability, refund and underpayment with a line-item breakdown

All monetary values use Decimal for precision. Nothing here performs I/O or
keeps state between calls; year parameters are passed in or looked up from
the static table.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from src.core.logging import get_logger
from src.estimator import messages
from src.estimator.confidence import classify_confidence
from src.estimator.models import (
    BreakdownItem,
    CalculationResult,
    CalculatorInput,
    DegreeType,
    Form106Entry,
    QuestionnaireAnswers,
    ResidencyAnswer,
    Totals,
    YesNo,
)
from src.tax.year_config import TaxBracket, YearParameters, get_year_parameters

logger = get_logger(__name__)

ZERO = Decimal("0")


class IncompleteInputError(ValueError):
    """Raised when the input is missing structurally required data."""


# =============================================================================
# Constants
# =============================================================================

# Standard credit points of a full-year resident
BASE_RESIDENCY_POINTS = Decimal("2.25")
GENDER_CREDIT_POINTS = Decimal("0.5")

# Degree credit applies for graduations up to this many years before the tax year
DEGREE_CREDIT_POINTS = Decimal("1")
DEGREE_CREDIT_WINDOW_YEARS = 3

CHILD_CREDIT_POINTS = Decimal("0.5")
CHILD_MAX_AGE = 18
CHILDREN_CREDIT_CAP = Decimal("3")

# Section 46: 35% credit on donations up to 30% of taxable income
DONATION_CREDIT_RATE = Decimal("0.35")
DONATION_INCOME_CEILING_RATE = Decimal("0.30")


# =============================================================================
# Tax
# =============================================================================


def tax_by_brackets(income: Decimal, brackets: Sequence[TaxBracket]) -> Decimal:
    """Calculate progressive tax across ascending brackets.

    Args:
        income: Non-negative annual taxable income.
        brackets: Ascending schedule whose last band is unbounded.

    Returns:
        Sum over bands of (min(income, upper) - previous upper) * rate.

    Example:
        >>> tax_by_brackets(Decimal("60000"), TAX_YEAR_2024.brackets)
        Decimal('6000.00')
    """
    tax = ZERO
    previous_upper = ZERO
    for bracket in brackets:
        if bracket.upper_limit is None:
            band = income - previous_upper
        else:
            band = min(income, bracket.upper_limit) - previous_upper
        if band <= ZERO:
            break
        tax += band * bracket.rate
        if bracket.upper_limit is None or income <= bracket.upper_limit:
            break
        previous_upper = bracket.upper_limit
    return tax


def surtax(income: Decimal, threshold: Decimal, rate: Decimal) -> Decimal:
    """Calculate the flat surtax on income above the threshold."""
    if income <= threshold:
        return ZERO
    return (income - threshold) * rate


# =============================================================================
# Credits
# =============================================================================


def degree_points(
    graduation_year: int | None, tax_year: int, degree_type: DegreeType | None
) -> Decimal:
    """Credit points for a recently completed degree.

    One point when a degree other than "none" was declared and it was
    completed no more than DEGREE_CREDIT_WINDOW_YEARS before the tax year
    (and not after it).
    """
    if not graduation_year or degree_type is None or degree_type == DegreeType.NONE:
        return ZERO
    years_since = tax_year - graduation_year
    if 0 <= years_since <= DEGREE_CREDIT_WINDOW_YEARS:
        return DEGREE_CREDIT_POINTS
    return ZERO


def children_points(birth_years: Sequence[int] | None, tax_year: int) -> Decimal:
    """Half a point per child aged 0-18 in the tax year, capped at 3 points."""
    if not birth_years:
        return ZERO
    points = ZERO
    for birth_year in birth_years:
        age = tax_year - birth_year
        if 0 <= age <= CHILD_MAX_AGE:
            points += CHILD_CREDIT_POINTS
    return min(points, CHILDREN_CREDIT_CAP)


def total_credit_points(
    forms: Sequence[Form106Entry],
    questionnaire: QuestionnaireAnswers | None,
    year: int,
) -> Decimal:
    """Total credit points used for the estimate.

    Without a questionnaire this is the sum of points the employers already
    applied. With one, points are recomputed from the declared facts and
    replace that sum: the 2.25 resident base when residency is confirmed,
    otherwise the forms sum, plus gender, degree and children extras.

    Args:
        forms: Employer forms for the year.
        questionnaire: Refinement answers, or None.
        year: Tax year.

    Returns:
        Credit points total.

    Example:
        >>> total_credit_points(forms, QuestionnaireAnswers(
        ...     is_israeli_resident_full_year=ResidencyAnswer.YES,
        ...     gender_for_credit=YesNo.YES,
        ... ), 2024)
        Decimal('2.75')
    """
    from_forms = sum((form.credit_points_granted for form in forms), ZERO)
    if questionnaire is None:
        return from_forms

    resident = questionnaire.is_israeli_resident_full_year == ResidencyAnswer.YES
    base = BASE_RESIDENCY_POINTS if resident else from_forms

    extra = ZERO
    if questionnaire.gender_for_credit == YesNo.YES:
        extra += GENDER_CREDIT_POINTS
    extra += degree_points(questionnaire.graduation_year, year, questionnaire.degree_type)
    extra += children_points(questionnaire.children_birth_years, year)
    return base + extra


def donation_credit(donations_total: Decimal | None, taxable_income: Decimal) -> Decimal:
    """Section 46 donation credit.

    Args:
        donations_total: Donations for the year, or None when not stated.
        taxable_income: Total taxable income.

    Returns:
        35% of donations, where donations count only up to 30% of income.
        Zero when nothing was donated or there is no taxable income.
    """
    if donations_total is None or donations_total <= ZERO or taxable_income <= ZERO:
        return ZERO
    eligible = min(donations_total, DONATION_INCOME_CEILING_RATE * taxable_income)
    return DONATION_CREDIT_RATE * eligible


# =============================================================================
# Narrative
# =============================================================================


def build_breakdown(
    gross_tax: Decimal,
    credit_points: Decimal,
    credit_points_value: Decimal,
    donation: Decimal,
    liability: Decimal,
    withheld_total: Decimal,
) -> tuple[BreakdownItem, ...]:
    """Build the five breakdown lines in their fixed order."""
    amounts = {
        messages.BREAKDOWN_GROSS_TAX: gross_tax,
        messages.BREAKDOWN_CREDIT_POINTS: -credit_points_value,
        messages.BREAKDOWN_DONATION: -donation,
        messages.BREAKDOWN_LIABILITY: liability,
        messages.BREAKDOWN_WITHHELD: -withheld_total,
    }
    points_text = messages.format_points(credit_points)
    return tuple(
        BreakdownItem(
            key=line.key,
            title=line.title,
            amount=amounts[line.key],
            explanation=line.explanation.format(points=points_text),
        )
        for line in messages.BREAKDOWN_LINES
    )


def build_assumptions(
    data: CalculatorInput,
    taxable_income_total: Decimal,
    withheld_total: Decimal,
    credit_points: Decimal,
) -> tuple[str, ...]:
    """Describe what the estimate assumed, in display order."""
    refined = (
        data.questionnaire is not None
        and data.questionnaire.is_israeli_resident_full_year is not None
    )
    return (
        messages.ASSUMPTION_TAX_YEAR.format(year=data.year),
        messages.ASSUMPTION_FORM_COUNT.format(count=len(data.forms)),
        messages.ASSUMPTION_INCOME_TOTAL.format(
            amount=messages.format_amount(taxable_income_total)
        ),
        messages.ASSUMPTION_WITHHELD_TOTAL.format(
            amount=messages.format_amount(withheld_total)
        ),
        messages.ASSUMPTION_CREDIT_POINTS.format(
            points=messages.format_points(credit_points)
        ),
        messages.ASSUMPTION_REFINED if refined else messages.ASSUMPTION_FORMS_ONLY,
    )


def collect_warnings(
    forms: Sequence[Form106Entry],
    taxable_income_total: Decimal,
    withheld_total: Decimal,
    underpayment: Decimal,
) -> tuple[str, ...]:
    """Evaluate each warning independently, in fixed order."""
    warnings: list[str] = []
    if taxable_income_total == ZERO and withheld_total > ZERO:
        warnings.append(messages.WARNING_ZERO_INCOME_WITH_WITHHOLDING)
    if len(forms) > 1 and all(form.credit_points_granted > ZERO for form in forms):
        warnings.append(messages.WARNING_DUPLICATE_CREDIT_POINTS)
    if underpayment > ZERO:
        warnings.append(messages.WARNING_POSSIBLE_DEBT)
    return tuple(warnings)


def build_summary(refund: Decimal, underpayment: Decimal) -> str:
    """Headline sentence for the estimate."""
    if refund > ZERO:
        return messages.SUMMARY_REFUND.format(amount=messages.format_amount(refund))
    if underpayment > ZERO:
        return messages.SUMMARY_UNDERPAYMENT.format(
            amount=messages.format_amount(underpayment)
        )
    return messages.SUMMARY_BALANCED


# =============================================================================
# Estimate
# =============================================================================


def calculate(
    data: CalculatorInput, parameters: YearParameters | None = None
) -> CalculationResult:
    """Estimate the refund or underpayment for a tax year.

    Args:
        data: Forms and optional questionnaire answers. Values are assumed to
            be validated and non-negative.
        parameters: Year parameters to use. Looked up from the static table
            for data.year when omitted.

    Returns:
        CalculationResult with totals, breakdown, assumptions, warnings and
        confidence.

    Raises:
        IncompleteInputError: If no forms were supplied.
        UnsupportedTaxYearError: If parameters are omitted and the year has
            no data row.

    Example:
        >>> result = calculate(CalculatorInput(
        ...     year=2024,
        ...     forms=(Form106Entry(Decimal("60000"), Decimal("5500")),),
        ...     questionnaire=QuestionnaireAnswers(
        ...         is_israeli_resident_full_year=ResidencyAnswer.YES
        ...     ),
        ... ))
        >>> result.refund_estimate
        Decimal('5500')
    """
    if not data.forms:
        raise IncompleteInputError("At least one Form 106 entry is required")

    params = parameters if parameters is not None else get_year_parameters(data.year)

    taxable_income_total = sum((form.taxable_income for form in data.forms), ZERO)
    withheld_total = sum((form.income_tax_withheld for form in data.forms), ZERO)

    gross_tax = tax_by_brackets(taxable_income_total, params.brackets) + surtax(
        taxable_income_total, params.surtax_threshold, params.surtax_rate
    )

    credit_points = total_credit_points(data.forms, data.questionnaire, data.year)
    credit_points_value = credit_points * params.credit_point_value_annual
    donation = donation_credit(
        data.questionnaire.donations_46_total if data.questionnaire else None,
        taxable_income_total,
    )

    liability = max(ZERO, gross_tax - credit_points_value - donation)
    refund = max(ZERO, withheld_total - liability)
    underpayment = max(ZERO, liability - withheld_total)

    warnings = collect_warnings(data.forms, taxable_income_total, withheld_total, underpayment)
    confidence = classify_confidence(data, warnings)

    logger.debug(
        "estimate_calculated",
        tax_year=data.year,
        form_count=len(data.forms),
        questionnaire=data.questionnaire is not None,
        confidence=confidence.value,
        warning_count=len(warnings),
    )

    return CalculationResult(
        result_summary=build_summary(refund, underpayment),
        refund_estimate=refund,
        underpayment_estimate=underpayment,
        totals=Totals(
            taxable_income_total=taxable_income_total,
            withheld_total=withheld_total,
            gross_tax=gross_tax,
            credit_points_value=credit_points_value,
            liability=liability,
        ),
        breakdown_items=build_breakdown(
            gross_tax,
            credit_points,
            credit_points_value,
            donation,
            liability,
            withheld_total,
        ),
        assumptions=build_assumptions(
            data, taxable_income_total, withheld_total, credit_points
        ),
        warnings=warnings,
        confidence=confidence,
    )
