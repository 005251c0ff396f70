"""Input and result records for the refund estimator.

Every record is a frozen dataclass: the engine never mutates what it is given
and returns a result that cannot be changed after construction. Optional
questionnaire fields use None for "not stated", which the engine treats
differently from an explicit zero or "no".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class ResidencyAnswer(str, Enum):
    """Answer to "Israeli resident for the whole tax year?"."""

    YES = "yes"
    NO = "no"
    UNSURE = "unsure"


class YesNo(str, Enum):
    """Plain yes/no answer."""

    YES = "yes"
    NO = "no"


class DegreeType(str, Enum):
    """Academic or professional degree declared for the degree credit."""

    FIRST = "first"
    SECOND = "second"
    PROFESSIONAL = "professional"
    NONE = "none"


class Confidence(str, Enum):
    """Coarse reliability label attached to an estimate."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Form106Entry:
    """Annual employer wage report for a single income source.

    Attributes:
        taxable_income: Taxable income for the year (fields 158/172 or 258/272).
        income_tax_withheld: Income tax withheld at source (field 042).
        credit_points_granted: Credit points the employer applied.
        has_complexity_flags: Severance, annuity, section 102 or 9(5) exemption
            items the estimator cannot model precisely.
    """

    taxable_income: Decimal
    income_tax_withheld: Decimal
    credit_points_granted: Decimal = field(default_factory=lambda: Decimal("0"))
    has_complexity_flags: bool = False


@dataclass(frozen=True)
class QuestionnaireAnswers:
    """Optional answers that refine the estimate.

    Attributes:
        is_israeli_resident_full_year: Residency for the whole tax year.
        gender_for_credit: Opt-in to the half point granted to women.
        children_birth_years: Birth year of each child.
        degree_type: Highest completed degree, if any.
        graduation_year: Year the degree was completed.
        lived_12_months_consecutive: Lived 12 consecutive months in an
            eligible locality. Collected for completeness; not yet priced.
        donations_46_total: Total section 46 donations for the year.
        has_additional_income_not_in_106: Income not covered by any Form 106.
    """

    is_israeli_resident_full_year: ResidencyAnswer | None = None
    gender_for_credit: YesNo | None = None
    children_birth_years: tuple[int, ...] | None = None
    degree_type: DegreeType | None = None
    graduation_year: int | None = None
    lived_12_months_consecutive: bool | None = None
    donations_46_total: Decimal | None = None
    has_additional_income_not_in_106: bool | None = None


@dataclass(frozen=True)
class CalculatorInput:
    """Everything the engine needs for one estimate.

    Attributes:
        year: Tax year to estimate.
        forms: One entry per employer. Must not be empty.
        questionnaire: Refinement answers, or None when none were given.
    """

    year: int
    forms: tuple[Form106Entry, ...]
    questionnaire: QuestionnaireAnswers | None = None


@dataclass(frozen=True)
class Totals:
    """Year totals aggregated across all forms."""

    taxable_income_total: Decimal
    withheld_total: Decimal
    gross_tax: Decimal
    credit_points_value: Decimal
    liability: Decimal


@dataclass(frozen=True)
class BreakdownItem:
    """Single signed line of the estimate breakdown.

    Attributes:
        key: Stable identifier (gross_tax, credit_points, donation, liability, withheld).
        title: Display title.
        amount: Signed amount; reductions and offsets are negative.
        explanation: Short explanation of how the line was computed.
    """

    key: str
    title: str
    amount: Decimal
    explanation: str


@dataclass(frozen=True)
class CalculationResult:
    """Immutable output of a single estimate.

    Attributes:
        result_summary: Headline sentence for display.
        refund_estimate: Expected refund (0 when none).
        underpayment_estimate: Expected additional payment (0 when none).
        totals: Aggregated totals.
        breakdown_items: Exactly five lines in fixed order.
        assumptions: Narrative log of what the estimate assumed.
        warnings: Cautionary notes, possibly empty.
        confidence: Reliability label.
    """

    result_summary: str
    refund_estimate: Decimal
    underpayment_estimate: Decimal
    totals: Totals
    breakdown_items: tuple[BreakdownItem, ...]
    assumptions: tuple[str, ...]
    warnings: tuple[str, ...]
    confidence: Confidence
