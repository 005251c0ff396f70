"""Confidence classification for refund estimates.

Rules are evaluated top to bottom and the first match wins. Structural or
legal complexity outranks missing refinement, so the order of CONFIDENCE_RULES
must not change without revisiting the whole cascade:

1. Any form flagged as complex -> LOW
2. Income outside the reported forms -> LOW
3. Residency answered "unsure" -> MEDIUM
4. Several forms and no questionnaire at all -> MEDIUM
5. Any warning raised -> MEDIUM
6. Otherwise -> HIGH
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from src.estimator.models import CalculatorInput, Confidence, ResidencyAnswer


@dataclass(frozen=True)
class ConfidenceRule:
    """Named predicate mapped to a confidence level."""

    name: str
    level: Confidence
    applies: Callable[[CalculatorInput, Sequence[str]], bool]


def _has_complex_form(data: CalculatorInput, _warnings: Sequence[str]) -> bool:
    return any(form.has_complexity_flags for form in data.forms)


def _has_outside_income(data: CalculatorInput, _warnings: Sequence[str]) -> bool:
    return bool(
        data.questionnaire and data.questionnaire.has_additional_income_not_in_106
    )


def _residency_unsure(data: CalculatorInput, _warnings: Sequence[str]) -> bool:
    return (
        data.questionnaire is not None
        and data.questionnaire.is_israeli_resident_full_year
        == ResidencyAnswer.UNSURE
    )


def _several_forms_unrefined(data: CalculatorInput, _warnings: Sequence[str]) -> bool:
    return len(data.forms) > 1 and data.questionnaire is None


def _has_warnings(_data: CalculatorInput, warnings: Sequence[str]) -> bool:
    return len(warnings) > 0


CONFIDENCE_RULES: tuple[ConfidenceRule, ...] = (
    ConfidenceRule("complex_form", Confidence.LOW, _has_complex_form),
    ConfidenceRule("outside_income", Confidence.LOW, _has_outside_income),
    ConfidenceRule("residency_unsure", Confidence.MEDIUM, _residency_unsure),
    ConfidenceRule("several_forms_unrefined", Confidence.MEDIUM, _several_forms_unrefined),
    ConfidenceRule("warnings_raised", Confidence.MEDIUM, _has_warnings),
)


def classify_confidence(data: CalculatorInput, warnings: Sequence[str]) -> Confidence:
    """Classify how reliable an estimate is.

    Args:
        data: The input the estimate was computed from.
        warnings: Warnings raised for the estimate.

    Returns:
        Level of the first matching rule, or HIGH when none match.

    Example:
        >>> data = CalculatorInput(
        ...     year=2024,
        ...     forms=(Form106Entry(Decimal("90000"), Decimal("9000")),),
        ... )
        >>> classify_confidence(data, [])
        <Confidence.HIGH: 'high'>
    """
    for rule in CONFIDENCE_RULES:
        if rule.applies(data, warnings):
            return rule.level
    return Confidence.HIGH
