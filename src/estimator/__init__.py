"""Form 106 refund estimator.

This package exports:
- calculate: Pure estimate of refund or underpayment for a tax year
- Input records: CalculatorInput, Form106Entry, QuestionnaireAnswers
- Result records: CalculationResult, Totals, BreakdownItem, Confidence
- Boundary validation: ensure_valid and InputValidationError
- Questionnaire prompts: select_questions
"""

from src.estimator.calculator import (
    IncompleteInputError,
    calculate,
    donation_credit,
    surtax,
    tax_by_brackets,
    total_credit_points,
)
from src.estimator.confidence import classify_confidence
from src.estimator.models import (
    BreakdownItem,
    CalculationResult,
    CalculatorInput,
    Confidence,
    DegreeType,
    Form106Entry,
    QuestionnaireAnswers,
    ResidencyAnswer,
    Totals,
    YesNo,
)
from src.estimator.questions import Question, select_questions
from src.estimator.validation import InputValidationError, ensure_valid

__all__ = [
    "BreakdownItem",
    "CalculationResult",
    "CalculatorInput",
    "Confidence",
    "DegreeType",
    "Form106Entry",
    "IncompleteInputError",
    "InputValidationError",
    "Question",
    "QuestionnaireAnswers",
    "ResidencyAnswer",
    "Totals",
    "YesNo",
    "calculate",
    "classify_confidence",
    "donation_credit",
    "ensure_valid",
    "select_questions",
    "surtax",
    "tax_by_brackets",
    "total_credit_points",
]
